"""CryptoAPI RSA interoperability utilities.

Translates between Windows CryptoAPI PUBLICKEYBLOB structures and canonical RSA public keys, and encrypts or decrypts
whole messages in CryptoAPI's little-endian-per-block layout using PKCS#1 v1.5 padding.

Typical usage example:

    key = decode_public_blob(received_blob)
    c = encrypt_blocks(PKCS1v15Engine(key), b"Hi there!")
    r = decrypt_blocks(PKCS1v15Engine(RSAPrivKey.import_key(path), encrypt=False), c)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from capiblob.blob import decode_public_blob
from capiblob.blob import encode_public_blob
from capiblob.blob import read_blob
from capiblob.blob import read_public_blob
from capiblob.blob import write_blob
from capiblob.cipher import BlockPrimitive
from capiblob.cipher import decrypt_blocks
from capiblob.cipher import encrypt_blocks
from capiblob.errors import CapiBlobError
from capiblob.errors import ExponentTooLargeError
from capiblob.errors import FormatError
from capiblob.errors import MisalignedInputError
from capiblob.errors import PrimitiveError
from capiblob.errors import TruncatedInputError
from capiblob.pkcs1 import PKCS1v15Engine
from capiblob.rsa import RSAPrivKey
from capiblob.rsa import RSAPubKey

__version__ = "0.1.0"
__all__ = [
    "RSAPrivKey",
    "RSAPubKey",
    "decode_public_blob",
    "encode_public_blob",
    "read_public_blob",
    "read_blob",
    "write_blob",
    "BlockPrimitive",
    "encrypt_blocks",
    "decrypt_blocks",
    "PKCS1v15Engine",
    "CapiBlobError",
    "FormatError",
    "TruncatedInputError",
    "ExponentTooLargeError",
    "MisalignedInputError",
    "PrimitiveError",
]
