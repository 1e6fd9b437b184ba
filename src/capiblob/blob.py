"""Converts CryptoAPI PUBLICKEYBLOB structures to and from canonical RSA public keys.

A PUBLICKEYBLOB is a BLOBHEADER followed by an RSAPUBKEY and the key data. CryptoAPI stores every integer
least-significant byte first, while the canonical key (and every standard RSA library) reads integers big-endian, so
both the exponent and the modulus are byte-reversed on the way in and on the way out.

Layout (offsets in bytes):

    0      bType      PUBLICKEYBLOB (0x06)
    1      bVersion   CUR_BLOB_VERSION (0x02)
    2-3    reserved   zero
    4-7    aiKeyAlg   CALG_RSA_KEYX, little-endian
    8-11   magic      b"RSA1"
    12-15  bitlen     modulus size in bits, little-endian
    16-19  pubexp     public exponent, little-endian
    20-    modulus    bitlen // 8 bytes, little-endian

Typical usage example:

    key = decode_public_blob(received)
    blob = encode_public_blob(key)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import io
import logging
import pathlib
import struct
import typing

from capiblob.errors import ExponentTooLargeError
from capiblob.errors import FormatError
from capiblob.errors import TruncatedInputError
from capiblob.rsa import bytes_to_integer
from capiblob.rsa import integer_to_bytes
from capiblob.rsa import RSAPubKey

logger = logging.getLogger(__name__)

PUBLICKEYBLOB = 0x06  # bType of a public key blob
CUR_BLOB_VERSION = 0x02  # bVersion
CALG_RSA_KEYX = 0x0000A400  # aiKeyAlg: RSA public key exchange
RSA1_MAGIC = b"RSA1"  # RSAPUBKEY.magic of a public key

BLOBHEADER = struct.Struct("<BBHI")  # bType, bVersion, reserved, aiKeyAlg
BITLEN = struct.Struct("<I")
EXPONENT_SIZE = 4

# BLOBHEADER and magic, the part of every blob that never changes
BLOB_PREFIX = BLOBHEADER.pack(PUBLICKEYBLOB, CUR_BLOB_VERSION, 0, CALG_RSA_KEYX) + RSA1_MAGIC
MODULUS_OFFSET = len(BLOB_PREFIX) + BITLEN.size + EXPONENT_SIZE


def _read_exact(stream: typing.BinaryIO, size: int, field: str) -> bytes:
    """Reads exactly `size` bytes from the stream.

    Raises:
        TruncatedInputError: If the stream ends early.
    """
    chunk = stream.read(size)
    if len(chunk) != size:
        raise TruncatedInputError(field, size, len(chunk))
    return chunk


def read_public_blob(stream: typing.BinaryIO) -> RSAPubKey:
    """Reads a single PUBLICKEYBLOB from a binary stream.

    Consumes exactly one blob, leaving the stream positioned right after it.

    Args:
        stream: A readable binary stream positioned at the start of the blob.

    Returns:
        The decoded public key.

    Raises:
        FormatError: If the header, magic or bit length do not match the PUBLICKEYBLOB layout.
        TruncatedInputError: If the stream ends before the blob does.
    """
    btype, version, _, alg_id = BLOBHEADER.unpack(_read_exact(stream, BLOBHEADER.size, "BLOBHEADER"))
    if btype != PUBLICKEYBLOB or version != CUR_BLOB_VERSION or alg_id != CALG_RSA_KEYX:
        raise FormatError(f"Unexpected public key header (Type = {btype:#04x}, Version = {version:#04x}, "
                          f"AlgId = {alg_id:#010x})")
    magic = _read_exact(stream, len(RSA1_MAGIC), "magic")
    if magic != RSA1_MAGIC:
        raise FormatError(f"Incorrect RSAPUBKEY magic {magic!r}, expected {RSA1_MAGIC!r}")
    (bit_length,) = BITLEN.unpack(_read_exact(stream, BITLEN.size, "bitlen"))
    if bit_length % 8:
        raise FormatError(f"Modulus bit length {bit_length} is not a multiple of 8")
    exponent = _read_exact(stream, EXPONENT_SIZE, "pubexp")
    modulus = _read_exact(stream, bit_length // 8, "modulus")
    logger.debug("Decoded PUBLICKEYBLOB header, bitlen=%d", bit_length)
    # CryptoAPI stores both integers least-significant byte first
    return RSAPubKey(bytes_to_integer(modulus[::-1]), bytes_to_integer(exponent[::-1]))


def decode_public_blob(data: bytes | bytearray | memoryview) -> RSAPubKey:
    """Decodes a complete PUBLICKEYBLOB held in memory.

    Unlike `read_public_blob`, the buffer has to hold exactly one blob.

    Args:
        data: The blob bytes.

    Returns:
        The decoded public key.

    Raises:
        FormatError: If the blob is malformed or followed by trailing bytes.
        TruncatedInputError: If the buffer is shorter than the blob it announces.
    """
    stream = io.BytesIO(data)
    key = read_public_blob(stream)
    trailing = len(data) - stream.tell()
    if trailing:
        raise FormatError(f"Blob length {len(data)} exceeds the {stream.tell()} bytes of a "
                          f"{key.bits}-bit key by {trailing} trailing bytes")
    return key


def encode_public_blob(key: RSAPubKey) -> bytes:
    """Encodes a public key as a PUBLICKEYBLOB.

    The exponent always occupies the fixed 4-byte field, zero padded.

    Args:
        key: The public key to encode.

    Returns:
        The blob bytes.

    Raises:
        ExponentTooLargeError: If the exponent needs more than 4 bytes.
        FormatError: If the modulus bit length is not a multiple of 8.
    """
    bit_length = key.mod.bit_length()
    if bit_length % 8:
        raise FormatError(f"Modulus bit length {bit_length} is not a multiple of 8 and cannot be stored in a blob")
    exponent = integer_to_bytes(key.expo)[::-1]
    if len(exponent) > EXPONENT_SIZE:
        raise ExponentTooLargeError(key.expo)
    modulus = integer_to_bytes(key.mod)[::-1]
    blob = bytearray(MODULUS_OFFSET + len(modulus))
    blob[:len(BLOB_PREFIX)] = BLOB_PREFIX
    BITLEN.pack_into(blob, len(BLOB_PREFIX), bit_length)
    blob[len(BLOB_PREFIX) + BITLEN.size:len(BLOB_PREFIX) + BITLEN.size + len(exponent)] = exponent
    blob[MODULUS_OFFSET:] = modulus
    logger.debug("Encoded %d-bit key into %d byte PUBLICKEYBLOB", bit_length, len(blob))
    return bytes(blob)


def read_blob(file: pathlib.Path) -> RSAPubKey:
    """Reads a PUBLICKEYBLOB file.

    Args:
        file: The blob file.

    Returns:
        The decoded public key.
    """
    with open(file, "rb") as f:
        return decode_public_blob(f.read())


def write_blob(file: pathlib.Path, key: RSAPubKey) -> None:
    """Writes a public key to file as a PUBLICKEYBLOB.

    Args:
        file: The destination file.
        key: The public key to store.
    """
    blob = encode_public_blob(key)
    with open(file, "wb") as f:
        f.write(blob)
