"""PKCS#1 v1.5 encryption padding as a block primitive.

Implements RSAES-PKCS1-v1_5 (block type 2) over the raw RSA operation of a key, exposing the block sizes CryptoAPI
uses so it can be handed straight to `encrypt_blocks` and `decrypt_blocks`.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
from secrets import token_bytes

from capiblob.errors import PrimitiveError
from capiblob.rsa import bytes_to_integer
from capiblob.rsa import integer_to_bytes
from capiblob.rsa import RSAKey

# block type, 8 bytes minimum of padding string, 0x00 separator
PADDING_OVERHEAD = 10
MIN_PADDING = 8
BLOCK_TYPE = 0x02


def _nonzero_padding(size: int) -> bytes:
    """Random padding string without zero bytes."""
    pad = bytearray()
    while len(pad) < size:
        pad.extend(b for b in token_bytes(size - len(pad)) if b)
    return bytes(pad)


class PKCS1v15Engine:
    """RSAES-PKCS1-v1_5 over a single key, configured for one direction.

    Encryption accepts up to `(bits - 1) // 8 - 10` bytes per block and always yields a full modulus-sized block;
    decryption takes modulus-sized blocks and strips the padding again.

    Attributes:
        key: The key performing the raw RSA operation. A public key when encrypting, a private key when decrypting.
        encrypt: Direction of the engine.
    """

    def __init__(self, key: RSAKey, encrypt: bool = True) -> None:
        if key.bits < (PADDING_OVERHEAD + 2) * 8:
            raise ValueError(f"A {key.bits}-bit key is too small for PKCS#1 v1.5 padding")
        self.key = key
        self.encrypt = encrypt

    @property
    def _block_len(self) -> int:
        # padded block length, short enough to always stay below the modulus
        return (self.key.bits - 1) // 8

    @property
    def input_block_size(self) -> int:
        if self.encrypt:
            return self._block_len - PADDING_OVERHEAD
        return self.key.bsize

    @property
    def output_block_size(self) -> int:
        if self.encrypt:
            return self.key.bsize
        return self._block_len - PADDING_OVERHEAD

    def process_block(self, data: bytes, offset: int, length: int) -> bytes:
        """Pads and encrypts, or decrypts and unpads, one block.

        Args:
            data: Buffer holding the block.
            offset: Start of the block within the buffer.
            length: Length of the block.

        Returns:
            The processed block.

        Raises:
            PrimitiveError: If the block is too long or decryption fails.
        """
        if length > self.input_block_size:
            raise PrimitiveError(f"Block of {length} bytes exceeds the input block size {self.input_block_size}")
        block = bytes(data[offset:offset + length])
        if self.encrypt:
            return self._encode(block)
        return self._decode(block)

    def _encode(self, message: bytes) -> bytes:
        pad = _nonzero_padding(self._block_len - len(message) - 2)
        em = bytes_to_integer(bytes([BLOCK_TYPE]) + pad + b"\x00" + message)
        try:
            return integer_to_bytes(self.key.c_rsa(em), self.key.bsize)
        except ValueError as exc:
            raise PrimitiveError(str(exc)) from exc

    def _decode(self, ciphertext: bytes) -> bytes:
        try:
            em = integer_to_bytes(self.key.c_rsa(bytes_to_integer(ciphertext)), self._block_len)
        except (ValueError, OverflowError) as exc:
            raise PrimitiveError("Decryption error.") from exc
        if em[0] != BLOCK_TYPE:
            raise PrimitiveError("Decryption error.")
        sep = em.find(b"\x00", 1)
        if sep < 1 + MIN_PADDING:
            raise PrimitiveError("Decryption error.")
        return em[sep + 1:]
