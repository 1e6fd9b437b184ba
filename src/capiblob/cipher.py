"""Whole-message RSA encryption and decryption in the CryptoAPI block layout.

CryptoAPI encrypts long messages as a run of independent RSA blocks and writes every ciphertext block
least-significant byte first. Standard primitives produce big-endian blocks, so each block is byte-reversed on its
own, right after encryption and right before decryption. The reversal never spans block boundaries.

Typical usage example:

    ciphertext = encrypt_blocks(PKCS1v15Engine(server_key), b"Hi there!")
    cleartext = decrypt_blocks(PKCS1v15Engine(client_key, encrypt=False), received)
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import logging
import typing

from capiblob.errors import MisalignedInputError
from capiblob.errors import PrimitiveError

logger = logging.getLogger(__name__)


class BlockPrimitive(typing.Protocol):
    """A single-block RSA transform, configured for one direction.

    Attributes:
        input_block_size: Bytes consumed per block.
        output_block_size: Bytes produced per block (at most, when decrypting).
    """
    input_block_size: int
    output_block_size: int

    def process_block(self, data: bytes, offset: int, length: int) -> bytes:
        """Transforms `data[offset:offset + length]` as one block.

        Raises:
            PrimitiveError: If the block is rejected.
        """
        ...


def encrypt_blocks(primitive: BlockPrimitive, message: bytes) -> bytes:
    """Encrypts a message of any length block by block.

    Args:
        primitive: Encryption primitive bound to the recipient's public key.
        message: The cleartext.

    Returns:
        The ciphertext, always a multiple of `primitive.output_block_size` long. Empty for an empty message.

    Raises:
        PrimitiveError: If the primitive rejects a block or returns a block of the wrong size.
    """
    in_size = primitive.input_block_size
    out_size = primitive.output_block_size
    total_blocks = -(-len(message) // in_size)
    result = bytearray(total_blocks * out_size)
    logger.debug("Encrypting %d bytes as %d blocks of %d -> %d bytes", len(message), total_blocks, in_size,
                 out_size)
    out_offset = 0
    for in_offset in range(0, len(message), in_size):
        consumed = min(in_size, len(message) - in_offset)
        block = primitive.process_block(message, in_offset, consumed)
        if len(block) != out_size:
            raise PrimitiveError(f"Primitive returned {len(block)} bytes, expected a {out_size} byte block")
        result[out_offset:out_offset + out_size] = block[::-1]
        out_offset += out_size
    return bytes(result)


def decrypt_blocks(primitive: BlockPrimitive, ciphertext: bytes) -> bytes:
    """Decrypts CryptoAPI-layout ciphertext block by block.

    Args:
        primitive: Decryption primitive bound to the recipient's private key. Its input block size has to match the
            ciphertext's block size.
        ciphertext: The received ciphertext.

    Returns:
        The concatenated cleartext of every block, in order.

    Raises:
        MisalignedInputError: If the ciphertext is not a whole number of blocks.
        PrimitiveError: If the primitive rejects a block.
    """
    block_size = primitive.input_block_size
    if len(ciphertext) % block_size:
        raise MisalignedInputError(len(ciphertext), block_size)
    logger.debug("Decrypting %d blocks of %d bytes", len(ciphertext) // block_size, block_size)
    blocks = []
    for offset in range(0, len(ciphertext), block_size):
        reversed_block = bytes(ciphertext[offset:offset + block_size])[::-1]
        blocks.append(primitive.process_block(reversed_block, 0, block_size))
    return b"".join(blocks)
