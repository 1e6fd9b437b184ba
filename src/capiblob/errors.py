"""Exceptions raised while encoding, decoding, encrypting or decrypting legacy CryptoAPI data.

Every error derives from `CapiBlobError` as well as from the builtin type callers would otherwise expect
(`ValueError` for malformed input, `RuntimeError` for primitive failures), so existing handlers keep working.
"""
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0


class CapiBlobError(Exception):
    """Base class for all capiblob errors."""


class FormatError(CapiBlobError, ValueError):
    """A blob does not follow the PUBLICKEYBLOB layout (header, magic, bit length or total length)."""


class TruncatedInputError(FormatError):
    """Fewer bytes were available than a blob field requires.

    Attributes:
        field: Name of the field being read.
        expected: Number of bytes the field needs.
        actual: Number of bytes that were available.
    """

    def __init__(self, field: str, expected: int, actual: int) -> None:
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(f"Truncated blob while reading {field}: expected {expected} bytes, got {actual}")


class ExponentTooLargeError(CapiBlobError, ValueError):
    """The public exponent does not fit the fixed 4-byte blob field."""

    def __init__(self, exponent: int) -> None:
        self.exponent = exponent
        size = (exponent.bit_length() + 7) // 8
        super().__init__(f"Public exponent {exponent:#x} needs {size} bytes, blob field holds 4")


class MisalignedInputError(CapiBlobError, ValueError):
    """Ciphertext length is not a multiple of the primitive's block size."""

    def __init__(self, length: int, block_size: int) -> None:
        self.length = length
        self.block_size = block_size
        super().__init__(f"Cannot decrypt {length} bytes, not a multiple of the block size {block_size}")


class PrimitiveError(CapiBlobError, RuntimeError):
    """The block primitive rejected a block (bad padding, oversized input, out of range representative)."""
