# pylint: disable=missing-module-docstring,redefined-outer-name
# Copyright (c) 2025-present Tech. TTGames
# SPDX-License-Identifier: EPL-2.0
import pytest

import capiblob


class PadPrimitive:
    """Stand-in encryption primitive: length byte, payload, zero fill, big-endian style."""

    def __init__(self, input_block_size: int = 4, output_block_size: int = 6) -> None:
        self.input_block_size = input_block_size
        self.output_block_size = output_block_size

    def process_block(self, data: bytes, offset: int, length: int) -> bytes:
        if length > self.input_block_size:
            raise capiblob.PrimitiveError("too long")
        block = bytes([0xEE, length]) + data[offset:offset + length]
        return block.ljust(self.output_block_size, b"\x00")


class UnpadPrimitive:
    """Inverse of PadPrimitive."""

    def __init__(self, input_block_size: int = 6, output_block_size: int = 4) -> None:
        self.input_block_size = input_block_size
        self.output_block_size = output_block_size

    def process_block(self, data: bytes, offset: int, length: int) -> bytes:
        block = data[offset:offset + length]
        if block[0] != 0xEE:
            raise capiblob.PrimitiveError("Decryption error.")
        return bytes(block[2:2 + block[1]])


def test_encrypt_reverses_each_block():
    ciph = capiblob.encrypt_blocks(PadPrimitive(), b"abcdefghij")
    assert ciph == (b"\xEE\x04abcd"[::-1] + b"\xEE\x04efgh"[::-1] + b"\xEE\x02ij\x00\x00"[::-1])


@pytest.mark.parametrize("length, blocks", [(1, 1), (3, 1), (4, 1), (5, 2), (8, 2), (9, 3), (40, 10)])
def test_encrypt_output_size(length, blocks):
    assert len(capiblob.encrypt_blocks(PadPrimitive(), b"x" * length)) == blocks * 6


def test_encrypt_single_block_scenario():
    assert len(capiblob.encrypt_blocks(PadPrimitive(117, 128), b"Hello")) == 128


def test_encrypt_passes_offsets(mocker):
    prim = PadPrimitive()
    spy = mocker.spy(prim, "process_block")
    message = b"0123456789"
    capiblob.encrypt_blocks(prim, message)
    assert [call.args for call in spy.call_args_list] == [(message, 0, 4), (message, 4, 4), (message, 8, 2)]


def test_empty_message(mocker):
    enc, dec = PadPrimitive(), UnpadPrimitive()
    enc_spy = mocker.spy(enc, "process_block")
    dec_spy = mocker.spy(dec, "process_block")
    assert capiblob.encrypt_blocks(enc, b"") == b""
    assert capiblob.decrypt_blocks(dec, b"") == b""
    enc_spy.assert_not_called()
    dec_spy.assert_not_called()


def test_decrypt_reverses_before_processing(mocker):
    prim = UnpadPrimitive()
    spy = mocker.spy(prim, "process_block")
    assert capiblob.decrypt_blocks(prim, b"\x00\x00ba\x02\xEE") == b"ab"
    spy.assert_called_once_with(b"\xEE\x02ab\x00\x00", 0, 6)


@pytest.mark.parametrize("length", [0, 1, 3, 4, 5, 12, 33])
def test_round_trip(length):
    message = bytes(range(length))
    assert capiblob.decrypt_blocks(UnpadPrimitive(), capiblob.encrypt_blocks(PadPrimitive(), message)) == message


def test_decrypt_keeps_block_order():
    ciph = capiblob.encrypt_blocks(PadPrimitive(), b"AAAABBBBC")
    assert capiblob.decrypt_blocks(UnpadPrimitive(), ciph) == b"AAAABBBBC"
    swapped = ciph[6:12] + ciph[:6] + ciph[12:]
    assert capiblob.decrypt_blocks(UnpadPrimitive(), swapped) == b"BBBBAAAAC"


@pytest.mark.parametrize("length", [1, 5, 11, 13])
def test_decrypt_misaligned(length):
    with pytest.raises(capiblob.MisalignedInputError) as exc:
        capiblob.decrypt_blocks(UnpadPrimitive(), b"\x00" * length)
    assert exc.value.length == length
    assert exc.value.block_size == 6


def test_decrypt_misaligned_is_value_error():
    with pytest.raises(ValueError, match="not a multiple of the block size 6"):
        capiblob.decrypt_blocks(UnpadPrimitive(), b"\x00" * 11)


def test_decrypt_primitive_error_propagates():
    ciph = bytearray(capiblob.encrypt_blocks(PadPrimitive(), b"abcdefgh"))
    ciph[-1] = 0x00
    with pytest.raises(capiblob.PrimitiveError, match="Decryption error."):
        capiblob.decrypt_blocks(UnpadPrimitive(), bytes(ciph))


def test_encrypt_primitive_error_propagates(mocker):
    prim = PadPrimitive()
    mocker.patch.object(prim, "process_block", side_effect=capiblob.PrimitiveError("rejected"))
    with pytest.raises(capiblob.PrimitiveError, match="rejected"):
        capiblob.encrypt_blocks(prim, b"abc")


@pytest.mark.parametrize("returned", [b"\x00" * 5, b"\x00" * 7, b""])
def test_encrypt_rejects_wrong_block_size(mocker, returned):
    prim = PadPrimitive()
    mocker.patch.object(prim, "process_block", return_value=returned)
    with pytest.raises(capiblob.PrimitiveError, match=f"returned {len(returned)} bytes, expected a 6 byte block"):
        capiblob.encrypt_blocks(prim, b"abc")
