import random

import pytest

from bkassets.rarezip import bk
from bkassets.bk.codec import BKZipCodec
from bkassets.bk.errors import CodecError


RNG = random.Random(0x1172)


@pytest.mark.parametrize(
    "data",
    [
        b"",
        b"a",
        b"banjo" * 1000,
        bytes(range(256)),
        RNG.randbytes(4096),
    ],
)
def test_decompress_inverts_compress(data):
    assert bk.decompress(bk.compress(data)) == data


def test_stream_header_and_padding():
    data = b"kazooie" * 37
    stream = bk.compress(data)

    assert stream[:2] == bk.BK_MAGIC
    assert int.from_bytes(stream[2:6], "big") == len(data)
    assert len(stream) % bk.PAD_ALIGN == 0
    assert bk.inflated_size(stream) == len(data)


def test_unpadded_stream_is_still_readable():
    data = b"gruntilda" * 11
    stream = bk.compress(data, pad=False)

    assert bk.decompress(stream) == data
    assert len(bk.compress(data)) >= len(stream)


def test_decompress_ignores_trailing_padding():
    data = b"jiggy" * 20
    assert bk.decompress(bk.compress(data) + b"\xAA" * 32) == data


def test_bad_magic():
    stream = bytearray(bk.compress(b"mumbo"))
    stream[0] = 0x00

    with pytest.raises(bk.BKZipError, match="magic"):
        bk.decompress(bytes(stream))


def test_short_header():
    with pytest.raises(bk.BKZipError, match="too short"):
        bk.inflated_size(b"\x11\x72\x00")


def test_truncated_stream():
    stream = bk.compress(RNG.randbytes(2048), pad=False)

    with pytest.raises(bk.BKZipError, match="final block"):
        bk.decompress(stream[: len(stream) // 2])


def test_oversized_stream_is_reported_by_length():
    stream = bytearray(bk.compress(b"x" * 100))
    stream[2:6] = (50).to_bytes(4, "big")

    assert len(bk.decompress(bytes(stream))) == 51


def test_codec_wraps_errors():
    codec = BKZipCodec()

    with pytest.raises(CodecError, match="decompression failed"):
        codec.decompress(b"\x00\x00\x00\x00\x00\x10garbage")

    with pytest.raises(CodecError, match="stream header"):
        codec.inflated_size(b"\x11")


def test_codec_round_trip_all_levels():
    data = b"notes and jinjos " * 64
    for level in range(10):
        codec = BKZipCodec(level=level)
        assert codec.decompress(codec.compress(data)) == data


def test_codec_rejects_bad_level():
    with pytest.raises(ValueError):
        BKZipCodec(level=12)
