import zlib
import struct


BK_MAGIC = b"\x11\x72"
BK_HEADER = struct.Struct(">2sI")

PAD_BYTE = 0xAA
PAD_ALIGN = 0x10


class BKZipError(Exception):
    pass


def inflated_size(data: bytes) -> int:
    if len(data) < BK_HEADER.size:
        raise BKZipError(f"stream too short for header ({len(data)} < {BK_HEADER.size} bytes)")

    magic, size = BK_HEADER.unpack_from(data)

    if magic != BK_MAGIC:
        raise BKZipError(f"bad stream magic {magic.hex()}, expected {BK_MAGIC.hex()}")

    return size


def decompress(data: bytes) -> bytes:
    expected = inflated_size(data)

    # one byte past the declared size is enough to tell an oversized stream apart
    decoder = zlib.decompressobj(-zlib.MAX_WBITS)
    try:
        out = decoder.decompress(data[BK_HEADER.size :], expected + 1)
    except zlib.error as e:
        raise BKZipError(f"corrupt deflate stream: {e}") from e

    if not decoder.eof and len(out) <= expected:
        raise BKZipError("deflate stream ends before its final block")

    return out


def compress(data: bytes, level: int = 9, pad: bool = True) -> bytes:
    if len(data) > 0xFFFFFFFF:
        raise BKZipError(f"payload of {len(data)} bytes does not fit the 32 bit size field")

    encoder = zlib.compressobj(level, zlib.DEFLATED, -zlib.MAX_WBITS)
    try:
        body = encoder.compress(data) + encoder.flush()
    except zlib.error as e:
        raise BKZipError(f"deflate failed: {e}") from e

    out = bytearray(BK_HEADER.pack(BK_MAGIC, len(data)))
    out += body

    if pad:
        out += bytes([PAD_BYTE]) * (-len(out) % PAD_ALIGN)

    return bytes(out)
