from .abstract import AbstractCodec
from ..errors import CodecError
from ...rarezip import bk


class BKZipCodec(AbstractCodec):
    def __init__(self, level: int = 9, pad: bool = True):
        if not 0 <= level <= 9:
            raise ValueError(f"compression level must be between 0 and 9, got {level}")

        self.level = level
        self.pad = pad

    def compress(self, data: bytes) -> bytes:
        try:
            return bk.compress(data, level=self.level, pad=self.pad)
        except bk.BKZipError as e:
            raise CodecError(f"compression failed: {e}") from e

    def decompress(self, data: bytes) -> bytes:
        try:
            return bk.decompress(data)
        except bk.BKZipError as e:
            raise CodecError(f"decompression failed: {e}") from e

    def inflated_size(self, data: bytes) -> int:
        try:
            return bk.inflated_size(data)
        except bk.BKZipError as e:
            raise CodecError(f"unreadable stream header: {e}") from e

    def __repr__(self):
        return f"{self.__class__.__name__}[level={self.level}]"
