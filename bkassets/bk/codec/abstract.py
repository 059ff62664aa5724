from abc import ABC, abstractmethod


class AbstractCodec(ABC):
    @abstractmethod
    def compress(self, data: bytes) -> bytes:
        ...

    @abstractmethod
    def decompress(self, data: bytes) -> bytes:
        ...

    @abstractmethod
    def inflated_size(self, data: bytes) -> int:
        ...
