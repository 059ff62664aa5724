from dataclasses import dataclass


EMPTY_FLAGS = 0x0004


@dataclass
class Entry:
    uid: int
    offset: int
    stored_size: int
    raw_size: int
    is_compressed: bool = False
    flags: int = EMPTY_FLAGS

    @property
    def end(self) -> int:
        return self.offset + self.stored_size

    @property
    def empty(self) -> bool:
        return self.stored_size == 0
