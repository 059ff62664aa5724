import struct

from dataclasses import dataclass, replace


DEFAULT_TAG = 0xFFFFFFFF
MAX_ALIGNMENT = 0x800
MAX_SLOTS = 0x10000


@dataclass(frozen=True)
class ContainerLayout:
    byte_order: str = ">"
    alignment: int = 8
    fill: int = 0x00
    file_alignment: int = 16
    file_fill: int = 0x00

    def __post_init__(self):
        for name in ("alignment", "file_alignment"):
            value = getattr(self, name)
            if value < 1 or value & (value - 1) or value > MAX_ALIGNMENT:
                raise ValueError(f"{name} must be a power of two between 1 and {MAX_ALIGNMENT}, got {value}")

        for name in ("fill", "file_fill"):
            if not 0 <= getattr(self, name) <= 0xFF:
                raise ValueError(f"{name} must be a byte value")

    @property
    def header(self) -> struct.Struct:
        # slot count, tag
        return struct.Struct(f"{self.byte_order}2I")

    @property
    def record(self) -> struct.Struct:
        # offset from data start, compressed, flags
        return struct.Struct(f"{self.byte_order}I2H")

    @property
    def header_size(self) -> int:
        return self.header.size

    @property
    def record_size(self) -> int:
        return self.record.size

    def data_start(self, slot_count: int) -> int:
        return self.header_size + slot_count * self.record_size

    def align(self, value: int, alignment: "int | None" = None) -> int:
        alignment = alignment or self.alignment
        return (value + alignment - 1) & ~(alignment - 1)

    def with_alignment(self, alignment: int) -> "ContainerLayout":
        return replace(self, alignment=alignment)

    @classmethod
    def variant(cls, name: str) -> "ContainerLayout":
        try:
            return VARIANTS[name]
        except KeyError:
            raise ValueError(f"unknown container variant '{name}' (known: {', '.join(VARIANTS)})") from None


VARIANTS = {
    "bk": ContainerLayout(),
    "bk-packed": ContainerLayout(alignment=1),
}


def infer_alignment(offsets, limit=MAX_ALIGNMENT) -> int:
    alignment = limit
    for offset in offsets:
        while alignment > 1 and offset % alignment:
            alignment //= 2
    return alignment
