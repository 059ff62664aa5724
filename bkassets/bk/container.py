from typing import Iterator
from dataclasses import dataclass, field

from .entry import Entry
from .errors import InvalidLayout
from .layout import ContainerLayout, DEFAULT_TAG, MAX_SLOTS


@dataclass
class Container:
    layout: ContainerLayout = field(default_factory=ContainerLayout)
    entries: list[Entry] = field(default_factory=list)
    tag: int = DEFAULT_TAG
    length: int = -1

    def __post_init__(self):
        if self.length < 0:
            self.length = self.total_size()

    @property
    def entry_count(self) -> int:
        return len(self.entries)

    @property
    def data_start(self) -> int:
        return self.layout.data_start(len(self.entries))

    @property
    def data_end(self) -> int:
        return self.entries[-1].end if self.entries else self.data_start

    def validate(self):
        if not self.entries:
            raise InvalidLayout(0, "table has no slots, at least the terminator is required")

        if len(self.entries) > MAX_SLOTS:
            raise InvalidLayout(MAX_SLOTS, f"table has {len(self.entries)} slots, at most {MAX_SLOTS} are supported")

        first = self.entries[0]
        if first.offset != self.data_start:
            raise InvalidLayout(0, f"first payload at 0x{first.offset:X}, data section starts at 0x{self.data_start:X}")

        previous = None
        for index, entry in enumerate(self.entries):
            if entry.uid != index:
                raise InvalidLayout(index, f"uid 0x{entry.uid:04X} does not match table position")

            if entry.stored_size < 0:
                raise InvalidLayout(index, f"negative stored size {entry.stored_size}")

            if not entry.is_compressed and entry.raw_size != entry.stored_size:
                raise InvalidLayout(
                    index, f"uncompressed entry has raw size {entry.raw_size}, stored size {entry.stored_size}"
                )

            if previous is not None:
                if entry.offset < previous.offset:
                    raise InvalidLayout(
                        index, f"offset 0x{entry.offset:X} precedes previous offset 0x{previous.offset:X}"
                    )

                if previous.end > entry.offset:
                    raise InvalidLayout(
                        index - 1, f"payload ends at 0x{previous.end:X}, next entry starts at 0x{entry.offset:X}"
                    )

            previous = entry

        terminator = self.entries[-1]
        if not terminator.empty:
            raise InvalidLayout(terminator.uid, f"terminator slot holds {terminator.stored_size} bytes")

        if self.data_end > self.length:
            raise InvalidLayout(
                terminator.uid, f"data ends at 0x{self.data_end:X}, container length is 0x{self.length:X}"
            )

    def total_size(self) -> int:
        return self.layout.align(self.data_end, self.layout.file_alignment)

    def __len__(self):
        return len(self.entries)

    def __iter__(self) -> Iterator[Entry]:
        yield from self.entries

    def __getitem__(self, item: int) -> Entry:
        return self.entries[item]
