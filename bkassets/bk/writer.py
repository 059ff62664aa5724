from typing import Optional, Callable, Sequence
from dataclasses import dataclass

from .entry import Entry, EMPTY_FLAGS
from .manifest import ManifestRecord
from .container import Container
from .codec import AbstractCodec, BKZipCodec
from .errors import CodecError
from .layout import ContainerLayout, DEFAULT_TAG
from ..utils.logger import logger
from ..utils.workers import map_ordered


@dataclass
class PackedEntry:
    record: ManifestRecord
    raw_size: int
    stored: bytes

    @property
    def empty(self):
        return len(self.stored) == 0


def layout_entries(packed: Sequence[PackedEntry], layout: ContainerLayout) -> list[Entry]:
    entries: list[Entry] = []

    # alignment applies to offsets relative to the data section
    data_start = layout.data_start(len(packed))
    relative = 0
    for uid, item in enumerate(packed):
        next_relative = layout.align(relative + len(item.stored)) if not item.empty else relative
        stored_size = next_relative - relative
        raw_size = item.raw_size if item.record.compressed and not item.empty else stored_size

        record = item.record
        entries.append(Entry(uid, data_start + relative, stored_size, raw_size, record.compressed, record.flags))
        relative = next_relative

    return entries


def pack_payloads(
    records: Sequence[tuple[ManifestRecord, bytes]],
    codec: Optional[AbstractCodec] = None,
    workers: int = 1,
    callback: Optional[Callable] = None,
) -> list[PackedEntry]:
    codec = codec or BKZipCodec()

    def encode(item: tuple[int, tuple[ManifestRecord, bytes]]) -> PackedEntry:
        index, (record, payload) = item

        if not record.compressed or not payload:
            return PackedEntry(record, len(payload), bytes(payload))

        try:
            stored = codec.compress(payload)
        except CodecError as e:
            raise CodecError(str(e), index=index) from e

        logger.debug(f"entry 0x{index:04X}: {len(payload)} -> {len(stored)} bytes")

        return PackedEntry(record, len(payload), stored)

    packed = map_ordered(encode, list(enumerate(records)), workers=workers, callback=callback)

    if not packed or not packed[-1].empty:
        terminator = ManifestRecord(uid=len(packed), compressed=False, flags=EMPTY_FLAGS)
        packed.append(PackedEntry(terminator, 0, b""))

    return packed


def serialize(container: Container, packed: Sequence[PackedEntry]) -> bytes:
    layout = container.layout

    out = bytearray(layout.header.pack(len(container), container.tag))

    for entry in container:
        out += layout.record.pack(entry.offset - container.data_start, int(entry.is_compressed), entry.flags)

    for entry, item in zip(container, packed):
        out += item.stored
        out += bytes([layout.fill]) * (entry.stored_size - len(item.stored))

    out += bytes([layout.file_fill]) * (container.length - len(out))

    return bytes(out)


def construct(
    records: Sequence[tuple[ManifestRecord, bytes]],
    layout: Optional[ContainerLayout] = None,
    tag: int = DEFAULT_TAG,
    codec: Optional[AbstractCodec] = None,
    workers: int = 1,
    callback: Optional[Callable] = None,
) -> tuple[Container, bytes]:
    layout = layout or ContainerLayout()

    packed = pack_payloads(records, codec, workers, callback)
    entries = layout_entries(packed, layout)

    container = Container(layout, entries, tag)
    container.validate()

    data = serialize(container, packed)

    logger.debug(f"laid out {len(container)} slots, container is 0x{len(data):X} bytes")

    return container, data
