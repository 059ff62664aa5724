from typing import Optional, Callable

from .entry import Entry
from .container import Container
from .codec import AbstractCodec, BKZipCodec
from .errors import TruncatedHeader, TruncatedToc, PayloadOutOfBounds, CodecError, SizeMismatch
from .layout import ContainerLayout, infer_alignment
from ..utils.logger import logger
from ..utils.workers import map_ordered


def read_container(
    data: bytes,
    layout: Optional[ContainerLayout] = None,
    codec: Optional[AbstractCodec] = None,
    infer: Optional[bool] = None,
) -> Container:
    """
    Parse the header and table of `data`. The alignment is inferred from the table when `infer`
    is set, or when no layout is given; the rest of the layout is kept as given.
    """
    codec = codec or BKZipCodec()
    if infer is None:
        infer = layout is None
    base_layout = layout or ContainerLayout()

    if len(data) < base_layout.header_size:
        raise TruncatedHeader(len(data), base_layout.header_size)

    slot_count, tag = base_layout.header.unpack_from(data)

    toc_end = base_layout.data_start(slot_count)
    if len(data) < toc_end:
        raise TruncatedToc(slot_count, len(data), toc_end)

    records = [
        base_layout.record.unpack_from(data, base_layout.header_size + i * base_layout.record_size)
        for i in range(slot_count)
    ]

    if infer:
        base_layout = base_layout.with_alignment(infer_alignment(offset for offset, _, _ in records))

    offsets = [toc_end + offset for offset, _, _ in records]

    entries = []
    for uid, (offset, (_, compressed, flags)) in enumerate(zip(offsets, records)):
        # sizes are implied by the next slot; a backwards step is reported by validate()
        next_offset = offsets[uid + 1] if uid + 1 < slot_count else offset
        stored_size = max(next_offset - offset, 0)
        entries.append(Entry(uid, offset, stored_size, stored_size, compressed != 0, flags))

    container = Container(base_layout, entries, tag, len(data))
    container.validate()

    for entry in container:
        if entry.is_compressed and not entry.empty:
            try:
                entry.raw_size = codec.inflated_size(data[entry.offset : entry.end])
            except CodecError as e:
                raise CodecError(str(e), index=entry.uid) from e

    logger.debug(
        f"parsed {len(container)} slots, data 0x{container.data_start:X}-0x{container.data_end:X}, "
        f"alignment {container.layout.alignment}"
    )

    return container


def read_payloads(
    container: Container,
    data: bytes,
    codec: Optional[AbstractCodec] = None,
    workers: int = 1,
    callback: Optional[Callable] = None,
) -> list[bytes]:
    codec = codec or BKZipCodec()

    def decode(entry: Entry) -> bytes:
        if entry.end > len(data):
            raise PayloadOutOfBounds(entry.uid, entry.offset, entry.end, len(data))

        payload = data[entry.offset : entry.end]

        if not entry.is_compressed or entry.empty:
            return bytes(payload)

        try:
            raw = codec.decompress(payload)
        except CodecError as e:
            raise CodecError(str(e), index=entry.uid) from e

        if len(raw) != entry.raw_size:
            raise SizeMismatch(entry.uid, entry.raw_size, len(raw))

        logger.debug(f"entry 0x{entry.uid:04X}: {entry.stored_size} -> {len(raw)} bytes")

        return raw

    return map_ordered(decode, container.entries, workers=workers, callback=callback)


def extract(
    data: bytes,
    layout: Optional[ContainerLayout] = None,
    codec: Optional[AbstractCodec] = None,
    workers: int = 1,
    callback: Optional[Callable] = None,
    infer: Optional[bool] = None,
) -> tuple[Container, list[bytes]]:
    container = read_container(data, layout, codec, infer)
    payloads = read_payloads(container, data, codec, workers, callback)
    return container, payloads
