import pytest

from bkassets.bk import AbstractCodec, ContainerLayout, ManifestRecord, EMPTY_FLAGS, construct, payload_path
from bkassets.bk.errors import CodecError


SAMPLE_PAYLOADS = [
    (b"\x00\x01\x02\x03" * 64, True, 0x0003),
    (b"plain uncompressed payload!!", False, 0x0000),
    (b"", False, EMPTY_FLAGS),
    (bytes(range(256)) * 3, True, 0x0002),
    (b"tail", False, 0x0001),
]


class FailingCodec(AbstractCodec):
    def compress(self, data):
        raise CodecError("refusing to compress")

    def decompress(self, data):
        return data

    def inflated_size(self, data):
        return len(data)


def make_records(payloads):
    records = []
    for uid, (payload, compressed, flags) in enumerate(payloads):
        record = ManifestRecord(uid=uid, compressed=compressed, flags=flags, path=payload_path(uid) if payload else None)
        records.append((record, payload))
    return records


@pytest.fixture
def layout():
    return ContainerLayout(alignment=8)


@pytest.fixture
def sample_records():
    return make_records(SAMPLE_PAYLOADS)


@pytest.fixture
def sample(sample_records, layout):
    return construct(sample_records, layout)


@pytest.fixture
def sample_bin(sample, tmp_path):
    _, data = sample
    bin_path = tmp_path / "assets.bin"
    bin_path.write_bytes(data)
    return bin_path
