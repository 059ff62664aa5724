import pytest

from bkassets.bk import Container, ContainerLayout, Entry, EMPTY_FLAGS, infer_alignment
from bkassets.bk.layout import MAX_SLOTS
from bkassets.bk.errors import InvalidLayout


def test_default_layout():
    layout = ContainerLayout()

    assert layout.header_size == 8
    assert layout.record_size == 8
    assert layout.data_start(3) == 8 + 3 * 8
    assert layout.alignment == 8


@pytest.mark.parametrize("value, alignment, expected", [(0, 8, 0), (1, 8, 8), (8, 8, 8), (9, 16, 16), (2049, 2048, 4096)])
def test_align(value, alignment, expected):
    assert ContainerLayout(alignment=alignment).align(value) == expected


def test_align_to_file_boundary():
    layout = ContainerLayout(alignment=1)
    assert layout.align(17, layout.file_alignment) == 32


@pytest.mark.parametrize("alignment", [0, 3, 12, 0x1000])
def test_alignment_must_be_power_of_two(alignment):
    with pytest.raises(ValueError):
        ContainerLayout(alignment=alignment)


def test_fill_must_be_a_byte():
    with pytest.raises(ValueError):
        ContainerLayout(fill=0x100)


def test_variants():
    assert ContainerLayout.variant("bk") == ContainerLayout()
    assert ContainerLayout.variant("bk-packed").alignment == 1

    with pytest.raises(ValueError, match="unknown container variant"):
        ContainerLayout.variant("dk64")


@pytest.mark.parametrize(
    "offsets, expected",
    [
        ([], 0x800),
        ([0, 0, 0], 0x800),
        ([0, 32, 64], 32),
        ([0, 0x800, 0x1800], 0x800),
        ([0, 8, 24], 8),
        ([0, 4, 6], 2),
        ([0, 3], 1),
    ],
)
def test_infer_alignment(offsets, expected):
    assert infer_alignment(offsets) == expected


def make_container(sizes, layout=None, length=None):
    layout = layout or ContainerLayout(alignment=1)
    entries = []
    offset = layout.data_start(len(sizes))
    for uid, size in enumerate(sizes):
        entries.append(Entry(uid, offset, size, size, False, 0 if size else EMPTY_FLAGS))
        offset += size
    return Container(layout, entries, length=-1 if length is None else length)


class TestContainer:
    def test_valid(self):
        container = make_container([16, 0, 8, 0])
        container.validate()

        assert container.entry_count == 4
        assert container.data_start == 8 + 4 * 8
        assert container.data_end == container.data_start + 24
        assert container.total_size() == 64
        assert container.length == 64

    def test_no_slots(self):
        with pytest.raises(InvalidLayout, match="no slots"):
            Container(ContainerLayout(), []).validate()

    def test_too_many_slots(self):
        make_container([0] * MAX_SLOTS).validate()

        with pytest.raises(InvalidLayout, match="at most 65536"):
            make_container([0] * (MAX_SLOTS + 1)).validate()

    def test_first_entry_must_start_at_data_section(self):
        container = make_container([8, 0])
        container.entries[0].offset += 8
        container.entries[1].offset += 8

        with pytest.raises(InvalidLayout) as e:
            container.validate()
        assert e.value.index == 0

    def test_backwards_offset(self):
        container = make_container([8, 8, 0])
        container.entries[2].offset = container.entries[1].offset - 1

        with pytest.raises(InvalidLayout) as e:
            container.validate()
        assert e.value.index == 2

    def test_overlap(self):
        container = make_container([8, 8, 0])
        container.entries[0].stored_size = container.entries[0].raw_size = 12

        with pytest.raises(InvalidLayout, match="next entry starts") as e:
            container.validate()
        assert e.value.index == 0

    def test_terminator_must_be_empty(self):
        container = make_container([8, 8])

        with pytest.raises(InvalidLayout, match="terminator") as e:
            container.validate()
        assert e.value.index == 1

    def test_data_past_declared_length(self):
        container = make_container([16, 0], length=20)

        with pytest.raises(InvalidLayout, match="container length") as e:
            container.validate()
        assert e.value.index == 1

    def test_uncompressed_sizes_must_agree(self):
        container = make_container([8, 0])
        container.entries[0].raw_size = 4

        with pytest.raises(InvalidLayout, match="raw size"):
            container.validate()

    def test_uid_follows_position(self):
        container = make_container([8, 0])
        container.entries[1].uid = 7

        with pytest.raises(InvalidLayout, match="uid"):
            container.validate()

    def test_sequence_protocol(self):
        container = make_container([8, 4, 0])

        assert len(container) == 3
        assert [entry.uid for entry in container] == [0, 1, 2]
        assert container[1].stored_size == 4
        assert container[2].empty
