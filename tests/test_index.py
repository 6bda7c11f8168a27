"""Indexed (lazy) decoding tests."""

from __future__ import annotations

import io
from itertools import accumulate

import pytest

from bsor.blocks import BlockType
from bsor.codec import pack_byte, pack_int
from bsor.container import decode_full
from bsor.errors import SeekUnsupported, Truncated, UnknownBlock, UnsupportedFormat
from bsor.index import BlockIndexEntry, ReplayIndex, build_index, materialize
from bsor.notes import NoteEventType

from replay_builder import (
    ForwardOnlyStream,
    build_replay,
    encode_block,
    encode_header,
    encode_info,
    make_frame,
    make_height,
    make_note,
    sample_info,
    standard_blocks,
)


class CountingStream(io.BytesIO):
    """BytesIO that records how many bytes were read."""

    def __init__(self, data: bytes) -> None:
        super().__init__(data)
        self.bytes_read = 0

    def read(self, size: int | None = -1) -> bytes:
        data = super().read(size)
        self.bytes_read += len(data)
        return data


def _layout(blocks) -> list[tuple[int, int]]:
    """(first record offset, end offset) for each encoded block."""
    start = len(encode_header()) + len(encode_info(sample_info()))
    sizes = [len(encode_block(bt, items)) for bt, items in blocks]
    ends = [start + s for s in accumulate(sizes)]
    starts = [start] + ends[:-1]
    return [(s + 5, e) for s, e in zip(starts, ends)]


def test_rejects_non_seekable_stream() -> None:
    stream = ForwardOnlyStream(build_replay(standard_blocks()))
    with pytest.raises(SeekUnsupported):
        build_index(stream)
    # nothing was consumed before the rejection
    assert stream.read(4) == encode_header()[:4]


def test_materialize_rejects_non_seekable_stream() -> None:
    data = build_replay(standard_blocks())
    entry = build_index(io.BytesIO(data)).notes
    with pytest.raises(SeekUnsupported):
        materialize(entry, ForwardOnlyStream(data))


def test_index_records_offsets_and_counts() -> None:
    blocks = standard_blocks(frames=3, notes=5, walls=0, heights=2, pauses=1)
    data = build_replay(blocks)
    index = build_index(io.BytesIO(data))

    assert index.version == 1
    assert index.info == sample_info()
    assert [e.block_type for e in index.entries] == [bt for bt, _ in blocks]
    for entry, (bt, items), (offset, end) in zip(index.entries, blocks, _layout(blocks)):
        assert entry.block_type is bt
        assert entry.count == len(items)
        assert entry.offset == offset
        assert entry.end == end
    assert index.frames.size == 3 * 92
    assert index.walls.is_empty
    assert index.count(BlockType.NOTES) == 5


def test_index_does_not_read_frame_payloads() -> None:
    blocks = [(BlockType.FRAMES, [make_frame(i) for i in range(200)])]
    data = build_replay(blocks)
    stream = CountingStream(data)
    build_index(stream)
    # header + info + tag + count, never the 200 x 92 bytes of frames
    assert stream.bytes_read == len(encode_header()) + len(encode_info(sample_info())) + 5


def test_index_reads_only_note_event_types() -> None:
    notes = [make_note(i, NoteEventType.GOOD) for i in range(10)]
    data = build_replay([(BlockType.NOTES, notes)])
    stream = CountingStream(data)
    build_index(stream)
    prefix = len(encode_header()) + len(encode_info(sample_info())) + 5
    assert stream.bytes_read == prefix + 10 * 4


def test_full_and_lazy_decodes_are_identical() -> None:
    data = build_replay(standard_blocks(frames=7, notes=11, walls=4, heights=3, pauses=2))
    full = decode_full(io.BytesIO(data))

    stream = io.BytesIO(data)
    index = ReplayIndex.from_stream(stream)
    assert index.load_all(stream) == full

    assert index.notes.load(stream) == full.notes
    assert materialize(index.frames, stream) == full.frames


def test_materialize_is_repeatable_on_independent_handles() -> None:
    data = build_replay(standard_blocks())
    index = build_index(io.BytesIO(data))
    first = materialize(index.notes, io.BytesIO(data))
    second = materialize(index.notes, io.BytesIO(data))
    assert first == second
    assert len(first) == index.notes.count


def test_materialize_restores_cursor() -> None:
    data = build_replay(standard_blocks())
    stream = io.BytesIO(data)
    index = build_index(stream)
    stream.seek(3)
    index.heights.load(stream)
    assert stream.tell() == 3


def test_entry_is_immutable() -> None:
    index = build_index(io.BytesIO(build_replay(standard_blocks())))
    entry = index.notes
    with pytest.raises(AttributeError):
        entry.count = 0  # type: ignore[misc]
    assert isinstance(entry, BlockIndexEntry)


def test_missing_block_has_no_entry() -> None:
    index = build_index(io.BytesIO(build_replay([(BlockType.HEIGHTS, [make_height(0)])])))
    assert index.frames is None
    assert index.load(BlockType.FRAMES, io.BytesIO(b"")) == []
    assert index.heights.count == 1


def test_repeated_blocks_are_loaded_in_order() -> None:
    blocks = [
        (BlockType.FRAMES, [make_frame(0)]),
        (BlockType.FRAMES, [make_frame(1)]),
    ]
    data = build_replay(blocks)
    stream = io.BytesIO(data)
    index = build_index(stream)
    assert len(index.entries_for(BlockType.FRAMES)) == 2
    assert index.load(BlockType.FRAMES, stream) == [make_frame(0), make_frame(1)]
    assert index.load_all(stream) == decode_full(io.BytesIO(data))


def test_zero_record_block_entry() -> None:
    blocks = [(BlockType.NOTES, []), (BlockType.PAUSES, [])]
    stream = io.BytesIO(build_replay(blocks))
    index = build_index(stream)
    assert index.notes.count == 0
    assert index.notes.size == 0
    assert index.pauses.offset == index.notes.offset + 5
    assert index.notes.load(stream) == []


def test_bad_magic_in_lazy_mode() -> None:
    data = bytearray(build_replay(standard_blocks()))
    data[0] = 0
    with pytest.raises(UnsupportedFormat):
        build_index(io.BytesIO(bytes(data)))


def test_unknown_tag_in_lazy_mode_reports_offset() -> None:
    head = build_replay([(BlockType.HEIGHTS, [make_height(0)])])
    data = head + pack_byte(9) + pack_int(0)
    with pytest.raises(UnknownBlock) as excinfo:
        build_index(io.BytesIO(data))
    assert excinfo.value.tag == 9
    assert excinfo.value.offset == len(head)


@pytest.mark.parametrize("block_pos", range(5))
def test_truncated_last_record_fails_index(block_pos) -> None:
    blocks = standard_blocks()
    data = build_replay(blocks)
    _, end = _layout(blocks)[block_pos]
    with pytest.raises(Truncated):
        build_index(io.BytesIO(data[: end - 1]))


def test_index_respects_initial_position() -> None:
    prefix = b"\x00" * 7
    data = build_replay(standard_blocks())
    stream = io.BytesIO(prefix + data)
    stream.seek(len(prefix))
    index = build_index(stream)
    assert index.notes.load(stream) == decode_full(io.BytesIO(data)).notes


def test_failing_materialization_leaves_earlier_results() -> None:
    data = build_replay(standard_blocks())
    index = build_index(io.BytesIO(data))
    notes = index.notes.load(io.BytesIO(data))

    short = io.BytesIO(data[: index.pauses.end - 1])
    with pytest.raises(Truncated):
        index.pauses.load(short)
    assert notes == decode_full(io.BytesIO(data)).notes
