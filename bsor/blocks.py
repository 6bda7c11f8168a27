"""Block types, per-record metadata and the block reader.

After the Info block every block is ``[tag u8][count i32][records...]``.
Each record type declares whether it is fixed width; the index scan relies
on that to skip blocks with a single seek instead of decoding them.
"""

from __future__ import annotations

import io
from dataclasses import dataclass
from enum import IntEnum
from typing import Any, BinaryIO, Callable, Dict, List, Optional

from . import records
from .codec import read_int
from .errors import CorruptBlock, Truncated
from .notes import read_note, skip_note

COUNT_SIZE = 4


class BlockType(IntEnum):
    INFO = 0
    FRAMES = 1
    NOTES = 2
    WALLS = 3
    HEIGHTS = 4
    PAUSES = 5

    @property
    def label(self) -> str:
        return self.name.lower()


@dataclass(frozen=True)
class RecordSpec:
    """How to decode (and cheaply skip) the records of one block type.

    ``fixed_size`` is the record width in bytes, or None when the width
    depends on the record's contents.  Variable-width types may provide
    ``skip``, which advances past one record and returns its size; without
    it records are decoded and discarded.
    """

    block_type: BlockType
    decode: Callable[[BinaryIO], Any]
    fixed_size: Optional[int] = None
    skip: Optional[Callable[[BinaryIO], int]] = None

    @property
    def is_fixed_width(self) -> bool:
        return self.fixed_size is not None


RECORD_SPECS: Dict[BlockType, RecordSpec] = {
    BlockType.FRAMES: RecordSpec(BlockType.FRAMES, records.read_frame, records.FRAME.size),
    BlockType.NOTES: RecordSpec(BlockType.NOTES, read_note, skip=skip_note),
    BlockType.WALLS: RecordSpec(BlockType.WALLS, records.read_wall, records.WALL.size),
    BlockType.HEIGHTS: RecordSpec(BlockType.HEIGHTS, records.read_height, records.HEIGHT.size),
    BlockType.PAUSES: RecordSpec(BlockType.PAUSES, records.read_pause, records.PAUSE.size),
}

DATA_BLOCKS = tuple(RECORD_SPECS)


def block_type_for_tag(tag: int) -> BlockType | None:
    """Return the data block type for ``tag``, or None if it is not one."""
    try:
        block_type = BlockType(tag)
    except ValueError:
        return None
    return block_type if block_type in RECORD_SPECS else None


def read_count(stream: BinaryIO) -> int:
    count = read_int(stream)
    if count < 0:
        raise CorruptBlock(f"negative record count {count}")
    return count


def read_records(stream: BinaryIO, block_type: BlockType, count: int) -> List[Any]:
    """Decode ``count`` records of ``block_type`` starting at the cursor."""
    decode = RECORD_SPECS[block_type].decode
    return [decode(stream) for _ in range(count)]


def read_block(stream: BinaryIO, block_type: BlockType) -> List[Any]:
    """Read a block's record count, then that many records.

    The tag byte must already have been consumed.
    """
    return read_records(stream, block_type, read_count(stream))


def skip_records(
    stream: BinaryIO, block_type: BlockType, count: int, end: int
) -> int:
    """Move past ``count`` records without keeping them.

    ``end`` is the stream length; a block reaching beyond it raises
    ``Truncated``.  Returns the number of bytes skipped.
    """
    spec = RECORD_SPECS[block_type]
    start = stream.tell()

    if spec.is_fixed_width:
        size = count * spec.fixed_size
        _check_within(start, size, end, block_type)
        stream.seek(size, io.SEEK_CUR)
        return size

    size = 0
    for _ in range(count):
        if spec.skip is not None:
            size += spec.skip(stream)
        else:
            spec.decode(stream)
            size = stream.tell() - start
        _check_within(start, size, end, block_type)
    return size


def _check_within(start: int, size: int, end: int, block_type: BlockType) -> None:
    if start + size > end:
        raise Truncated(
            f"{block_type.label} block at 0x{start:X} needs {size} bytes, "
            f"stream has {max(end - start, 0)}",
            needed=size,
            got=max(end - start, 0),
        )
