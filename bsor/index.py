"""Indexed access: scan block boundaries once, decode blocks on demand.

The Frames block usually dominates a replay's size.  ``build_index``
decodes only the header and Info block and records where every other block
starts; ``materialize`` later seeks back and decodes just one block.

    with open(path, "rb") as fh:
        index = build_index(fh)
        notes = index.notes.load(fh)

A stream handle has one cursor.  Materializing from several threads needs
either a lock around each call or a separate handle per thread.
"""

from __future__ import annotations

import io
import logging
from dataclasses import dataclass
from typing import Any, BinaryIO, List, Optional, Tuple

from .blocks import (
    DATA_BLOCKS,
    BlockType,
    block_type_for_tag,
    read_count,
    read_records,
    skip_records,
)
from .container import Replay, read_tag
from .errors import SeekUnsupported, UnknownBlock
from .header import read_header
from .info import Info, read_info

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BlockIndexEntry:
    """Where one block's records live in the stream."""

    block_type: BlockType
    offset: int  # byte offset of the first record, after tag and count
    count: int
    size: int  # bytes taken by the records

    @property
    def end(self) -> int:
        return self.offset + self.size

    @property
    def is_empty(self) -> bool:
        return self.count == 0

    def load(self, stream: BinaryIO) -> List[Any]:
        return materialize(self, stream)


@dataclass(frozen=True)
class ReplayIndex:
    version: int
    info: Info
    entries: Tuple[BlockIndexEntry, ...] = ()

    @classmethod
    def from_stream(cls, stream: BinaryIO) -> "ReplayIndex":
        return build_index(stream)

    def entries_for(self, block_type: BlockType) -> Tuple[BlockIndexEntry, ...]:
        return tuple(e for e in self.entries if e.block_type == block_type)

    def entry(self, block_type: BlockType) -> Optional[BlockIndexEntry]:
        for e in self.entries:
            if e.block_type == block_type:
                return e
        return None

    @property
    def frames(self) -> Optional[BlockIndexEntry]:
        return self.entry(BlockType.FRAMES)

    @property
    def notes(self) -> Optional[BlockIndexEntry]:
        return self.entry(BlockType.NOTES)

    @property
    def walls(self) -> Optional[BlockIndexEntry]:
        return self.entry(BlockType.WALLS)

    @property
    def heights(self) -> Optional[BlockIndexEntry]:
        return self.entry(BlockType.HEIGHTS)

    @property
    def pauses(self) -> Optional[BlockIndexEntry]:
        return self.entry(BlockType.PAUSES)

    def count(self, block_type: BlockType) -> int:
        return sum(e.count for e in self.entries_for(block_type))

    def load(self, block_type: BlockType, stream: BinaryIO) -> List[Any]:
        """Materialize every block of ``block_type``, in stream order."""
        items: List[Any] = []
        for e in self.entries_for(block_type):
            items.extend(materialize(e, stream))
        return items

    def load_all(self, stream: BinaryIO) -> Replay:
        replay = Replay(version=self.version, info=self.info)
        for block_type in DATA_BLOCKS:
            replay.block(block_type).extend(self.load(block_type, stream))
        return replay


def require_seekable(stream: BinaryIO) -> None:
    seekable = getattr(stream, "seekable", None)
    if seekable is None:
        ok = hasattr(stream, "seek") and hasattr(stream, "tell")
    else:
        ok = seekable()
    if not ok:
        raise SeekUnsupported(
            f"indexed decoding needs a seekable stream, got {type(stream).__name__}"
        )


def build_index(stream: BinaryIO) -> ReplayIndex:
    """Decode header and Info, then record the position of every block.

    Fixed-width blocks are skipped with one seek; note blocks read only
    each note's event type to learn its size.
    """
    require_seekable(stream)

    start = stream.tell()
    stream.seek(0, io.SEEK_END)
    end = stream.tell()
    stream.seek(start)

    header = read_header(stream)
    info = read_info(stream)

    entries: List[BlockIndexEntry] = []
    while True:
        tag_offset = stream.tell()
        tag = read_tag(stream)
        if tag is None:
            break
        block_type = block_type_for_tag(tag)
        if block_type is None:
            raise UnknownBlock(tag, tag_offset)

        count = read_count(stream)
        offset = stream.tell()
        size = skip_records(stream, block_type, count, end)
        entries.append(
            BlockIndexEntry(block_type=block_type, offset=offset, count=count, size=size)
        )
        logger.debug(
            "indexed %s block at 0x%X: %d records, %d bytes",
            block_type.label,
            offset,
            count,
            size,
        )

    return ReplayIndex(version=header.version, info=info, entries=tuple(entries))


def materialize(entry: BlockIndexEntry, stream: BinaryIO) -> List[Any]:
    """Decode the records behind ``entry``.

    The stream cursor is put back where it was, also when decoding fails,
    so repeated calls give the same result.
    """
    require_seekable(stream)
    saved = stream.tell()
    try:
        stream.seek(entry.offset)
        return read_records(stream, entry.block_type, entry.count)
    finally:
        stream.seek(saved)
