from __future__ import annotations

import io
import logging
from dataclasses import dataclass, field
from typing import BinaryIO, Dict, List

from .blocks import DATA_BLOCKS, BlockType, block_type_for_tag, read_block
from .errors import UnknownBlock
from .header import read_header
from .info import Info, read_info
from .notes import Note
from .records import Frame, Height, Pause, Wall

logger = logging.getLogger(__name__)


@dataclass
class Replay:
    """A fully decoded replay.

    Block types absent from the stream leave their list empty.  A block
    type that appears more than once has its records appended in stream
    order.
    """

    version: int
    info: Info
    frames: List[Frame] = field(default_factory=list)
    notes: List[Note] = field(default_factory=list)
    walls: List[Wall] = field(default_factory=list)
    heights: List[Height] = field(default_factory=list)
    pauses: List[Pause] = field(default_factory=list)

    @classmethod
    def from_stream(cls, stream: BinaryIO) -> "Replay":
        return decode_full(stream)

    @classmethod
    def from_bytes(cls, data: bytes) -> "Replay":
        return decode_full(io.BytesIO(data))

    def block(self, block_type: BlockType) -> list:
        return getattr(self, block_type.label)

    def counts(self) -> Dict[str, int]:
        return {bt.label: len(self.block(bt)) for bt in DATA_BLOCKS}


def read_tag(stream: BinaryIO) -> int | None:
    """Return the next block tag, or None at end of stream."""
    data = stream.read(1)
    if not data:
        return None
    return data[0]


def decode_full(stream: BinaryIO) -> Replay:
    """Decode a whole replay in one forward pass.

    Only ``stream.read`` is used, so pipes and sockets work; short reads are
    retried until each field is filled.  Any failing block aborts the call;
    no partially filled replay is returned.
    """
    header = read_header(stream)
    info = read_info(stream)
    replay = Replay(version=header.version, info=info)
    logger.debug("replay v%d for %r by %r", header.version, info.song_name, info.player_name)

    while True:
        tag = read_tag(stream)
        if tag is None:
            break
        block_type = block_type_for_tag(tag)
        if block_type is None:
            raise UnknownBlock(tag)
        items = read_block(stream, block_type)
        logger.debug("decoded %s block: %d records", block_type.label, len(items))
        replay.block(block_type).extend(items)

    return replay
