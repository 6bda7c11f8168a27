"""Decode note events, the one record type with conditional fields.

Per-note layout (little-endian):

  note id      i32   packed decimal digits, see ``split_note_id``
  event time   f32
  spawn time   f32
  event type   i32   0 good cut, 1 bad cut, 2 miss, 3 bomb hit
  cut info     72 bytes, present only for good and bad cuts

Cut info layout:

  speed_ok, direction_ok, saber_type_ok, was_cut_too_soon   4 x u8
  saber speed f32, saber direction 3 x f32, saber type i32
  time deviation f32, cut direction deviation f32
  cut point 3 x f32, cut normal 3 x f32
  cut distance to center f32, cut angle f32
  before cut rating f32, after cut rating f32

Whether the cut info follows is decided by the event type that was just
read; there is no separate presence flag.
"""

from __future__ import annotations

import io
import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import BinaryIO, Optional

from .codec import read_int, read_struct
from .records import Vector3

NOTE = struct.Struct("<iffi")
CUT_INFO = struct.Struct("<4Bf3fiff3f3f4f")
EVENT_TYPE_OFFSET = 12  # note id + event time + spawn time


class _WithUnknown(IntEnum):
    @classmethod
    def _missing_(cls, value):
        return cls.UNKNOWN


class NoteEventType(_WithUnknown):
    GOOD = 0
    BAD = 1
    MISS = 2
    BOMB = 3
    UNKNOWN = 255

    @property
    def has_cut_info(self) -> bool:
        return self in (NoteEventType.GOOD, NoteEventType.BAD)


class NoteScoringType(_WithUnknown):
    NORMAL_OLD = 0
    IGNORE = 1
    NO_SCORE = 2
    NORMAL = 3
    SLIDER_HEAD = 4
    SLIDER_TAIL = 5
    BURST_SLIDER_HEAD = 6
    BURST_SLIDER_ELEMENT = 7
    UNKNOWN = 255


class ColorType(_WithUnknown):
    RED = 0
    BLUE = 1
    UNKNOWN = 255


class CutDirection(_WithUnknown):
    TOP_CENTER = 0
    BOTTOM_CENTER = 1
    MIDDLE_LEFT = 2
    MIDDLE_RIGHT = 3
    TOP_LEFT = 4
    TOP_RIGHT = 5
    BOTTOM_LEFT = 6
    BOTTOM_RIGHT = 7
    DOT = 8
    UNKNOWN = 255


@dataclass(frozen=True)
class NoteCutInfo:
    speed_ok: bool
    direction_ok: bool
    saber_type_ok: bool
    was_cut_too_soon: bool
    saber_speed: float
    saber_direction: Vector3
    saber_type: ColorType
    time_deviation: float
    cut_direction_deviation: float
    cut_point: Vector3
    cut_normal: Vector3
    cut_distance_to_center: float
    cut_angle: float
    before_cut_rating: float  # pre-swing
    after_cut_rating: float  # post-swing


@dataclass(frozen=True)
class Note:
    """One note event.

    ``cut_info`` is set exactly when ``event_type`` is a good or bad cut;
    constructing a note that breaks this raises ``ValueError``.
    """

    scoring_type: NoteScoringType
    line_index: int
    line_layer: int
    color: ColorType
    cut_direction: CutDirection
    event_time: float
    spawn_time: float
    event_type: NoteEventType
    cut_info: Optional[NoteCutInfo] = None

    def __post_init__(self) -> None:
        if self.event_type.has_cut_info and self.cut_info is None:
            raise ValueError(f"{self.event_type.name} note requires cut info")
        if not self.event_type.has_cut_info and self.cut_info is not None:
            raise ValueError(f"{self.event_type.name} note cannot carry cut info")

    @property
    def note_id(self) -> int:
        return (
            int(self.scoring_type) * 10000
            + self.line_index * 1000
            + self.line_layer * 100
            + int(self.color) * 10
            + int(self.cut_direction)
        )

    @property
    def is_cut(self) -> bool:
        return self.cut_info is not None


def split_note_id(note_id: int) -> tuple[int, int, int, int, int]:
    """Return (scoring_type, line_index, line_layer, color, cut_direction)."""
    scoring_type, rest = divmod(note_id, 10000)
    line_index, rest = divmod(rest, 1000)
    line_layer, rest = divmod(rest, 100)
    color, cut_direction = divmod(rest, 10)
    return scoring_type, line_index, line_layer, color, cut_direction


def read_cut_info(stream: BinaryIO) -> NoteCutInfo:
    v = read_struct(stream, CUT_INFO)
    return NoteCutInfo(
        speed_ok=v[0] == 1,
        direction_ok=v[1] == 1,
        saber_type_ok=v[2] == 1,
        was_cut_too_soon=v[3] == 1,
        saber_speed=v[4],
        saber_direction=Vector3(v[5], v[6], v[7]),
        saber_type=ColorType(v[8] & 0xFF),
        time_deviation=v[9],
        cut_direction_deviation=v[10],
        cut_point=Vector3(v[11], v[12], v[13]),
        cut_normal=Vector3(v[14], v[15], v[16]),
        cut_distance_to_center=v[17],
        cut_angle=v[18],
        before_cut_rating=v[19],
        after_cut_rating=v[20],
    )


def read_note(stream: BinaryIO) -> Note:
    note_id, event_time, spawn_time, raw_event_type = read_struct(stream, NOTE)
    scoring_type, line_index, line_layer, color, cut_direction = split_note_id(note_id)
    event_type = NoteEventType(raw_event_type)

    cut_info = read_cut_info(stream) if event_type.has_cut_info else None

    return Note(
        scoring_type=NoteScoringType(scoring_type),
        line_index=line_index,
        line_layer=line_layer,
        color=ColorType(color),
        cut_direction=CutDirection(cut_direction),
        event_time=event_time,
        spawn_time=spawn_time,
        event_type=event_type,
        cut_info=cut_info,
    )


def skip_note(stream: BinaryIO) -> int:
    """Advance past one note without decoding it and return its byte size.

    Only the event type is read; everything else is seeked over.
    """
    stream.seek(EVENT_TYPE_OFFSET, io.SEEK_CUR)
    raw_event_type = read_int(stream)
    size = NOTE.size
    if NoteEventType(raw_event_type).has_cut_info:
        stream.seek(CUT_INFO.size, io.SEEK_CUR)
        size += CUT_INFO.size
    return size
