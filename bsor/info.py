"""Decode the Info block: session metadata stored right after the header."""

from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

from .codec import read_bool, read_byte, read_float, read_int, read_string
from .errors import CorruptBlock

INFO_TAG = 0x00


@dataclass(frozen=True)
class Info:
    version: str  # recorder mod version
    game_version: str
    timestamp: int  # unix seconds, stored as decimal text
    player_id: str
    player_name: str
    platform: str
    tracking_system: str
    hmd: str
    controller: str
    hash: str  # level hash
    song_name: str
    mapper: str
    difficulty: str
    score: int
    mode: str
    environment: str
    modifiers: str  # comma separated modifier codes
    jump_distance: float
    left_handed: bool
    height: float
    start_time: float
    fail_time: float  # 0 when the level was completed
    speed: float

    @property
    def failed(self) -> bool:
        return self.fail_time > 0

    @property
    def modifier_list(self) -> list[str]:
        return [m for m in self.modifiers.split(",") if m]


MAX_TIMESTAMP = 0xFFFFFFFF


def _parse_timestamp(text: str) -> int:
    # plain ASCII digits only: no sign, whitespace or underscores
    if not (text.isascii() and text.isdigit()):
        raise CorruptBlock(f"info timestamp is not an unsigned integer: {text!r}")
    value = int(text)
    if value > MAX_TIMESTAMP:
        raise CorruptBlock(f"info timestamp out of u32 range: {value}")
    return value


def read_info(stream: BinaryIO) -> Info:
    """Read the tagged Info block at the cursor.

    Field order and count are fixed for format version 1.
    """
    tag = read_byte(stream)
    if tag != INFO_TAG:
        raise CorruptBlock(f"expected info block tag 0x00, found 0x{tag:02X}")

    version = read_string(stream)
    game_version = read_string(stream)
    timestamp = _parse_timestamp(read_string(stream))
    player_id = read_string(stream)
    player_name = read_string(stream)
    platform = read_string(stream)
    tracking_system = read_string(stream)
    hmd = read_string(stream)
    controller = read_string(stream)
    level_hash = read_string(stream)
    song_name = read_string(stream)
    mapper = read_string(stream)
    difficulty = read_string(stream)
    score = read_int(stream)
    mode = read_string(stream)
    environment = read_string(stream)
    modifiers = read_string(stream)
    jump_distance = read_float(stream)
    left_handed = read_bool(stream)
    height = read_float(stream)
    start_time = read_float(stream)
    fail_time = read_float(stream)
    speed = read_float(stream)

    return Info(
        version=version,
        game_version=game_version,
        timestamp=timestamp,
        player_id=player_id,
        player_name=player_name,
        platform=platform,
        tracking_system=tracking_system,
        hmd=hmd,
        controller=controller,
        hash=level_hash,
        song_name=song_name,
        mapper=mapper,
        difficulty=difficulty,
        score=score,
        mode=mode,
        environment=environment,
        modifiers=modifiers,
        jump_distance=jump_distance,
        left_handed=left_handed,
        height=height,
        start_time=start_time,
        fail_time=fail_time,
        speed=speed,
    )
