"""Fixed-width records: vectors, poses, frames, walls, heights and pauses.

Record layouts (little-endian):

  Frame   time f32, fps i32, head/left/right pose        92 bytes
  Pose    position 3 x f32, rotation 4 x f32             28 bytes
  Wall    wall id i32, energy f32, time f32, spawn f32   16 bytes
  Height  height f32, time f32                            8 bytes
  Pause   duration u64, time f32                         12 bytes

The wall id packs three decimal digits: ``line_index * 100 +
obstacle_type * 10 + width``.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass
from typing import BinaryIO, Sequence

from .codec import read_floats, read_struct

VECTOR3 = struct.Struct("<3f")
VECTOR4 = struct.Struct("<4f")
POSE = struct.Struct("<7f")
FRAME = struct.Struct("<fi21f")
WALL = struct.Struct("<i3f")
HEIGHT = struct.Struct("<2f")
PAUSE = struct.Struct("<Qf")


@dataclass(frozen=True)
class Vector3:
    x: float
    y: float
    z: float


@dataclass(frozen=True)
class Vector4:
    """Orientation quaternion."""

    x: float
    y: float
    z: float
    w: float


@dataclass(frozen=True)
class Pose:
    position: Vector3
    rotation: Vector4


@dataclass(frozen=True)
class Frame:
    time: float
    fps: int
    head: Pose
    left_hand: Pose
    right_hand: Pose


@dataclass(frozen=True)
class Wall:
    line_index: int
    obstacle_type: int
    width: int
    energy: float  # energy lost while inside the wall
    time: float
    spawn_time: float

    @property
    def wall_id(self) -> int:
        return self.line_index * 100 + self.obstacle_type * 10 + self.width


@dataclass(frozen=True)
class Height:
    height: float
    time: float


@dataclass(frozen=True)
class Pause:
    duration: int
    time: float


def read_vector3(stream: BinaryIO) -> Vector3:
    return Vector3(*read_floats(stream, 3))


def read_vector4(stream: BinaryIO) -> Vector4:
    return Vector4(*read_floats(stream, 4))


def read_pose(stream: BinaryIO) -> Pose:
    return _pose(read_struct(stream, POSE))


def _pose(values: Sequence[float]) -> Pose:
    return Pose(
        position=Vector3(values[0], values[1], values[2]),
        rotation=Vector4(values[3], values[4], values[5], values[6]),
    )


def read_frame(stream: BinaryIO) -> Frame:
    values = read_struct(stream, FRAME)
    return Frame(
        time=values[0],
        fps=values[1],
        head=_pose(values[2:9]),
        left_hand=_pose(values[9:16]),
        right_hand=_pose(values[16:23]),
    )


def split_wall_id(wall_id: int) -> tuple[int, int, int]:
    line_index, rest = divmod(wall_id, 100)
    obstacle_type, width = divmod(rest, 10)
    return line_index, obstacle_type, width


def read_wall(stream: BinaryIO) -> Wall:
    wall_id, energy, time, spawn_time = read_struct(stream, WALL)
    line_index, obstacle_type, width = split_wall_id(wall_id)
    return Wall(
        line_index=line_index,
        obstacle_type=obstacle_type,
        width=width,
        energy=energy,
        time=time,
        spawn_time=spawn_time,
    )


def read_height(stream: BinaryIO) -> Height:
    height, time = read_struct(stream, HEIGHT)
    return Height(height=height, time=time)


def read_pause(stream: BinaryIO) -> Pause:
    duration, time = read_struct(stream, PAUSE)
    return Pause(duration=duration, time=time)
