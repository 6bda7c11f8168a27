"""Tests for the fixed-width record decoders."""

import io

import pytest

from bsor.errors import Truncated
from bsor.records import (
    FRAME,
    HEIGHT,
    PAUSE,
    POSE,
    WALL,
    Vector3,
    Vector4,
    read_frame,
    read_height,
    read_pause,
    read_pose,
    read_vector3,
    read_vector4,
    read_wall,
    split_wall_id,
)

from replay_builder import (
    encode_frame,
    encode_height,
    encode_pause,
    encode_pose,
    encode_wall,
    make_frame,
    make_height,
    make_pause,
    make_pose,
    make_wall,
)


def test_record_sizes() -> None:
    assert FRAME.size == 92
    assert POSE.size == 28
    assert WALL.size == 16
    assert HEIGHT.size == 8
    assert PAUSE.size == 12


def test_vectors() -> None:
    stream = io.BytesIO(encode_pose(make_pose(2.0)))
    assert read_vector3(stream) == Vector3(2.0, 2.5, 3.0)
    assert read_vector4(stream) == Vector4(0.0, 0.25, -0.5, 1.0)


def test_pose() -> None:
    pose = make_pose(-1.5)
    assert read_pose(io.BytesIO(encode_pose(pose))) == pose


def test_frame() -> None:
    frame = make_frame(3)
    stream = io.BytesIO(encode_frame(frame) + b"\xAA")
    assert read_frame(stream) == frame
    assert stream.tell() == FRAME.size


def test_frame_keeps_hand_order() -> None:
    frame = read_frame(io.BytesIO(encode_frame(make_frame(0))))
    assert frame.head.position.x == 0.0
    assert frame.left_hand.position.x == 10.0
    assert frame.right_hand.position.x == 20.0


def test_wall_id_is_split_into_digits() -> None:
    assert split_wall_id(312) == (3, 1, 2)
    assert split_wall_id(5) == (0, 0, 5)

    wall = make_wall(3)
    decoded = read_wall(io.BytesIO(encode_wall(wall)))
    assert decoded == wall
    assert decoded.wall_id == 312


def test_height_and_pause() -> None:
    assert read_height(io.BytesIO(encode_height(make_height(2)))) == make_height(2)
    pause = read_pause(io.BytesIO(encode_pause(make_pause(1))))
    assert pause.duration == 5001
    assert pause.time == 11.0


@pytest.mark.parametrize(
    "reader, data",
    [
        (read_frame, encode_frame(make_frame(1))[:-1]),
        (read_wall, encode_wall(make_wall(1))[:-1]),
        (read_height, encode_height(make_height(1))[:4]),
        (read_pause, encode_pause(make_pause(1))[:8]),
    ],
)
def test_short_record_raises_truncated(reader, data) -> None:
    with pytest.raises(Truncated):
        reader(io.BytesIO(data))
