"""Primitive readers and writers for the BSOR byte stream.

All scalars are little-endian:

  byte    u8
  bool    u8, true only when the byte is 0x01
  int     i32
  long    u64
  float   f32
  string  i32 byte length, then that many UTF-8 bytes

Readers consume exactly the encoded width from a binary stream and raise
``Truncated`` on a short read.  The ``pack_*`` writers return the encoded
bytes and exist for fixtures and tooling.
"""

from __future__ import annotations

import struct
from typing import BinaryIO, List

from .errors import CorruptBlock, InvalidEncoding, Truncated

BYTE = struct.Struct("<B")
INT = struct.Struct("<i")
LONG = struct.Struct("<Q")
FLOAT = struct.Struct("<f")


def read_exact(stream: BinaryIO, size: int) -> bytes:
    """Read exactly ``size`` bytes, retrying the partial reads raw streams give."""
    buf = b""
    while len(buf) < size:
        chunk = stream.read(size - len(buf))
        if not chunk:
            # b"" at end of stream, None from a non-blocking stream with no data
            raise Truncated(
                f"stream ended early: needed {size} bytes, got {len(buf)}",
                needed=size,
                got=len(buf),
            )
        buf += chunk
    return buf


def read_struct(stream: BinaryIO, layout: struct.Struct) -> tuple:
    """Read and unpack one fixed-width ``layout`` at the cursor."""
    return layout.unpack(read_exact(stream, layout.size))


def read_byte(stream: BinaryIO) -> int:
    return read_exact(stream, 1)[0]


def read_bool(stream: BinaryIO) -> bool:
    return read_byte(stream) == 1


def read_int(stream: BinaryIO) -> int:
    return INT.unpack(read_exact(stream, INT.size))[0]


def read_long(stream: BinaryIO) -> int:
    return LONG.unpack(read_exact(stream, LONG.size))[0]


def read_float(stream: BinaryIO) -> float:
    return FLOAT.unpack(read_exact(stream, FLOAT.size))[0]


def read_floats(stream: BinaryIO, count: int) -> List[float]:
    data = read_exact(stream, FLOAT.size * count)
    return list(struct.unpack(f"<{count}f", data))


def read_string(stream: BinaryIO) -> str:
    length = read_int(stream)
    if length < 0:
        raise CorruptBlock(f"negative string length {length}")
    raw = read_exact(stream, length)
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as err:
        raise InvalidEncoding(
            f"string of {length} bytes is not valid UTF-8: {err.reason}",
            raw=raw,
        ) from err


def pack_byte(value: int) -> bytes:
    return BYTE.pack(value & 0xFF)


def pack_bool(value: bool) -> bytes:
    return b"\x01" if value else b"\x00"


def pack_int(value: int) -> bytes:
    return INT.pack(value)


def pack_long(value: int) -> bytes:
    return LONG.pack(value)


def pack_float(value: float) -> bytes:
    return FLOAT.pack(value)


def pack_floats(*values: float) -> bytes:
    return struct.pack(f"<{len(values)}f", *values)


def pack_string(value: str | bytes) -> bytes:
    """Encode a length-prefixed string; raw ``bytes`` are written unchecked."""
    raw = value.encode("utf-8") if isinstance(value, str) else value
    return INT.pack(len(raw)) + raw
