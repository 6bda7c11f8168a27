from __future__ import annotations

from dataclasses import dataclass
from typing import BinaryIO

from .codec import INT, read_byte
from .errors import Truncated, UnsupportedFormat


MAGIC_WORD = 0x442D3D69
MAGIC = INT.pack(MAGIC_WORD)  # 69 3D 2D 44 on disk
SUPPORTED_VERSIONS = frozenset({1})
HEADER_SIZE = len(MAGIC) + 1


@dataclass(frozen=True)
class Header:
    version: int


def read_header(stream: BinaryIO) -> Header:
    """Check the leading signature and version byte.

    The signature is checked before the version byte is read, so a bad
    magic is reported as such regardless of what follows it.
    """
    magic = _read_upto(stream, len(MAGIC))
    if magic != MAGIC[: len(magic)]:
        raise UnsupportedFormat(f"bad magic: {magic.hex()} (expected {MAGIC.hex()})")
    if len(magic) < len(MAGIC):
        raise Truncated(
            f"stream ended inside magic: needed {len(MAGIC)} bytes, got {len(magic)}",
            needed=len(MAGIC),
            got=len(magic),
        )

    version = read_byte(stream)
    if version not in SUPPORTED_VERSIONS:
        raise UnsupportedFormat(
            f"unsupported replay version {version}", version=version
        )
    return Header(version=version)


def _read_upto(stream: BinaryIO, size: int) -> bytes:
    buf = b""
    while len(buf) < size:
        chunk = stream.read(size - len(buf))
        if not chunk:
            break
        buf += chunk
    return buf
