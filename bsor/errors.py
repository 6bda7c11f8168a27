"""Errors raised while decoding BSOR replays.

Every error derives from ``ReplayError``, which is a ``ValueError`` so that
callers already catching ``ValueError`` around parsing keep working.
"""

from __future__ import annotations


class ReplayError(ValueError):
    """Base class for all replay decoding failures."""


class UnsupportedFormat(ReplayError):
    """Leading signature or version byte is not one this decoder understands."""

    def __init__(self, message: str, *, version: int | None = None) -> None:
        super().__init__(message)
        self.version = version


class Truncated(ReplayError):
    """The stream ended before a field or block was complete."""

    def __init__(self, message: str, *, needed: int = 0, got: int = 0) -> None:
        super().__init__(message)
        self.needed = needed
        self.got = got


class InvalidEncoding(ReplayError):
    """A text field is not valid UTF-8.

    Very old encoder versions wrote such strings; they are reported rather
    than repaired so callers can pick their own recovery policy.
    """

    def __init__(self, message: str, *, raw: bytes = b"") -> None:
        super().__init__(message)
        self.raw = raw


class UnknownBlock(ReplayError):
    """A block tag after the Info block does not name a known block type."""

    def __init__(self, tag: int, offset: int | None = None) -> None:
        where = "" if offset is None else f" at offset 0x{offset:X}"
        super().__init__(f"unknown block tag 0x{tag:02X}{where}")
        self.tag = tag
        self.offset = offset


class SeekUnsupported(ReplayError):
    """Indexed access was requested on a stream that cannot seek."""


class CorruptBlock(ReplayError):
    """A structurally impossible value (bad Info tag, negative length, ...)."""
