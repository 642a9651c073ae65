"""On-disk and system-call record layouts: stat and rtcdate."""

from __future__ import annotations

import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar


class FileType(IntEnum):
    """Inode types."""

    DIR = 1
    FILE = 2
    DEVICE = 3


def _pack(layout: struct.Struct, *values: int) -> bytes:
    try:
        return layout.pack(*values)
    except struct.error as exc:
        raise ValueError(str(exc)) from None


def _unpack(layout: struct.Struct, data: bytes) -> tuple:
    if len(data) != layout.size:
        raise ValueError(f"expected {layout.size} bytes, got {len(data)}")
    return layout.unpack(data)


@dataclass
class Stat:
    """File status as returned by fstat."""

    dev: int
    ino: int
    type: FileType | int
    nlink: int
    size: int

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<iIhh4xQ")

    def pack(self) -> bytes:
        """Encode in the little-endian 64-bit layout."""
        return _pack(self.LAYOUT, self.dev, self.ino, int(self.type), self.nlink, self.size)

    @classmethod
    def unpack(cls, data: bytes) -> Stat:
        """Decode from the packed layout."""
        dev, ino, kind, nlink, size = _unpack(cls.LAYOUT, data)
        try:
            kind = FileType(kind)
        except ValueError:
            pass
        return cls(dev, ino, kind, nlink, size)


@dataclass
class RtcDate:
    """A calendar date and time of day."""

    second: int
    minute: int
    hour: int
    day: int
    month: int
    year: int

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<6I")

    def pack(self) -> bytes:
        """Encode as six little-endian unsigned 32-bit fields."""
        return _pack(
            self.LAYOUT, self.second, self.minute, self.hour, self.day, self.month, self.year
        )

    @classmethod
    def unpack(cls, data: bytes) -> RtcDate:
        """Decode from the packed layout."""
        return cls(*_unpack(cls.LAYOUT, data))