"""Virtio block-device descriptor layouts and the buffer-cache record."""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import ClassVar

# MMIO control registers, as offsets from the device base.
VIRTIO_MMIO_MAGIC_VALUE = 0x000
VIRTIO_MMIO_VERSION = 0x004
VIRTIO_MMIO_DEVICE_ID = 0x008
VIRTIO_MMIO_VENDOR_ID = 0x00C
VIRTIO_MMIO_DEVICE_FEATURES = 0x010
VIRTIO_MMIO_DRIVER_FEATURES = 0x020
VIRTIO_MMIO_GUEST_PAGE_SIZE = 0x028
VIRTIO_MMIO_QUEUE_SEL = 0x030
VIRTIO_MMIO_QUEUE_NUM_MAX = 0x034
VIRTIO_MMIO_QUEUE_NUM = 0x038
VIRTIO_MMIO_QUEUE_ALIGN = 0x03C
VIRTIO_MMIO_QUEUE_PFN = 0x040
VIRTIO_MMIO_QUEUE_READY = 0x044
VIRTIO_MMIO_QUEUE_NOTIFY = 0x050
VIRTIO_MMIO_INTERRUPT_STATUS = 0x060
VIRTIO_MMIO_INTERRUPT_ACK = 0x064
VIRTIO_MMIO_STATUS = 0x070

# Status register bits.
VIRTIO_CONFIG_S_ACKNOWLEDGE = 1
VIRTIO_CONFIG_S_DRIVER = 2
VIRTIO_CONFIG_S_DRIVER_OK = 4
VIRTIO_CONFIG_S_FEATURES_OK = 8

# Device feature bit numbers.
VIRTIO_BLK_F_RO = 5
VIRTIO_BLK_F_SCSI = 7
VIRTIO_BLK_F_CONFIG_WCE = 11
VIRTIO_BLK_F_MQ = 12
VIRTIO_F_ANY_LAYOUT = 27
VIRTIO_RING_F_INDIRECT_DESC = 28
VIRTIO_RING_F_EVENT_IDX = 29

# Number of descriptors; a power of two.
NUM = 8

VRING_DESC_F_NEXT = 1
VRING_DESC_F_WRITE = 2

VIRTIO_BLK_T_IN = 0
VIRTIO_BLK_T_OUT = 1


def _pack(layout: struct.Struct, *values: int) -> bytes:
    try:
        return layout.pack(*values)
    except struct.error as exc:
        raise ValueError(str(exc)) from None


def _unpack(layout: struct.Struct, data: bytes) -> tuple:
    if len(data) != layout.size:
        raise ValueError(f"expected {layout.size} bytes, got {len(data)}")
    return layout.unpack(bytes(data))


@dataclass
class VRingDesc:
    """One descriptor in the virtqueue descriptor table."""

    addr: int
    len: int
    flags: int = 0
    next: int = 0

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<QIHH")

    def pack(self) -> bytes:
        """Encode in little-endian wire layout."""
        return _pack(self.LAYOUT, self.addr, self.len, self.flags, self.next)

    @classmethod
    def unpack(cls, data: bytes) -> VRingDesc:
        """Decode from the wire layout."""
        return cls(*_unpack(cls.LAYOUT, data))


@dataclass
class VRingUsedElem:
    """A completed descriptor chain: its head index and byte count."""

    id: int
    len: int

    LAYOUT: ClassVar[struct.Struct] = struct.Struct("<II")

    def pack(self) -> bytes:
        """Encode in little-endian wire layout."""
        return _pack(self.LAYOUT, self.id, self.len)

    @classmethod
    def unpack(cls, data: bytes) -> VRingUsedElem:
        """Decode from the wire layout."""
        return cls(*_unpack(cls.LAYOUT, data))


def _empty_elems() -> list:
    return [VRingUsedElem(0, 0) for _ in range(NUM)]


@dataclass
class UsedArea:
    """The used ring: flags, the device's index and NUM used elements."""

    flags: int = 0
    id: int = 0
    elems: list = field(default_factory=_empty_elems)

    HEAD: ClassVar[struct.Struct] = struct.Struct("<HH")

    @classmethod
    def size(cls) -> int:
        """Size in bytes of the packed ring."""
        return cls.HEAD.size + NUM * VRingUsedElem.LAYOUT.size

    def pack(self) -> bytes:
        """Encode in wire layout; missing elements are zero-filled."""
        if len(self.elems) > NUM:
            raise ValueError(f"at most {NUM} used elements")
        elems = list(self.elems) + [VRingUsedElem(0, 0)] * (NUM - len(self.elems))
        return _pack(self.HEAD, self.flags, self.id) + b"".join(e.pack() for e in elems)

    @classmethod
    def unpack(cls, data: bytes) -> UsedArea:
        """Decode from the wire layout."""
        if len(data) != cls.size():
            raise ValueError(f"expected {cls.size()} bytes, got {len(data)}")
        data = bytes(data)
        flags, ident = cls.HEAD.unpack(data[: cls.HEAD.size])
        step = VRingUsedElem.LAYOUT.size
        body = data[cls.HEAD.size:]
        elems = [VRingUsedElem.unpack(body[k:k + step]) for k in range(0, len(body), step)]
        return cls(flags, ident, elems)


@dataclass
class Buf:
    """A cached disk block."""

    dev: int
    blockno: int
    valid: bool = False
    disk: bool = False
    refcnt: int = 0
    data: bytearray = field(default_factory=bytearray)