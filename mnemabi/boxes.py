"""Byte boxes shared between kernel and userspace, and future status codes."""

from __future__ import annotations

from enum import IntEnum

_U32_MAX = 0xFFFF_FFFF
# Header of a byte box: a u32 capacity and a u32 length.
_HEADER_SIZE = 8
_HEADER_ALIGN = 4


class FutureStatus(IntEnum):
    """Access state of a shared future."""

    #: The kernel is working and should be allowed exclusive access.
    KERNEL_ACCESS = 0
    #: Userspace is working and should be allowed exclusive access.
    USERSPACE_ACCESS = 1
    #: Completed on either side; the payload is no longer accessible.
    COMPLETED = 2
    #: Failed and will never complete; the payload is no longer accessible.
    ERROR = 3
    #: A handle that will only ever report error or completion.
    INVALID = 4


class BoxBytes:
    """A length-prefixed byte payload with a fixed capacity."""

    def __init__(self, capacity: int, data: bytes = b"") -> None:
        if not 0 <= capacity <= _U32_MAX:
            raise ValueError("capacity must fit in an unsigned 32-bit integer")
        data = bytes(data)
        if len(data) > capacity:
            raise ValueError("data does not fit in the box")
        self.capacity = capacity
        self._data = data

    def __len__(self) -> int:
        return len(self._data)

    def __repr__(self) -> str:
        return f"BoxBytes(capacity={self.capacity}, len={len(self._data)})"

    def payload(self) -> bytes:
        """The bytes held in the box."""
        return self._data

    def layout(self) -> tuple[int, int]:
        """Return ``(size, align)`` of the box in memory.

        The capacity is rounded up to the header's alignment.
        """
        padded = -(-self.capacity // _HEADER_ALIGN) * _HEADER_ALIGN
        return _HEADER_SIZE + padded, _HEADER_ALIGN