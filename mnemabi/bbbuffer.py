"""Single-producer, single-consumer bip-buffer queue."""

from __future__ import annotations

from .grants import GrantR, GrantW, RingState, SplitGrantR


class BBQueueError(Exception):
    """Base class for queue errors."""


class InsufficientSize(BBQueueError):
    """The buffer does not hold enough space or data for the request."""


class GrantInProgress(BBQueueError):
    """A grant of this kind is already outstanding."""


class AlreadySplit(BBQueueError):
    """The buffer has already been split into producer and consumer."""


def _check_size(sz: int) -> int:
    if sz < 0:
        raise ValueError("grant size must not be negative")
    return sz


class BBBuffer:
    """Backing storage from which a producer and a consumer are taken.

    The storage is zero-filled on creation.
    """

    def __init__(self, size: int) -> None:
        self.ring = RingState(size)

    def __len__(self) -> int:
        return self.ring.buf_len

    def __repr__(self) -> str:
        return f"BBBuffer({self.ring!r})"

    def take_producer(self) -> Producer:
        """Return the writing half of the queue."""
        return Producer(self)

    def take_consumer(self) -> Consumer:
        """Return the reading half of the queue."""
        return Consumer(self)


class Producer:
    """Hands out contiguous write grants on a :class:`BBBuffer`."""

    def __init__(self, bbq: BBBuffer) -> None:
        self._bbq = bbq

    def grant_exact(self, sz: int) -> GrantW:
        """Grant exactly ``sz`` contiguous bytes, wrapping early if needed.

        Raises :class:`GrantInProgress` if a write grant is outstanding and
        :class:`InsufficientSize` if no contiguous region of that size exists.
        """
        _check_size(sz)
        ring = self._bbq.ring
        if ring.write_in_progress:
            raise GrantInProgress("a write grant is already in progress")
        ring.write_in_progress = True

        write = ring.write
        read = ring.read
        max_len = ring.buf_len

        if write < read:
            # Already inverted: room only up to (not including) read.
            if write + sz < read:
                start = write
            else:
                ring.write_in_progress = False
                raise InsufficientSize(f"no room for {sz} bytes")
        elif write + sz <= max_len:
            start = write
        elif sz < read:
            # Going inverted; write must never equal read while inverted.
            start = 0
        else:
            ring.write_in_progress = False
            raise InsufficientSize(f"no room for {sz} bytes")

        ring.reserve = start + sz
        return GrantW(ring, start, sz)

    def grant_max_remaining(self, sz: int) -> GrantW:
        """Grant up to ``sz`` contiguous bytes without skipping any.

        Wraps to the start only when no space is left at the end. Raises
        :class:`InsufficientSize` when nothing can be granted.
        """
        _check_size(sz)
        ring = self._bbq.ring
        if ring.write_in_progress:
            raise GrantInProgress("a write grant is already in progress")
        ring.write_in_progress = True

        write = ring.write
        read = ring.read
        max_len = ring.buf_len

        if write < read:
            remain = read - write - 1
            if remain == 0:
                ring.write_in_progress = False
                raise InsufficientSize("no room left in the buffer")
            sz = min(remain, sz)
            start = write
        elif write != max_len:
            sz = min(max_len - write, sz)
            start = write
        elif read > 1:
            sz = min(read - 1, sz)
            start = 0
        else:
            ring.write_in_progress = False
            raise InsufficientSize("no room left in the buffer")

        ring.reserve = start + sz
        return GrantW(ring, start, sz)


class Consumer:
    """Hands out read grants over committed bytes of a :class:`BBBuffer`."""

    def __init__(self, bbq: BBBuffer) -> None:
        self._bbq = bbq

    def _begin_read(self) -> tuple[int, int, int]:
        ring = self._bbq.ring
        if ring.read_in_progress:
            raise GrantInProgress("a read grant is already in progress")
        ring.read_in_progress = True

        write = ring.write
        last = ring.last
        read = ring.read

        # Resolve the inverted case at the end of the readable streak.
        if read == last and write < read:
            read = 0
            ring.read = 0
        return write, last, read

    def read(self) -> GrantR:
        """Grant the next contiguous run of committed bytes.

        This may not hold every available byte if the writer has wrapped.
        Raises :class:`InsufficientSize` when nothing is readable.
        """
        ring = self._bbq.ring
        write, last, read = self._begin_read()
        sz = (last if write < read else write) - read
        if sz == 0:
            ring.read_in_progress = False
            raise InsufficientSize("no committed bytes to read")
        return GrantR(ring, read, sz)

    def split_read(self) -> SplitGrantR:
        """Grant every committed byte as up to two contiguous regions."""
        ring = self._bbq.ring
        write, last, read = self._begin_read()
        if write < read:
            sz1, sz2 = last - read, write
        else:
            sz1, sz2 = write - read, 0
        if sz1 == 0:
            ring.read_in_progress = False
            raise InsufficientSize("no committed bytes to read")
        return SplitGrantR(ring, read, sz1, sz2)