"""Shared ring state and the read/write grants handed out over it."""

from __future__ import annotations


class RingState:
    """Backing storage and cursors of a bip-buffer ring.

    ``last`` starts at zero, which puts a fresh ring in the "inverted"
    condition.  The first commit resolves it.
    """

    def __init__(self, size: int) -> None:
        if size < 0:
            raise ValueError("ring size must not be negative")
        self.buf = bytearray(size)
        self.buf_len = size
        # Where the next byte will be written.
        self.write = 0
        # Where the next byte will be read from.
        self.read = 0
        # End of the readable streak while inverted.
        self.last = 0
        # End of the region currently granted to the writer.
        self.reserve = 0
        self.read_in_progress = False
        self.write_in_progress = False

    def __repr__(self) -> str:
        return (
            f"RingState(buf_len={self.buf_len}, write={self.write}, "
            f"read={self.read}, last={self.last}, reserve={self.reserve}, "
            f"read_in_progress={self.read_in_progress}, "
            f"write_in_progress={self.write_in_progress})"
        )


def _check_amount(value: int) -> int:
    if value < 0:
        raise ValueError("amount must not be negative")
    return value


class _Grant:
    """Common bookkeeping: a grant may be finished exactly once."""

    def __init__(self) -> None:
        self._finished = False

    def _ensure_live(self) -> None:
        if self._finished:
            raise RuntimeError("grant has already been finished")


class GrantW(_Grant):
    """A contiguous writable region that may be committed to the ring.

    Leaving a ``with`` block without calling :meth:`commit` commits the
    amount set by :meth:`to_commit` (zero by default).
    """

    def __init__(self, ring: RingState, start: int, size: int) -> None:
        super().__init__()
        if start < 0 or size < 0 or start + size > ring.buf_len:
            raise ValueError("grant lies outside the ring")
        self._ring = ring
        self._start = start
        self._size = size
        self._to_commit = 0

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"GrantW(start={self._start}, size={self._size})"

    def __enter__(self) -> GrantW:
        self._ensure_live()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._finished:
            self._finished = True
            self._commit_inner(self._to_commit)

    def buf(self) -> memoryview:
        """Writable view of the granted bytes."""
        self._ensure_live()
        return memoryview(self._ring.buf)[self._start:self._start + self._size]

    def commit(self, used: int) -> None:
        """Make ``used`` bytes readable, saturating at the grant size."""
        self._ensure_live()
        self._finished = True
        self._commit_inner(_check_amount(used))

    def to_commit(self, amt: int) -> None:
        """Set how many bytes are committed when the grant is dropped."""
        self._to_commit = min(self._size, _check_amount(amt))

    def _commit_inner(self, used: int) -> None:
        ring = self._ring
        if not ring.write_in_progress:
            return

        length = self._size
        used = min(length, used)

        write = ring.write
        ring.reserve -= length - used

        max_len = ring.buf_len
        last = ring.last
        new_write = ring.reserve

        if new_write < write and write != max_len:
            # Wrapped while skipping bytes at the end: hold the line at write.
            ring.last = write
        elif new_write > last:
            # Passed the artificial end, so the skipped section is unlocked.
            ring.last = max_len

        # Write is updated after last so the reader never inverts early.
        ring.write = new_write
        ring.write_in_progress = False


class GrantR(_Grant):
    """A contiguous readable region that may be released from the ring.

    Leaving a ``with`` block without calling :meth:`release` releases the
    amount set by :meth:`to_release` (zero by default).
    """

    def __init__(self, ring: RingState, start: int, size: int) -> None:
        super().__init__()
        if start < 0 or size < 0 or start + size > ring.buf_len:
            raise ValueError("grant lies outside the ring")
        self._ring = ring
        self._start = start
        self._size = size
        self._to_release = 0

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"GrantR(start={self._start}, size={self._size})"

    def __enter__(self) -> GrantR:
        self._ensure_live()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._finished:
            self._finished = True
            self._release_inner(self._to_release)

    def buf(self) -> memoryview:
        """View of the granted bytes; writable for in-place processing."""
        self._ensure_live()
        return memoryview(self._ring.buf)[self._start:self._start + self._size]

    def release(self, used: int) -> None:
        """Free ``used`` bytes for later writes, saturating at the grant size."""
        self._ensure_live()
        self._finished = True
        self._release_inner(min(self._size, _check_amount(used)))

    def to_release(self, amt: int) -> None:
        """Set how many bytes are released when the grant is dropped."""
        self._to_release = min(self._size, _check_amount(amt))

    def shrink(self, length: int) -> None:
        """Reduce the grant to its first ``length`` bytes."""
        if not 0 <= length <= self._size:
            raise ValueError("cannot shrink a grant beyond its size")
        self._size = length
        self._to_release = min(self._to_release, length)

    def _release_inner(self, used: int) -> None:
        ring = self._ring
        if not ring.read_in_progress:
            return
        ring.read += used
        ring.read_in_progress = False


class SplitGrantR(_Grant):
    """Two readable regions that together hold every committed byte."""

    def __init__(self, ring: RingState, start: int, size1: int, size2: int) -> None:
        super().__init__()
        if min(start, size1, size2) < 0 or start + size1 > ring.buf_len or size2 > ring.buf_len:
            raise ValueError("grant lies outside the ring")
        self._ring = ring
        self._start = start
        self._size1 = size1
        self._size2 = size2
        self._to_release = 0

    def __repr__(self) -> str:
        return f"SplitGrantR(start={self._start}, size1={self._size1}, size2={self._size2})"

    def __enter__(self) -> SplitGrantR:
        self._ensure_live()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if not self._finished:
            self._finished = True
            self._release_inner(self._to_release)

    def bufs(self) -> tuple[memoryview, memoryview]:
        """Views of the tail region and of the wrapped head region."""
        self._ensure_live()
        view = memoryview(self._ring.buf)
        return view[self._start:self._start + self._size1], view[:self._size2]

    def combined_len(self) -> int:
        """Total length of both regions."""
        return self._size1 + self._size2

    def release(self, used: int) -> None:
        """Free ``used`` bytes, saturating at the combined length."""
        self._ensure_live()
        self._finished = True
        self._release_inner(min(self.combined_len(), _check_amount(used)))

    def to_release(self, amt: int) -> None:
        """Set how many bytes are released when the grant is dropped."""
        self._to_release = min(self.combined_len(), _check_amount(amt))

    def _release_inner(self, used: int) -> None:
        ring = self._ring
        if not ring.read_in_progress:
            return
        if used <= self._size1:
            ring.read += used
        else:
            ring.read = used - self._size1
        ring.read_in_progress = False