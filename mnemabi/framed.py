"""Framed mode: variable-length frames with a two-byte length header."""

from __future__ import annotations

from .bbbuffer import BBBuffer, BBQueueError, Consumer, Producer
from .grants import GrantR, GrantW

HDR_LEN = 2


class FrameProducer:
    """Producer of length-prefixed frames."""

    def __init__(self, producer: Producer) -> None:
        self._producer = producer

    def grant(self, max_sz: int) -> FrameGrantW:
        """Grant a frame of up to ``max_sz`` payload bytes (header excluded)."""
        if max_sz < 0:
            raise ValueError("frame size must not be negative")
        return FrameGrantW(self._producer.grant_exact(max_sz + HDR_LEN))


class FrameConsumer:
    """Consumer of length-prefixed frames."""

    def __init__(self, consumer: Consumer) -> None:
        self._consumer = consumer

    def read(self) -> FrameGrantR | None:
        """Return the next available frame, or ``None`` if there is none."""
        try:
            grant_r = self._consumer.read()
        except BBQueueError:
            return None
        # Frames never wrap and are always committed whole, so any readable
        # data starts with a complete header followed by the whole frame.
        total_len = int.from_bytes(bytes(grant_r.buf()[:HDR_LEN]), "little")
        grant_r.shrink(total_len)
        return FrameGrantR(grant_r)


class FrameGrantW:
    """Write grant for a single frame.

    Leaving a ``with`` block without committing commits only what was set
    by :meth:`to_commit`; by default no frame is written.
    """

    def __init__(self, grant_w: GrantW) -> None:
        if len(grant_w) < HDR_LEN:
            raise ValueError("grant is too small to hold a frame header")
        self._grant_w = grant_w

    def __len__(self) -> int:
        return len(self._grant_w) - HDR_LEN

    def __repr__(self) -> str:
        return f"FrameGrantW(size={len(self)})"

    def __enter__(self) -> FrameGrantW:
        self._grant_w.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._grant_w.__exit__(exc_type, exc, tb)

    def buf(self) -> memoryview:
        """Writable view of the frame payload."""
        return self._grant_w.buf()[HDR_LEN:]

    def commit(self, used: int) -> None:
        """Commit a frame of ``used`` payload bytes, saturating at its size."""
        total_len = self._set_header(used)
        self._grant_w.commit(total_len)

    def to_commit(self, amt: int) -> None:
        """Set the payload size committed when the grant is dropped."""
        if amt == 0:
            self._grant_w.to_commit(0)
        else:
            self._grant_w.to_commit(self._set_header(amt))

    def _set_header(self, used: int) -> int:
        if used < 0:
            raise ValueError("amount must not be negative")
        frame_len = min(used, len(self._grant_w) - HDR_LEN)
        total_len = frame_len + HDR_LEN
        self._grant_w.buf()[:HDR_LEN] = (total_len & 0xFFFF).to_bytes(HDR_LEN, "little")
        return total_len


class FrameGrantR:
    """Read grant for a single frame.

    Leaving a ``with`` block without releasing releases the frame only if
    :meth:`auto_release` was switched on.
    """

    def __init__(self, grant_r: GrantR) -> None:
        if len(grant_r) < HDR_LEN:
            raise ValueError("grant is too small to hold a frame header")
        self._grant_r = grant_r

    def __len__(self) -> int:
        return len(self._grant_r) - HDR_LEN

    def __repr__(self) -> str:
        return f"FrameGrantR(size={len(self)})"

    def __enter__(self) -> FrameGrantR:
        self._grant_r.__enter__()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._grant_r.__exit__(exc_type, exc, tb)

    def buf(self) -> memoryview:
        """View of the frame payload."""
        return self._grant_r.buf()[HDR_LEN:]

    def release(self) -> None:
        """Release the whole frame so its space can be written again."""
        self._grant_r.release(len(self._grant_r))

    def auto_release(self, is_auto: bool) -> None:
        """Choose whether the frame is released when the grant is dropped."""
        self._grant_r.to_release(len(self._grant_r) if is_auto else 0)


def take_framed_producer(bbq: BBBuffer) -> FrameProducer:
    """Return a frame producer over ``bbq``."""
    return FrameProducer(bbq.take_producer())


def take_framed_consumer(bbq: BBBuffer) -> FrameConsumer:
    """Return a frame consumer over ``bbq``."""
    return FrameConsumer(bbq.take_consumer())