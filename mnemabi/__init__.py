"""Bip-buffer queues, framed queues, byte boxes and system-call message types."""

__version__ = "0.1.0"
__all__ = ["bbbuffer", "boxes", "framed", "grants", "syscall"]