"""Message types exchanged between userspace and the kernel."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Union

_U16_MAX = 0xFFFF
_U32_MAX = 0xFFFF_FFFF
_U64_MAX = 0xFFFF_FFFF_FFFF_FFFF


def _check_uint(name: str, value: int, maximum: int | None = None) -> None:
    if value < 0 or (maximum is not None and value > maximum):
        raise ValueError(f"{name} out of range: {value}")


def _require(what: str, value: object, allowed: tuple) -> None:
    if not isinstance(value, allowed):
        raise TypeError(f"unsupported {what}: {value!r}")


class DriverKind(Enum):
    """Kernel driver that a request is routed to."""

    SERIAL = "serial"
    TODO = "todo"


@dataclass(frozen=True)
class ByteBoxWire:
    """A byte box passed by address and length."""

    ptr: int
    len: int

    def __post_init__(self) -> None:
        _check_uint("ptr", self.ptr)
        _check_uint("len", self.len)


@dataclass(frozen=True)
class _PortMessage:
    port: int

    def __post_init__(self) -> None:
        _check_uint("port", self.port, _U16_MAX)


@dataclass(frozen=True)
class _PortBuffer(_PortMessage):
    buffer: ByteBoxWire


@dataclass(frozen=True)
class _PortBufferUsed(_PortBuffer):
    used: int

    def __post_init__(self) -> None:
        super().__post_init__()
        _check_uint("used", self.used)


class SerialOpenPort(_PortMessage):
    """Ask for a serial port to be opened."""


class SerialProvideReceiveBuffer(_PortBuffer):
    """Hand the kernel a buffer to receive serial data into."""


class SerialFlush(_PortMessage):
    """Ask for a serial port to be flushed."""


class SerialSendData(_PortBufferUsed):
    """Send the first ``used`` bytes of a buffer on a serial port."""


class SerialOpenPortResponse(_PortMessage):
    """A serial port was opened."""


class SerialReceiveData(_PortBufferUsed):
    """Data was received into the first ``used`` bytes of a buffer."""


class SerialFlushAck(_PortMessage):
    """A serial port was flushed."""


class SerialSendComplete(_PortBuffer):
    """A send finished and its buffer is handed back."""


class SerialError(Enum):
    """Failure reported by the serial driver."""

    UNKNOWN = "unknown"


SerialRequest = Union[SerialOpenPort, SerialProvideReceiveBuffer, SerialFlush, SerialSendData]
SerialResponse = Union[SerialOpenPortResponse, SerialReceiveData, SerialFlushAck, SerialSendComplete]

_SERIAL_REQUESTS = (SerialOpenPort, SerialProvideReceiveBuffer, SerialFlush, SerialSendData)
_SERIAL_RESPONSES = (SerialOpenPortResponse, SerialReceiveData, SerialFlushAck, SerialSendComplete)


@dataclass(frozen=True)
class _Header:
    nonce: int

    def __post_init__(self) -> None:
        _check_uint("nonce", self.nonce, _U32_MAX)


class UserRequestHeader(_Header):
    """Header of a request from userspace."""


class KernelResponseHeader(_Header):
    """Header of a response from the kernel."""


@dataclass(frozen=True)
class UserRequest:
    """A request from userspace to a kernel driver."""

    header: UserRequestHeader
    body: SerialRequest

    def __post_init__(self) -> None:
        _require("request body", self.body, _SERIAL_REQUESTS)

    def driver_kind(self) -> DriverKind:
        """The driver that should handle this request."""
        return DriverKind.SERIAL


@dataclass(frozen=True)
class SerialResult:
    """Outcome of a serial request: a response or an error."""

    result: Union[SerialResponse, SerialError]

    def __post_init__(self) -> None:
        _require("serial result", self.result, (*_SERIAL_RESPONSES, SerialError))

    @property
    def is_ok(self) -> bool:
        return not isinstance(self.result, SerialError)


@dataclass(frozen=True)
class TodoLoopback:
    """Placeholder response body that carries nothing."""


@dataclass(frozen=True)
class KernelResponse:
    """A response from the kernel to a user request."""

    header: KernelResponseHeader
    body: Union[SerialResult, TodoLoopback]

    def __post_init__(self) -> None:
        _require("response body", self.body, (SerialResult, TodoLoopback))


@dataclass(frozen=True)
class Timestamp:
    """Kernel message carrying the current time."""

    value: int

    def __post_init__(self) -> None:
        _check_uint("timestamp", self.value, _U64_MAX)


@dataclass(frozen=True)
class Dealloc:
    """Kernel message asking userspace to free a byte box."""

    box: ByteBoxWire


@dataclass(frozen=True)
class Response:
    """Kernel message carrying a response."""

    response: KernelResponse


KernelMsg = Union[Timestamp, Dealloc, Response]