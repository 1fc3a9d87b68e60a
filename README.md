# mnemabi

Building blocks for passing messages across a kernel/userspace boundary:

- `mnemabi.bbbuffer` – a single-producer, single-consumer bip-buffer
  queue (`BBBuffer`, `Producer`, `Consumer`). The writer gets contiguous
  grants of memory, fills them and commits; the reader gets contiguous
  read grants and releases them.
- `mnemabi.grants` – the shared ring state (`RingState`) and the grant
  objects `GrantW`, `GrantR` and `SplitGrantR`.
- `mnemabi.framed` – a framing layer over the queue: each frame carries a
  two-byte little-endian length header, so whole variable-size packets
  pass through.
- `mnemabi.boxes` – `BoxBytes`, a byte payload with a fixed capacity and
  its memory layout, and `FutureStatus`, the access states of a shared
  future.
- `mnemabi.syscall` – the request and response messages exchanged
  between userspace and the kernel, including the serial-port requests.

## Install

```
pip install .
```

For the tests:

```
pip install .[test]
pytest
```

## Byte queue

```python
from mnemabi.bbbuffer import BBBuffer, InsufficientSize

buffer = BBBuffer(6)
prod = buffer.take_producer()
cons = buffer.take_consumer()

grant = prod.grant_exact(4)
grant.buf()[:] = b"\x01\x02\x03\x04"
grant.commit(4)

try:
    prod.grant_exact(3)
except InsufficientSize:
    print("no room for three more bytes")

rgrant = cons.read()
assert bytes(rgrant.buf()) == b"\x01\x02\x03\x04"
rgrant.release(4)
```

- `grant_exact(n)` grants exactly `n` bytes, wrapping to the start of the
  buffer early if the end has no room.
- `grant_max_remaining(n)` grants up to `n` bytes without skipping any,
  wrapping only when nothing is left at the end.
- `read()` grants the next contiguous run of committed bytes;
  `split_read()` returns a `SplitGrantR` whose `bufs()` gives both
  readable regions when the writer has wrapped around.

`buf()` returns a `memoryview` into the buffer. Committing or releasing
more than the grant holds saturates at the grant's size.

Errors are exceptions derived from `BBQueueError`: `InsufficientSize`
when there is no room or nothing to read, and `GrantInProgress` when a
grant of the same kind is still outstanding. Negative sizes raise
`ValueError`; using a grant after it was finished raises `RuntimeError`.

Grants are context managers: leaving the `with` block commits (or
releases) the amount set with `to_commit()` / `to_release()`, which is
zero unless you set it.

```python
with prod.grant_exact(2) as grant:
    grant.buf()[:] = b"hi"
    grant.to_commit(2)
```

## Framed queue

```python
from mnemabi.bbbuffer import BBBuffer
from mnemabi.framed import take_framed_producer, take_framed_consumer

buffer = BBBuffer(1000)
prod = take_framed_producer(buffer)
cons = take_framed_consumer(buffer)

wgrant = prod.grant(128)
wgrant.buf()[:5] = b"hello"
wgrant.commit(5)

frame = cons.read()          # None when nothing is queued
assert bytes(frame.buf()) == b"hello"
frame.release()
```

`grant(max_sz)` reserves `max_sz` payload bytes plus the two-byte header.
`FrameGrantW.to_commit()` and `FrameGrantR.auto_release()` choose what
happens when a frame grant leaves a `with` block.

## Boxes

```python
from mnemabi.boxes import BoxBytes, FutureStatus

box = BoxBytes(10, b"abc")
assert box.payload() == b"abc"
assert box.layout() == (20, 4)   # 8-byte header + capacity rounded to 4
assert FutureStatus.COMPLETED == 2
```

## System-call messages

```python
from mnemabi.syscall import (
    DriverKind, SerialOpenPort, UserRequest, UserRequestHeader,
)

request = UserRequest(header=UserRequestHeader(nonce=1), body=SerialOpenPort(port=0))
assert request.driver_kind() is DriverKind.SERIAL
```

Kernel messages are `Timestamp`, `Dealloc` and `Response`; a
`KernelResponse` body is a `SerialResult` (a serial response or a
`SerialError`) or `TodoLoopback`. All message types are frozen
dataclasses that check their field ranges on construction.

## What this package does not do

The queues work on in-process memory only; nothing is shared between
processes or address spaces. The system-call messages are plain Python
values: there is no byte encoding or decoding of them, and nothing here
sends them to a kernel or acts on them.