# asyncbufread

Buffered reading for asyncio streams, built for peeking. You can look ahead at
as many bytes as you need without consuming them. After that you can read them
normally or switch the reader into passthrough mode.

## Installation

```
pip install asyncbufread
```

## Usage

`AsyncBufReader` wraps any object that has an `async def read(n)` coroutine
returning `bytes`:

```python
from asyncbufread.reader import AsyncBufReader

async def sniff(stream):
    reader = AsyncBufReader(stream, chunk_size=8 * 1024)

    # Look at the first bytes without consuming them.
    head = await reader.peek(4)
    if head == b"GET ":
        ...

    # Reads return the peeked bytes first.
    data = await reader.read(1024)
```

`chunk_size` defaults to 8 KiB. It sets how much room is reserved when the
buffer has to grow. Reads of `chunk_size` bytes or more skip the buffer once it
is empty.

### AsyncBufReader methods

- `peek(amt)` / `fill_buf(amt)` return up to `amt` bytes without consuming
  them. They read from the inner stream only when the buffer holds fewer than
  `amt` bytes, and each call reads at most once. If fewer bytes come back, call
  again or check `ended()`. `ended()` turns true once the inner stream returns
  `b""`.
- `consume(amt)` drops `amt` bytes from the front of the buffer. It raises
  `ValueError` if `amt` is negative or larger than what is buffered.
- `read(n)` returns up to `n` bytes. At end of stream it returns `b""`.
- `buffer()` returns a copy of the bytes currently buffered. `len(reader)`
  gives their count and `is_empty()` tells whether there are none.
- `capacity()` returns the room currently reserved for the buffer.
- `passthrough(True)` stops all further buffering. Reads first drain what is
  already buffered and then go straight to the inner stream. Once the buffer
  has drained, its memory is released. Use it when you no longer need to peek.
- `inner` is the wrapped stream. Reading from it directly bypasses the buffer.
- `write`, `writelines`, `drain`, `close` and `wait_closed` are forwarded to the
  inner stream, such as an `asyncio.StreamWriter`-like object. If the inner
  stream lacks the method, they raise `io.UnsupportedOperation`.

Negative sizes passed to `peek`, `fill_buf`, `consume` or `read` raise
`ValueError`.

Cancelling a pending `peek` loses no data. Bytes already read stay in the
buffer.

### Interfaces

`asyncbufread.protocol` defines two abstract base classes:

- `AsyncBufRead` declares `ended`, `buffer`, `fill_buf`, `consume` and `read`,
  and provides `peek` on top of `fill_buf`.
- `Passthrough` declares `passthrough(enabled)`.

The same module has `BytesBufRead`, an in-memory `AsyncBufRead` over a bytes
value that is handy in tests. All of its data is buffered from the start, and
`ended()` is always false.

## What it does not do

The package only buffers the read side. It does not open connections, handle
TLS, or buffer writes.

## Running the tests

```
pip install -e ".[test]"
pytest
```