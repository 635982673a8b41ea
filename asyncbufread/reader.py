"""A buffering wrapper around any asynchronous reader."""

from __future__ import annotations

import io
from typing import Any, Protocol

from asyncbufread.protocol import AsyncBufRead, Passthrough

DEFAULT_CHUNK_SIZE = 8 * 1024

_MIN_NON_ZERO_CAPACITY = 8


class _Reader(Protocol):
    async def read(self, n: int) -> bytes: ...


class AsyncBufReader(AsyncBufRead, Passthrough):
    """Adds a growable buffer to an asynchronous reader.

    Small reads are served from the buffer, and ``peek`` lets a parser look
    at the same data several times. The buffer grows to hold whatever amount
    is requested. Data still buffered is lost when the object is discarded.
    """

    def __init__(self, reader: _Reader, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        if chunk_size < 0:
            raise ValueError(f"chunk size must be non-negative, got {chunk_size}")
        self._reader = reader
        self._chunk_size = chunk_size
        self._passthrough = False
        self._eof = False
        self._data = bytearray()
        # Room available from the current read position, and how far that
        # position sits from the start of the allocation.
        self._capacity = chunk_size
        self._offset = 0

    def __repr__(self) -> str:
        return (
            f"{type(self).__name__}(reader={self._reader!r}, "
            f"chunk_size={self._chunk_size}, buffered={len(self._data)})"
        )

    def capacity(self) -> int:
        """Return the current capacity of the internal buffer."""
        return self._capacity

    def __len__(self) -> int:
        return len(self._data)

    def is_empty(self) -> bool:
        """Return True if nothing is buffered."""
        return not self._data

    @property
    def inner(self) -> Any:
        """The wrapped reader. Reading from it directly bypasses the buffer."""
        return self._reader

    def ended(self) -> bool:
        return self._eof

    def buffer(self) -> bytes:
        return bytes(self._data)

    def passthrough(self, enabled: bool) -> None:
        self._passthrough = bool(enabled)

    def _discard_buffer(self) -> None:
        self._data = bytearray()
        self._capacity = 0
        self._offset = 0

    def _reserve(self, additional: int) -> None:
        length = len(self._data)
        if self._capacity - length >= additional:
            return
        if self._capacity - length + self._offset >= additional and self._offset >= length:
            # Enough space has been consumed at the front to reuse it.
            self._capacity += self._offset
            self._offset = 0
            return
        full = self._capacity + self._offset
        required = self._offset + length + additional
        new_full = max(full * 2, required, _MIN_NON_ZERO_CAPACITY)
        self._capacity = new_full - self._offset

    async def fill_buf(self, amt: int) -> bytes:
        if amt < 0:
            raise ValueError(f"amount must be non-negative, got {amt}")
        if self._passthrough or self._eof:
            return bytes(self._data[:amt])
        if len(self._data) >= amt:
            return bytes(self._data[:amt])
        if self._capacity < amt:
            self._reserve(max(self._chunk_size, amt - len(self._data)))

        spare = self._capacity - len(self._data)
        chunk = await self._reader.read(spare)
        if len(chunk) > spare:
            raise RuntimeError(
                f"underlying reader returned {len(chunk)} bytes, at most {spare} requested"
            )
        if not chunk:
            self._eof = True
        self._data += chunk
        return bytes(self._data[:amt])

    def consume(self, amt: int) -> None:
        if amt < 0:
            raise ValueError(f"amount must be non-negative, got {amt}")
        if amt > len(self._data):
            raise ValueError(
                f"cannot consume {amt} bytes, only {len(self._data)} buffered"
            )
        del self._data[:amt]
        self._offset += amt
        self._capacity -= amt

    async def read(self, n: int) -> bytes:
        if n < 0:
            raise ValueError(f"read size must be non-negative, got {n}")
        # Large reads and passthrough mode bypass the buffer once it is drained.
        if self._passthrough or n >= self._chunk_size:
            if self._data:
                amt = min(n, len(self._data))
                out = bytes(self._data[:amt])
                self.consume(amt)
                if not self._data and self._passthrough:
                    self._discard_buffer()
                # Only the caller knows whether more data is wanted.
                return out
            if self._eof:
                return b""
            return await self._reader.read(n)
        data = await self.fill_buf(n)
        self.consume(len(data))
        return data

    def _writer_method(self, name: str) -> Any:
        try:
            return getattr(self._reader, name)
        except AttributeError:
            raise io.UnsupportedOperation(
                f"underlying stream does not support {name}()"
            ) from None

    def write(self, data: bytes) -> Any:
        """Write ``data`` to the underlying stream."""
        return self._writer_method("write")(data)

    def writelines(self, data: Any) -> Any:
        """Write each chunk of ``data`` to the underlying stream."""
        return self._writer_method("writelines")(data)

    async def drain(self) -> None:
        """Wait until the underlying stream has flushed its output."""
        await self._writer_method("drain")()

    def close(self) -> Any:
        """Close the underlying stream."""
        return self._writer_method("close")()

    async def wait_closed(self) -> None:
        """Wait until the underlying stream is closed."""
        await self._writer_method("wait_closed")()