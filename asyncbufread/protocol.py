"""Interfaces for buffered asynchronous readers."""

from __future__ import annotations

import abc


def _require_non_negative(value: int, what: str) -> None:
    if value < 0:
        raise ValueError(f"{what} must be non-negative, got {value}")


class AsyncBufRead(abc.ABC):
    """A reader that keeps an internal buffer which can be inspected and refilled."""

    @abc.abstractmethod
    def ended(self) -> bool:
        """Return True once the underlying source has reached end of stream."""

    @abc.abstractmethod
    def buffer(self) -> bytes:
        """Return a copy of the data currently held in the internal buffer."""

    @abc.abstractmethod
    async def fill_buf(self, amt: int) -> bytes:
        """Return up to ``amt`` buffered bytes, reading more if fewer are held.

        The returned bytes are not consumed: a later ``read`` returns them
        again unless ``consume`` is called.
        """

    @abc.abstractmethod
    def consume(self, amt: int) -> None:
        """Drop ``amt`` bytes from the front of the internal buffer."""

    @abc.abstractmethod
    async def read(self, n: int) -> bytes:
        """Read at most ``n`` bytes."""

    async def peek(self, amt: int) -> bytes:
        """Look at up to ``amt`` bytes without consuming them.

        Cancelling the call never loses data.
        """
        return await self.fill_buf(amt)


class Passthrough(abc.ABC):
    """A buffered reader whose buffering can be switched off."""

    @abc.abstractmethod
    def passthrough(self, enabled: bool) -> None:
        """Start or stop passing reads straight to the underlying reader.

        While enabled, no further data is buffered: what is already held is
        handed out first, then reads go to the underlying reader.
        """


class BytesBufRead(AsyncBufRead):
    """An in-memory byte string exposed as a buffered asynchronous reader."""

    def __init__(self, data: bytes | bytearray | memoryview) -> None:
        self._view = memoryview(bytes(data))

    def __len__(self) -> int:
        return len(self._view)

    def ended(self) -> bool:
        return False

    def buffer(self) -> bytes:
        return bytes(self._view)

    async def fill_buf(self, amt: int) -> bytes:
        _require_non_negative(amt, "amount")
        return bytes(self._view[:amt])

    def consume(self, amt: int) -> None:
        _require_non_negative(amt, "amount")
        if amt > len(self._view):
            raise ValueError(
                f"cannot consume {amt} bytes, only {len(self._view)} available"
            )
        self._view = self._view[amt:]

    async def read(self, n: int) -> bytes:
        _require_non_negative(n, "read size")
        chunk = bytes(self._view[:n])
        self._view = self._view[len(chunk):]
        return chunk