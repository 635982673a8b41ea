import pytest

from asyncbufread.protocol import AsyncBufRead, BytesBufRead, Passthrough

DATA = b"hello world"


class _MinimalBufRead(AsyncBufRead):
    def __init__(self, data):
        self.data = bytearray(data)
        self.fill_calls = []

    def ended(self):
        return not self.data

    def buffer(self):
        return bytes(self.data)

    async def fill_buf(self, amt):
        self.fill_calls.append(amt)
        return bytes(self.data[:amt])

    def consume(self, amt):
        del self.data[:amt]

    async def read(self, n):
        out = bytes(self.data[:n])
        self.consume(n)
        return out


@pytest.fixture
def reader():
    return BytesBufRead(DATA)


@pytest.mark.parametrize("cls", [AsyncBufRead, Passthrough])
def test_interfaces_are_abstract(cls):
    with pytest.raises(TypeError):
        cls()


@pytest.mark.asyncio
async def test_peek_delegates_to_fill_buf():
    minimal = _MinimalBufRead(DATA)
    assert await AsyncBufRead.peek(minimal, 5) == DATA[:5]
    assert minimal.fill_calls == [5]
    assert minimal.buffer() == DATA


def test_bytes_never_ended(reader):
    assert reader.ended() is False
    reader.consume(len(DATA))
    assert reader.ended() is False


def test_bytes_buffer_is_whole_data(reader):
    assert reader.buffer() == DATA


@pytest.mark.asyncio
async def test_bytes_fill_buf_is_capped_and_does_not_consume(reader):
    assert [await reader.fill_buf(n) for n in (5, 100)] == [DATA[:5], DATA]
    assert reader.buffer() == DATA


@pytest.mark.asyncio
async def test_bytes_peek_then_consume(reader):
    assert await reader.peek(6) == DATA[:6]
    reader.consume(6)
    assert reader.buffer() == DATA[6:]
    assert await reader.peek(100) == DATA[6:]


@pytest.mark.parametrize("amt", [len(DATA) + 1, -1])
def test_bytes_bad_consume_raises_and_keeps_data(reader, amt):
    with pytest.raises(ValueError):
        reader.consume(amt)
    assert reader.buffer() == DATA


@pytest.mark.asyncio
async def test_bytes_read_in_pieces_round_trips(reader):
    pieces = []
    while chunk := await reader.read(3):
        pieces.append(chunk)
    assert b"".join(pieces) == DATA
    assert all(len(piece) <= 3 for piece in pieces)
    assert await reader.read(3) == b""


@pytest.mark.asyncio
@pytest.mark.parametrize(("method", "amt"), [("read", -1), ("fill_buf", -2)])
async def test_bytes_negative_async_argument_raises(reader, method, amt):
    with pytest.raises(ValueError):
        await getattr(reader, method)(amt)
    assert reader.buffer() == DATA
    assert await reader.read(len(DATA)) == DATA


def test_bytes_accepts_bytearray_and_copies():
    source = bytearray(DATA)
    copied = BytesBufRead(source)
    source[0] = 0
    assert copied.buffer() == DATA
    assert len(copied) == len(DATA)