import asyncio

import pytest

from ibmi_signon.client.connection import AsyncHostConnection
from ibmi_signon.common.frame import Frame
from ibmi_signon.common.transport import recv_exact, recv_frame, send_frame
from ibmi_signon.exceptions import (
    ConnectionError as HostConnectionError,
    MaxFrameSizeExceededError,
    ProtocolError,
)


def _reader(data: bytes, eof: bool = True) -> asyncio.StreamReader:
    reader = asyncio.StreamReader()
    reader.feed_data(data)
    if eof:
        reader.feed_eof()
    return reader


def test_recv_frame_reads_exactly_one_frame():
    async def scenario():
        first = Frame(24)
        first.set32(20, 7)
        second = Frame(20)
        reader = _reader(first.to_bytes() + second.to_bytes())

        got_first = await recv_frame(reader)
        got_second = await recv_frame(reader)
        return got_first, got_second

    got_first, got_second = asyncio.run(scenario())
    assert len(got_first) == 24
    assert got_first.get32(20) == 7
    assert len(got_second) == 20


def test_recv_frame_accepts_short_frames():
    async def scenario():
        return await recv_frame(_reader(b'\x00\x00\x00\x0a' + bytes(6)))

    assert len(asyncio.run(scenario())) == 10


def test_recv_frame_rejects_length_below_prefix():
    async def scenario():
        await recv_frame(_reader(b'\x00\x00\x00\x02'))

    with pytest.raises(ProtocolError):
        asyncio.run(scenario())


def test_recv_frame_rejects_oversized_frames():
    async def scenario():
        await recv_frame(_reader(b'\x00\x10\x00\x00'), max_frame_size=1024)

    with pytest.raises(MaxFrameSizeExceededError) as exc_info:
        asyncio.run(scenario())
    assert exc_info.value.size == 0x100000


def test_recv_exact_on_closed_stream():
    async def scenario():
        await recv_exact(_reader(b'\x00\x00'), 4)

    with pytest.raises(HostConnectionError, match="got 2/4"):
        asyncio.run(scenario())


def test_recv_exact_timeout():
    async def scenario():
        await recv_exact(_reader(b'', eof=False), 4, timeout=0.01)

    with pytest.raises(HostConnectionError, match="Read timeout"):
        asyncio.run(scenario())


def test_connection_sends_and_receives_frames():
    async def echo(reader, writer):
        frame = await recv_frame(reader)
        await send_frame(writer, frame)
        writer.close()

    async def scenario():
        server = await asyncio.start_server(echo, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        try:
            async with AsyncHostConnection("127.0.0.1", port) as connection:
                assert connection.connected
                request = Frame(28)
                request.request_reply_id = 0x7003
                request.set32(24, 0xCAFEBABE)
                await connection.send(request)
                reply = await connection.receive()
            assert not connection.connected
            return reply
        finally:
            server.close()
            await server.wait_closed()

    reply = asyncio.run(scenario())
    assert reply.request_reply_id == 0x7003
    assert reply.get32(24) == 0xCAFEBABE


def test_connection_refused_is_connection_error():
    async def scenario():
        server = await asyncio.start_server(lambda r, w: None, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        server.close()
        await server.wait_closed()

        await AsyncHostConnection("127.0.0.1", port, connect_timeout=5).connect()

    with pytest.raises(HostConnectionError, match="Failed to connect"):
        asyncio.run(scenario())


def test_send_without_connect_is_connection_error():
    async def scenario():
        await AsyncHostConnection("127.0.0.1", 1).send(Frame(20))

    with pytest.raises(HostConnectionError, match="Not connected"):
        asyncio.run(scenario())


def test_connection_is_dropped_after_unframeable_reply():
    async def oversized(reader, writer):
        writer.write(b'\x00\x10\x00\x00' + bytes(16))
        await writer.drain()
        await reader.read()
        writer.close()

    async def scenario():
        server = await asyncio.start_server(oversized, "127.0.0.1", 0)
        port = server.sockets[0].getsockname()[1]
        try:
            async with AsyncHostConnection("127.0.0.1", port, max_frame_size=1024) as connection:
                with pytest.raises(MaxFrameSizeExceededError):
                    await connection.receive()
                assert not connection.connected

                with pytest.raises(HostConnectionError, match="Not connected"):
                    await connection.receive()
        finally:
            server.close()
            await server.wait_closed()

    asyncio.run(scenario())
