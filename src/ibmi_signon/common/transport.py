"""
Host Server Async Transport Module
Asynchronous I/O operations for length-prefixed host server frames.
"""

import asyncio
import struct
from typing import Optional

from .constants import MAX_FRAME_SIZE
from .frame import Frame
from ..exceptions import (
    ConnectionError as HostConnectionError,
    ProtocolError,
    MaxFrameSizeExceededError,
)

LENGTH_FIELD_SIZE = 4


async def recv_exact(
    reader: asyncio.StreamReader,
    size: int,
    timeout: Optional[float] = None
) -> bytes:
    """
    Receive exact number of bytes from async stream.

    Args:
        reader: Async stream reader
        size: Exact number of bytes to receive
        timeout: Optional timeout in seconds

    Returns:
        Received bytes

    Raises:
        HostConnectionError: If connection is closed before receiving all bytes
            or the operation times out
    """
    try:
        if timeout is not None:
            data = await asyncio.wait_for(reader.readexactly(size), timeout=timeout)
        else:
            data = await reader.readexactly(size)
        return data
    except asyncio.IncompleteReadError as e:
        raise HostConnectionError(
            f"Connection closed while reading (got {len(e.partial)}/{size} bytes)"
        ) from e
    except asyncio.TimeoutError:
        raise HostConnectionError("Read timeout") from None


async def recv_frame(
    reader: asyncio.StreamReader,
    max_frame_size: int = MAX_FRAME_SIZE,
    timeout: Optional[float] = None
) -> Frame:
    """
    Receive one complete frame from async stream.

    The frame is delimited by its own length field; no header validation
    beyond that happens here, callers check sizes and return codes.

    Raises:
        HostConnectionError: If connection is closed
        ProtocolError: If the length field is smaller than itself
        MaxFrameSizeExceededError: If the frame exceeds max size
    """
    prefix = await recv_exact(reader, LENGTH_FIELD_SIZE, timeout)
    length = struct.unpack('>I', prefix)[0]

    if length < LENGTH_FIELD_SIZE:
        raise ProtocolError(f"Invalid frame length: {length}")

    if length > max_frame_size:
        raise MaxFrameSizeExceededError(length, max_frame_size)

    rest = b''
    if length > LENGTH_FIELD_SIZE:
        rest = await recv_exact(reader, length - LENGTH_FIELD_SIZE, timeout)

    return Frame.parse(prefix + rest)


async def send_frame(
    writer: asyncio.StreamWriter,
    frame: Frame,
    timeout: Optional[float] = None
) -> None:
    """
    Send a frame over async stream.

    Raises:
        HostConnectionError: If connection is closed or the write times out
    """
    try:
        writer.write(frame.to_bytes())
        if timeout is not None:
            await asyncio.wait_for(writer.drain(), timeout=timeout)
        else:
            await writer.drain()
    except (BrokenPipeError, ConnectionResetError, OSError) as e:
        raise HostConnectionError(f"Failed to send frame: {e}") from e
    except asyncio.TimeoutError:
        raise HostConnectionError("Write timeout") from None
