"""
Host Server Async Connection Module
Async connection management for host server clients.
"""

import asyncio
import logging
import ssl
from typing import Optional, Union

from ..common.constants import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_WRITE_TIMEOUT,
    MAX_FRAME_SIZE,
)
from ..common.frame import Frame
from ..common.transport import recv_frame, send_frame
from ..exceptions import ConnectionError as HostConnectionError, ProtocolError


class AsyncHostConnection:
    """
    Async host server connection wrapper.

    Provides async access to one TCP (optionally TLS) stream. Exactly one
    request may be outstanding at a time; callers send a frame and then
    receive its reply before sending the next one.
    """

    def __init__(
        self,
        host: str,
        port: int,
        ssl_context: Union[ssl.SSLContext, bool, None] = None,
        connect_timeout: Optional[float] = DEFAULT_CONNECT_TIMEOUT,
        read_timeout: Optional[float] = DEFAULT_READ_TIMEOUT,
        write_timeout: Optional[float] = DEFAULT_WRITE_TIMEOUT,
        max_frame_size: int = MAX_FRAME_SIZE,
        logger: Optional[logging.Logger] = None,
    ):
        self._host = host
        self._port = port
        self._ssl = ssl_context or None
        self._connect_timeout = connect_timeout
        self._read_timeout = read_timeout
        self._write_timeout = write_timeout
        self._max_frame_size = max_frame_size
        self.logger = logger or logging.getLogger("ibmi.connection")

        self._reader: Optional[asyncio.StreamReader] = None
        self._writer: Optional[asyncio.StreamWriter] = None
        self._connected = False

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int:
        return self._port

    @property
    def connected(self) -> bool:
        """Check if connection is active."""
        return self._connected

    async def connect(self) -> 'AsyncHostConnection':
        """
        Establish connection to the host server.

        Returns:
            This connection

        Raises:
            HostConnectionError: If connection fails
        """
        if self._connected:
            return self

        try:
            coro = asyncio.open_connection(self._host, self._port, ssl=self._ssl)
            if self._connect_timeout is not None:
                self._reader, self._writer = await asyncio.wait_for(
                    coro, timeout=self._connect_timeout
                )
            else:
                self._reader, self._writer = await coro

            self._connected = True
            self.logger.debug(
                f"Connected to {self._host}:{self._port}{' (TLS)' if self._ssl else ''}"
            )
            return self

        except asyncio.TimeoutError:
            await self._cleanup()
            raise HostConnectionError(
                f"Connection to {self._host}:{self._port} timed out"
            ) from None
        except (OSError, ssl.SSLError) as e:
            await self._cleanup()
            raise HostConnectionError(
                f"Failed to connect to {self._host}:{self._port}: {e}"
            ) from e

    async def disconnect(self) -> None:
        """Close the connection."""
        self._connected = False
        await self._cleanup()

    async def send(self, frame: Frame) -> None:
        """
        Send a frame to the host server.

        Raises:
            HostConnectionError: If not connected or send fails
        """
        if not self._connected or self._writer is None:
            raise HostConnectionError("Not connected")
        try:
            await send_frame(self._writer, frame, self._write_timeout)
        except HostConnectionError:
            self._connected = False
            raise

    async def receive(self) -> Frame:
        """
        Receive the next frame from the host server.

        Raises:
            HostConnectionError: If not connected or receive fails
            ProtocolError: If the inbound length field is invalid
        """
        if not self._connected or self._reader is None:
            raise HostConnectionError("Not connected")
        try:
            return await recv_frame(self._reader, self._max_frame_size, self._read_timeout)
        except (HostConnectionError, ProtocolError):
            self._connected = False
            raise

    async def _cleanup(self) -> None:
        """Clean up connection resources."""
        if self._writer is not None:
            try:
                self._writer.close()
                await self._writer.wait_closed()
            except (OSError, ssl.SSLError) as e:
                self.logger.debug(f"Error while closing connection to {self._host}: {e}")
            self._writer = None
        self._reader = None

    async def __aenter__(self) -> 'AsyncHostConnection':
        return await self.connect()

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()
