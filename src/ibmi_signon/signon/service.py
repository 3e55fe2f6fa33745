"""
Sign-on Service Module
Drives the two-step sign-on handshake with a host server.
"""

import logging
import os
from typing import Callable, Optional

from ..client.connection import AsyncHostConnection
from ..common.constants import (
    MIN_REPLY_SIZE,
    SEED_SIZE,
    SIGNON_SERVICE_NAME,
    SIGNON_SERVER_ID,
)
from ..common.frame import Frame
from ..exceptions import FramingError, ProtocolError, SeedExchangeError, SignonInfoError
from ..system import HostSystem
from .encryptor import encrypt_password, scheme_for_level
from .errors import lookup_error
from .models import NegotiationState, SessionAttributes
from .packets import SeedExchangeReply, SeedExchangeRequest, SignonInfoReply, SignonInfoRequest


class SignonService:
    """
    Sign-on service client.

    Performs the seed exchange and the sign-on info exchange over one
    connection, one request at a time.

    Example usage:
        system = HostSystem(host_name="myibmi", user_id="alice", password="secret")
        async with SignonService(system) as service:
            attributes = await service.signon()
            print(attributes.server_ccsid)

    The connection argument accepts any object with async connect(), send(frame)
    and receive() methods; by default an AsyncHostConnection to the system's
    sign-on port is created.
    """

    name = SIGNON_SERVICE_NAME
    server_id = SIGNON_SERVER_ID

    def __init__(
        self,
        system: HostSystem,
        connection=None,
        logger: Optional[logging.Logger] = None,
        seed_factory: Callable[[int], bytes] = os.urandom,
        encryptor: Callable[..., bytes] = encrypt_password,
    ):
        self.system = system
        self.logger = logger or logging.getLogger("ibmi.signon")
        self.connection = connection
        self._seed_factory = seed_factory
        self._encryptor = encryptor

    @property
    def host_name(self) -> str:
        return self.system.host_name

    async def connect(self):
        """Open (or reuse) the connection to the sign-on server."""
        if self.connection is None:
            self.connection = AsyncHostConnection(
                self.system.host_name,
                self.system.signon_port,
                ssl_context=self.system.tls(),
                connect_timeout=self.system.connect_timeout,
                read_timeout=self.system.read_timeout,
                write_timeout=self.system.write_timeout,
                max_frame_size=self.system.max_frame_size,
            )
        await self.connection.connect()
        return self.connection

    async def close(self) -> None:
        """Close the connection if one was opened."""
        if self.connection is not None:
            await self.connection.disconnect()

    async def signon(self) -> SessionAttributes:
        """
        Perform a sign-on.

        Returns:
            Session attributes reported by the host

        Raises:
            ConnectionError: If the connection cannot be used
            FramingError: If a reply is too short or cannot be framed
            SeedExchangeError: If the host rejects the seed exchange
            SignonInfoError: If the host rejects the credentials
        """
        self.logger.debug(f"Attempt to signon as {self.system.user_id} to {self.host_name}")
        try:
            await self.connect()
            state = await self.exchange_seeds()
            attributes = await self.info(state)
        except Exception as e:
            self.logger.error(f"Failed to signon to {self.host_name}: {e}")
            raise

        self.logger.info(f"Signed on to {self.host_name} as {attributes.user_id}")
        return attributes

    async def exchange_seeds(self) -> NegotiationState:
        """
        Exchange seeds with the host.

        Returns:
            Negotiated levels and both seeds, with password attributes set
        """
        self.logger.debug(f"Attempt to exchange seeds with {self.host_name}")

        client_seed = self._seed_factory(SEED_SIZE)
        reply_frame = await self._request(SeedExchangeRequest(client_seed).to_frame(), "seed exchange")
        self.logger.debug(
            f"Seed exchange response received from {self.host_name}: {reply_frame.to_bytes().hex()}"
        )
        self._check_reply_size(reply_frame, "seed exchange")

        reply = SeedExchangeReply.from_frame(reply_frame)
        self.logger.debug(f"Signon seed exchange response code from {self.host_name} is {reply.return_code}")

        if reply.return_code != 0:
            raise SeedExchangeError(self.host_name, reply.return_code)

        state = NegotiationState(
            server_level=reply.server_level,
            server_version=reply.server_version,
            password_level=reply.password_level,
            client_seed=client_seed,
            server_seed=reply.server_seed,
            password_attributes_set=True,
        )

        self.logger.debug(f"Seed exchange server level from {self.host_name}: {state.server_level}")
        self.logger.debug(f"Seed exchange server version from {self.host_name}: {state.server_version}")
        self.logger.debug(f"Seed exchange password level from {self.host_name}: {state.password_level}")

        return state

    async def info(self, state: NegotiationState) -> SessionAttributes:
        """
        Submit the encrypted credentials and read the session attributes.

        Args:
            state: Result of exchange_seeds() on the same connection
        """
        if not state.password_attributes_set:
            raise ProtocolError(f"Password attributes for {self.host_name} have not been negotiated")

        self.logger.debug(f"Attempt to get signon info from {self.host_name}")

        scheme = scheme_for_level(state.password_level)
        encrypted_password = self._encryptor(
            self.system.user_id,
            self.system.password,
            state.client_seed,
            state.server_seed,
            state.password_level,
        )
        request = SignonInfoRequest(self.system.user_id, encrypted_password, scheme, state.server_level)

        reply_frame = await self._request(request.to_frame(), "info")
        self.logger.debug(f"Info response received from {self.host_name}: {reply_frame.to_bytes().hex()}")
        self._check_reply_size(reply_frame, "info")

        reply = SignonInfoReply.from_frame(reply_frame)
        self.logger.debug(f"Info response return code from {self.host_name} is {reply.return_code}")

        if reply.return_code != 0:
            raise SignonInfoError(self.host_name, reply.return_code, lookup_error(reply.return_code))

        attributes = reply.to_session_attributes()
        self.logger.debug(f"Info response from {self.host_name}: {attributes}")
        return attributes

    async def _request(self, frame: Frame, step: str) -> Frame:
        """
        Send one frame and wait for the single reply to it.

        A reply whose length prefix cannot be framed is reported as a
        FramingError for the step, like a reply that is too short.
        """
        if self.connection is None:
            raise ProtocolError(f"No connection to {self.host_name}")
        await self.connection.send(frame)
        try:
            return await self.connection.receive()
        except ProtocolError as e:
            raise self._framing_error(step) from e

    def _check_reply_size(self, frame: Frame, step: str) -> None:
        if len(frame) < MIN_REPLY_SIZE:
            raise self._framing_error(step)

    def _framing_error(self, step: str) -> FramingError:
        return FramingError(f"Invalid {step} response received from {self.host_name}", self.host_name)

    async def __aenter__(self) -> 'SignonService':
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


async def signon(system: HostSystem, logger: Optional[logging.Logger] = None) -> SessionAttributes:
    """Sign on to a host once and close the connection afterwards."""
    async with SignonService(system, logger=logger) as service:
        return await service.signon()
