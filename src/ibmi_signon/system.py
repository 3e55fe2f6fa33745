"""
Host system description: where to sign on and as whom.
"""

import ssl

from dataclasses import dataclass, field
from typing import Optional, Union

from .common.constants import (
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_WRITE_TIMEOUT,
    MAX_FRAME_SIZE,
    SIGNON_DEFAULT_PORT,
    SIGNON_DEFAULT_TLS_PORT,
)
from .config import Settings


@dataclass(frozen=True)
class HostSystem:
    """Target host and credentials for one sign-on."""

    host_name: str
    user_id: str
    password: str = field(repr=False)
    secure: bool = False
    port: Optional[int] = None
    ssl_context: Optional[ssl.SSLContext] = field(default=None, repr=False, compare=False)
    connect_timeout: Optional[float] = DEFAULT_CONNECT_TIMEOUT
    read_timeout: Optional[float] = DEFAULT_READ_TIMEOUT
    write_timeout: Optional[float] = DEFAULT_WRITE_TIMEOUT
    max_frame_size: int = MAX_FRAME_SIZE

    @property
    def signon_port(self) -> int:
        """Explicit port, otherwise the sign-on default for plain or TLS."""
        if self.port is not None:
            return self.port
        return SIGNON_DEFAULT_TLS_PORT if self.secure else SIGNON_DEFAULT_PORT

    def tls(self) -> Union[ssl.SSLContext, bool, None]:
        """TLS argument for the connection, None for plain TCP."""
        if not self.secure:
            return None
        return self.ssl_context or ssl.create_default_context()

    @classmethod
    def from_settings(cls, settings: Settings) -> 'HostSystem':
        return cls(
            host_name=settings.host,
            user_id=settings.user_id,
            password=settings.password,
            secure=settings.secure,
            port=settings.port,
            connect_timeout=settings.connect_timeout,
            read_timeout=settings.read_timeout,
            write_timeout=settings.write_timeout,
            max_frame_size=settings.max_frame_size,
        )
