"""
ibmi-signon - IBM i host server sign-on client

Async client for the sign-on host server: seed exchange, password
encryption and sign-on info over the host server frame format.
"""

from .client import AsyncHostConnection
from .common import Frame
from .system import HostSystem
from .signon import SignonService, SessionAttributes, NegotiationState
from .exceptions import (
    HostServerError,
    ConnectionError,
    ProtocolError,
    MaxFrameSizeExceededError,
    FramingError,
    SeedExchangeError,
    SignonInfoError,
    UnsupportedPasswordLevelError,
    PasswordLengthError,
)

__version__ = "0.1.0"
__all__ = [
    'AsyncHostConnection',
    'Frame',
    'HostSystem',
    'SignonService',
    'SessionAttributes',
    'NegotiationState',
    # Exceptions
    'HostServerError',
    'ConnectionError',
    'ProtocolError',
    'MaxFrameSizeExceededError',
    'FramingError',
    'SeedExchangeError',
    'SignonInfoError',
    'UnsupportedPasswordLevelError',
    'PasswordLengthError',
]
