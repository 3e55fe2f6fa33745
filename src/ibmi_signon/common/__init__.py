"""Host Server Common Package - frame format, constants and transport."""

from .constants import (
    HEADER_SIZE,
    MIN_REPLY_SIZE,
    MAX_FRAME_SIZE,
    SIGNON_SERVICE_NAME,
    SIGNON_SERVER_ID,
    SIGNON_DEFAULT_PORT,
    SIGNON_DEFAULT_TLS_PORT,
    DEFAULT_CONNECT_TIMEOUT,
    DEFAULT_READ_TIMEOUT,
    DEFAULT_WRITE_TIMEOUT,
)
from .frame import Frame
from .transport import recv_exact, recv_frame, send_frame

__all__ = [
    # Constants
    'HEADER_SIZE', 'MIN_REPLY_SIZE', 'MAX_FRAME_SIZE',
    'SIGNON_SERVICE_NAME', 'SIGNON_SERVER_ID', 'SIGNON_DEFAULT_PORT', 'SIGNON_DEFAULT_TLS_PORT',
    'DEFAULT_CONNECT_TIMEOUT', 'DEFAULT_READ_TIMEOUT', 'DEFAULT_WRITE_TIMEOUT',
    # Frame
    'Frame',
    # Transport
    'recv_exact', 'recv_frame', 'send_frame',
]
