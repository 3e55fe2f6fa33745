"""
Host Server Exceptions Module
Exception hierarchy for the host server sign-on client.
"""


class HostServerError(Exception):
    """Base exception for all host server errors."""
    pass


class ConnectionError(HostServerError):
    """Connection-related errors (connect, send, receive, timeouts)."""
    pass


class ProtocolError(HostServerError):
    """Protocol-level errors (malformed frames, bad parameters, etc.)."""
    pass


class MaxFrameSizeExceededError(ProtocolError):
    """Frame size exceeds maximum allowed."""

    def __init__(self, size: int, max_size: int):
        self.size = size
        self.max_size = max_size
        super().__init__(f"Frame size {size} exceeds maximum {max_size}")


class FramingError(ProtocolError):
    """Reply too short to carry a header and a return code."""

    def __init__(self, message: str, host: str):
        self.host = host
        super().__init__(message)


class SeedExchangeError(ProtocolError):
    """Host rejected the seed exchange."""

    def __init__(self, host: str, return_code: int):
        self.host = host
        self.return_code = return_code
        super().__init__(f"Error during signon seed exchange with {host}: 0x{return_code:08X}")


class SignonInfoError(ProtocolError):
    """Host rejected the credentials."""

    def __init__(self, host: str, return_code: int, description: str):
        self.host = host
        self.return_code = return_code
        self.description = description
        super().__init__(f"Error during signon info with {host}: {description}")


class UnsupportedPasswordLevelError(ProtocolError):
    """Negotiated password level has no known encryption scheme."""

    def __init__(self, password_level: int):
        self.password_level = password_level
        super().__init__(f"Unsupported password level: {password_level}")


class PasswordLengthError(HostServerError):
    """Password cannot be encoded for the negotiated password level."""
    pass
