"""
Sign-on error codes returned by the host in the info reply.
"""

from typing import NamedTuple, Tuple


class ErrorEntry(NamedTuple):
    id: int
    msg: str


PASSWORD_LENGTH_NOT_VALID = ErrorEntry(0x00010008, "Password length not valid")
USERID_UNKNOWN = ErrorEntry(0x00020001, "Unknown user ID")
USERID_DISABLED = ErrorEntry(0x00020002, "User ID is disabled")
PASSWORD_INCORRECT = ErrorEntry(0x0003000B, "Incorrect password")
PASSWORD_INCORRECT_DISABLE = ErrorEntry(
    0x0003000C,
    "Incorrect password, user ID will be disabled on the next incorrect password",
)

SIGNON_ERRORS: Tuple[ErrorEntry, ...] = (
    PASSWORD_LENGTH_NOT_VALID,
    USERID_UNKNOWN,
    USERID_DISABLED,
    PASSWORD_INCORRECT,
    PASSWORD_INCORRECT_DISABLE,
)

UNKNOWN_ERROR = "Unknown error"


def lookup_error(code: int) -> str:
    """Map a sign-on return code to its message, "Unknown error" if unrecognized."""
    for entry in SIGNON_ERRORS:
        if entry.id == code:
            return entry.msg
    return UNKNOWN_ERROR
