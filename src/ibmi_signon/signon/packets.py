"""
Sign-on Packets Module
Request and reply frames of the sign-on service.
"""

import struct

from datetime import datetime
from typing import List, Optional, Tuple

from ..common.constants import (
    HEADER_SIZE,
    MIN_REPLY_SIZE,
    PARAMETER_HEADER_SIZE,
    SIGNON_SERVER_ID,
    SEED_EXCHANGE_REQUEST_ID,
    SEED_EXCHANGE_REPLY_ID,
    SIGNON_INFO_REQUEST_ID,
    SIGNON_INFO_REPLY_ID,
    CP_CLIENT_VERSION,
    CP_CLIENT_LEVEL,
    CP_CLIENT_SEED,
    CP_SERVER_VERSION,
    CP_SERVER_LEVEL,
    CP_SERVER_SEED,
    CP_PASSWORD_LEVEL,
    CP_USER_ID,
    CP_PASSWORD,
    CP_CLIENT_CCSID,
    CP_SERVER_CCSID,
    CP_CURRENT_SIGNON_DATE,
    CP_LAST_SIGNON_DATE,
    CP_EXPIRATION_DATE,
    CP_EXPIRATION_WARNING,
    CP_RETURN_ERROR_MESSAGES,
    CLIENT_VERSION,
    CLIENT_DATASTREAM_LEVEL,
    CLIENT_CCSID,
    EBCDIC_CODEC,
    RETURN_ERROR_MESSAGES_SERVER_LEVEL,
    USER_ID_SIZE,
)
from ..common.frame import Frame
from ..exceptions import ProtocolError
from .encryptor import EncryptionScheme, encode_user_id
from .models import SessionAttributes

OFFSET_RETURN_CODE = 20
DATE_SIZE = 7

Parameters = List[Tuple[int, bytes]]


def build_frame(request_reply_id: int, template: bytes, parameters: Parameters) -> Frame:
    """Allocate a sign-on frame sized for its template and LL/CP parameters."""
    size = HEADER_SIZE + len(template) + sum(PARAMETER_HEADER_SIZE + len(data) for _, data in parameters)

    frame = Frame(size)
    frame.server_id = SIGNON_SERVER_ID
    frame.template_length = len(template)
    frame.request_reply_id = request_reply_id
    frame.set_bytes(HEADER_SIZE, template)

    offset = HEADER_SIZE + len(template)
    for code_point, data in parameters:
        offset = frame.set_parameter(offset, code_point, data)

    return frame


def decode_date(data: Optional[bytes]) -> Optional[datetime]:
    """Decode a host timestamp: year(u16), month, day, hour, minute, second."""
    if data is None or len(data) < DATE_SIZE or not any(data[:DATE_SIZE]):
        return None
    year, month, day, hour, minute, second = struct.unpack('>HBBBBB', data[:DATE_SIZE])
    try:
        return datetime(year, month, day, hour, minute, second)
    except ValueError as e:
        raise ProtocolError(f"Invalid host timestamp {data.hex()}: {e}") from e


def encode_date(value: Optional[datetime]) -> bytes:
    if value is None:
        return bytes(DATE_SIZE)
    return struct.pack('>HBBBBB', value.year, value.month, value.day, value.hour, value.minute, value.second)


def _required(parameters: dict, code_point: int, name: str) -> bytes:
    try:
        return parameters[code_point]
    except KeyError:
        raise ProtocolError(f"Reply is missing {name} (code point 0x{code_point:04X})") from None


class SeedExchangeRequest:
    """Seed exchange request: client version, data stream level and client seed."""

    def __init__(self, client_seed: bytes):
        self.client_seed = bytes(client_seed)

    def to_frame(self) -> Frame:
        return build_frame(SEED_EXCHANGE_REQUEST_ID, b'', [
            (CP_CLIENT_VERSION, struct.pack('>I', CLIENT_VERSION)),
            (CP_CLIENT_LEVEL, struct.pack('>H', CLIENT_DATASTREAM_LEVEL)),
            (CP_CLIENT_SEED, self.client_seed),
        ])


class SeedExchangeReply:
    """Seed exchange reply from the host."""

    def __init__(
        self,
        return_code: int,
        server_version: int = 0,
        server_level: int = 0,
        server_seed: bytes = b'',
        password_level: int = 0,
    ):
        self.return_code = return_code
        self.server_version = server_version
        self.server_level = server_level
        self.server_seed = server_seed
        self.password_level = password_level

    def to_frame(self) -> Frame:
        parameters: Parameters = []
        if self.return_code == 0:
            parameters = [
                (CP_SERVER_VERSION, struct.pack('>I', self.server_version)),
                (CP_SERVER_LEVEL, struct.pack('>H', self.server_level)),
                (CP_SERVER_SEED, self.server_seed),
                (CP_PASSWORD_LEVEL, struct.pack('>B', self.password_level)),
            ]
        return build_frame(SEED_EXCHANGE_REPLY_ID, struct.pack('>I', self.return_code), parameters)

    @classmethod
    def from_frame(cls, frame: Frame) -> 'SeedExchangeReply':
        """
        Parse a seed exchange reply.

        Negotiated values are only read when the return code is zero.
        """
        return_code = frame.get32(OFFSET_RETURN_CODE)
        if return_code != 0:
            return cls(return_code)

        parameters = frame.parameter_map(MIN_REPLY_SIZE)
        return cls(
            return_code=return_code,
            server_version=struct.unpack('>I', _required(parameters, CP_SERVER_VERSION, "server version"))[0],
            server_level=struct.unpack('>H', _required(parameters, CP_SERVER_LEVEL, "server level"))[0],
            server_seed=_required(parameters, CP_SERVER_SEED, "server seed"),
            password_level=_required(parameters, CP_PASSWORD_LEVEL, "password level")[0],
        )


class SignonInfoRequest:
    """Sign-on info request carrying the user id and the encrypted password."""

    def __init__(self, user_id: str, encrypted_password: bytes, scheme: EncryptionScheme, server_level: int):
        self.user_id = user_id
        self.encrypted_password = bytes(encrypted_password)
        self.scheme = scheme
        self.server_level = server_level

    def to_frame(self) -> Frame:
        parameters: Parameters = [
            (CP_CLIENT_CCSID, struct.pack('>I', CLIENT_CCSID)),
            (CP_PASSWORD, self.encrypted_password),
            (CP_USER_ID, encode_user_id(self.user_id)),
        ]
        if self.server_level >= RETURN_ERROR_MESSAGES_SERVER_LEVEL:
            parameters.append((CP_RETURN_ERROR_MESSAGES, b'\x01'))

        return build_frame(SIGNON_INFO_REQUEST_ID, bytes([int(self.scheme)]), parameters)


class SignonInfoReply:
    """Sign-on info reply from the host."""

    def __init__(
        self,
        return_code: int,
        server_ccsid: int = 0,
        current_signon_date: Optional[datetime] = None,
        last_signon_date: Optional[datetime] = None,
        password_expiration_date: Optional[datetime] = None,
        expiration_warning: bool = False,
        user_id: str = "",
    ):
        self.return_code = return_code
        self.server_ccsid = server_ccsid
        self.current_signon_date = current_signon_date
        self.last_signon_date = last_signon_date
        self.password_expiration_date = password_expiration_date
        self.expiration_warning = expiration_warning
        self.user_id = user_id

    def to_frame(self) -> Frame:
        parameters: Parameters = []
        if self.return_code == 0:
            parameters = [
                (CP_CURRENT_SIGNON_DATE, encode_date(self.current_signon_date)),
                (CP_LAST_SIGNON_DATE, encode_date(self.last_signon_date)),
                (CP_EXPIRATION_DATE, encode_date(self.password_expiration_date)),
                (CP_EXPIRATION_WARNING, struct.pack('>I', 1 if self.expiration_warning else 0)),
                (CP_SERVER_CCSID, struct.pack('>I', self.server_ccsid)),
                (CP_USER_ID, self.user_id.ljust(USER_ID_SIZE).encode(EBCDIC_CODEC)),
            ]
        return build_frame(SIGNON_INFO_REPLY_ID, struct.pack('>I', self.return_code), parameters)

    @classmethod
    def from_frame(cls, frame: Frame) -> 'SignonInfoReply':
        return_code = frame.get32(OFFSET_RETURN_CODE)
        if return_code != 0:
            return cls(return_code)

        parameters = frame.parameter_map(MIN_REPLY_SIZE)
        warning = parameters.get(CP_EXPIRATION_WARNING, b'')
        return cls(
            return_code=return_code,
            server_ccsid=struct.unpack('>I', _required(parameters, CP_SERVER_CCSID, "server CCSID"))[0],
            current_signon_date=decode_date(parameters.get(CP_CURRENT_SIGNON_DATE)),
            last_signon_date=decode_date(parameters.get(CP_LAST_SIGNON_DATE)),
            password_expiration_date=decode_date(parameters.get(CP_EXPIRATION_DATE)),
            expiration_warning=any(warning),
            user_id=_required(parameters, CP_USER_ID, "user ID").decode(EBCDIC_CODEC).rstrip(),
        )

    def to_session_attributes(self) -> SessionAttributes:
        return SessionAttributes(
            server_ccsid=self.server_ccsid,
            current_signon_date=self.current_signon_date,
            last_signon_date=self.last_signon_date,
            password_expiration_date=self.password_expiration_date,
            expiration_warning=self.expiration_warning,
            user_id=self.user_id,
        )
