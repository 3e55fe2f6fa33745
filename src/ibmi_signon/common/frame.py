"""
Host Server Frame Module
Defines the binary frame format shared by all host server services.
"""

import struct

from typing import Dict, Iterator, Tuple, Union

from .constants import (
    HEADER_SIZE,
    OFFSET_LENGTH,
    OFFSET_HEADER_ID,
    OFFSET_SERVER_ID,
    OFFSET_CS_INSTANCE,
    OFFSET_CORRELATION_ID,
    OFFSET_TEMPLATE_LENGTH,
    OFFSET_REQREP_ID,
    PARAMETER_HEADER_SIZE,
)
from ..exceptions import ProtocolError


class Frame:
    """
    Host server frame.

    Binary format (big-endian):
    +--------+--------+--------+----------+-------------+----------+--------+----------+------------+
    | LENGTH | HDR ID | SERVER | INSTANCE | CORRELATION | TEMPLATE | REQREP | TEMPLATE | PARAMETERS |
    | 4 bytes| 2 bytes| 2 bytes| 4 bytes  | 4 bytes     | 2 bytes  | 2 bytes| N bytes  | LL/CP ...  |
    +--------+--------+--------+----------+-------------+----------+--------+----------+------------+

    The length field always equals the size of the buffer. Reads and writes
    outside the buffer raise IndexError; values that do not fit the field
    raise ValueError.
    """

    def __init__(self, data: Union[int, bytes, bytearray]):
        if isinstance(data, int):
            if data < HEADER_SIZE:
                raise ValueError(f"Frame size {data} is smaller than the header ({HEADER_SIZE})")
            self._buffer = bytearray(data)
            self.set32(OFFSET_LENGTH, data)
        else:
            self._buffer = bytearray(data)

    @classmethod
    def parse(cls, data: Union[bytes, bytearray]) -> 'Frame':
        """Wrap an inbound buffer for read access."""
        return cls(bytes(data))

    def __len__(self) -> int:
        return len(self._buffer)

    def __repr__(self) -> str:
        if len(self._buffer) < HEADER_SIZE:
            return f"Frame(length={len(self._buffer)})"
        return f"Frame(length={len(self._buffer)}, reqrep=0x{self.request_reply_id:04X})"

    def to_bytes(self) -> bytes:
        """Serialize frame to bytes."""
        return bytes(self._buffer)

    def _check(self, offset: int, size: int) -> None:
        if offset < 0 or offset + size > len(self._buffer):
            raise IndexError(
                f"Access of {size} bytes at offset {offset} is outside frame of {len(self._buffer)} bytes"
            )

    def _check_value(self, value: int, bits: int) -> None:
        if not 0 <= value < 1 << bits:
            raise ValueError(f"Value {value} does not fit in {bits} unsigned bits")

    # Accessors

    def get8(self, offset: int) -> int:
        self._check(offset, 1)
        return self._buffer[offset]

    def set8(self, offset: int, value: int) -> None:
        self._check(offset, 1)
        self._check_value(value, 8)
        self._buffer[offset] = value

    def get16(self, offset: int) -> int:
        self._check(offset, 2)
        return struct.unpack_from('>H', self._buffer, offset)[0]

    def set16(self, offset: int, value: int) -> None:
        self._check(offset, 2)
        self._check_value(value, 16)
        struct.pack_into('>H', self._buffer, offset, value)

    def get32(self, offset: int) -> int:
        self._check(offset, 4)
        return struct.unpack_from('>I', self._buffer, offset)[0]

    def set32(self, offset: int, value: int) -> None:
        self._check(offset, 4)
        self._check_value(value, 32)
        struct.pack_into('>I', self._buffer, offset, value)

    def get_bytes(self, offset: int, size: int) -> bytes:
        self._check(offset, size)
        return bytes(self._buffer[offset:offset + size])

    def set_bytes(self, offset: int, data: bytes) -> None:
        self._check(offset, len(data))
        self._buffer[offset:offset + len(data)] = data

    # Header fields

    @property
    def length(self) -> int:
        return self.get32(OFFSET_LENGTH)

    @property
    def header_id(self) -> int:
        return self.get16(OFFSET_HEADER_ID)

    @header_id.setter
    def header_id(self, value: int) -> None:
        self.set16(OFFSET_HEADER_ID, value)

    @property
    def server_id(self) -> int:
        return self.get16(OFFSET_SERVER_ID)

    @server_id.setter
    def server_id(self, value: int) -> None:
        self.set16(OFFSET_SERVER_ID, value)

    @property
    def cs_instance(self) -> int:
        return self.get32(OFFSET_CS_INSTANCE)

    @cs_instance.setter
    def cs_instance(self, value: int) -> None:
        self.set32(OFFSET_CS_INSTANCE, value)

    @property
    def correlation_id(self) -> int:
        return self.get32(OFFSET_CORRELATION_ID)

    @correlation_id.setter
    def correlation_id(self, value: int) -> None:
        self.set32(OFFSET_CORRELATION_ID, value)

    @property
    def template_length(self) -> int:
        return self.get16(OFFSET_TEMPLATE_LENGTH)

    @template_length.setter
    def template_length(self, value: int) -> None:
        self.set16(OFFSET_TEMPLATE_LENGTH, value)

    @property
    def request_reply_id(self) -> int:
        return self.get16(OFFSET_REQREP_ID)

    @request_reply_id.setter
    def request_reply_id(self, value: int) -> None:
        self.set16(OFFSET_REQREP_ID, value)

    # LL/CP parameters

    def set_parameter(self, offset: int, code_point: int, data: bytes) -> int:
        """
        Write one LL/CP parameter.

        Args:
            offset: Offset of the LL field
            code_point: Parameter code point
            data: Parameter data

        Returns:
            Offset just past the parameter
        """
        size = PARAMETER_HEADER_SIZE + len(data)
        self._check(offset, size)
        self.set32(offset, size)
        self.set16(offset + 4, code_point)
        self.set_bytes(offset + PARAMETER_HEADER_SIZE, data)
        return offset + size

    def parameters(self, offset: int) -> Iterator[Tuple[int, bytes]]:
        """
        Iterate LL/CP parameters from offset to the end of the frame.

        Yields:
            (code_point, data) pairs

        Raises:
            ProtocolError: If a parameter is truncated or its LL is invalid
        """
        end = len(self._buffer)
        while offset < end:
            if end - offset < PARAMETER_HEADER_SIZE:
                raise ProtocolError(f"Truncated parameter header at offset {offset}")
            size = self.get32(offset)
            if size < PARAMETER_HEADER_SIZE or offset + size > end:
                raise ProtocolError(f"Invalid parameter length {size} at offset {offset}")
            code_point = self.get16(offset + 4)
            yield code_point, self.get_bytes(offset + PARAMETER_HEADER_SIZE, size - PARAMETER_HEADER_SIZE)
            offset += size

    def parameter_map(self, offset: int) -> Dict[int, bytes]:
        """Collect LL/CP parameters into a dict keyed by code point."""
        return dict(self.parameters(offset))
