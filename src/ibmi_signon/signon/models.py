"""
Sign-on data models.
"""

from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class NegotiationState:
    """Values negotiated by one seed exchange, handed to the info phase."""

    server_level: int
    server_version: int
    password_level: int
    client_seed: bytes
    server_seed: bytes
    password_attributes_set: bool = False


@dataclass(frozen=True)
class SessionAttributes:
    """Authenticated session attributes returned by a successful sign-on."""

    server_ccsid: int
    current_signon_date: Optional[datetime]
    last_signon_date: Optional[datetime]
    password_expiration_date: Optional[datetime]
    expiration_warning: bool
    user_id: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
