"""Sign-on Service Package."""

from .encryptor import EncryptionScheme, encrypt_password, scheme_for_level
from .errors import ErrorEntry, SIGNON_ERRORS, lookup_error
from .models import NegotiationState, SessionAttributes
from .packets import SeedExchangeRequest, SeedExchangeReply, SignonInfoRequest, SignonInfoReply
from .service import SignonService, signon

__all__ = [
    'EncryptionScheme', 'encrypt_password', 'scheme_for_level',
    'ErrorEntry', 'SIGNON_ERRORS', 'lookup_error',
    'NegotiationState', 'SessionAttributes',
    'SeedExchangeRequest', 'SeedExchangeReply', 'SignonInfoRequest', 'SignonInfoReply',
    'SignonService', 'signon',
]
