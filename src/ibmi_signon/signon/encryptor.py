"""
Sign-on Password Encryptor Module
Builds the password substitute sent in the sign-on info request.

The scheme is selected by the password level negotiated during the seed
exchange:

    level 0, 1  ->  DES substitute (8 bytes), EBCDIC upper-case credentials
    level 2, 3  ->  SHA-1 substitute (20 bytes), UTF-16BE credentials

Both schemes mix the client and server seeds into the substitute, so a
captured blob is useless against another seed pair.
"""

import hashlib

from enum import IntEnum
from typing import Callable, Dict

from cryptography.hazmat.decrepit.ciphers.algorithms import TripleDES
from cryptography.hazmat.primitives.ciphers import Cipher, modes

from ..common.constants import EBCDIC_CODEC, SEED_SIZE, USER_ID_SIZE
from ..exceptions import PasswordLengthError, UnsupportedPasswordLevelError
from .errors import PASSWORD_LENGTH_NOT_VALID

DES_PASSWORD_MAX_LENGTH = 10
SHA_PASSWORD_MAX_LENGTH = 128

EBCDIC_BLANK = 0x40
SEQUENCE_NUMBER = (1).to_bytes(8, 'big')


class EncryptionScheme(IntEnum):
    """Password encryption variants, valued by their authentication scheme byte."""
    DES = 0x01
    SHA1 = 0x03


def scheme_for_level(password_level: int) -> EncryptionScheme:
    """
    Select the encryption scheme for a negotiated password level.

    Raises:
        UnsupportedPasswordLevelError: If the level has no known scheme
    """
    if password_level in (0, 1):
        return EncryptionScheme.DES
    if password_level in (2, 3):
        return EncryptionScheme.SHA1
    raise UnsupportedPasswordLevelError(password_level)


def _xor(a: bytes, b: bytes) -> bytes:
    return bytes(x ^ y for x, y in zip(a, b))


def _ebcdic_length(data: bytes) -> int:
    """Length of an EBCDIC field up to the first blank or null."""
    for i, byte in enumerate(data):
        if byte in (EBCDIC_BLANK, 0x00):
            return i
    return len(data)


def _pad(data: bytes, size: int) -> bytes:
    return data + bytes([EBCDIC_BLANK]) * (size - len(data))


def _des_encrypt(key: bytes, data: bytes) -> bytes:
    # Single DES: triple DES with K1 == K2 == K3 collapses to one DES pass.
    encryptor = Cipher(TripleDES(key * 3), modes.ECB()).encryptor()
    return encryptor.update(data) + encryptor.finalize()


def _xor_0x55_and_shift(block: bytes) -> bytes:
    """XOR every byte with 0x55, then shift the whole 64-bit block left by one."""
    value = int.from_bytes(_xor(block, b'\x55' * 8), 'big')
    return ((value << 1) & 0xFFFFFFFFFFFFFFFF).to_bytes(8, 'big')


def _fold_user_id(user_id: bytes) -> bytes:
    """Fold characters 9 and 10 of a 10-byte EBCDIC user id into its first 8 bytes."""
    folded = bytearray(user_id[:8])
    if _ebcdic_length(user_id) > 8:
        for half, source in enumerate(user_id[8:10]):
            base = half * 4
            folded[base] ^= source & 0xC0
            folded[base + 1] ^= ((source & 0x30) << 2) & 0xFF
            folded[base + 2] ^= ((source & 0x0C) << 4) & 0xFF
            folded[base + 3] ^= ((source & 0x03) << 6) & 0xFF
    return bytes(folded)


def _des_token(user_id: bytes, password: bytes) -> bytes:
    data = _fold_user_id(user_id)
    length = _ebcdic_length(password)

    if length > 8:
        first = _des_encrypt(_xor_0x55_and_shift(password[:8]), data)
        second = _des_encrypt(_xor_0x55_and_shift(_pad(password[8:length], 8)), data)
        return _xor(first, second)

    return _des_encrypt(_xor_0x55_and_shift(_pad(password[:length], 8)), data)


def _des_substitute(user_id: bytes, token: bytes, client_seed: bytes, server_seed: bytes) -> bytes:
    rd_seq = ((int.from_bytes(server_seed, 'big') + 1) & 0xFFFFFFFFFFFFFFFF).to_bytes(8, 'big')

    encrypted = _des_encrypt(token, rd_seq)
    encrypted = _des_encrypt(token, _xor(encrypted, client_seed))
    encrypted = _des_encrypt(token, _xor(_xor(user_id[:8], rd_seq), encrypted))
    encrypted = _des_encrypt(token, _xor(_xor(rd_seq, _pad(user_id[8:10], 8)), encrypted))
    encrypted = _des_encrypt(token, _xor(_xor(rd_seq, SEQUENCE_NUMBER), encrypted))
    return encrypted


def _normalize_user_id(user_id: str) -> str:
    normalized = user_id.upper()
    if not normalized or len(normalized) > USER_ID_SIZE:
        raise ValueError(f"User ID must be 1 to {USER_ID_SIZE} characters")
    return normalized.ljust(USER_ID_SIZE)


def encode_user_id(user_id: str) -> bytes:
    """Upper-case user id padded to 10 EBCDIC characters."""
    return _normalize_user_id(user_id).encode(EBCDIC_CODEC)


def _encrypt_des(user_id: str, password: str, client_seed: bytes, server_seed: bytes) -> bytes:
    normalized = password.upper()
    if normalized[:1].isdigit():
        normalized = "Q" + normalized
    if not normalized or len(normalized) > DES_PASSWORD_MAX_LENGTH:
        raise PasswordLengthError(PASSWORD_LENGTH_NOT_VALID.msg)

    user_ebcdic = encode_user_id(user_id)
    password_ebcdic = _pad(normalized.encode(EBCDIC_CODEC), DES_PASSWORD_MAX_LENGTH)

    token = _des_token(user_ebcdic, password_ebcdic)
    return _des_substitute(user_ebcdic, token, client_seed, server_seed)


def _encrypt_sha1(user_id: str, password: str, client_seed: bytes, server_seed: bytes) -> bytes:
    if not password or len(password) > SHA_PASSWORD_MAX_LENGTH:
        raise PasswordLengthError(PASSWORD_LENGTH_NOT_VALID.msg)

    user_unicode = _normalize_user_id(user_id).encode('utf-16-be')
    password_unicode = password.encode('utf-16-be')

    token = hashlib.sha1(user_unicode + password_unicode).digest()
    return hashlib.sha1(
        token + server_seed + client_seed + user_unicode + SEQUENCE_NUMBER
    ).digest()


_ENCODERS: Dict[EncryptionScheme, Callable[[str, str, bytes, bytes], bytes]] = {
    EncryptionScheme.DES: _encrypt_des,
    EncryptionScheme.SHA1: _encrypt_sha1,
}


def encrypt_password(
    user_id: str,
    password: str,
    client_seed: bytes,
    server_seed: bytes,
    password_level: int,
) -> bytes:
    """
    Produce the encrypted credential blob for the info request.

    Args:
        user_id: User profile name
        password: Plaintext password
        client_seed: 8-byte seed generated by this client
        server_seed: 8-byte seed returned by the host
        password_level: Password level negotiated in the seed exchange

    Returns:
        8-byte DES substitute or 20-byte SHA-1 substitute

    Raises:
        UnsupportedPasswordLevelError: If the level has no known scheme
        PasswordLengthError: If the password does not fit the scheme
        ValueError: If a seed has the wrong size or the user id is invalid
    """
    if len(client_seed) != SEED_SIZE or len(server_seed) != SEED_SIZE:
        raise ValueError(f"Seeds must be {SEED_SIZE} bytes")

    scheme = scheme_for_level(password_level)
    return _ENCODERS[scheme](user_id, password, bytes(client_seed), bytes(server_seed))
