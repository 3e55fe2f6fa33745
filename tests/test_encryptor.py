import functools
import hashlib
import operator

import pytest
from cryptography.hazmat.decrepit.ciphers.algorithms import TripleDES
from cryptography.hazmat.primitives.ciphers import Cipher, modes

from ibmi_signon.exceptions import PasswordLengthError, UnsupportedPasswordLevelError
from ibmi_signon.signon.encryptor import (
    EncryptionScheme,
    _des_encrypt,
    _fold_user_id,
    _xor_0x55_and_shift,
    encode_user_id,
    encrypt_password,
    scheme_for_level,
)

from conftest import CLIENT_SEED, SERVER_SEED

OTHER_SEED = bytes(range(0x20, 0x28))


@pytest.mark.parametrize("level, scheme", [
    (0, EncryptionScheme.DES),
    (1, EncryptionScheme.DES),
    (2, EncryptionScheme.SHA1),
    (3, EncryptionScheme.SHA1),
])
def test_scheme_for_level(level, scheme):
    assert scheme_for_level(level) is scheme


@pytest.mark.parametrize("level", [-1, 4, 5])
def test_unknown_level_is_rejected(level):
    with pytest.raises(UnsupportedPasswordLevelError) as exc_info:
        encrypt_password("ALICE", "secret", CLIENT_SEED, SERVER_SEED, level)
    assert exc_info.value.password_level == level


def test_single_des_known_answer():
    key = bytes.fromhex("133457799BBCDFF1")
    plaintext = bytes.fromhex("0123456789ABCDEF")

    assert _des_encrypt(key, plaintext) == bytes.fromhex("85E813540F0AB405")


def test_xor_0x55_and_shift_carries_between_bytes():
    assert _xor_0x55_and_shift(bytes(8)) == b'\xaa' * 8
    # 0xD5 ^ 0x55 = 0x80: its high bit moves into the previous byte
    assert _xor_0x55_and_shift(b'\x55' * 6 + b'\xd5\x55') == bytes(5) + b'\x01' + bytes(2)
    assert _xor_0x55_and_shift(b'\x55' * 7 + b'\xd5') == bytes(6) + b'\x01\x00'
    # and falls off the top of the first byte
    assert _xor_0x55_and_shift(b'\xd5' + b'\x55' * 7) == bytes(8)


def test_user_id_is_upper_cased_and_blank_padded():
    assert encode_user_id("alice") == "ALICE     ".encode("cp037")
    assert encode_user_id("alice")[-1] == 0x40


@pytest.mark.parametrize("user_id", ["", "ABCDEFGHIJK"])
def test_invalid_user_id_is_rejected(user_id):
    with pytest.raises(ValueError):
        encrypt_password(user_id, "secret", CLIENT_SEED, SERVER_SEED, 2)


def test_fold_user_id_only_changes_long_user_ids():
    short = encode_user_id("ALICE")
    long = encode_user_id("ABCDEFGHIJ")

    assert _fold_user_id(short) == short[:8]
    assert _fold_user_id(long) != long[:8]


@pytest.mark.parametrize("level, size", [(0, 8), (1, 8), (2, 20), (3, 20)])
def test_blob_size_per_level(level, size):
    assert len(encrypt_password("ALICE", "secret", CLIENT_SEED, SERVER_SEED, level)) == size


@pytest.mark.parametrize("level", [0, 2])
def test_encryption_is_deterministic(level):
    first = encrypt_password("ALICE", "secret", CLIENT_SEED, SERVER_SEED, level)
    second = encrypt_password("ALICE", "secret", CLIENT_SEED, SERVER_SEED, level)
    assert first == second


@pytest.mark.parametrize("level", [0, 2])
@pytest.mark.parametrize("changed", [
    {"user_id": "BOB"},
    {"password": "secreu"},
    {"client_seed": OTHER_SEED},
    {"server_seed": OTHER_SEED},
])
def test_changing_one_input_changes_blob(level, changed):
    base = dict(user_id="ALICE", password="secret", client_seed=CLIENT_SEED, server_seed=SERVER_SEED)
    modified = dict(base, **changed)

    assert encrypt_password(password_level=level, **base) != encrypt_password(password_level=level, **modified)


def test_changing_scheme_changes_blob():
    assert encrypt_password("ALICE", "secret", CLIENT_SEED, SERVER_SEED, 0) != \
        encrypt_password("ALICE", "secret", CLIENT_SEED, SERVER_SEED, 2)


def test_swapping_seeds_changes_blob():
    for level in (0, 2):
        assert encrypt_password("ALICE", "secret", CLIENT_SEED, SERVER_SEED, level) != \
            encrypt_password("ALICE", "secret", SERVER_SEED, CLIENT_SEED, level)


def test_des_credentials_are_case_insensitive():
    assert encrypt_password("alice", "secret", CLIENT_SEED, SERVER_SEED, 0) == \
        encrypt_password("ALICE", "SECRET", CLIENT_SEED, SERVER_SEED, 0)


def test_des_numeric_password_gets_q_prefix():
    assert encrypt_password("ALICE", "12345", CLIENT_SEED, SERVER_SEED, 0) == \
        encrypt_password("ALICE", "Q12345", CLIENT_SEED, SERVER_SEED, 0)


def test_des_password_of_nine_and_ten_characters():
    nine = encrypt_password("ALICE", "ABCDEFGHI", CLIENT_SEED, SERVER_SEED, 0)
    ten = encrypt_password("ALICE", "ABCDEFGHIJ", CLIENT_SEED, SERVER_SEED, 0)
    eight = encrypt_password("ALICE", "ABCDEFGH", CLIENT_SEED, SERVER_SEED, 0)

    assert len({nine, ten, eight}) == 3


@pytest.mark.parametrize("password", ["", "ABCDEFGHIJK", "1234567890"])
def test_des_password_length_is_validated(password):
    with pytest.raises(PasswordLengthError, match="Password length not valid"):
        encrypt_password("ALICE", password, CLIENT_SEED, SERVER_SEED, 1)


def test_sha1_password_is_case_sensitive():
    assert encrypt_password("ALICE", "secret", CLIENT_SEED, SERVER_SEED, 2) != \
        encrypt_password("ALICE", "SECRET", CLIENT_SEED, SERVER_SEED, 2)


def test_sha1_substitute_composition():
    user = "ALICE     ".encode("utf-16-be")
    password = "Passw0rd".encode("utf-16-be")
    token = hashlib.sha1(user + password).digest()
    expected = hashlib.sha1(token + SERVER_SEED + CLIENT_SEED + user + (1).to_bytes(8, "big")).digest()

    assert encrypt_password("alice", "Passw0rd", CLIENT_SEED, SERVER_SEED, 3) == expected


def _des(key, block):
    encryptor = Cipher(TripleDES(key * 3), modes.ECB()).encryptor()
    return encryptor.update(block) + encryptor.finalize()


def _xor_blocks(*blocks):
    return bytes(functools.reduce(operator.xor, column) for column in zip(*blocks))


def test_des_substitute_composition():
    # "ALICE" in EBCDIC, blank padded; short enough that folding keeps the first 8 bytes
    user = bytes.fromhex("C1D3C9C3C5404040")
    user_tail = bytes.fromhex("4040404040404040")
    # "SECRET" in EBCDIC is E2C5C3D9C5E34040; XOR 0x55 gives B790968C90B61515, shifted left one bit
    password_key = bytes.fromhex("6F212D19216C2A2A")
    rd_seq = bytes.fromhex("090A0B0C0D0E0F11")
    sequence = bytes.fromhex("0000000000000001")

    token = _des(password_key, user)
    step = _des(token, rd_seq)
    step = _des(token, _xor_blocks(step, CLIENT_SEED))
    step = _des(token, _xor_blocks(user, rd_seq, step))
    step = _des(token, _xor_blocks(rd_seq, user_tail, step))
    expected = _des(token, _xor_blocks(rd_seq, sequence, step))

    assert encrypt_password("alice", "secret", CLIENT_SEED, SERVER_SEED, 0) == expected
    assert encrypt_password("alice", "secret", CLIENT_SEED, SERVER_SEED, 1) == expected


@pytest.mark.parametrize("password", ["", "x" * 129])
def test_sha1_password_length_is_validated(password):
    with pytest.raises(PasswordLengthError):
        encrypt_password("ALICE", password, CLIENT_SEED, SERVER_SEED, 2)


def test_seed_size_is_validated():
    with pytest.raises(ValueError):
        encrypt_password("ALICE", "secret", CLIENT_SEED[:4], SERVER_SEED, 2)
