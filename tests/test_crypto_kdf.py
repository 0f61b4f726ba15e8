# --------------------------------------------------------------
# File: test_crypto_kdf.py
# Description: Pruebas de la derivación de claves con PBKDF2-HMAC-SHA256.
# --------------------------------------------------------------

import hashlib

import pytest

from privatebin.crypto_kdf import KDF_ITERATIONS, KEY_SIZE, derive_key
from privatebin.errors import UnsupportedParameterError

MASTER = bytes(range(32))
SALT = b"saltsalt"


def test_defaults_for_new_pastes():
    assert KDF_ITERATIONS == 600_000
    assert KEY_SIZE == 256


def test_derive_key_matches_pbkdf2_sha256():
    """La clave es PBKDF2-SHA256 sobre clave maestra concatenada con la contraseña.

    Returns:
        None: Se compara con `hashlib.pbkdf2_hmac` como referencia.
    """
    key = derive_key(MASTER, "secreto", SALT, iterations=1000)
    expected = hashlib.pbkdf2_hmac("sha256", MASTER + b"secreto", SALT, 1000, 32)
    assert key == expected


def test_empty_password_uses_master_key_only():
    key = derive_key(MASTER, "", SALT, iterations=1000)
    assert key == hashlib.pbkdf2_hmac("sha256", MASTER, SALT, 1000, 32)


def test_password_is_utf8_encoded():
    key = derive_key(MASTER, "contraseña", SALT, iterations=10)
    assert key == hashlib.pbkdf2_hmac("sha256", MASTER + "contraseña".encode("utf-8"), SALT, 10, 32)


def test_different_passwords_give_different_keys():
    assert derive_key(MASTER, "a", SALT, iterations=10) != derive_key(MASTER, "b", SALT, iterations=10)


@pytest.mark.parametrize("key_size", [128, 192, 256])
def test_key_length_follows_key_size(key_size):
    assert len(derive_key(MASTER, "", SALT, iterations=10, key_size=key_size)) == key_size // 8


@pytest.mark.parametrize("key_size", [0, 64, 255, 512])
def test_unsupported_key_size(key_size):
    with pytest.raises(UnsupportedParameterError):
        derive_key(MASTER, "", SALT, iterations=10, key_size=key_size)


@pytest.mark.parametrize("iterations", [0, -1])
def test_invalid_iterations(iterations):
    with pytest.raises(UnsupportedParameterError):
        derive_key(MASTER, "", SALT, iterations=iterations)
