# --------------------------------------------------------------
# File: crypto_kdf.py
# Description: Derivación de la clave de paste mediante PBKDF2-HMAC-SHA256.
# --------------------------------------------------------------
"""Funciones de derivación de claves a partir de la clave maestra y la contraseña."""

from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from privatebin.errors import UnsupportedParameterError

# Parámetros con los que se crean los pastes nuevos.
KDF_ITERATIONS = 600_000
KEY_SIZE = 256  # bits
SUPPORTED_KEY_SIZES = (128, 192, 256)


def derive_key(
    master_key: bytes,
    password: str,
    salt: bytes,
    *,
    iterations: int,
    key_size: int = KEY_SIZE,
) -> bytes:
    """Deriva la clave AES de un paste.

    Args:
        master_key (bytes): Clave maestra que viaja en el fragmento de la URL.
        password (str): Contraseña opcional del paste; se concatena a la clave maestra.
        salt (bytes): Salt recibida o generada en el `Spec`.
        iterations (int): Iteraciones de PBKDF2.
        key_size (int): Tamaño de la clave en bits.

    Returns:
        bytes: Clave de ``key_size / 8`` bytes.

    Raises:
        UnsupportedParameterError: Si el tamaño de clave o las iteraciones no son válidos.

    """

    if key_size not in SUPPORTED_KEY_SIZES:
        raise UnsupportedParameterError(f"tamaño de clave no soportado: {key_size} bits")
    if iterations < 1:
        raise UnsupportedParameterError(f"número de iteraciones inválido: {iterations}")

    kdf = PBKDF2HMAC(
        algorithm=hashes.SHA256(),
        length=key_size // 8,
        salt=salt,
        iterations=iterations,
    )
    return kdf.derive(master_key + password.encode("utf-8"))
