# --------------------------------------------------------------
# File: crypto_sym.py
# Description: Primitivas AES-GCM con los parámetros que fija el protocolo PrivateBin.
# --------------------------------------------------------------
"""Rutinas de cifrado autenticado para pastes y comentarios.

El nonce y el tamaño de etiqueta vienen del `Spec`. Solo se admiten las
combinaciones que la librería `cryptography` expone de forma pública:

    nonce 12 + etiqueta 16        -> AESGCM
    nonce propio + etiqueta 16    -> AESGCM
    nonce 12 + etiqueta propia    -> Cipher(AES, GCM) con etiqueta truncada
    nonce propio + etiqueta propia -> UnsupportedParameterError
"""

import logging
import os
from typing import Optional, Union

from cryptography.exceptions import InvalidTag
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from privatebin import crypto_kdf
from privatebin.codec import (
    AData,
    CompressionAlgorithm,
    EncryptionAlgorithm,
    EncryptionMode,
    Spec,
    canonical_json,
)
from privatebin.errors import AuthenticationError, UnsupportedParameterError

logger = logging.getLogger(__name__)

IV_SIZE = 12  # bytes
SALT_SIZE = 8  # bytes
TAG_SIZE = 128  # bits

GCM_STANDARD_NONCE_SIZE = 12
GCM_STANDARD_TAG_SIZE = 16
GCM_MINIMUM_TAG_SIZE = 12
GCM_NONCE_RANGE = (8, 128)


class TruncatedTagAESGCM:
    """AES-GCM con nonce estándar y etiqueta de menos de 16 bytes.

    Expone la misma interfaz `encrypt`/`decrypt` que `AESGCM`: el ciphertext
    lleva la etiqueta concatenada al final.
    """

    def __init__(self, key: bytes, tag_size: int) -> None:
        self._key = key
        self._tag_size = tag_size

    def encrypt(self, nonce: bytes, data: bytes, associated_data: Optional[bytes]) -> bytes:
        encryptor = Cipher(algorithms.AES(self._key), modes.GCM(nonce)).encryptor()
        if associated_data:
            encryptor.authenticate_additional_data(associated_data)
        ciphertext = encryptor.update(data) + encryptor.finalize()
        return ciphertext + encryptor.tag[: self._tag_size]

    def decrypt(self, nonce: bytes, data: bytes, associated_data: Optional[bytes]) -> bytes:
        if len(data) < self._tag_size:
            raise InvalidTag()
        ciphertext, tag = data[: -self._tag_size], data[-self._tag_size :]
        decryptor = Cipher(
            algorithms.AES(self._key),
            modes.GCM(nonce, tag, min_tag_length=self._tag_size),
        ).decryptor()
        if associated_data:
            decryptor.authenticate_additional_data(associated_data)
        return decryptor.update(ciphertext) + decryptor.finalize()


def new_gcm(key: bytes, nonce_size: int, tag_size: int) -> Union[AESGCM, TruncatedTagAESGCM]:
    """Construye el AEAD para un nonce y una etiqueta dados en bytes.

    Args:
        key (bytes): Clave AES de 16, 24 o 32 bytes.
        nonce_size (int): Longitud del IV recibido.
        tag_size (int): Longitud de la etiqueta en bytes.

    Returns:
        AESGCM | TruncatedTagAESGCM: Objeto con `encrypt` y `decrypt`.

    Raises:
        UnsupportedParameterError: Si la combinación no es construible.

    """

    if not GCM_NONCE_RANGE[0] <= nonce_size <= GCM_NONCE_RANGE[1]:
        raise UnsupportedParameterError(f"tamaño de nonce GCM no soportado: {nonce_size} bytes")
    if not GCM_MINIMUM_TAG_SIZE <= tag_size <= GCM_STANDARD_TAG_SIZE:
        raise UnsupportedParameterError(f"tamaño de etiqueta GCM no soportado: {tag_size} bytes")

    if tag_size == GCM_STANDARD_TAG_SIZE:
        return AESGCM(key)
    if nonce_size == GCM_STANDARD_NONCE_SIZE:
        return TruncatedTagAESGCM(key, tag_size)
    raise UnsupportedParameterError(
        f"parámetros GCM no soportados (nonce={nonce_size}, etiqueta={tag_size})"
    )


def check_spec(spec: Spec) -> None:
    """Valida que el `Spec` nombre algoritmos implementados.

    Se invoca justo antes de construir el cifrador, nunca al decodificar.
    """

    if spec.algorithm is not EncryptionAlgorithm.AES:
        raise UnsupportedParameterError(f"algoritmo no soportado: {spec.algorithm.value}")
    if spec.mode is not EncryptionMode.GCM:
        raise UnsupportedParameterError(f"modo no soportado: {spec.mode.value}")
    if spec.compression is CompressionAlgorithm.UNKNOWN:
        raise UnsupportedParameterError(f"compresión no soportada: {spec.compression.value}")
    if spec.tag_size % 8:
        raise UnsupportedParameterError(f"tamaño de etiqueta no múltiplo de 8: {spec.tag_size}")


def new_spec(compress: bool, iterations: Optional[int] = None) -> Spec:
    """Genera un `Spec` nuevo con IV y salt aleatorios."""

    return Spec(
        iv=os.urandom(IV_SIZE),
        salt=os.urandom(SALT_SIZE),
        iterations=crypto_kdf.KDF_ITERATIONS if iterations is None else iterations,
        key_size=crypto_kdf.KEY_SIZE,
        tag_size=TAG_SIZE,
        algorithm=EncryptionAlgorithm.AES,
        mode=EncryptionMode.GCM,
        compression=CompressionAlgorithm.DEFLATE if compress else CompressionAlgorithm.NONE,
    )


def _cipher_for(key: bytes, spec: Spec) -> Union[AESGCM, TruncatedTagAESGCM]:
    check_spec(spec)
    return new_gcm(key, len(spec.iv), spec.tag_size // 8)


def seal(key: bytes, adata: AData, plaintext: bytes) -> bytes:
    """Cifra con AES-GCM usando el `adata` canónico como dato asociado.

    Args:
        key (bytes): Clave derivada con `derive_key`.
        adata (AData): Datos autenticados; su `spec` aporta IV y etiqueta.
        plaintext (bytes): Texto en claro ya comprimido.

    Returns:
        bytes: Ciphertext con la etiqueta al final.

    """

    spec = adata.spec
    aead = _cipher_for(key, spec)
    logger.debug("sellando %d bytes (nonce=%d, etiqueta=%d bits)", len(plaintext), len(spec.iv), spec.tag_size)
    return aead.encrypt(spec.iv, plaintext, canonical_json(adata.to_wire()))


def open_sealed(key: bytes, spec: Spec, associated: Union[AData, Spec], ciphertext: bytes) -> bytes:
    """Descifra y verifica un ciphertext.

    El dato asociado se vuelve a serializar en forma canónica: un `AData`
    para pastes o un `Spec` para comentarios.

    Raises:
        UnsupportedParameterError: Si el `Spec` no es utilizable.
        AuthenticationError: Si la etiqueta no verifica.
    """

    aead = _cipher_for(key, spec)
    try:
        return aead.decrypt(spec.iv, ciphertext, canonical_json(associated.to_wire()))
    except InvalidTag as exc:
        raise AuthenticationError(
            "no se pudo autenticar el contenido: clave o contraseña incorrecta, o datos alterados"
        ) from exc
