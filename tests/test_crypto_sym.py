# --------------------------------------------------------------
# File: test_crypto_sym.py
# Description: Pruebas del cifrado y descifrado simétrico con AES-GCM.
# --------------------------------------------------------------

import os

import pytest
from cryptography.hazmat.primitives.ciphers.aead import AESGCM

from privatebin import crypto_kdf
from privatebin.codec import (
    AData,
    CompressionAlgorithm,
    EncryptionAlgorithm,
    EncryptionMode,
    Spec,
)
from privatebin.crypto_sym import (
    IV_SIZE,
    SALT_SIZE,
    TruncatedTagAESGCM,
    check_spec,
    new_gcm,
    new_spec,
    open_sealed,
    seal,
)
from privatebin.errors import AuthenticationError, UnsupportedParameterError


def _adata(iv_size: int = 12, tag_size: int = 128, **overrides) -> AData:
    spec = Spec(
        iv=os.urandom(iv_size),
        salt=os.urandom(8),
        iterations=1000,
        key_size=256,
        tag_size=tag_size,
        algorithm=overrides.pop("algorithm", EncryptionAlgorithm.AES),
        mode=overrides.pop("mode", EncryptionMode.GCM),
        compression=overrides.pop("compression", CompressionAlgorithm.NONE),
    )
    return AData(spec=spec, **overrides)


def test_seal_roundtrip_ok():
    """Comprueba que un cifrado con AES-GCM pueda revertirse correctamente.

    Returns:
        None: Las aserciones evalúan la igualdad entre claro y descifrado.
    """
    key = os.urandom(32)
    adata = _adata()
    plaintext = os.urandom(128)
    ciphertext = seal(key, adata, plaintext)
    assert len(ciphertext) == len(plaintext) + 16
    assert open_sealed(key, adata.spec, adata, ciphertext) == plaintext


def test_seal_detects_tampering_ciphertext():
    """Verifica que cualquier alteración del ciphertext sea detectada.

    Returns:
        None: La expectativa es un `AuthenticationError` al descifrar.
    """
    key = os.urandom(32)
    adata = _adata()
    ciphertext = seal(key, adata, b"hola mundo")
    tampered = bytes([ciphertext[0] ^ 1]) + ciphertext[1:]
    with pytest.raises(AuthenticationError):
        open_sealed(key, adata.spec, adata, tampered)


def test_seal_detects_tampering_adata():
    """Cambiar una bandera autenticada invalida la etiqueta.

    Returns:
        None: Se espera un `AuthenticationError`.
    """
    key = os.urandom(32)
    adata = _adata()
    ciphertext = seal(key, adata, b"msg")
    altered = adata.model_copy(update={"burn_after_reading": True})
    with pytest.raises(AuthenticationError):
        open_sealed(key, adata.spec, altered, ciphertext)


def test_seal_wrong_key_fails():
    adata = _adata()
    ciphertext = seal(os.urandom(32), adata, b"msg")
    with pytest.raises(AuthenticationError):
        open_sealed(os.urandom(32), adata.spec, adata, ciphertext)


def test_empty_plaintext_is_tag_only():
    key = os.urandom(32)
    adata = _adata()
    ciphertext = seal(key, adata, b"")
    assert len(ciphertext) == 16
    assert open_sealed(key, adata.spec, adata, ciphertext) == b""


@pytest.mark.parametrize("iv_size", [8, 16, 64])
def test_custom_nonce_with_standard_tag(iv_size):
    key = os.urandom(32)
    adata = _adata(iv_size=iv_size)
    ciphertext = seal(key, adata, b"nonce propio")
    assert open_sealed(key, adata.spec, adata, ciphertext) == b"nonce propio"


@pytest.mark.parametrize("tag_bits", [96, 104, 112, 120])
def test_standard_nonce_with_truncated_tag(tag_bits):
    """Un IV de 12 bytes admite etiquetas recortadas de 12 a 15 bytes.

    Args:
        tag_bits (int): Tamaño de etiqueta en bits.

    Returns:
        None: Se comprueba la longitud y el descifrado.
    """
    key = os.urandom(32)
    adata = _adata(tag_size=tag_bits)
    plaintext = b"etiqueta corta"
    ciphertext = seal(key, adata, plaintext)
    assert len(ciphertext) == len(plaintext) + tag_bits // 8
    assert open_sealed(key, adata.spec, adata, ciphertext) == plaintext


def test_truncated_tag_is_prefix_of_full_tag():
    key = os.urandom(32)
    nonce = os.urandom(12)
    full = AESGCM(key).encrypt(nonce, b"abc", b"aad")
    short = TruncatedTagAESGCM(key, 12).encrypt(nonce, b"abc", b"aad")
    assert short == full[: 3 + 12]


def test_truncated_tag_detects_tampering():
    key = os.urandom(32)
    adata = _adata(tag_size=96)
    ciphertext = seal(key, adata, b"msg")
    bad_tag = ciphertext[:-1] + bytes([ciphertext[-1] ^ 1])
    with pytest.raises(AuthenticationError):
        open_sealed(key, adata.spec, adata, bad_tag)


def test_truncated_tag_rejects_short_input():
    key = os.urandom(32)
    adata = _adata(tag_size=96)
    with pytest.raises(AuthenticationError):
        open_sealed(key, adata.spec, adata, b"\x00" * 5)


def test_custom_nonce_and_custom_tag_is_unsupported():
    with pytest.raises(UnsupportedParameterError):
        new_gcm(os.urandom(32), 16, 12)


@pytest.mark.parametrize("nonce_size, tag_size", [(12, 8), (12, 17), (4, 16), (200, 16)])
def test_new_gcm_rejects_out_of_range(nonce_size, tag_size):
    with pytest.raises(UnsupportedParameterError):
        new_gcm(os.urandom(32), nonce_size, tag_size)


def test_new_gcm_standard_uses_aesgcm():
    assert isinstance(new_gcm(os.urandom(32), 12, 16), AESGCM)
    assert isinstance(new_gcm(os.urandom(32), 12, 13), TruncatedTagAESGCM)


@pytest.mark.parametrize(
    "overrides",
    [
        {"algorithm": EncryptionAlgorithm.UNKNOWN},
        {"mode": EncryptionMode.UNKNOWN},
        {"compression": CompressionAlgorithm.UNKNOWN},
    ],
)
def test_check_spec_rejects_unknown_values(overrides):
    with pytest.raises(UnsupportedParameterError):
        check_spec(_adata(**overrides).spec)


def test_check_spec_rejects_partial_byte_tag():
    with pytest.raises(UnsupportedParameterError):
        check_spec(_adata(tag_size=100).spec)


def test_unknown_algorithm_fails_before_decrypting():
    """Un `Spec` con "rsa"/"cbc" decodificado de forma permisiva falla al usarse.

    Returns:
        None: Se espera `UnsupportedParameterError`, no `AuthenticationError`.
    """
    spec = Spec.from_wire(["aXY=", "c2FsdA==", 1000, 256, 128, "rsa", "cbc", "none"])
    with pytest.raises(UnsupportedParameterError):
        open_sealed(os.urandom(32), spec, spec, b"\x00" * 32)


def test_new_spec_defaults():
    spec = new_spec(compress=True)
    assert len(spec.iv) == IV_SIZE
    assert len(spec.salt) == SALT_SIZE
    assert spec.iterations == 600_000
    assert spec.key_size == 256
    assert spec.tag_size == 128
    assert spec.algorithm is EncryptionAlgorithm.AES
    assert spec.mode is EncryptionMode.GCM
    assert spec.compression is CompressionAlgorithm.DEFLATE
    assert new_spec(compress=False).compression is CompressionAlgorithm.NONE


def test_new_spec_follows_kdf_setting(fast_kdf):
    assert new_spec(compress=False).iterations == crypto_kdf.KDF_ITERATIONS == fast_kdf
    assert new_spec(compress=False, iterations=5).iterations == 5


def test_new_spec_nonce_uniqueness():
    """Evalúa que los IV aleatorios generados no se repitan.

    Returns:
        None: Las aserciones verifican la unicidad dentro del muestreo.
    """
    nonces = {new_spec(compress=False).iv for _ in range(200)}
    assert len(nonces) == 200


def test_new_spec_keeps_explicit_zero_iterations():
    assert new_spec(compress=False, iterations=0).iterations == 0
