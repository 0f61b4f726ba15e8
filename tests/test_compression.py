# --------------------------------------------------------------
# File: test_compression.py
# Description: Pruebas de la compresión deflate cruda del texto en claro.
# --------------------------------------------------------------

import os
import zlib

import pytest

from privatebin.codec import CompressionAlgorithm
from privatebin.compression import compress, decompress
from privatebin.errors import CodecError, UnsupportedParameterError


def test_none_is_identity():
    assert compress(b"abc", CompressionAlgorithm.NONE) == b"abc"
    assert decompress(b"abc", CompressionAlgorithm.NONE) == b"abc"


@pytest.mark.parametrize("data", [b"", b"hello", b"a" * 10_000, os.urandom(4096)])
def test_deflate_roundtrip(data):
    packed = compress(data, CompressionAlgorithm.DEFLATE)
    assert decompress(packed, CompressionAlgorithm.DEFLATE) == data


def test_deflate_is_raw_stream():
    """El flujo no lleva cabecera zlib: se descomprime con wbits negativo.

    Returns:
        None: Se valida con `zlib` directamente.
    """
    packed = compress(b"hello hello hello", CompressionAlgorithm.DEFLATE)
    assert zlib.decompress(packed, -zlib.MAX_WBITS) == b"hello hello hello"
    with pytest.raises(zlib.error):
        zlib.decompress(packed)


def test_repetitive_data_shrinks():
    assert len(compress(b"a" * 10_000, CompressionAlgorithm.DEFLATE)) < 100


def test_corrupt_stream_raises_codec_error():
    with pytest.raises(CodecError):
        decompress(b"\xff\xff\xff\xff", CompressionAlgorithm.DEFLATE)


def test_truncated_stream_raises_codec_error():
    packed = compress(os.urandom(2048), CompressionAlgorithm.DEFLATE)
    with pytest.raises(CodecError):
        decompress(packed[: len(packed) // 2], CompressionAlgorithm.DEFLATE)


def test_unknown_algorithm_is_unsupported():
    with pytest.raises(UnsupportedParameterError):
        compress(b"x", CompressionAlgorithm.UNKNOWN)
    with pytest.raises(UnsupportedParameterError):
        decompress(b"x", CompressionAlgorithm.UNKNOWN)
