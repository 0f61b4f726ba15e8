# --------------------------------------------------------------
# File: compression.py
# Description: Compresión deflate sin cabeceras aplicada antes de cifrar.
# --------------------------------------------------------------
"""Compresión del texto en claro según `Spec.compression`."""

import zlib

from privatebin.codec import CompressionAlgorithm
from privatebin.errors import CodecError, UnsupportedParameterError

# wbits negativo: flujo deflate crudo, sin cabecera zlib ni gzip.
_RAW_DEFLATE_WBITS = -zlib.MAX_WBITS


def compress(data: bytes, algorithm: CompressionAlgorithm) -> bytes:
    """Comprime con el nivel máximo si el algoritmo es `DEFLATE`."""

    if algorithm is CompressionAlgorithm.NONE:
        return data
    if algorithm is CompressionAlgorithm.DEFLATE:
        compressor = zlib.compressobj(zlib.Z_BEST_COMPRESSION, zlib.DEFLATED, _RAW_DEFLATE_WBITS)
        return compressor.compress(data) + compressor.flush()
    raise UnsupportedParameterError(f"compresión no soportada: {algorithm.value}")


def decompress(data: bytes, algorithm: CompressionAlgorithm) -> bytes:
    """Invierte `compress`; un flujo corrupto es un `CodecError`."""

    if algorithm is CompressionAlgorithm.NONE:
        return data
    if algorithm is CompressionAlgorithm.DEFLATE:
        decompressor = zlib.decompressobj(_RAW_DEFLATE_WBITS)
        try:
            output = decompressor.decompress(data) + decompressor.flush()
        except zlib.error as exc:
            raise CodecError("no se puede descomprimir el contenido") from exc
        if not decompressor.eof:
            raise CodecError("flujo deflate truncado")
        return output
    raise UnsupportedParameterError(f"compresión no soportada: {algorithm.value}")
