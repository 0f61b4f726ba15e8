# --------------------------------------------------------------
# File: codec.py
# Description: Codificación posicional de `Spec` y `AData` del protocolo PrivateBin v2.
# --------------------------------------------------------------
"""Capa de codificación de los parámetros de cifrado que viajan en `adata`.

El protocolo serializa los parámetros como arrays JSON de posición fija:

    Spec  = [iv, salt, iterations, key_size, tag_size, algorithm, mode, compression]
    AData = [Spec, formatter, open_discussion, burn_after_reading]

La decodificación es permisiva con los valores de enumeración desconocidos
(se mapean a ``UNKNOWN``) pero estricta con la forma del JSON.
"""

from __future__ import annotations

import base64
import binascii
import json
from enum import Enum
from typing import Any, List

from pydantic import BaseModel, ConfigDict

from privatebin.errors import CodecError

SPEC_LENGTH = 8
ADATA_LENGTH = 4


class _WireEnum(str, Enum):
    """Enumeración con etiqueta de cable y valor centinela ``UNKNOWN``."""

    @classmethod
    def from_wire(cls, value: Any):
        """Decodifica la etiqueta; las cadenas no reconocidas devuelven ``UNKNOWN``."""

        if not isinstance(value, str):
            raise CodecError(f"{cls.__name__}: se esperaba una cadena, recibido {value!r}")
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN

    def to_wire(self) -> str:
        return self.value


class EncryptionAlgorithm(_WireEnum):
    UNKNOWN = "unknown"
    AES = "aes"


class EncryptionMode(_WireEnum):
    UNKNOWN = "unknown"
    GCM = "gcm"


class CompressionAlgorithm(_WireEnum):
    UNKNOWN = "unknown"
    NONE = "none"
    # La etiqueta histórica es "zlib" aunque el flujo es deflate sin cabeceras.
    DEFLATE = "zlib"


def btoi(value: bool) -> int:
    """Convierte un booleano al entero 0/1 que espera el cliente de referencia."""

    return 1 if value else 0


def itob(value: int) -> bool:
    """Cualquier entero distinto de cero es verdadero."""

    return value != 0


def encode64(data: bytes, padded: bool = True) -> str:
    """Codifica en base64 estándar, con relleno salvo que `padded` sea falso."""

    encoded = base64.b64encode(data).decode("ascii")
    return encoded if padded else encoded.rstrip("=")


def is_padded64(*values: str) -> bool:
    """Indica si las cadenas base64 recibidas usan la forma con relleno.

    Si ninguna lleva `=` y todas tienen longitud múltiplo de 4 las dos formas
    coinciden y se devuelve `True`.
    """

    if any("=" in value for value in values):
        return True
    return all(len(value) % 4 == 0 for value in values)


def decode64(value: str) -> bytes:
    """Decodifica base64 estándar con o sin relleno.

    Si la longitud es múltiplo de 4 se exige la forma con relleno; en otro
    caso se interpreta como base64 sin relleno y no se admite ningún ``=``.

    Args:
        value (str): Cadena base64 recibida del servidor.

    Returns:
        bytes: Datos decodificados.

    Raises:
        CodecError: Si la cadena no es base64 válido.
    """

    if not isinstance(value, str):
        raise CodecError(f"base64: se esperaba una cadena, recibido {value!r}")
    if len(value) % 4 == 0:
        candidate = value
    else:
        if "=" in value or len(value) % 4 == 1:
            raise CodecError(f"base64 sin relleno inválido: {value!r}")
        candidate = value + "=" * (-len(value) % 4)
    try:
        return base64.b64decode(candidate.encode("ascii"), validate=True)
    except (binascii.Error, UnicodeEncodeError) as exc:
        raise CodecError(f"base64 inválido: {value!r}") from exc


def canonical_json(value: Any) -> bytes:
    """Serializa JSON compacto; es la única forma usada como dato asociado."""

    return json.dumps(value, separators=(",", ":"), ensure_ascii=False).encode("utf-8")


def _expect_array(value: Any, length: int, name: str) -> List[Any]:
    if not isinstance(value, list) or len(value) != length:
        raise CodecError(f"{name}: se esperaba un array de {length} elementos, recibido {value!r}")
    return value


def _expect_int(value: Any, name: str) -> int:
    # bool es subclase de int en Python, pero en el cable no es un número.
    if isinstance(value, bool) or not isinstance(value, int):
        raise CodecError(f"{name}: se esperaba un entero, recibido {value!r}")
    return value


class Spec(BaseModel):
    """Parámetros de cifrado de un paste o comentario.

    Attributes:
        iv (bytes): Nonce GCM.
        salt (bytes): Salt de PBKDF2.
        iterations (int): Iteraciones de PBKDF2.
        key_size (int): Tamaño de clave en bits.
        tag_size (int): Tamaño de etiqueta en bits.
        algorithm (EncryptionAlgorithm): Algoritmo de bloque.
        mode (EncryptionMode): Modo de operación.
        compression (CompressionAlgorithm): Compresión aplicada al texto en claro.
        padded (bool): Forma base64 de `iv` y `salt` en el cable, tal como se
            recibió. No interviene en la igualdad.

    """

    model_config = ConfigDict(frozen=True)

    iv: bytes
    salt: bytes
    iterations: int
    key_size: int
    tag_size: int
    algorithm: EncryptionAlgorithm = EncryptionAlgorithm.AES
    mode: EncryptionMode = EncryptionMode.GCM
    compression: CompressionAlgorithm = CompressionAlgorithm.NONE
    padded: bool = True

    def _identity(self) -> tuple:
        return tuple(getattr(self, name) for name in type(self).model_fields if name != "padded")

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Spec):
            return NotImplemented
        return self._identity() == other._identity()

    def __hash__(self) -> int:
        return hash(self._identity())

    def to_wire(self) -> List[Any]:
        return [
            encode64(self.iv, self.padded),
            encode64(self.salt, self.padded),
            self.iterations,
            self.key_size,
            self.tag_size,
            self.algorithm.to_wire(),
            self.mode.to_wire(),
            self.compression.to_wire(),
        ]

    @classmethod
    def from_wire(cls, value: Any) -> "Spec":
        """Reconstruye un `Spec` desde su array de 8 posiciones."""

        items = _expect_array(value, SPEC_LENGTH, "spec")
        return cls(
            iv=decode64(items[0]),
            salt=decode64(items[1]),
            iterations=_expect_int(items[2], "spec.iterations"),
            key_size=_expect_int(items[3], "spec.key_size"),
            tag_size=_expect_int(items[4], "spec.tag_size"),
            algorithm=EncryptionAlgorithm.from_wire(items[5]),
            mode=EncryptionMode.from_wire(items[6]),
            compression=CompressionAlgorithm.from_wire(items[7]),
            padded=is_padded64(items[0], items[1]),
        )


class AData(BaseModel):
    """Datos autenticados adicionales de un paste."""

    model_config = ConfigDict(frozen=True)

    spec: Spec
    formatter: str = "plaintext"
    open_discussion: bool = False
    burn_after_reading: bool = False

    def to_wire(self) -> List[Any]:
        return [
            self.spec.to_wire(),
            self.formatter,
            btoi(self.open_discussion),
            btoi(self.burn_after_reading),
        ]

    @classmethod
    def from_wire(cls, value: Any) -> "AData":
        """Reconstruye un `AData` desde su array de 4 posiciones."""

        items = _expect_array(value, ADATA_LENGTH, "adata")
        if not isinstance(items[1], str):
            raise CodecError(f"adata.formatter: se esperaba una cadena, recibido {items[1]!r}")
        return cls(
            spec=Spec.from_wire(items[0]),
            formatter=items[1],
            open_discussion=itob(_expect_int(items[2], "adata.open_discussion")),
            burn_after_reading=itob(_expect_int(items[3], "adata.burn_after_reading")),
        )
