# --------------------------------------------------------------
# File: errors.py
# Description: Jerarquía de excepciones del cliente PrivateBin.
# --------------------------------------------------------------
"""Excepciones que distinguen fallos de formato, criptografía, red y política."""


class PrivateBinError(Exception):
    """Clase base de todos los errores del cliente."""


class CodecError(PrivateBinError, ValueError):
    """Estructura de cable malformada (longitud, tipo o base64 inválidos)."""


class AttachmentError(CodecError):
    """El adjunto no es una data URL válida."""


class MalformedDataURLError(AttachmentError):
    """La cadena no utiliza el esquema `data:`."""


class DataURLSegmentError(AttachmentError):
    """La data URL no contiene exactamente un par separado por coma."""


class MissingBase64MarkerError(AttachmentError):
    """Falta el marcador `;base64` antes de la coma."""


class InvalidAttachmentPayloadError(AttachmentError):
    """El contenido del adjunto no es base64 válido."""


class UnsupportedParameterError(PrivateBinError):
    """El `Spec` pide un algoritmo, modo, compresión o tamaño no soportado."""


class AuthenticationError(PrivateBinError):
    """La etiqueta GCM no verifica: manipulación, clave o contraseña incorrecta."""


class TransportError(PrivateBinError):
    """Fallo HTTP o estado de aplicación distinto de cero."""

    def __init__(self, message: str, *, server_message: str | None = None) -> None:
        super().__init__(message)
        self.server_message = server_message


class RequestCancelledError(TransportError):
    """La petición superó el plazo indicado por el llamador."""


class PolicyError(PrivateBinError):
    """Operación rechazada por política (p. ej. lectura de un paste que se autodestruye)."""


class ConfigError(PrivateBinError):
    """Configuración ausente, corrupta o incompleta."""
