# --------------------------------------------------------------
# File: content.py
# Description: Serialización del cuerpo en claro de pastes y comentarios.
# --------------------------------------------------------------
"""Construye y analiza el JSON `{paste, attachment, attachment_name}`.

El adjunto viaja como data URL RFC 2397 (`data:<mime>;base64,<datos>`).
"""

from __future__ import annotations

import json
import mimetypes
from typing import Any, Dict, Mapping, Tuple

from privatebin.codec import canonical_json, decode64, encode64
from privatebin.errors import (
    CodecError,
    DataURLSegmentError,
    InvalidAttachmentPayloadError,
    MalformedDataURLError,
    MissingBase64MarkerError,
)
from privatebin.models import Paste

DEFAULT_MIME_TYPE = "application/octet-stream"
_DATA_SCHEME = "data:"
_BASE64_MARKER = ";base64"


def resolve_mime_type(paste: Paste) -> str:
    """Resuelve el MIME: explícito, por extensión del nombre o genérico."""

    if paste.mime_type:
        return paste.mime_type
    if paste.attachment_name:
        guessed, _ = mimetypes.guess_type(paste.attachment_name, strict=False)
        if guessed:
            return guessed
    return DEFAULT_MIME_TYPE


def build_data_url(data: bytes, mime_type: str) -> str:
    return f"{_DATA_SCHEME}{mime_type}{_BASE64_MARKER},{encode64(data)}"


def parse_data_url(value: str) -> Tuple[str, bytes]:
    """Separa una data URL en tipo MIME y contenido.

    Args:
        value (str): Data URL recibida en el campo `attachment`.

    Returns:
        Tuple[str, bytes]: Tipo MIME (``application/octet-stream`` si está vacío)
        y bytes del adjunto.

    Raises:
        MalformedDataURLError: Si no es una cadena con esquema `data:`.
        DataURLSegmentError: Si no hay exactamente una coma.
        MissingBase64MarkerError: Si falta `;base64`.
        InvalidAttachmentPayloadError: Si el contenido no es base64.
    """

    if not isinstance(value, str) or not value.lower().startswith(_DATA_SCHEME):
        raise MalformedDataURLError("adjunto inválido: no es una data URL")

    parts = value[len(_DATA_SCHEME):].split(",")
    if len(parts) != 2:
        raise DataURLSegmentError("adjunto inválido: formato de data URL incorrecto")

    header, payload = parts
    if not header.endswith(_BASE64_MARKER):
        raise MissingBase64MarkerError("adjunto inválido: falta la codificación base64")

    mime_type = header[: -len(_BASE64_MARKER)] or DEFAULT_MIME_TYPE
    try:
        data = decode64(payload)
    except CodecError as exc:
        raise InvalidAttachmentPayloadError(
            "adjunto inválido: no se puede decodificar el base64"
        ) from exc
    return mime_type, data


def encode_paste(paste: Paste) -> Dict[str, str]:
    """Convierte un `Paste` en el diccionario que se cifra.

    Solo se incluyen las claves con contenido. El texto se transmite como
    cadena JSON: los bytes que no son UTF-8 válido se sustituyen por U+FFFD.
    """

    output: Dict[str, str] = {}
    if paste.attachment:
        if paste.attachment_name:
            output["attachment_name"] = paste.attachment_name
        output["attachment"] = build_data_url(paste.attachment, resolve_mime_type(paste))
    if paste.data:
        output["paste"] = paste.data.decode("utf-8", errors="replace")
    return output


def decode_paste(payload: Mapping[str, Any]) -> Paste:
    """Reconstruye un `Paste` desde el diccionario descifrado."""

    if not isinstance(payload, Mapping):
        raise CodecError("contenido del paste: se esperaba un objeto JSON")
    text = payload.get("paste", "")
    name = payload.get("attachment_name", "")
    if not isinstance(text, str) or not isinstance(name, str):
        raise CodecError("contenido del paste: los campos deben ser cadenas")

    attachment = b""
    mime_type = ""
    if "attachment" in payload:
        mime_type, attachment = parse_data_url(payload["attachment"])

    return Paste(
        data=text.encode("utf-8"),
        attachment=attachment,
        attachment_name=name,
        mime_type=mime_type,
    )


def paste_to_bytes(paste: Paste) -> bytes:
    return canonical_json(encode_paste(paste))


def _load_json(raw: bytes, what: str) -> Any:
    try:
        return json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise CodecError(f"{what}: el texto descifrado no es JSON válido") from exc


def paste_from_bytes(raw: bytes) -> Paste:
    return decode_paste(_load_json(raw, "contenido del paste"))


def decode_comment_body(raw: bytes) -> Tuple[str, str]:
    """Devuelve `(nickname, comment)` del cuerpo descifrado de un comentario."""

    body = _load_json(raw, "comentario")
    if not isinstance(body, Mapping):
        raise CodecError("comentario: se esperaba un objeto JSON")
    nickname = body.get("nickname", "")
    text = body.get("comment", "")
    if not isinstance(nickname, str) or not isinstance(text, str):
        raise CodecError("comentario: los campos deben ser cadenas")
    return nickname, text
