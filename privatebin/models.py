# --------------------------------------------------------------
# File: models.py
# Description: Modelos de datos del paste, sus comentarios y los mensajes del servidor.
# --------------------------------------------------------------
"""Modelos Pydantic que encapsulan las estructuras de intercambio con PrivateBin."""

from __future__ import annotations

from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from privatebin.codec import AData

PRIVATEBIN_API_VERSION = 2


class Paste(BaseModel):
    """Contenido en claro de un paste.

    Attributes:
        data (bytes): Texto del paste; vacío si solo hay adjunto.
        attachment (bytes): Contenido binario del adjunto.
        attachment_name (str): Nombre del fichero adjunto.
        mime_type (str): Tipo MIME explícito o el decodificado de la data URL.

    """

    model_config = ConfigDict(frozen=True)

    data: bytes = b""
    attachment: bytes = b""
    attachment_name: str = ""
    mime_type: str = ""


class Comment(BaseModel):
    """Comentario descifrado de una discusión."""

    model_config = ConfigDict(frozen=True)

    comment_id: str
    paste_id: str
    parent_id: str
    nickname: str = ""
    text: str = ""
    icon: str = ""
    created: int = 0


class PasteOptions(BaseModel):
    """Opciones de creación de un paste."""

    expire: str = "1day"
    formatter: str = "plaintext"
    open_discussion: bool = False
    burn_after_reading: bool = False
    compress: bool = True
    password: str = ""


class SealedPaste(BaseModel):
    """Resultado de cifrar un paste: `adata` y ciphertext con la etiqueta al final."""

    adata: AData
    ciphertext: bytes


class CreatePasteRequestMeta(BaseModel):
    expire: str


class CreatePasteRequest(BaseModel):
    v: int = PRIVATEBIN_API_VERSION
    adata: List[Any]
    meta: CreatePasteRequestMeta
    ct: str


class CreatePasteResponse(BaseModel):
    id: str = ""
    status: int
    message: str = ""
    url: str = ""
    deletetoken: str = ""


def _empty_php_array(value: Any) -> Any:
    # PHP serializa un array asociativo vacío como `[]`.
    if isinstance(value, list):
        if value:
            raise ValueError("meta debe ser un objeto JSON")
        return {}
    return value


class ShowPasteRequestMeta(BaseModel):
    created: int = 0
    time_to_live: int = 0


class CommentMeta(BaseModel):
    icon: str = ""
    created: int = 0


class CommentEntry(BaseModel):
    """Comentario tal como lo devuelve el servidor, aún cifrado."""

    id: str
    pasteid: str = ""
    parentid: str = ""
    url: str = ""
    v: int = PRIVATEBIN_API_VERSION
    ct: str
    adata: List[Any]
    meta: CommentMeta = Field(default_factory=CommentMeta)

    @field_validator("meta", mode="before")
    @classmethod
    def accept_php_empty_meta(cls, value: Any) -> Any:
        return _empty_php_array(value)


class ShowPasteResponse(BaseModel):
    """Respuesta de lectura de un paste."""

    model_config = ConfigDict(populate_by_name=True)

    status: int
    message: str = ""
    id: str = ""
    url: str = ""
    v: int = PRIVATEBIN_API_VERSION
    adata: Optional[List[Any]] = None
    meta: ShowPasteRequestMeta = Field(default_factory=ShowPasteRequestMeta)
    ct: str = ""
    comments: List[CommentEntry] = Field(default_factory=list)
    comment_count: int = 0
    comment_offset: int = 0
    context: str = Field(default="", alias="@context")

    @field_validator("meta", mode="before")
    @classmethod
    def accept_php_empty_meta(cls, value: Any) -> Any:
        return _empty_php_array(value)


class CreatePasteResult(BaseModel):
    paste_id: str
    url: str
    delete_token: str


class ShowPasteResult(BaseModel):
    """Paste descifrado junto con sus metadatos y comentarios."""

    paste_id: str
    paste: Paste
    adata: AData
    comments: List[Comment] = Field(default_factory=list)
    created: int = 0
    time_to_live: int = 0


__all__ = [
    "Comment",
    "CommentEntry",
    "CreatePasteRequest",
    "CreatePasteRequestMeta",
    "CreatePasteResponse",
    "CreatePasteResult",
    "Paste",
    "PasteOptions",
    "SealedPaste",
    "ShowPasteRequestMeta",
    "ShowPasteResponse",
    "ShowPasteResult",
]
