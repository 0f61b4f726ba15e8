# --------------------------------------------------------------
# File: services.py
# Description: Servicios de creación y lectura de pastes cifrados extremo a extremo.
# --------------------------------------------------------------
"""Orquestación de `create_paste` y `show_paste` sobre el núcleo criptográfico."""

import logging
import threading
from typing import List, Optional

from pydantic import ValidationError

from api.transport import HttpTransport
from privatebin.codec import AData, Spec, decode64, encode64
from privatebin.compression import compress, decompress
from privatebin.content import decode_comment_body, paste_from_bytes, paste_to_bytes
from privatebin.crypto_kdf import derive_key
from privatebin.crypto_sym import new_spec, open_sealed, seal
from privatebin.errors import CodecError, PrivateBinError, TransportError
from privatebin.keys import build_paste_url, decode_fragment, generate_master_key, split_paste_url
from privatebin.models import (
    Comment,
    CommentEntry,
    CreatePasteRequest,
    CreatePasteRequestMeta,
    CreatePasteResponse,
    CreatePasteResult,
    Paste,
    PasteOptions,
    SealedPaste,
    ShowPasteResponse,
    ShowPasteResult,
)

logger = logging.getLogger(__name__)


def encrypt_paste(master_key: bytes, paste: Paste, options: PasteOptions) -> SealedPaste:
    """Cifra un paste sin realizar ninguna petición.

    Args:
        master_key (bytes): Clave maestra del paste.
        paste (Paste): Contenido en claro.
        options (PasteOptions): Formateador, banderas, compresión y contraseña.

    Returns:
        SealedPaste: `adata` a enviar y ciphertext con etiqueta.

    """

    spec = new_spec(options.compress)
    adata = AData(
        spec=spec,
        formatter=options.formatter,
        open_discussion=options.open_discussion,
        burn_after_reading=options.burn_after_reading,
    )
    plaintext = compress(paste_to_bytes(paste), spec.compression)
    key = derive_key(master_key, options.password, spec.salt, iterations=spec.iterations, key_size=spec.key_size)
    return SealedPaste(adata=adata, ciphertext=seal(key, adata, plaintext))


def _open(master_key: bytes, password: str, spec: Spec, associated, ct: str) -> bytes:
    ciphertext = decode64(ct)
    key = derive_key(master_key, password, spec.salt, iterations=spec.iterations, key_size=spec.key_size)
    return decompress(open_sealed(key, spec, associated, ciphertext), spec.compression)


def decrypt_paste(master_key: bytes, adata: AData, ct: str, password: str = "") -> Paste:
    """Descifra el ciphertext de un paste con los parámetros de su `adata`."""

    return paste_from_bytes(_open(master_key, password, adata.spec, adata, ct))


def decrypt_comment(master_key: bytes, entry: CommentEntry, password: str = "") -> Comment:
    """Descifra un comentario con su propio `Spec`."""

    spec = Spec.from_wire(entry.adata)
    nickname, text = decode_comment_body(_open(master_key, password, spec, spec, entry.ct))
    return Comment(
        comment_id=entry.id,
        paste_id=entry.pasteid,
        parent_id=entry.parentid,
        nickname=nickname,
        text=text,
        icon=entry.meta.icon,
        created=entry.meta.created,
    )


def create_paste(
    endpoint: str,
    paste: Paste,
    options: PasteOptions,
    transport: HttpTransport,
    *,
    timeout: Optional[float] = None,
    cancel: Optional[threading.Event] = None,
) -> CreatePasteResult:
    """Cifra y publica un paste.

    Args:
        endpoint (str): URL de la instancia PrivateBin.
        paste (Paste): Texto y/o adjunto a publicar.
        options (PasteOptions): Opciones de creación.
        transport (HttpTransport): Colaborador HTTP.
        timeout (Optional[float]): Plazo total de la petición en segundos.
        cancel (Optional[threading.Event]): Señal para abortar la petición en curso.

    Returns:
        CreatePasteResult: Identificador, URL con la clave en el fragmento y
        token de borrado.

    Raises:
        TransportError: Si la petición falla o el servidor devuelve un estado distinto de cero.
        RequestCancelledError: Si vence el plazo o se activa `cancel`.

    """

    master_key = generate_master_key()
    try:
        sealed = encrypt_paste(master_key, paste, options)
    except PrivateBinError as exc:
        exc.add_note("create_paste: cifrado")
        raise

    request = CreatePasteRequest(
        adata=sealed.adata.to_wire(),
        meta=CreatePasteRequestMeta(expire=options.expire),
        ct=encode64(sealed.ciphertext),
    )
    body = request.model_dump_json().encode("utf-8")
    payload = transport.post(endpoint, body, timeout=timeout, cancel=cancel)

    try:
        response = CreatePasteResponse.model_validate(payload)
    except ValidationError as exc:
        raise TransportError(f"create_paste: respuesta inesperada del servidor: {exc}") from exc
    if response.status != 0:
        raise TransportError(
            f"create_paste: el servidor rechazó el paste: {response.message}",
            server_message=response.message,
        )

    url = build_paste_url(endpoint, response.url, master_key, options.burn_after_reading)
    logger.info("paste %s creado", response.id)
    return CreatePasteResult(paste_id=response.id, url=url, delete_token=response.deletetoken)


def show_paste(
    paste_url: str,
    transport: HttpTransport,
    *,
    password: str = "",
    confirm_burn: bool = False,
    timeout: Optional[float] = None,
    cancel: Optional[threading.Event] = None,
) -> ShowPasteResult:
    """Descarga y descifra un paste y sus comentarios.

    Args:
        paste_url (str): URL completa, con la clave en el fragmento.
        transport (HttpTransport): Colaborador HTTP.
        password (str): Contraseña del paste, si la tiene.
        confirm_burn (bool): Confirma la lectura de un paste que se autodestruye.
        timeout (Optional[float]): Plazo total de la petición en segundos.
        cancel (Optional[threading.Event]): Señal para abortar la petición en curso.

    Returns:
        ShowPasteResult: Paste descifrado, su `adata` y los comentarios.

    Raises:
        PolicyError: Si el paste se autodestruye y falta `confirm_burn`.
        AuthenticationError: Si la contraseña o la clave no son correctas.
        TransportError: Si la petición falla o el servidor devuelve un error.
        RequestCancelledError: Si vence el plazo o se activa `cancel`.

    """

    request_url, paste_id, fragment = split_paste_url(paste_url)
    master_key, _ = decode_fragment(fragment, confirm_burn=confirm_burn)

    payload = transport.get(request_url, timeout=timeout, cancel=cancel)
    try:
        response = ShowPasteResponse.model_validate(payload)
    except ValidationError as exc:
        raise TransportError(f"show_paste: respuesta inesperada del servidor: {exc}") from exc
    if response.status != 0:
        raise TransportError(
            f"show_paste: el servidor no devolvió el paste: {response.message}",
            server_message=response.message,
        )
    if response.adata is None:
        raise CodecError("show_paste: la respuesta no contiene adata")

    try:
        adata = AData.from_wire(response.adata)
        paste = decrypt_paste(master_key, adata, response.ct, password)
    except PrivateBinError as exc:
        exc.add_note("show_paste: descifrado del paste")
        raise

    comments: List[Comment] = []
    for entry in response.comments:
        try:
            comments.append(decrypt_comment(master_key, entry, password))
        except PrivateBinError as exc:
            exc.add_note(f"show_paste: descifrado del comentario {entry.id}")
            raise

    logger.info("paste %s leído con %d comentarios", response.id or paste_id, len(comments))
    return ShowPasteResult(
        paste_id=response.id or paste_id,
        paste=paste,
        adata=adata,
        comments=comments,
        created=response.meta.created,
        time_to_live=response.meta.time_to_live,
    )
