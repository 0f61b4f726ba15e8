# --------------------------------------------------------------
# File: keys.py
# Description: Clave maestra del paste y su transporte en el fragmento de la URL.
# --------------------------------------------------------------
"""Intercambio de la clave maestra mediante el fragmento (`#...`) de la URL.

El fragmento nunca llega al servidor. Un ``-`` inicial marca un paste que se
destruye tras la primera lectura.
"""

import os
from typing import Tuple
from urllib.parse import urlsplit, urlunsplit

import base58

from privatebin.errors import CodecError, PolicyError

MASTER_KEY_SIZE = 32
BURN_MARKER = "-"


def generate_master_key() -> bytes:
    """Genera 32 bytes aleatorios criptográficamente seguros."""

    return os.urandom(MASTER_KEY_SIZE)


def encode_fragment(master_key: bytes, burn_after_reading: bool = False) -> str:
    """Codifica la clave en base58 y antepone el marcador de autodestrucción."""

    fragment = base58.b58encode(master_key).decode("ascii")
    return BURN_MARKER + fragment if burn_after_reading else fragment


def decode_fragment(fragment: str, confirm_burn: bool = False) -> Tuple[bytes, bool]:
    """Extrae la clave maestra del fragmento.

    Args:
        fragment (str): Fragmento de la URL sin el ``#``.
        confirm_burn (bool): Confirmación explícita para leer un paste que se
            destruye al leerse.

    Returns:
        Tuple[bytes, bool]: Clave maestra e indicador de autodestrucción.

    Raises:
        PolicyError: Si el paste se autodestruye y no hay confirmación.
        CodecError: Si el fragmento está vacío, no es base58 o la clave no
            tiene `MASTER_KEY_SIZE` bytes.
    """

    burn = fragment.startswith(BURN_MARKER)
    if burn:
        if not confirm_burn:
            raise PolicyError(
                "el paste se destruirá al leerlo; se requiere confirmación explícita"
            )
        fragment = fragment[len(BURN_MARKER):]

    if not fragment:
        raise CodecError("la URL no contiene la clave del paste en el fragmento")
    try:
        master_key = base58.b58decode(fragment)
    except ValueError as exc:
        raise CodecError("la clave del fragmento no es base58 válido") from exc
    if len(master_key) != MASTER_KEY_SIZE:
        raise CodecError(
            f"la clave del fragmento debe tener {MASTER_KEY_SIZE} bytes, tiene {len(master_key)}"
        )
    return master_key, burn


def build_paste_url(endpoint: str, response_url: str, master_key: bytes, burn_after_reading: bool) -> str:
    """Compone la URL final del paste.

    Esquema, host y ruta provienen del endpoint configurado; la query (el
    identificador del paste) de la URL devuelta por el servidor.
    """

    base = urlsplit(endpoint)
    created = urlsplit(response_url)
    return urlunsplit(
        (
            base.scheme,
            base.netloc,
            base.path,
            created.query,
            encode_fragment(master_key, burn_after_reading),
        )
    )


def split_paste_url(paste_url: str) -> Tuple[str, str, str]:
    """Separa una URL de paste en `(url_sin_fragmento, id_del_paste, fragmento)`."""

    parts = urlsplit(paste_url)
    if not parts.scheme or not parts.netloc:
        raise CodecError(f"URL de paste inválida: {paste_url!r}")
    paste_id = parts.query
    if paste_id.startswith("pasteid="):
        paste_id = paste_id[len("pasteid="):]
    if not paste_id:
        raise CodecError("la URL no contiene el identificador del paste")
    request_url = urlunsplit((parts.scheme, parts.netloc, parts.path, parts.query, ""))
    return request_url, paste_id, parts.fragment
