# --------------------------------------------------------------
# File: conftest.py
# Description: Fixtures compartidas: KDF rápido y servidor PrivateBin en memoria.
# --------------------------------------------------------------

import json
from typing import Any, Dict, List
from urllib.parse import urlsplit

import pytest

from privatebin import crypto_kdf


class FakePrivateBin:
    """Servidor PrivateBin mínimo que cumple la interfaz de `HttpTransport`.

    Guarda los pastes recibidos por POST y los devuelve por GET con el mismo
    formato que la API JSON real.
    """

    def __init__(self) -> None:
        self.pastes: Dict[str, Dict[str, Any]] = {}
        self.comments: Dict[str, List[Dict[str, Any]]] = {}
        self.requests: List[Dict[str, Any]] = []
        self.next_status = 0
        self.meta_as_php_array = False
        self._counter = 0

    def post(self, url: str, body: bytes, timeout=None, cancel=None) -> Dict[str, Any]:
        request = json.loads(body.decode("utf-8"))
        self.requests.append(
            {"method": "POST", "url": url, "body": request, "timeout": timeout, "cancel": cancel}
        )
        if self.next_status != 0:
            return {"status": self.next_status, "message": "Invalid data."}
        self._counter += 1
        paste_id = f"{self._counter:016x}"
        self.pastes[paste_id] = request
        return {
            "status": 0,
            "id": paste_id,
            "url": f"/?{paste_id}",
            "deletetoken": "d" * 64,
        }

    def get(self, url: str, timeout=None, cancel=None) -> Dict[str, Any]:
        self.requests.append({"method": "GET", "url": url, "timeout": timeout, "cancel": cancel})
        paste_id = urlsplit(url).query
        stored = self.pastes.get(paste_id)
        if stored is None:
            return {"status": 1, "message": "Paste does not exist, has expired or has been deleted."}
        comments = self.comments.get(paste_id, [])
        return {
            "status": 0,
            "id": paste_id,
            "url": f"/?{paste_id}",
            "v": stored["v"],
            "adata": stored["adata"],
            "meta": [] if self.meta_as_php_array else {"created": 1707900000, "time_to_live": 86400},
            "ct": stored["ct"],
            "comments": comments,
            "comment_count": len(comments),
            "comment_offset": 0,
            "@context": "?jsonld=paste",
        }


@pytest.fixture
def fast_kdf(monkeypatch):
    """Reduce las iteraciones de PBKDF2 para que las pruebas sean rápidas.

    Args:
        monkeypatch (pytest.MonkeyPatch): Fixture para modificar atributos de módulo.

    Returns:
        int: Iteraciones configuradas durante la prueba.
    """
    monkeypatch.setattr(crypto_kdf, "KDF_ITERATIONS", 1_000)
    return 1_000


@pytest.fixture
def server(fast_kdf) -> FakePrivateBin:
    """Instancia limpia del servidor en memoria para cada prueba."""
    return FakePrivateBin()
