# --------------------------------------------------------------
# File: transport.py
# Description: Transporte HTTP hacia una instancia PrivateBin basado en requests.
# --------------------------------------------------------------
"""Colaborador HTTP de los servicios de paste.

La sesión `requests.Session` la aporta el llamador; este módulo solo fija las
cabeceras del protocolo, la autenticación básica, el proxy y la verificación
TLS, y traduce los fallos de red a `TransportError`.

El `timeout` es un plazo total: cubre la conexión y la descarga completa del
cuerpo, que se lee por fragmentos. Un `threading.Event` del llamador permite
además cancelar la petición en curso.
"""

import json
import logging
import threading
import time
from typing import Any, Dict, List, Mapping, Optional

import requests
from requests.auth import HTTPBasicAuth

from privatebin.config import DEFAULT_USER_AGENT, REQUEST_TIMEOUT, BinConfig
from privatebin.errors import RequestCancelledError, TransportError

logger = logging.getLogger(__name__)

PROTOCOL_HEADERS = {
    "Content-Type": "application/x-www-form-urlencoded",
    "X-Requested-With": "JSONHttpRequest",
}

_CHUNK_SIZE = 8192
_WATCH_INTERVAL = 0.05  # segundos


class HttpTransport:
    """Realiza exactamente una petición por llamada, sin reintentos.

    Args:
        session (Optional[requests.Session]): Sesión (pool de conexiones) del llamador.
        username (str): Usuario de autenticación básica; vacío para no enviarla.
        password (str): Contraseña de autenticación básica.
        headers (Optional[Mapping[str, str]]): Cabeceras adicionales.
        user_agent (str): Valor de `User-Agent`.
        proxy (Optional[str]): URL del proxy HTTP(S).
        verify (bool): Verificar el certificado TLS del servidor.
        timeout (float): Plazo total por defecto en segundos.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        *,
        username: str = "",
        password: str = "",
        headers: Optional[Mapping[str, str]] = None,
        user_agent: str = DEFAULT_USER_AGENT,
        proxy: Optional[str] = None,
        verify: bool = True,
        timeout: float = REQUEST_TIMEOUT,
    ) -> None:
        self.session = session or requests.Session()
        self.auth = HTTPBasicAuth(username, password) if username else None
        self.headers: Dict[str, str] = {"User-Agent": user_agent}
        self.headers.update(headers or {})
        self.headers.update(PROTOCOL_HEADERS)
        self.proxies = {"http": proxy, "https": proxy} if proxy else None
        self.verify = verify
        self.timeout = timeout

    @classmethod
    def from_bin(cls, bin_cfg: BinConfig, session: Optional[requests.Session] = None) -> "HttpTransport":
        """Crea el transporte a partir de una instancia ya resuelta."""

        return cls(
            session,
            username=bin_cfg.auth.username,
            password=bin_cfg.auth.password,
            headers=bin_cfg.extra_header_fields,
            user_agent=bin_cfg.user_agent or DEFAULT_USER_AGENT,
            proxy=bin_cfg.proxy,
            verify=not bin_cfg.insecure_skip_verify,
        )

    def post(
        self,
        url: str,
        body: bytes,
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> Dict[str, Any]:
        return self._request("POST", url, body, timeout, cancel)

    def get(
        self,
        url: str,
        timeout: Optional[float] = None,
        cancel: Optional[threading.Event] = None,
    ) -> Dict[str, Any]:
        return self._request("GET", url, None, timeout, cancel)

    def _request(
        self,
        method: str,
        url: str,
        body: Optional[bytes],
        timeout: Optional[float],
        cancel: Optional[threading.Event],
    ) -> Dict[str, Any]:
        """Ejecuta la petición completa dentro del plazo total.

        Args:
            method (str): Método HTTP.
            url (str): URL destino.
            body (Optional[bytes]): Cuerpo de la petición.
            timeout (Optional[float]): Plazo total en segundos, incluida la
                descarga del cuerpo; por defecto el del transporte.
            cancel (Optional[threading.Event]): Señal del llamador para abortar.

        Returns:
            Dict[str, Any]: Objeto JSON de la respuesta.

        Raises:
            RequestCancelledError: Si vence el plazo o se activa `cancel`.
            TransportError: Si la petición falla o la respuesta no es válida.
        """

        budget = timeout if timeout is not None else self.timeout
        deadline = time.monotonic() + budget
        if _expired(deadline, cancel):
            raise RequestCancelledError(f"{method} {url}: petición cancelada antes de enviarse")

        logger.debug("%s %s", method, url)
        try:
            response = self.session.request(
                method,
                url,
                data=body,
                headers=self.headers,
                auth=self.auth,
                proxies=self.proxies,
                verify=self.verify,
                timeout=budget,
                stream=True,
            )
        except requests.exceptions.Timeout as exc:
            raise RequestCancelledError(f"{method} {url}: se superó el plazo de la petición") from exc
        except requests.exceptions.RequestException as exc:
            raise TransportError(f"{method} {url}: no se pudo ejecutar la petición: {exc}") from exc

        try:
            if response.status_code != 200:
                raise TransportError(
                    f"{method} {url}: el servidor responde con el estado {response.status_code} {response.reason}"
                )
            raw = self._read_body(method, url, response, deadline, cancel)
        finally:
            response.close()

        try:
            payload = json.loads(raw)
        except ValueError as exc:
            raise TransportError(f"{method} {url}: la respuesta no es JSON válido") from exc
        if not isinstance(payload, dict):
            raise TransportError(f"{method} {url}: la respuesta no es un objeto JSON")
        return payload

    def _read_body(
        self,
        method: str,
        url: str,
        response: requests.Response,
        deadline: float,
        cancel: Optional[threading.Event],
    ) -> bytes:
        # El vigilante cierra la respuesta al vencer el plazo, aunque la lectura esté bloqueada.
        done = threading.Event()
        watchdog = threading.Thread(
            target=_watch, args=(response, deadline, cancel, done), daemon=True
        )
        watchdog.start()

        chunks: List[bytes] = []
        try:
            for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                if _expired(deadline, cancel):
                    break
                chunks.append(chunk)
        except (requests.exceptions.RequestException, OSError, ValueError) as exc:
            if _expired(deadline, cancel):
                raise RequestCancelledError(f"{method} {url}: petición cancelada o fuera de plazo") from exc
            raise TransportError(f"{method} {url}: no se pudo leer la respuesta: {exc}") from exc
        finally:
            done.set()

        if _expired(deadline, cancel):
            raise RequestCancelledError(f"{method} {url}: petición cancelada o fuera de plazo")
        return b"".join(chunks)


def _expired(deadline: float, cancel: Optional[threading.Event]) -> bool:
    return time.monotonic() >= deadline or (cancel is not None and cancel.is_set())


def _watch(
    response: requests.Response,
    deadline: float,
    cancel: Optional[threading.Event],
    done: threading.Event,
) -> None:
    while not done.wait(_WATCH_INTERVAL):
        if _expired(deadline, cancel):
            logger.debug("cerrando la respuesta: plazo vencido o petición cancelada")
            response.close()
            return
