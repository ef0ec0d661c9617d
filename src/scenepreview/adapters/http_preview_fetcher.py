## `src/scenepreview/adapters/http_preview_fetcher.py`
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional

import requests
from requests.auth import HTTPBasicAuth

from ..contracts.errors import RetrievalFailure
from ..ports.preview_fetch import PreviewFetcherPort

logger = logging.getLogger(__name__)


@dataclass
class HttpPreviewFetcher(PreviewFetcherPort):
    """Adapter HTTP (requests) para descargar el quicklook de un registro.

    Si hay `username`, usa autenticación básica (los hubs de datos la exigen
    también para los iconos). No reintenta: eso lo decide el llamador.
    """
    username: Optional[str] = None
    password: Optional[str] = None
    timeout_s: float = 30.0
    session: requests.Session = field(default_factory=requests.Session)

    def _auth(self) -> Optional[HTTPBasicAuth]:
        if not self.username:
            return None
        return HTTPBasicAuth(self.username, self.password or "")

    def fetch(self, url: str) -> bytes:
        logger.info("Descargando preview: %s", url)
        try:
            resp = self.session.get(url, auth=self._auth(), timeout=self.timeout_s)
        except requests.RequestException as e:
            raise RetrievalFailure(f"Fallo de conexión al descargar preview: {url}", detail=str(e)) from e
        if not resp.ok:
            raise RetrievalFailure(
                f"HTTP {resp.status_code} al descargar preview: {url}",
                detail=resp.reason,
            )
        payload = resp.content
        if not payload:
            raise RetrievalFailure(f"Respuesta vacía al descargar preview: {url}")
        logger.debug("Preview descargado: %d bytes", len(payload))
        return payload
