# src/scenepreview/ports/preview_fetch.py
from __future__ import annotations

from typing import Protocol, runtime_checkable

URI = str

@runtime_checkable
class PreviewFetcherPort(Protocol):
    """
    Descarga los bytes del preview (quicklook) de un registro.
    Reglas: ante cualquier fallo levanta RetrievalFailure; nunca devuelve bytes vacíos.
    """
    def fetch(self, url: URI) -> bytes: ...

__all__ = ["PreviewFetcherPort", "URI"]
