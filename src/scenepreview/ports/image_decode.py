# src/scenepreview/ports/image_decode.py
from __future__ import annotations

from typing import Protocol, runtime_checkable
from ..contracts.geo import RasterImage

@runtime_checkable
class ImageDecoderPort(Protocol):
    """
    Decodifica bytes (JPEG/PNG) a RasterImage band-first.
    El resultado no trae extent ni CRS: un formato de imagen genérico no georreferencia.
    """
    def decode(self, payload: bytes) -> RasterImage: ...

__all__ = ["ImageDecoderPort"]
