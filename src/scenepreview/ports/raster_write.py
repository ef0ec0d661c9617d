# src/scenepreview/ports/raster_write.py
from __future__ import annotations

from typing import Protocol, runtime_checkable, Optional
from ..contracts.geo import RasterImage

URI = str

@runtime_checkable
class RasterWriterPort(Protocol):
    """
    Escritor de previews georreferenciados (GeoTIFF).
    """
    def write(self, uri: URI, image: RasterImage, *, compress: Optional[str] = None) -> URI: ...

__all__ = ["RasterWriterPort", "URI"]
