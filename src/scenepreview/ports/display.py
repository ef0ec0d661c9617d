# src/scenepreview/ports/display.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol, runtime_checkable

from shapely.geometry.base import BaseGeometry

from ..contracts.geo import RasterImage

@dataclass(frozen=True)
class PreviewDisplayConfig:
    """Modo de visualización de la sesión (reemplaza opciones globales)."""
    on_map: bool = True
    show_aoi: bool = True
    aoi: Optional[BaseGeometry] = None

    @property
    def has_aoi(self) -> bool:
        return self.aoi is not None and not self.aoi.is_empty

@runtime_checkable
class PreviewDisplayPort(Protocol):
    """
    Visualizador del preview.
      - show_on_map(): requiere RasterImage georreferenciado; `aoi` opcional.
      - show_plain(): plot RGB simple, sin georreferencia.
    Devuelve el objeto de figura/mapa que corresponda al backend.
    """
    def show_on_map(self, image: RasterImage, aoi: Optional[BaseGeometry] = None) -> Any: ...
    def show_plain(self, image: RasterImage) -> Any: ...

__all__ = ["PreviewDisplayPort", "PreviewDisplayConfig"]
