## `src/scenepreview/adapters/matplotlib_display.py`

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import numpy as np
import matplotlib.pyplot as plt
import shapely
from matplotlib.figure import Figure
from shapely.geometry.base import BaseGeometry

from ..contracts.geo import RasterImage
from ..ports.display import PreviewDisplayPort

logger = logging.getLogger(__name__)


def _display_array(image: RasterImage) -> np.ndarray:
    """(h, w[, 3]) listo para imshow; solo escala para pintar, no toca el raster."""
    arr = image.to_hwc()
    if arr.shape[-1] == 1:
        arr = arr[..., 0]
    elif arr.shape[-1] > 3:
        arr = arr[..., :3]
    if arr.dtype == np.uint8:
        return arr
    arr = arr.astype(np.float32)
    vmax = float(np.nanmax(arr)) if arr.size else 0.0
    return arr / vmax if vmax > 0 else arr


def _draw_geometry(ax, geom: BaseGeometry, **style) -> None:
    for part in getattr(geom, "geoms", [geom]):
        if hasattr(part, "exterior"):
            xs, ys = part.exterior.xy
        else:
            xy = shapely.get_coordinates(part)
            xs, ys = xy[:, 0], xy[:, 1]
        ax.plot(xs, ys, **style)


@dataclass(frozen=True)
class MatplotlibPreviewDisplay(PreviewDisplayPort):
    """Visualizador matplotlib.

    - `out_path`: si se entrega, guarda la figura (PNG) ahí.
    - `show`: si True, llama a `plt.show()` (bloqueante en backends interactivos).
      Si False, la figura se cierra en pyplot tras guardarla (sigue siendo devuelta).
    """
    out_path: Optional[Path] = None
    show: bool = True
    figsize: Tuple[float, float] = (8.0, 8.0)
    aoi_color: str = "#FF3B30"

    def _finish(self, fig: Figure) -> Figure:
        if self.out_path is not None:
            out = Path(self.out_path)
            out.parent.mkdir(parents=True, exist_ok=True)
            fig.savefig(out, dpi=150, bbox_inches="tight")
            logger.info("Figura guardada: %s", out)
        if self.show:
            plt.show()
        else:
            # sin ventana: libera la figura de pyplot (lotes con preview_many)
            plt.close(fig)
        return fig

    def show_on_map(self, image: RasterImage, aoi: Optional[BaseGeometry] = None) -> Figure:
        if not image.is_georeferenced:
            raise ValueError("show_on_map requiere un RasterImage con extent y CRS")
        ext = image.extent
        fig, ax = plt.subplots(figsize=self.figsize)
        cmap = "gray" if image.count == 1 else None
        # extent de matplotlib: (left, right, bottom, top)
        ax.imshow(_display_array(image), extent=ext.as_tuple(), origin="upper", cmap=cmap)
        if aoi is not None:
            _draw_geometry(ax, aoi, color=self.aoi_color, linewidth=1.5)
        crs_txt = image.crs.to_wkt() if image.crs.epsg is not None else "CRS"
        ax.set_xlabel(f"x [{crs_txt}]")
        ax.set_ylabel(f"y [{crs_txt}]")
        return self._finish(fig)

    def show_plain(self, image: RasterImage) -> Figure:
        fig, ax = plt.subplots(figsize=self.figsize)
        cmap = "gray" if image.count == 1 else None
        ax.imshow(_display_array(image), cmap=cmap)
        ax.set_axis_off()
        return self._finish(fig)
