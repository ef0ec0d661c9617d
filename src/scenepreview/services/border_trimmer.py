# src/scenepreview/services/border_trimmer.py
from __future__ import annotations

"""
Recorte del relleno no-data (negro) de un thumbnail.

El proveedor rellena con ceros hasta una relación de aspecto fija. Se conserva
el rectángulo mínimo que contiene todos los píxeles con algún valor != nodata
en alguna banda. No resamplea ni altera valores: solo decide qué píxeles quedan.
"""

import logging
from dataclasses import dataclass
from typing import Tuple

import numpy as np

from ..contracts.errors import EmptyImageError
from ..contracts.geo import RasterImage

logger = logging.getLogger(__name__)

# (row_min, row_max, col_min, col_max), inclusivos
Window = Tuple[int, int, int, int]


@dataclass(frozen=True)
class BorderTrimmer:
    nodata: float = 0

    def nodata_mask(self, image: RasterImage) -> np.ndarray:
        """True donde el píxel es nodata en TODAS las bandas."""
        return np.all(image.data == self.nodata, axis=0)

    def window(self, image: RasterImage) -> Window:
        mask = self.nodata_mask(image)
        rows, cols = np.nonzero(~mask)
        if rows.size == 0:
            raise EmptyImageError(
                f"Imagen sin píxeles válidos ({image.height}x{image.width}, nodata={self.nodata})"
            )
        return int(rows.min()), int(rows.max()), int(cols.min()), int(cols.max())

    def trim(self, image: RasterImage) -> RasterImage:
        r0, r1, c0, c1 = self.window(image)
        logger.debug(
            "trim %dx%d -> filas %d..%d, columnas %d..%d",
            image.height, image.width, r0, r1, c0, c1,
        )
        # +1: el máximo es inclusivo; copia para no retener el buffer del llamador
        sub = image.data[:, r0:r1 + 1, c0:c1 + 1].copy()
        return RasterImage(sub, extent=None, crs=image.crs)


__all__ = ["BorderTrimmer", "Window"]
