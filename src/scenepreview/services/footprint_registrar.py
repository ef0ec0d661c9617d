# src/scenepreview/services/footprint_registrar.py
from __future__ import annotations

"""
Georreferenciación del preview recortado con el footprint de la escena.

La caja envolvente del footprint se estira sobre los cuatro bordes de la grilla
recortada (afín sin rotación). Es una aproximación intencional: el footprint real
suele ser un cuadrilátero rotado y el preview queda alineado solo en los bordes.
"""

import logging
import math
from dataclasses import dataclass
from typing import Optional

from ..contracts.errors import DegenerateFootprintError
from ..contracts.geo import CRSRef, Extent, FootprintPolygon, RasterImage, pretty_extent

logger = logging.getLogger(__name__)


def extent_of(footprint: FootprintPolygon) -> Extent:
    """Extent exacto (min/max de x, min/max de y) sobre todos los vértices."""
    if not all(math.isfinite(v) for v in footprint.xs + footprint.ys):
        raise DegenerateFootprintError("Footprint con coordenadas no finitas (NaN/inf)")
    if footprint.distinct_vertices() < 3:
        raise DegenerateFootprintError(
            f"Footprint con {footprint.distinct_vertices()} vértice(s) distinto(s); se requieren >= 3"
        )
    ext = Extent.from_points(footprint.xs, footprint.ys)
    if ext.is_point:
        raise DegenerateFootprintError(f"Footprint colapsa a un punto: {pretty_extent(ext)}")
    return ext


@dataclass(frozen=True)
class FootprintRegistrar:

    def register(
        self,
        image: RasterImage,
        footprint: FootprintPolygon,
        crs: Optional[CRSRef] = None,
    ) -> RasterImage:
        ext = extent_of(footprint)
        if ext.is_flat:
            logger.warning("Footprint sin área (extent plano): %s", pretty_extent(ext))
        out_crs = crs if crs is not None else footprint.crs
        logger.debug("register %s crs=%s", pretty_extent(ext), out_crs.to_wkt())
        return image.with_crs(out_crs).with_extent(ext)


__all__ = ["FootprintRegistrar", "extent_of"]
