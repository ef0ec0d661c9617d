## `src/scenepreview/adapters/rasterio_geotiff_writer.py`
from __future__ import annotations

import logging
import os
from typing import Optional

import rasterio
from rasterio.transform import from_bounds

from ..contracts.geo import RasterImage
from ..ports.raster_write import RasterWriterPort

logger = logging.getLogger(__name__)


def _ensure_dir(path: str) -> None:
    d = os.path.dirname(path)
    if d and not os.path.exists(d):
        os.makedirs(d, exist_ok=True)


class RasterioGeoTiffWriter(RasterWriterPort):
    """Exporta el preview registrado como GeoTIFF (transform desde el extent)."""

    def write(self, uri: str, image: RasterImage, *, compress: Optional[str] = None) -> str:
        if not image.is_georeferenced:
            raise ValueError("RasterImage sin extent/CRS: registra antes de exportar")
        _ensure_dir(uri)
        data = image.data
        b = image.extent.to_bounds()
        profile = {
            "driver": "GTiff",
            "height": image.height,
            "width": image.width,
            "count": image.count,
            "dtype": data.dtype,
            "transform": from_bounds(b.minx, b.miny, b.maxx, b.maxy, image.width, image.height),
            "compress": (compress or "DEFLATE").upper(),
        }
        if image.crs.epsg is not None:
            profile["crs"] = f"EPSG:{image.crs.epsg}"
        elif image.crs.wkt:
            profile["crs"] = image.crs.wkt
        with rasterio.open(uri, "w", **profile) as dst:
            dst.write(data)
        logger.info("GeoTIFF escrito: %s", uri)
        return uri
