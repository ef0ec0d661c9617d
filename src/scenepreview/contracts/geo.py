# src/scenepreview/contracts/geo.py

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Mapping, NamedTuple, Optional, Sequence, Tuple

import numpy as np
import numpy.typing as npt
import shapely
from shapely.errors import GEOSException
from shapely import wkt as shapely_wkt
from shapely.geometry import shape as shapely_shape
from shapely.geometry.base import BaseGeometry

from .errors import ShapeMismatchError

GeoTransform = Tuple[float, float, float, float, float, float]
Vertex = Tuple[float, float]

class Bounds(NamedTuple):
    minx: float; miny: float; maxx: float; maxy: float

# ---------- CRS (puro dominio, sin GDAL) ----------
@dataclass(frozen=True)
class CRSRef:
    wkt: Optional[str] = None
    epsg: Optional[int] = None

    @staticmethod
    def from_epsg(code: int) -> "CRSRef":
        return CRSRef(epsg=int(code))

    @staticmethod
    def from_wkt(wkt: str) -> "CRSRef":
        return CRSRef(wkt=wkt)

    @staticmethod
    def parse(value: "CRSRef | str | int") -> "CRSRef":
        """Acepta CRSRef, 4326, 'EPSG:4326' o un WKT."""
        if isinstance(value, CRSRef):
            return value
        if isinstance(value, int):
            return CRSRef.from_epsg(value)
        s = str(value).strip()
        if not s:
            raise ValueError("CRS vacío")
        if s.upper().startswith("EPSG:"):
            return CRSRef.from_epsg(int(s.split(":", 1)[1]))
        if s.isdigit():
            return CRSRef.from_epsg(int(s))
        return CRSRef.from_wkt(s)

    def to_wkt(self) -> str:
        """
        Devuelve una representación de texto del CRS.
        - Si hay WKT, retorna el WKT tal cual.
        - Si no hay WKT pero sí EPSG, retorna 'EPSG:<code>'.
        - Si no hay nada, error.
        """
        if self.wkt:
            return self.wkt
        if self.epsg is not None:
            return f"EPSG:{int(self.epsg)}"
        raise ValueError("CRSRef vacío: no hay WKT ni EPSG.")

    @staticmethod
    def _normalize_wkt(wkt: str) -> str:
        s = wkt.strip().upper()
        s = " ".join(s.split())
        s = s.replace(" ,", ",").replace(", ", ",")
        s = s.replace("[ ", "[").replace(" ]", "]")
        return s

    def equals(self, other: "CRSRef") -> bool:
        """
        Comparación determinista sin GDAL:
        1) Si ambos tienen EPSG -> compara enteros.
        2) Si ambos tienen WKT -> compara WKT normalizado.
        3) Cualquier mezcla -> False.
        """
        if self is other:
            return True
        if self.epsg is not None and other.epsg is not None:
            return int(self.epsg) == int(other.epsg)
        if self.wkt and other.wkt:
            return self._normalize_wkt(self.wkt) == self._normalize_wkt(other.wkt)
        return False

WGS84 = CRSRef.from_epsg(4326)

# ---------- Extensión ----------
@dataclass(frozen=True)
class Extent:
    """Caja (xmin, xmax, ymin, ymax). Invariante: xmin <= xmax, ymin <= ymax."""
    xmin: float
    xmax: float
    ymin: float
    ymax: float

    def __post_init__(self):
        if self.xmin > self.xmax or self.ymin > self.ymax:
            raise ValueError(f"Extent inválido: {self.as_tuple()}")

    @staticmethod
    def from_points(xs: Sequence[float], ys: Sequence[float]) -> "Extent":
        return Extent(float(min(xs)), float(max(xs)), float(min(ys)), float(max(ys)))

    @property
    def width(self) -> float:
        return self.xmax - self.xmin

    @property
    def height(self) -> float:
        return self.ymax - self.ymin

    @property
    def is_point(self) -> bool:
        return self.xmin == self.xmax and self.ymin == self.ymax

    @property
    def is_flat(self) -> bool:
        """Colapsa en al menos un eje (línea o punto)."""
        return self.xmin == self.xmax or self.ymin == self.ymax

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.xmin, self.xmax, self.ymin, self.ymax)

    def to_bounds(self) -> Bounds:
        return Bounds(self.xmin, self.ymin, self.xmax, self.ymax)

# ---------- Raster (puro dominio) ----------
@dataclass(frozen=True)
class RasterImage:
    """
    Raster multibanda band-first `(bands, height, width)`.
    `extent` y `crs` quedan en None hasta registrar contra el footprint.
    """
    data: "npt.NDArray[Any]"  # type: ignore[valid-type]
    extent: Optional[Extent] = None
    crs: Optional[CRSRef] = None

    def __post_init__(self):
        if getattr(self.data, "ndim", 0) != 3:
            raise ShapeMismatchError(
                f"Se esperaba arreglo (bands, height, width); ndim={getattr(self.data, 'ndim', None)}"
            )
        # Bloquea mutaciones accidentales sobre los datos
        if hasattr(self.data, "setflags"):
            try:
                self.data.setflags(write=False)
            except ValueError:
                pass

    @staticmethod
    def from_bands(bands: Sequence["npt.NDArray[Any]"]) -> "RasterImage":
        if not bands:
            raise ShapeMismatchError("Se requiere al menos una banda")
        arrs = [np.asarray(b) for b in bands]
        shapes = {a.shape for a in arrs}
        if any(a.ndim != 2 for a in arrs) or len(shapes) != 1:
            raise ShapeMismatchError(f"Bandas con dimensiones distintas: {[a.shape for a in arrs]}")
        return RasterImage(np.stack(arrs, axis=0))

    @property
    def shape(self) -> Tuple[int, ...]:
        return self.data.shape  # type: ignore[no-any-return]

    @property
    def count(self) -> int:
        return int(self.data.shape[0])

    @property
    def height(self) -> int:
        return int(self.data.shape[1])

    @property
    def width(self) -> int:
        return int(self.data.shape[2])

    @property
    def is_georeferenced(self) -> bool:
        return self.extent is not None and self.crs is not None

    def with_extent(self, extent: Extent) -> "RasterImage":
        return replace(self, extent=extent)

    def with_crs(self, crs: CRSRef) -> "RasterImage":
        return replace(self, crs=crs)

    def transform(self) -> GeoTransform:
        if self.extent is None:
            raise ValueError("Raster sin extent: registra primero contra el footprint")
        return bounds_to_geotransform(self.extent.to_bounds(), self.width, self.height)

    def to_hwc(self) -> "npt.NDArray[Any]":  # type: ignore[valid-type]
        """Vista (height, width, bands) para matplotlib/PIL."""
        return np.moveaxis(self.data, 0, -1)

# ---------- Footprint ----------
@dataclass(frozen=True)
class FootprintPolygon:
    """Vértices (x, y) del footprint de la escena en `crs`. Nunca se muta."""
    vertices: Tuple[Vertex, ...]
    crs: CRSRef = WGS84

    @staticmethod
    def from_coords(coords: Sequence[Sequence[float]], crs: CRSRef = WGS84) -> "FootprintPolygon":
        verts = tuple((float(c[0]), float(c[1])) for c in coords)
        return FootprintPolygon(vertices=verts, crs=crs)

    @staticmethod
    def from_geometry(geom: BaseGeometry, crs: CRSRef = WGS84) -> "FootprintPolygon":
        # todas las coordenadas de todos los anillos/partes (MultiPolygon incluido)
        xy = shapely.get_coordinates(geom)
        return FootprintPolygon.from_coords(xy.tolist(), crs)

    @staticmethod
    def from_wkt(text: str, crs: CRSRef = WGS84) -> "FootprintPolygon":
        try:
            geom = shapely_wkt.loads(text)
        except GEOSException as e:
            raise ValueError(f"WKT de footprint inválido: {e}") from e
        return FootprintPolygon.from_geometry(geom, crs)

    @staticmethod
    def from_geojson(obj: Mapping[str, Any], crs: CRSRef = WGS84) -> "FootprintPolygon":
        return FootprintPolygon.from_geometry(shapely_shape(geojson_geometry(obj)), crs)

    @property
    def xs(self) -> Tuple[float, ...]:
        return tuple(v[0] for v in self.vertices)

    @property
    def ys(self) -> Tuple[float, ...]:
        return tuple(v[1] for v in self.vertices)

    def distinct_vertices(self) -> int:
        return len(set(self.vertices))

# ---------- GeoJSON ----------
def geojson_geometry(obj: Mapping[str, Any]) -> Mapping[str, Any]:
    """Acepta Feature/FeatureCollection/Geometry, devuelve Geometry."""
    t = obj.get("type")
    if t == "FeatureCollection":
        feats = obj.get("features", [])
        if not feats:
            raise ValueError("GeoJSON vacío")
        return feats[0]["geometry"]
    if t == "Feature":
        return obj["geometry"]
    if "coordinates" in obj:
        return obj
    raise ValueError("Formato GeoJSON no reconocido")

# ---------- GeoTransform helpers (afines a GDAL pero sin dependencia) ----------
def bounds_to_geotransform(bounds: Bounds, width: int, height: int) -> GeoTransform:
    minx, miny, maxx, maxy = bounds
    px = (maxx - minx) / float(width)
    py = (miny - maxy) / float(height)  # negativo (origen en esquina sup-izq)
    return (minx, px, 0.0, maxy, 0.0, py)

def pixel_to_world(col: float, row: float, gt: GeoTransform) -> Tuple[float, float]:
    x0, px, rx, y0, ry, py = gt
    x = x0 + col * px + row * rx
    y = y0 + col * ry + row * py
    return x, y

def pretty_extent(e: Extent, ndigits: int = 4) -> str:
    return (f"Extent(xmin={e.xmin:.{ndigits}f}, xmax={e.xmax:.{ndigits}f}, "
            f"ymin={e.ymin:.{ndigits}f}, ymax={e.ymax:.{ndigits}f})")

__all__ = [
    "GeoTransform", "Bounds", "CRSRef", "WGS84", "Extent", "RasterImage",
    "FootprintPolygon", "Vertex", "geojson_geometry", "bounds_to_geotransform",
    "pixel_to_world", "pretty_extent",
]
