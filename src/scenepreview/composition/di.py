from __future__ import annotations
from pathlib import Path
from typing import Optional
import json
import yaml

from shapely import wkt as shapely_wkt
from shapely.geometry import shape as shapely_shape
from shapely.errors import GEOSException
from shapely.geometry.base import BaseGeometry

from ..adapters.http_preview_fetcher import HttpPreviewFetcher
from ..adapters.pillow_decoder import PillowImageDecoder
from ..config import Settings
from ..contracts.geo import geojson_geometry
from ..ports.display import PreviewDisplayConfig, PreviewDisplayPort
from ..services.border_trimmer import BorderTrimmer
from ..services.preview_service import PreviewService

def load_settings_from_yaml(path: Path) -> Settings:
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    return Settings(**data)

def load_aoi(path: Path) -> BaseGeometry:
    """AOI desde GeoJSON (.geojson/.json) o WKT (cualquier otra extensión)."""
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() in (".geojson", ".json"):
        return shapely_shape(geojson_geometry(json.loads(text)))
    try:
        return shapely_wkt.loads(text)
    except GEOSException as e:
        raise ValueError(f"AOI WKT inválido en {path}: {e}") from e

def build_display_config(settings: Settings, *, aoi: Optional[BaseGeometry] = None) -> PreviewDisplayConfig:
    if aoi is None and settings.aoi_file is not None:
        aoi = load_aoi(settings.aoi_file)
    return PreviewDisplayConfig(on_map=settings.on_map, show_aoi=settings.show_aoi, aoi=aoi)

def build_preview_service(
    settings: Settings,
    display: Optional[PreviewDisplayPort] = None,
    *,
    password: Optional[str] = None,
) -> PreviewService:
    fetcher = HttpPreviewFetcher(
        username=settings.username,
        password=password if password is not None else settings.password_value(),
        timeout_s=settings.timeout_s,
    )
    return PreviewService(
        fetcher=fetcher,
        decoder=PillowImageDecoder(),
        display=display,
        trimmer=BorderTrimmer(nodata=settings.nodata),
        footprint_crs=settings.crs_ref(),
    )
