# =============================
# FILE: examples/preview_record.py
# =============================
"""
Uso mínimo: preview de un registro de catálogo con el AOI de la sesión.
Las credenciales salen de PREVIEW_USERNAME / PREVIEW_PASSWORD (o .env).
"""
import logging
from pathlib import Path

from shapely.geometry import box

from scenepreview.adapters.matplotlib_display import MatplotlibPreviewDisplay
from scenepreview.composition.di import build_preview_service
from scenepreview.config import get_settings
from scenepreview.contracts.core import SceneRecord
from scenepreview.ports.display import PreviewDisplayConfig


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    settings = get_settings()
    record = SceneRecord(
        title="S2A_MSIL1C_20170815T102021_N0205_R065_T32UNA_20170815T102513",
        platformname="Sentinel-2",
        url_icon="https://scihub.copernicus.eu/apihub/odata/v1/Products('<uuid>')/Products('Quicklook')/$value",
        footprint="POLYGON((10.3 49.5, 11.8 49.5, 11.8 50.5, 10.3 50.5, 10.3 49.5))",
    )
    aoi = box(10.8, 49.8, 11.2, 50.1)

    svc = build_preview_service(settings, display=MatplotlibPreviewDisplay(out_path=Path("preview.png"), show=False))
    result = svc.preview(record, PreviewDisplayConfig(on_map=True, show_aoi=True, aoi=aoi))
    if result.ok:
        print("extent:", result.image.extent.as_tuple(), "crs:", result.image.crs.to_wkt())
    else:
        print("omitido:", result.error.message)
