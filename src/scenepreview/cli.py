# src/scenepreview/cli.py
from __future__ import annotations

"""
CLI de previews de escenas (contracts-first, minimal).

Comandos principales:
  - show: descarga el quicklook de un registro, lo recorta, lo georreferencia
    con el footprint y lo muestra en mapa (o en un plot RGB simple).
  - register: recorta + georreferencia una imagen local contra un footprint y
    reporta forma, extent y CRS resultantes (JSON).

Ejemplos rápidos:
  python -m scenepreview.cli show --record ./record.json --aoi ./aoi.geojson --out ./preview.png

  python -m scenepreview.cli register --image ./thumb.jpg \
      --footprint "POLYGON((10 50, 10.5 50, 10.5 50.3, 10 50.3, 10 50))" --geotiff ./thumb.tif
"""

import argparse
import getpass
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Mapping

from .adapters.matplotlib_display import MatplotlibPreviewDisplay
from .adapters.pillow_decoder import PillowImageDecoder
from .adapters.rasterio_geotiff_writer import RasterioGeoTiffWriter
from .composition.di import build_display_config, build_preview_service, load_aoi, load_settings_from_yaml
from .config import Settings, get_settings
from .contracts.core import SceneRecord
from .contracts.errors import PreviewError
from .contracts.geo import CRSRef, FootprintPolygon, RasterImage
from .services.border_trimmer import BorderTrimmer
from .services.footprint_registrar import FootprintRegistrar

EXIT_SKIPPED = 2

# ----------------------
# Utilidades locales
# ----------------------

def _load_settings(args: argparse.Namespace) -> Settings:
    s = load_settings_from_yaml(Path(args.config)) if args.config else get_settings()
    if args.verbose:
        s = s.model_copy(update={"log_level": "DEBUG"})
    return s


def _setup_logging(s: Settings) -> None:
    logging.basicConfig(
        level=s.log_level_value(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _load_record(path: str | Path) -> SceneRecord:
    with open(path, "r", encoding="utf-8") as f:
        obj = json.load(f)
    # acepta una lista de un solo registro (fila única)
    if isinstance(obj, list):
        if len(obj) != 1:
            raise ValueError("El archivo debe contener un único registro")
        obj = obj[0]
    return SceneRecord.model_validate(obj)


def _load_footprint(text: str, crs: CRSRef) -> FootprintPolygon:
    if text.lstrip().upper().startswith(("POLYGON", "MULTIPOLYGON")):
        return FootprintPolygon.from_wkt(text, crs)
    p = Path(text)
    if p.suffix.lower() in (".geojson", ".json"):
        with open(p, "r", encoding="utf-8") as f:
            return FootprintPolygon.from_geojson(json.load(f), crs)
    return FootprintPolygon.from_wkt(p.read_text(encoding="utf-8"), crs)


def _summary(image: RasterImage) -> Mapping[str, Any]:
    return {
        "shape": list(image.shape),
        "extent": list(image.extent.as_tuple()) if image.extent else None,
        "crs": image.crs.to_wkt() if image.crs else None,
    }


# ----------------------
# Comandos
# ----------------------

def cmd_show(args: argparse.Namespace) -> int:
    s = _load_settings(args)
    upd: Dict[str, Any] = {}
    if args.no_map:
        upd["on_map"] = False
    if args.no_aoi:
        upd["show_aoi"] = False
    if args.username:
        upd["username"] = args.username
    if upd:
        s = s.model_copy(update=upd)
    _setup_logging(s)

    password = s.password_value()
    if s.username and password is None:
        password = getpass.getpass(f"Password para {s.username}: ")

    record = _load_record(args.record)
    aoi = load_aoi(Path(args.aoi)) if args.aoi else None
    display_cfg = build_display_config(s, aoi=aoi)
    display = MatplotlibPreviewDisplay(out_path=Path(args.out) if args.out else None, show=not args.no_show)

    svc = build_preview_service(s, display=display, password=password)
    result = svc.preview(record, display_cfg)
    if not result.ok:
        print(f"[SKIP] {result.error.message}", file=sys.stderr)
        return EXIT_SKIPPED

    if args.geotiff:
        if not result.image.is_georeferenced:
            raise ValueError("--geotiff requiere modo mapa (sin --no-map)")
        print(RasterioGeoTiffWriter().write(args.geotiff, result.image))
    return 0


def cmd_register(args: argparse.Namespace) -> int:
    s = _load_settings(args)
    _setup_logging(s)
    crs = CRSRef.parse(args.crs) if args.crs else s.crs_ref()

    image = PillowImageDecoder().decode(Path(args.image).read_bytes())
    image = BorderTrimmer(nodata=s.nodata).trim(image)
    image = FootprintRegistrar().register(image, _load_footprint(args.footprint, crs))

    if args.geotiff:
        RasterioGeoTiffWriter().write(args.geotiff, image)
    print(json.dumps(_summary(image)))
    return 0


# ----------------------
# Parser
# ----------------------

def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="scenepreview", description="Preview georreferenciado de escenas de catálogo")
    p.add_argument("--config", help="settings.yaml (si no, variables PREVIEW_* / .env)")
    p.add_argument("-v", "--verbose", action="store_true", help="log DEBUG")
    sub = p.add_subparsers(dest="cmd", required=True)

    # show
    ps = sub.add_parser("show", help="descarga y muestra el preview de un registro")
    ps.add_argument("--record", required=True, help="JSON con el registro (title, url.icon, footprint, ...)")
    ps.add_argument("--no-map", action="store_true", help="plot RGB simple en vez de mapa")
    ps.add_argument("--no-aoi", action="store_true", help="no dibuja el AOI de la sesión")
    ps.add_argument("--aoi", help="AOI (GeoJSON o WKT); sobre-escribe Settings.aoi_file")
    ps.add_argument("--out", help="guarda la figura en esta ruta (PNG)")
    ps.add_argument("--no-show", action="store_true", help="no abre ventana (útil con --out)")
    ps.add_argument("--geotiff", help="exporta el preview georreferenciado a GeoTIFF")
    ps.add_argument("--username", help="usuario del hub; el password sale de PREVIEW_PASSWORD/.env o se pide por consola")
    ps.set_defaults(func=cmd_show)

    # register
    pr = sub.add_parser("register", help="recorta y georreferencia una imagen local")
    pr.add_argument("--image", required=True, help="imagen (JPEG/PNG)")
    pr.add_argument("--footprint", required=True, help="WKT, o ruta a .wkt/.geojson")
    pr.add_argument("--crs", help="CRS del footprint (por defecto Settings.default_crs)")
    pr.add_argument("--geotiff", help="exporta a GeoTIFF")
    pr.set_defaults(func=cmd_register)

    return p


def main(argv: list[str] | None = None) -> int:
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = _build_parser()
    args = parser.parse_args(argv)
    try:
        return int(args.func(args))
    except KeyboardInterrupt:
        return 130
    except PreviewError as ex:
        print(f"[ERROR] {ex.stage.value if ex.stage else 'preview'}: {ex}", file=sys.stderr)
        return 1
    except Exception as ex:
        print(f"[ERROR] {ex}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
