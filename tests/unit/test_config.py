# tests/unit/test_config.py
import json
import pytest
import yaml
from pathlib import Path
from shapely.geometry import Polygon

from scenepreview.config import Settings, get_settings
from scenepreview.composition.di import (
    build_display_config, build_preview_service, load_aoi, load_settings_from_yaml,
)

def test_settings_defaults_and_crs():
    s = Settings()
    assert s.crs_ref().epsg == 4326
    assert s.on_map and s.show_aoi and s.aoi_file is None
    assert s.password_value() is None

def test_settings_from_env(monkeypatch):
    monkeypatch.setenv("PREVIEW_USERNAME", "hubuser")
    monkeypatch.setenv("PREVIEW_PASSWORD", "secret")
    monkeypatch.setenv("PREVIEW_ON_MAP", "false")
    s = get_settings()
    assert s.username == "hubuser"
    assert s.password_value() == "secret"
    assert "secret" not in repr(s)
    assert s.on_map is False

@pytest.mark.parametrize("bad", [{"log_level": "LOUD"}, {"timeout_s": 0}, {"default_crs": "  "}, {"site": "x"}])
def test_settings_guards(bad):
    with pytest.raises(ValueError):
        Settings(**bad)

def test_load_settings_from_yaml_and_service(tmp_path: Path):
    aoi = tmp_path / "aoi.geojson"
    aoi.write_text(json.dumps({"type": "FeatureCollection", "features": [
        {"type": "Feature", "properties": {},
         "geometry": {"type": "Polygon", "coordinates": [[[10.1, 50.1], [10.2, 50.1], [10.2, 50.2], [10.1, 50.1]]]}}
    ]}), encoding="utf-8")
    cfg = tmp_path / "settings.yaml"
    cfg.write_text(yaml.safe_dump({
        "username": "hubuser",
        "timeout_s": 12.5,
        "default_crs": "EPSG:4326",
        "nodata": 0,
        "show_aoi": True,
        "aoi_file": str(aoi),
        "log_level": "debug",
    }), encoding="utf-8")

    s = load_settings_from_yaml(cfg)
    assert s.log_level == "DEBUG" and s.aoi_file.is_absolute()
    dcfg = build_display_config(s)
    assert dcfg.has_aoi and isinstance(dcfg.aoi, Polygon)

    svc = build_preview_service(s, password="pw")
    assert svc.fetcher.timeout_s == 12.5
    assert svc.fetcher.password == "pw"
    assert svc.footprint_crs.epsg == 4326

def test_load_aoi_wkt_and_missing_aoi(tmp_path: Path):
    p = tmp_path / "aoi.wkt"
    p.write_text("POLYGON((0 0, 1 0, 1 1, 0 0))", encoding="utf-8")
    assert load_aoi(p).area == pytest.approx(0.5)
    assert not build_display_config(Settings()).has_aoi

def test_load_aoi_invalid_wkt_is_value_error(tmp_path: Path):
    p = tmp_path / "aoi.wkt"
    p.write_text("POLYGON((0 0, 1", encoding="utf-8")
    with pytest.raises(ValueError, match="AOI WKT inválido"):
        load_aoi(p)
