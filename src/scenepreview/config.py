# src/scenepreview/config.py
from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .contracts.geo import CRSRef

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

class Settings(BaseSettings):
    """
    Config unificada del proyecto. No toca disco (salvo .env vía pydantic-settings).
    Debe ser construida y provista por composition/di.py (CLI/UI/adapters).
    """
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="PREVIEW_",
        env_nested_delimiter="__",
        extra="forbid",
        frozen=True,
    )

    # --- credenciales del hub ---
    username: Optional[str] = None
    password: Optional[SecretStr] = None

    # --- red ---
    timeout_s: float = 30.0

    # --- dominio ---
    # declarado como str para que pydantic-settings NO intente json.loads
    default_crs: str = "EPSG:4326"
    nodata: float = 0

    # --- visualización (sesión) ---
    on_map: bool = True
    show_aoi: bool = True
    aoi_file: Optional[Path] = None

    log_level: str = "INFO"

    # ----------------------------
    # Normalizadores / validadores
    # ----------------------------
    @field_validator("default_crs", mode="before")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        v2 = str(v).strip()
        if not v2:
            raise ValueError("default_crs no puede ser vacío")
        return v2

    @field_validator("timeout_s")
    @classmethod
    def _positive(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("timeout_s debe ser > 0")
        return v

    @field_validator("aoi_file", mode="after")
    @classmethod
    def _abs_aoi(cls, p: Optional[Path]) -> Optional[Path]:
        return None if p is None else p.expanduser().resolve()

    @field_validator("log_level", mode="before")
    @classmethod
    def _valid_level(cls, v: str) -> str:
        v2 = str(v).strip().upper()
        if v2 not in _LOG_LEVELS:
            raise ValueError(f"log_level inválido: {v}")
        return v2

    # ----------------------------
    # Helpers puros (sin side-effects)
    # ----------------------------
    def crs_ref(self) -> CRSRef:
        return CRSRef.parse(self.default_crs)

    def password_value(self) -> Optional[str]:
        return self.password.get_secret_value() if self.password is not None else None

    def log_level_value(self) -> int:
        return getattr(logging, self.log_level)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Instancia cacheada. Úsala SOLO desde composition/di.py o CLI.
    Prohibido usarla en services/ (dominio). Para tests, recuerda limpiar:
        get_settings.cache_clear()
    """
    return Settings()
