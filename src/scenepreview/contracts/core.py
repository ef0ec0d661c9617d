# src/scenepreview/contracts/core.py
from __future__ import annotations

import re
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

# -------------------------
# Etapas del pipeline
# -------------------------
class Stage(str, Enum):
    FETCH = "fetch"
    DECODE = "decode"
    TRIM = "trim"
    REGISTER = "register"
    DISPLAY = "display"

# -------------------------
# Registro de catálogo
# -------------------------
_URL_RE = re.compile(r"^https?://", re.IGNORECASE)

class SceneRecord(BaseModel):
    """
    Una fila del resultado de una consulta al catálogo (solo lectura).
    `footprint` viene como WKT en EPSG:4326, tal como lo entrega el hub.
    """
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    title: str
    platformname: Optional[str] = None
    url_icon: Optional[str] = Field(default=None, alias="url.icon")
    footprint: Optional[str] = None
    uuid: Optional[str] = None

    @field_validator("title")
    @classmethod
    def _non_empty(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("title no puede ser vacío")
        return v2

    @field_validator("url_icon", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        # el catálogo entrega NA/"" cuando no hay preview
        if v is None:
            return None
        if isinstance(v, float):
            return None
        v2 = str(v).strip()
        if not v2 or v2.upper() in ("NA", "NAN", "NONE"):
            return None
        if not _URL_RE.match(v2):
            raise ValueError(f"url_icon no es una URL http(s): {v2}")
        return v2

    @property
    def has_preview(self) -> bool:
        return self.url_icon is not None

# -------------------------
# Resultado de error (skip-with-message)
# -------------------------
class RunError(BaseModel):
    model_config = ConfigDict(frozen=True)
    stage: Stage
    message: str
    detail: str | None = None
