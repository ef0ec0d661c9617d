# src/scenepreview/services/preview_service.py
from __future__ import annotations

"""
Servicio de preview de escenas: contracts-first, sin backends concretos.

Pipeline determinista por solicitud:
  FETCH → DECODE → TRIM → (REGISTER, solo en modo mapa) → DISPLAY

Cualquier PreviewError es terminal para ESA solicitud: `preview()` lo devuelve
como resultado omitido (RunError) y nunca entrega un raster parcial.
`prepare()` es la variante de librería: propaga las excepciones.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Iterable, Optional, Tuple

from ..contracts.core import RunError, SceneRecord, Stage
from ..contracts.errors import InvalidRecordError, PreviewError, RetrievalFailure
from ..contracts.geo import CRSRef, FootprintPolygon, RasterImage, WGS84
from ..ports.display import PreviewDisplayConfig, PreviewDisplayPort
from ..ports.image_decode import ImageDecoderPort
from ..ports.preview_fetch import PreviewFetcherPort
from .border_trimmer import BorderTrimmer
from .footprint_registrar import FootprintRegistrar

logger = logging.getLogger(__name__)


# ----------------------
# DTOs
# ----------------------

@dataclass(frozen=True)
class PreviewResult:
    title: str
    image: Optional[RasterImage] = None
    figure: Any = None
    error: Optional[RunError] = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ----------------------
# Servicio
# ----------------------

@dataclass
class PreviewService:
    fetcher: PreviewFetcherPort
    decoder: ImageDecoderPort
    display: Optional[PreviewDisplayPort] = None
    trimmer: BorderTrimmer = field(default_factory=BorderTrimmer)
    registrar: FootprintRegistrar = field(default_factory=FootprintRegistrar)
    footprint_crs: CRSRef = WGS84

    # ---------- Helpers ----------
    @staticmethod
    def _require_url(record: SceneRecord) -> str:
        if not record.has_preview:
            raise InvalidRecordError(f"El registro '{record.title}' no es válido o no tiene preview disponible")
        return record.url_icon  # type: ignore[return-value]

    def _footprint(self, record: SceneRecord) -> FootprintPolygon:
        if not record.footprint:
            raise InvalidRecordError(f"El registro '{record.title}' no trae footprint", stage=Stage.REGISTER)
        try:
            return FootprintPolygon.from_wkt(record.footprint, self.footprint_crs)
        except ValueError as e:
            raise InvalidRecordError(
                f"Footprint inválido en '{record.title}'", detail=str(e), stage=Stage.REGISTER
            ) from e

    # ---------- Casos de uso ----------
    def prepare(self, record: SceneRecord, *, georeference: bool = True) -> RasterImage:
        url = self._require_url(record)
        payload = self.fetcher.fetch(url)
        image = self.decoder.decode(payload)
        image = self.trimmer.trim(image)
        if georeference:
            image = self.registrar.register(image, self._footprint(record))
        logger.info("Preview listo para '%s': %s", record.title, image.shape)
        return image

    def show(self, image: RasterImage, display: PreviewDisplayConfig) -> Any:
        if self.display is None:
            return None
        if not display.on_map:
            return self.display.show_plain(image)
        aoi = None
        if display.show_aoi:
            if display.has_aoi:
                aoi = display.aoi
            else:
                logger.warning("Preview sin AOI: no se ha definido un AOI para la sesión")
        return self.display.show_on_map(image, aoi)

    def preview(self, record: SceneRecord, display: Optional[PreviewDisplayConfig] = None) -> PreviewResult:
        display = display or PreviewDisplayConfig()
        try:
            image = self.prepare(record, georeference=display.on_map)
            figure = self.show(image, display)
        except RetrievalFailure as e:
            logger.warning("No hay preview disponible para '%s': %s", record.title, e.message)
            err = RunError(
                stage=e.stage or Stage.FETCH,
                message=f"No hay preview disponible para '{record.title}'",
                detail=e.detail or e.message,
            )
            return PreviewResult(title=record.title, error=err)
        except PreviewError as e:
            logger.warning("Preview omitido para '%s' (%s): %s", record.title, e.stage, e.message)
            err = RunError(stage=e.stage or Stage.FETCH, message=e.message, detail=e.detail)
            return PreviewResult(title=record.title, error=err)
        return PreviewResult(title=record.title, image=image, figure=figure)

    def preview_many(
        self, records: Iterable[SceneRecord], display: Optional[PreviewDisplayConfig] = None
    ) -> Tuple[PreviewResult, ...]:
        return tuple(self.preview(r, display) for r in records)


__all__ = ["PreviewService", "PreviewResult"]
