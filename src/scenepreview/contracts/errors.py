# src/scenepreview/contracts/errors.py
from __future__ import annotations

from typing import Optional

from .core import Stage


class PreviewError(Exception):
    """
    Error terminal para UNA solicitud de preview.
    El llamador decide si detiene el lote o salta el registro.
    """
    stage: Optional[Stage] = None

    def __init__(self, message: str, *, detail: Optional[str] = None, stage: Optional[Stage] = None):
        super().__init__(message)
        self.message = message
        self.detail = detail
        if stage is not None:
            self.stage = stage


class EmptyImageError(PreviewError):
    """No queda ningún píxel distinto de no-data tras el recorte."""
    stage = Stage.TRIM


class ShapeMismatchError(PreviewError, ValueError):
    """Bandas con dimensiones distintas."""
    stage = Stage.DECODE


class DegenerateFootprintError(PreviewError, ValueError):
    """El footprint no permite derivar una extensión (menos de 3 vértices o un punto)."""
    stage = Stage.REGISTER


class RetrievalFailure(PreviewError):
    """La descarga (o decodificación) del preview falló aguas arriba."""
    stage = Stage.FETCH


class InvalidRecordError(PreviewError, ValueError):
    """El registro no trae preview o un atributo requerido es inválido."""
    stage = Stage.FETCH


__all__ = [
    "PreviewError",
    "EmptyImageError",
    "ShapeMismatchError",
    "DegenerateFootprintError",
    "RetrievalFailure",
    "InvalidRecordError",
]
