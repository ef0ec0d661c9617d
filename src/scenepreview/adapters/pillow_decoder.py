## `src/scenepreview/adapters/pillow_decoder.py`

from __future__ import annotations

import io
from dataclasses import dataclass

import numpy as np
from PIL import Image, UnidentifiedImageError

from ..contracts.errors import RetrievalFailure
from ..contracts.geo import RasterImage
from ..ports.image_decode import ImageDecoderPort

@dataclass(frozen=True)
class PillowImageDecoder(ImageDecoderPort):
    """Decodifica JPEG/PNG con Pillow y entrega (bands, height, width).

    `mode="RGB"` fuerza 3 bandas (los quicklooks suelen venir en RGB o L).
    """
    mode: str = "RGB"

    def decode(self, payload: bytes) -> RasterImage:
        try:
            with Image.open(io.BytesIO(payload)) as im:
                arr = np.asarray(im.convert(self.mode))
        except (UnidentifiedImageError, OSError) as e:
            # bytes no decodificables = no se obtuvo un preview utilizable
            raise RetrievalFailure("El preview descargado no es una imagen válida", detail=str(e)) from e
        if arr.ndim == 2:
            arr = arr[np.newaxis, ...]
        else:
            arr = np.moveaxis(arr, -1, 0)
        return RasterImage(np.ascontiguousarray(arr))
