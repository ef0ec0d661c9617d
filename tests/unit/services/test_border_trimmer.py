import numpy as np
import pytest
from scenepreview.contracts.errors import EmptyImageError
from scenepreview.contracts.geo import CRSRef, RasterImage
from scenepreview.services.border_trimmer import BorderTrimmer
from tests.factories import has_empty_border, make_image, make_padded_array, make_padded_image

def test_trim_padded_10x10_example():
    src = make_padded_array()
    out = BorderTrimmer().trim(RasterImage(src.copy()))
    assert out.shape == (3, 8, 8)
    np.testing.assert_array_equal(out.data, src[:, 2:10, 0:8])

def test_window_is_inclusive():
    assert BorderTrimmer().window(make_padded_image()) == (2, 9, 0, 7)

def test_nodata_mask_requires_all_bands_zero():
    arr = np.zeros((3, 2, 2), dtype=np.uint8)
    arr[1, 0, 0] = 5  # una sola banda con valor
    mask = BorderTrimmer().nodata_mask(RasterImage(arr))
    assert mask.tolist() == [[False, True], [True, True]]

def test_trim_is_idempotent_on_minimal_raster():
    img = make_image(h=6, w=4, value=9)
    once = BorderTrimmer().trim(img)
    assert once.shape == img.shape
    np.testing.assert_array_equal(once.data, img.data)
    twice = BorderTrimmer().trim(once)
    np.testing.assert_array_equal(twice.data, once.data)

def test_trim_all_zero_fails():
    with pytest.raises(EmptyImageError):
        BorderTrimmer().trim(make_image(value=0))

@pytest.mark.parametrize("seed", range(8))
def test_no_empty_border_after_trim(seed):
    rng = np.random.default_rng(seed)
    h, w = rng.integers(5, 30, size=2)
    arr = np.zeros((3, h, w), dtype=np.uint16)
    r0, c0 = rng.integers(0, h // 2), rng.integers(0, w // 2)
    r1, c1 = rng.integers(r0 + 1, h + 1), rng.integers(c0 + 1, w + 1)
    arr[:, r0:r1, c0:c1] = rng.integers(0, 3, size=(3, r1 - r0, c1 - c0))
    arr[rng.integers(0, 3), r0, c0] = 1  # al menos un píxel válido
    img = RasterImage(arr)
    out = BorderTrimmer().trim(img)
    assert not has_empty_border(out)
    assert out.count == 3

def test_trim_preserves_band_order_dtype_and_crs():
    arr = np.zeros((3, 4, 4), dtype=np.float32)
    arr[0, 1, 1], arr[1, 2, 2], arr[2, 1, 2] = 1.5, 2.5, 3.5
    out = BorderTrimmer().trim(RasterImage(arr, crs=CRSRef.from_epsg(4326)))
    assert out.data.dtype == np.float32
    assert out.shape == (3, 2, 2)
    assert out.data[0, 0, 0] == 1.5 and out.data[1, 1, 1] == 2.5 and out.data[2, 0, 1] == 3.5
    assert out.crs.epsg == 4326 and out.extent is None

def test_trim_does_not_alias_input_buffer():
    src = make_padded_image()
    out = BorderTrimmer().trim(src)
    assert not np.shares_memory(out.data, src.data)

def test_custom_nodata_value():
    arr = np.full((1, 4, 4), 255, dtype=np.uint8)
    arr[0, 1:3, 1:3] = 10
    out = BorderTrimmer(nodata=255).trim(RasterImage(arr))
    assert out.shape == (1, 2, 2)
