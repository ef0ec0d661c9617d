import numpy as np
import pytest
from shapely.geometry import box

from scenepreview.adapters.matplotlib_display import MatplotlibPreviewDisplay
from scenepreview.contracts.geo import CRSRef, Extent, RasterImage
from tests.factories import make_image

def _georef():
    return make_image(h=8, w=8).with_crs(CRSRef.from_epsg(4326)).with_extent(Extent(10.0, 10.5, 50.0, 50.3))

def test_show_on_map_uses_extent_and_draws_aoi(tmp_path):
    out = tmp_path / "map.png"
    fig = MatplotlibPreviewDisplay(out_path=out, show=False).show_on_map(_georef(), box(10.1, 50.1, 10.2, 50.2))
    ax = fig.axes[0]
    assert ax.images[0].get_extent() == pytest.approx([10.0, 10.5, 50.0, 50.3])
    assert len(ax.lines) == 1
    assert out.exists() and out.stat().st_size > 0

def test_show_on_map_requires_georeference():
    with pytest.raises(ValueError):
        MatplotlibPreviewDisplay(show=False).show_on_map(make_image())

def test_show_plain_single_band_float():
    img = RasterImage(np.linspace(0, 5000, 16, dtype=np.float32).reshape(1, 4, 4))
    fig = MatplotlibPreviewDisplay(show=False).show_plain(img)
    arr = fig.axes[0].images[0].get_array()
    assert arr.shape == (4, 4)
    assert float(arr.max()) == pytest.approx(1.0)

def test_batch_without_window_leaves_no_open_figures(tmp_path):
    import matplotlib.pyplot as plt
    from scenepreview.adapters.pillow_decoder import PillowImageDecoder
    from scenepreview.ports.display import PreviewDisplayConfig
    from scenepreview.services.preview_service import PreviewService
    from tests.factories import make_padded_array, make_record, png_bytes

    class _Fetcher:
        def fetch(self, url):
            return png_bytes(make_padded_array())

    plt.close("all")
    display = MatplotlibPreviewDisplay(out_path=tmp_path / "fig.png", show=False)
    svc = PreviewService(fetcher=_Fetcher(), decoder=PillowImageDecoder(), display=display)
    results = svc.preview_many([make_record() for _ in range(25)], PreviewDisplayConfig(aoi=box(10.1, 50.1, 10.2, 50.2)))
    assert all(r.ok for r in results)
    assert plt.get_fignums() == []
    # la figura devuelta sigue siendo utilizable
    assert len(results[-1].figure.axes[0].images) == 1
