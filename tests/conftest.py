import os
import matplotlib
import pytest

matplotlib.use("Agg")

from scenepreview.config import get_settings

def pytest_configure():
    os.environ.setdefault("MPLBACKEND", "Agg")

@pytest.fixture(autouse=True)
def _reset_settings_cache(monkeypatch):
    # evita fuga de estado entre tests (cache + variables PREVIEW_* del entorno)
    for k in list(os.environ):
        if k.startswith("PREVIEW_"):
            monkeypatch.delenv(k, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()

@pytest.fixture(autouse=True)
def _close_figures():
    yield
    import matplotlib.pyplot as plt
    plt.close("all")

def pytest_collection_modifyitems(items):
    for item in items:
        if "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)
