import pytest
from scenepreview.contracts.core import RunError, SceneRecord, Stage
from scenepreview.contracts.errors import (
    DegenerateFootprintError, EmptyImageError, InvalidRecordError, PreviewError,
    RetrievalFailure, ShapeMismatchError,
)

def test_record_alias_and_blank_url():
    r = SceneRecord.model_validate({"title": " S2A_X ", "url.icon": "https://hub/x", "footprint": "POLYGON EMPTY"})
    assert r.title == "S2A_X"
    assert r.has_preview
    for blank in ("", "NA", None, float("nan")):
        assert not SceneRecord(title="t", url_icon=blank).has_preview

def test_record_rejects_non_http_url():
    with pytest.raises(ValueError):
        SceneRecord(title="t", url_icon="ftp://hub/x")

def test_record_ignores_extra_columns():
    r = SceneRecord.model_validate({"title": "t", "cloudcoverpercentage": 12.5, "processinglevel": "Level-1C"})
    assert r.url_icon is None

@pytest.mark.parametrize("exc, stage", [
    (EmptyImageError, Stage.TRIM),
    (DegenerateFootprintError, Stage.REGISTER),
    (RetrievalFailure, Stage.FETCH),
    (ShapeMismatchError, Stage.DECODE),
])
def test_error_taxonomy_stages(exc, stage):
    e = exc("boom")
    assert isinstance(e, PreviewError)
    assert e.stage is stage

def test_error_stage_override_and_run_error():
    e = InvalidRecordError("sin footprint", stage=Stage.REGISTER, detail="x")
    assert e.stage is Stage.REGISTER and e.detail == "x"
    err = RunError(stage=e.stage, message=e.message)
    assert err.stage is Stage.REGISTER
