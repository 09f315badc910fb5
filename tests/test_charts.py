import pytest

from core.charts import build_chart, to_vega_spec
from core.controller import SelectRegion, SelectYear, ViewController, ZoomIn
from core.filters import ALL_REGIONS, Selection
from tests.conftest import build_dataset, make_row


def _values(spec):
    return next(iter(spec["datasets"].values()))


def test_full_request_chart(dataset):
    ctrl = ViewController(dataset, Selection(2021, ALL_REGIONS))
    spec = to_vega_spec(build_chart(ctrl.last_request))

    assert spec["mark"]["type"] == "circle"
    assert "stroke" not in spec["mark"]
    assert spec["encoding"]["x"]["scale"]["domain"] == pytest.approx(list(ctrl.scales.x.domain))
    assert spec["encoding"]["y"]["scale"]["domain"] == pytest.approx(sorted(ctrl.scales.y.domain))
    values = _values(spec)
    assert [v["country"] for v in values] == ["India", "Brazil", "Japan", "Norway"]
    assert [v["draw_index"] for v in values] == [0, 1, 2, 3]
    assert all(v["fill"].startswith("#") for v in values)


def test_region_highlight_and_zoom(dataset):
    ctrl = ViewController(dataset, Selection(2021, ALL_REGIONS))
    ctrl.dispatch(SelectRegion("Asia"))
    base_domain = ctrl.scales.x.domain
    request = ctrl.dispatch(ZoomIn())
    spec = to_vega_spec(build_chart(request))

    assert spec["mark"]["stroke"] == "gold"
    lo, hi = spec["encoding"]["x"]["scale"]["domain"]
    # zooming in narrows the visible domain
    assert hi - lo < base_domain[1] - base_domain[0]


def test_empty_request_chart(dataset):
    ctrl = ViewController(dataset)
    request = ctrl.dispatch(SelectYear(1900))
    spec = to_vega_spec(build_chart(request))
    assert spec["mark"]["type"] == "text"
    assert _values(spec) == [{"message": "No data available for all in 1900"}]


def test_single_record_chart():
    one = build_dataset([make_row("Norway", 2021, 11.2, 83.2, 5_400_000, 0.91)])
    spec = to_vega_spec(build_chart(ViewController(one).last_request))
    assert spec["encoding"]["x"]["scale"]["domain"] == pytest.approx([10.7, 11.7])
