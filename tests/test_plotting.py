from roi_model.engine import compute
from roi_model.plotting import _eok_tick, plot_cost_comparison


def test_plot_written(tmp_path, default_result):
    path = plot_cost_comparison(default_result, tmp_path / "charts", "baseline")
    assert path.name == "baseline_costs.png"
    assert path.exists()
    assert path.stat().st_size > 0


def test_plot_without_break_even(tmp_path, no_saving_params):
    result = compute(no_saving_params)
    path = plot_cost_comparison(result, tmp_path, "no_saving")
    assert path.exists()


def test_eok_tick():
    assert _eok_tick(300_000_000) == "3 억"
    assert _eok_tick(150_000_000, unit="억원") == "1.5 억원"
    assert _eok_tick(float("nan")) == "0 억"
