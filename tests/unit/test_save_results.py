import json

from transitmix.api import plan
from transitmix.utils.save_results import save_plan_results


def _plan(make_route, small_params):
    routes = [make_route("R1", a_to_b=60, b_to_a=30)]
    return plan(routes, small_params, output_dir=None)


def test_explicit_filename(make_route, small_params, tmp_path):
    result = _plan(make_route, small_params)
    target = tmp_path / "nested" / "plan.json"

    written = save_plan_results(result, small_params, filename=target)

    assert written == target
    data = json.loads(target.read_text())
    assert set(data) >= {
        "Plan Summary",
        "Parameters",
        "Peak Demand",
        "Fleet",
        "Schedule Statistics",
        "KPIs",
        "Trips",
        "Time Measurements",
    }
    assert data["Plan Summary"]["Total Trips"] == len(result.schedule.trips)
    assert data["Trips"][0]["Route_ID"] == "R1"
    assert data["Parameters"]["driver_cost_per_hour"] == 150.0


def test_timestamped_file_in_results_dir(make_route, small_params):
    result = _plan(make_route, small_params)

    written = save_plan_results(result, small_params)

    assert written.parent == small_params.io.results_dir
    assert written.name.startswith("transit_plan_")
    assert written.suffix == ".json"
