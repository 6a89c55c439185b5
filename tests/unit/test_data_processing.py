import pandas as pd
import pytest

from transitmix.core_types import Direction
from transitmix.utils.data_processing import load_route_demand, routes_from_dataframe

STATIC = {
    "Route_Name": "Line 1",
    "Length_AtoB": 10.0,
    "Length_BtoA": 11.0,
    "Time_AtoB": 20,
    "Time_BtoA": 22,
}


def _long_frame(route_id="R1", hours=range(24)):
    return pd.DataFrame(
        [
            {"Route_ID": route_id, **STATIC, "Hour": h, "Demand_AtoB": h, "Demand_BtoA": 2 * h}
            for h in hours
        ]
    )


def test_load_long_format(long_demand_csv):
    routes = load_route_demand(long_demand_csv)

    assert [r.route_id for r in routes] == ["R1", "R2"]
    assert routes[0].name == "Downtown"
    assert routes[0].length_b_to_a == 13.0
    assert routes[0].time_b_to_a == 27
    assert routes[0].demand_at(7, Direction.A_TO_B) == 180
    assert routes[1].demand_at(3, Direction.B_TO_A) == 30


def test_wide_format(tmp_path):
    row = {"Route_ID": "W1", **STATIC}
    for h in range(24):
        row[f"AtoB_{h:02d}"] = 10 + h
        row[f"BtoA_{h:02d}"] = 5
    path = tmp_path / "wide.csv"
    pd.DataFrame([row]).to_csv(path, index=False)

    (route,) = load_route_demand(path)

    assert route.route_id == "W1"
    assert route.demand_at(23, Direction.A_TO_B) == 33
    assert route.total_demand() == sum(10 + h for h in range(24)) + 5 * 24


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_route_demand(tmp_path / "missing.csv")


def test_missing_hours_rejected():
    with pytest.raises(ValueError, match="expected 24"):
        routes_from_dataframe(_long_frame(hours=range(23)))


def test_missing_columns_rejected():
    df = _long_frame().drop(columns=["Time_BtoA"])

    with pytest.raises(ValueError, match="Missing required columns"):
        routes_from_dataframe(df)


def test_negative_demand_rejected():
    df = _long_frame()
    df.loc[3, "Demand_AtoB"] = -4

    with pytest.raises(ValueError, match="Negative"):
        routes_from_dataframe(df)


def test_non_numeric_demand_rejected():
    df = _long_frame()
    df["Demand_BtoA"] = df["Demand_BtoA"].astype(object)
    df.loc[5, "Demand_BtoA"] = "lots"

    with pytest.raises(ValueError, match="Non-numeric"):
        routes_from_dataframe(df)


def test_fractional_demand_rejected():
    df = _long_frame()
    df["Demand_AtoB"] = df["Demand_AtoB"].astype(float)
    df.loc[2, "Demand_AtoB"] = 1.5

    with pytest.raises(ValueError, match="whole"):
        routes_from_dataframe(df)


def test_inconsistent_static_columns_rejected():
    df = _long_frame()
    df.loc[10, "Length_AtoB"] = 99.0

    with pytest.raises(ValueError, match="inconsistent"):
        routes_from_dataframe(df)


def test_empty_frame_rejected():
    with pytest.raises(ValueError, match="empty"):
        routes_from_dataframe(pd.DataFrame())


def test_invalid_route_values_reported():
    df = _long_frame()
    df["Time_AtoB"] = 0

    with pytest.raises(ValueError, match="Invalid route record 'R1'"):
        routes_from_dataframe(df)


def test_empty_length_cell_rejected(tmp_path):
    df = _long_frame()
    df["Length_AtoB"] = None
    path = tmp_path / "no_length.csv"
    df.to_csv(path, index=False)

    with pytest.raises(ValueError, match="missing or infinite Length_AtoB"):
        load_route_demand(path)


def test_infinite_length_rejected():
    df = _long_frame()
    df["Length_BtoA"] = float("inf")

    with pytest.raises(ValueError, match="Length_BtoA"):
        routes_from_dataframe(df)


def test_fractional_travel_time_rejected():
    df = _long_frame()
    df["Time_AtoB"] = 25.9

    with pytest.raises(ValueError, match="Time_AtoB values must be whole minutes"):
        routes_from_dataframe(df)


def test_whole_float_travel_time_accepted():
    df = _long_frame()
    df["Time_BtoA"] = 22.0

    (route,) = routes_from_dataframe(df)

    assert route.time_b_to_a == 22
    assert isinstance(route.time_b_to_a, int)


@pytest.mark.parametrize("missing_id", [None, "  "])
def test_missing_route_id_rejected(missing_id):
    df = _long_frame()
    df["Route_ID"] = df["Route_ID"].astype(object)
    df.loc[4, "Route_ID"] = missing_id

    with pytest.raises(ValueError, match="Missing Route_ID"):
        routes_from_dataframe(df)


def test_empty_route_id_cell_rejected(tmp_path):
    df = _long_frame()
    df.loc[0, "Route_ID"] = None
    path = tmp_path / "no_id.csv"
    df.to_csv(path, index=False)

    with pytest.raises(ValueError, match="Missing Route_ID"):
        load_route_demand(path)
