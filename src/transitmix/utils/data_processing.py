"""
Route demand ingestion.

Two CSV layouts are accepted:

* **long** – one row per route and hour::

    Route_ID,Route_Name,Length_AtoB,Length_BtoA,Time_AtoB,Time_BtoA,Hour,Demand_AtoB,Demand_BtoA

* **wide** – one row per route with the static columns above (minus ``Hour``
  and the demand pair) followed by ``AtoB_00`` … ``AtoB_23`` and
  ``BtoA_00`` … ``BtoA_23``.

Every route must come out with an id, finite lengths, whole-minute travel
times, exactly 24 hourly entries and non-negative integer counts. Anything
else is rejected here, before the planning core runs.
"""

from pathlib import Path

import numpy as np
import pandas as pd

from transitmix.core_types import HOURS_PER_DAY, HourlyDemand, Route, validate_routes
from transitmix.utils.logging import TransitmixLogger

logger = TransitmixLogger.get_logger(__name__)

STATIC_COLUMNS = [
    "Route_ID",
    "Route_Name",
    "Length_AtoB",
    "Length_BtoA",
    "Time_AtoB",
    "Time_BtoA",
]
LONG_DEMAND_COLUMNS = ["Hour", "Demand_AtoB", "Demand_BtoA"]
WIDE_DEMAND_COLUMNS = [f"AtoB_{h:02d}" for h in range(HOURS_PER_DAY)] + [
    f"BtoA_{h:02d}" for h in range(HOURS_PER_DAY)
]


def _is_wide_format(df: pd.DataFrame) -> bool:
    return any(col in df.columns for col in WIDE_DEMAND_COLUMNS)


def _require_columns(df: pd.DataFrame, required: list[str]) -> None:
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise ValueError(
            f"Missing required columns: {missing}\n"
            f"Required columns are: {required}\n"
            f"Available columns are: {list(df.columns)}"
        )


def _as_counts(series: pd.Series, label: str) -> pd.Series:
    """Coerce demand values to non-negative integers or fail loudly."""
    numeric = pd.to_numeric(series, errors="coerce")
    if numeric.isna().any():
        raise ValueError(f"Non-numeric or missing {label} values")
    if (numeric < 0).any():
        raise ValueError(f"Negative {label} values are not allowed")
    if not (numeric == numeric.round()).all():
        raise ValueError(f"{label} values must be whole passenger counts")
    return numeric.astype(int)


def _as_route_values(series: pd.Series, label: str, whole: bool = False) -> pd.Series:
    """Coerce route lengths or travel times to numbers, rejecting gaps and fractions."""
    numeric = pd.to_numeric(series, errors="coerce")
    if not np.isfinite(numeric).all():
        raise ValueError(f"Non-numeric, missing or infinite {label} values")
    if whole and not (numeric == numeric.round()).all():
        raise ValueError(f"{label} values must be whole minutes")
    return numeric


def _wide_to_long(df: pd.DataFrame) -> pd.DataFrame:
    _require_columns(df, STATIC_COLUMNS + WIDE_DEMAND_COLUMNS)
    rows = []
    for _, row in df.iterrows():
        for hour in range(HOURS_PER_DAY):
            record = {col: row[col] for col in STATIC_COLUMNS}
            record["Hour"] = hour
            record["Demand_AtoB"] = row[f"AtoB_{hour:02d}"]
            record["Demand_BtoA"] = row[f"BtoA_{hour:02d}"]
            rows.append(record)
    return pd.DataFrame(rows, columns=STATIC_COLUMNS + LONG_DEMAND_COLUMNS)


def routes_from_dataframe(df: pd.DataFrame) -> list[Route]:
    """Build validated routes from a long- or wide-format DataFrame.

    Routes keep the order of their first appearance in the frame.
    """
    if df.empty:
        raise ValueError("Demand data is empty. Please provide route demand data.")

    if _is_wide_format(df):
        df = _wide_to_long(df)
    _require_columns(df, STATIC_COLUMNS + LONG_DEMAND_COLUMNS)

    df = df.copy()
    if df["Route_ID"].isna().any():
        raise ValueError("Missing Route_ID values")
    df["Route_ID"] = df["Route_ID"].astype(str).str.strip()
    if (df["Route_ID"] == "").any():
        raise ValueError("Missing Route_ID values")
    for col in ("Length_AtoB", "Length_BtoA"):
        df[col] = _as_route_values(df[col], col)
    for col in ("Time_AtoB", "Time_BtoA"):
        df[col] = _as_route_values(df[col], col, whole=True)
    df["Hour"] = _as_counts(df["Hour"], "Hour")
    df["Demand_AtoB"] = _as_counts(df["Demand_AtoB"], "Demand_AtoB")
    df["Demand_BtoA"] = _as_counts(df["Demand_BtoA"], "Demand_BtoA")

    routes: list[Route] = []
    for route_id, group in df.groupby("Route_ID", sort=False):
        if len(group) != HOURS_PER_DAY:
            raise ValueError(
                f"Route '{route_id}' has {len(group)} hourly rows, expected {HOURS_PER_DAY}"
            )
        first = group.iloc[0]
        for col in STATIC_COLUMNS[1:]:
            if group[col].nunique(dropna=False) != 1:
                raise ValueError(f"Route '{route_id}' has inconsistent '{col}' values")

        hourly = tuple(
            HourlyDemand(
                hour=int(row["Hour"]),
                demand_a_to_b=int(row["Demand_AtoB"]),
                demand_b_to_a=int(row["Demand_BtoA"]),
            )
            for _, row in group.iterrows()
        )
        try:
            routes.append(
                Route(
                    route_id=str(route_id),
                    name=str(first["Route_Name"]),
                    length_a_to_b=float(first["Length_AtoB"]),
                    length_b_to_a=float(first["Length_BtoA"]),
                    time_a_to_b=int(first["Time_AtoB"]),
                    time_b_to_a=int(first["Time_BtoA"]),
                    hourly_demand=hourly,
                )
            )
        except (TypeError, ValueError) as e:
            raise ValueError(f"Invalid route record '{route_id}': {e}") from e

    validate_routes(routes)
    return routes


def load_route_demand(demand_file: str | Path) -> list[Route]:
    """Load and validate route demand from a CSV file."""
    csv_file_path = Path(demand_file)
    if not csv_file_path.exists():
        raise FileNotFoundError(
            f"Demand file not found: {csv_file_path}\n"
            f"Please check the file path and ensure it exists."
        )

    logger.info(f"Loading route demand from {csv_file_path}")
    df = pd.read_csv(csv_file_path, dtype={"Route_ID": str})
    routes = routes_from_dataframe(df)
    logger.info(f"Loaded {len(routes)} routes from {csv_file_path}")
    return routes
