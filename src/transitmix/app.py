"""
Command-line interface for Transitmix using Typer.
"""

from pathlib import Path

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from transitmix import __version__
from transitmix.api import plan as api_plan
from transitmix.config import load_transitmix_params
from transitmix.core_types import TransitPlan
from transitmix.utils.logging import (
    LogLevel,
    log_error,
    log_success,
    log_warning,
    setup_logging,
)

app = typer.Typer(
    help="Transitmix: fleet size, mix and schedule planner for bus networks",
    add_completion=False,
)
console = Console()


def _print_fleet_table(result: TransitPlan) -> None:
    table = Table(title="Fleet Plan", show_header=True)
    table.add_column("Vehicle Class", style="cyan")
    table.add_column("Planned", style="green", justify="right")
    table.add_column("Used", style="green", justify="right")
    table.add_column("Capacity", justify="right")

    vehicles_used = result.schedule.stats.vehicles_used
    for name, count in result.fleet.plan.counts.items():
        capacity = result.fleet.plan.vehicle_classes[name].capacity
        table.add_row(name, str(count), str(vehicles_used.get(name, 0)), str(capacity))

    console.print(table)
    console.print(
        f"[dim]Peak hour {result.peak.hour:02d}:00, demand {result.peak.demand:,.0f}, "
        f"status {result.fleet.status}[/dim]"
    )


def _print_kpi_table(result: TransitPlan) -> None:
    kpis = result.kpis
    table = Table(title="Plan KPIs", show_header=True)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Total Trips", str(result.schedule.stats.total_trips))
    table.add_row("Total Distance", f"{kpis.total_distance:,.1f} km")
    table.add_row("Fuel Cost", f"{kpis.total_fuel_cost:,.2f}")
    table.add_row("Maintenance Cost", f"{kpis.total_maintenance_cost:,.2f}")
    table.add_row("Depreciation Cost", f"{kpis.total_depreciation_cost:,.2f}")
    table.add_row("Driver Cost", f"{kpis.total_driver_cost:,.2f}")
    table.add_row("Operating Cost", f"{kpis.total_operating_cost:,.2f}")
    table.add_row("Cost per km", f"{kpis.cost_per_km:,.2f}")
    table.add_row("Cost per Passenger", f"{kpis.cost_per_passenger:,.2f}")
    table.add_row("Carbon Emission", f"{kpis.total_carbon_emission:,.1f} kg")
    table.add_row("Passengers Served", f"{kpis.passengers_served:,.0f}")
    table.add_row("Unmet Demand", f"{kpis.unmet_demand:,.1f}")

    console.print(table)


def _print_route_table(result: TransitPlan) -> None:
    trips_df = result.trips_df
    if trips_df.empty:
        console.print("[yellow]No trips were dispatched[/yellow]")
        return

    summary = (
        trips_df.groupby(["Route_ID", "Direction"], sort=False)
        .agg(Trips=("Trip_ID", "count"), Passengers=("Passengers", "sum"))
        .reset_index()
    )

    table = Table(title="Trips per Route", show_header=True)
    table.add_column("Route", style="cyan")
    table.add_column("Direction")
    table.add_column("Trips", justify="right")
    table.add_column("Passengers", justify="right")
    for _, row in summary.iterrows():
        table.add_row(
            str(row["Route_ID"]),
            str(row["Direction"]),
            str(row["Trips"]),
            f"{row['Passengers']:,.0f}",
        )

    console.print(table)


@app.command("plan")
def plan_command(
    demand: Path = typer.Option(
        ..., "--demand", "-d", help="Path to route demand CSV file"
    ),
    config: Path | None = typer.Option(
        None, "--config", "-c", help="Path to configuration YAML file"
    ),
    output: Path = typer.Option("results", "--output", "-o", help="Output directory"),
    abort_on_infeasible: bool = typer.Option(
        False,
        "--abort-on-infeasible",
        help="Fail instead of simulating when the fleet cannot cover the peak hour",
    ),
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Enable verbose output"
    ),
    quiet: bool = typer.Option(
        False, "--quiet", "-q", help="Minimal output (errors only)"
    ),
    debug: bool = typer.Option(False, "--debug", help="Enable debug output"),
) -> None:
    """
    Plan fleet size, mix and a full-day schedule for route demand.

    Finds the peak hour, picks the cheapest vehicle mix covering it, simulates
    a day of dispatching and reports cost, distance and emission KPIs.
    """
    _setup_logging_from_flags(verbose, quiet, debug)

    # -----------------------------
    # Validate CLI inputs first
    # -----------------------------
    if not demand.exists():
        log_error(f"Demand file not found: {demand}")
        raise typer.Exit(1)

    if config and not config.exists():
        log_error(f"Config file not found: {config}")
        raise typer.Exit(1)

    if config is not None:
        try:
            load_transitmix_params(config)
        except ValueError as e:
            log_error(str(e))
            raise typer.Exit(1)

    policy = "abort" if abort_on_infeasible else None

    try:
        if not quiet:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=console,
            ) as progress:
                task = progress.add_task("Planning fleet and schedule...", total=None)
                result = api_plan(
                    demand=str(demand),
                    config=str(config) if config else None,
                    output_dir=str(output),
                    verbose=verbose,
                    infeasible_policy=policy,
                )
                progress.update(task, completed=True)
        else:
            result = api_plan(
                demand=str(demand),
                config=str(config) if config else None,
                output_dir=str(output),
                verbose=verbose,
                infeasible_policy=policy,
            )

        if not quiet:
            _print_fleet_table(result)
            _print_kpi_table(result)
            _print_route_table(result)

        if not result.fleet.is_feasible:
            log_warning("Fleet could not cover the peak hour; results use the full fleet")
        if result.results_file:
            log_success(f"Results saved to {result.results_file}")

    except FileNotFoundError as e:
        log_error(str(e))
        raise typer.Exit(1)
    except ValueError as e:
        log_error(str(e))
        raise typer.Exit(1)
    except TimeoutError as e:
        log_error(str(e))
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """
    Show the Transitmix version.
    """
    console.print(f"Transitmix version {__version__}")


def _setup_logging_from_flags(
    verbose: bool = False, quiet: bool = False, debug: bool = False
):
    """Setup logging based on CLI flags or environment variable."""
    level_from_flags: LogLevel | None = None
    if debug:
        level_from_flags = LogLevel.DEBUG
    elif verbose:
        level_from_flags = LogLevel.VERBOSE
    elif quiet:
        level_from_flags = LogLevel.QUIET

    if level_from_flags is not None:
        setup_logging(level_from_flags)
    else:
        # No flags set, let setup_logging handle it (will check env var)
        setup_logging()


if __name__ == "__main__":
    app()
