"""Command line entry point for the studio-metrics application."""

from __future__ import annotations

import json
from pathlib import Path

import click
import structlog

from studio_metrics.data import (
    LAYOUTS,
    Dataset,
    DatasetLayout,
    DatasetLoadError,
    MetricsDatasetBuilder,
    MetricsHttpClient,
    get_layout,
)
from studio_metrics.data.files import DEFAULT_BASE_URL, DEFAULT_LAYOUT
from studio_metrics.logging import configure_logging
from studio_metrics.output import PivotTableSchema, pivot_frame, write_csv, write_parquet
from studio_metrics.pivot import (
    AVERAGE_METRICS,
    PivotTable,
    SelectionState,
    ViewMode,
    build_pivot,
)
from studio_metrics.pivot.views import compose_view

BASE_URL_HELP = (
    "Base URL serving the CSV exports. May also be set via the STUDIO_METRICS_BASE_URL env var."
)
LAYOUT_HELP = "Export layout to load. May also be set via the STUDIO_METRICS_LAYOUT env var."
CSV_HELP = "Read the export from a local CSV file instead of fetching it over HTTP."

LOG_FORMAT_CHOICES = ("console", "json")
LOG_LEVEL_CHOICES = ("critical", "error", "warning", "info", "debug")
VIEW_CHOICES = tuple(mode.value for mode in ViewMode)
OUTPUT_FORMAT_CHOICES = ("table", "json")

logger = structlog.get_logger(__name__)


def _resolve_layout(ctx: click.Context) -> DatasetLayout:
    """Return the layout selected on the command group."""
    ctx.ensure_object(dict)
    return get_layout(ctx.obj.get("layout") or DEFAULT_LAYOUT)


def _build_dataset(
    *,
    layout: DatasetLayout,
    base_url: str,
    csv_path: Path | None,
) -> Dataset:
    """Load the export either from disk or over HTTP."""
    build_log = logger.bind(scope="dataset-build", layout=layout.name)
    build_log.debug("dataset.build_start", csv_path=str(csv_path) if csv_path else None)
    builder = MetricsDatasetBuilder(layout=layout, client=MetricsHttpClient(base_url=base_url))
    try:
        if csv_path is not None:
            return builder.load_from_path(csv_path)
        return builder.load_dataset()
    finally:
        builder.close()


def _load_dataset(ctx: click.Context, csv_path: Path | None) -> tuple[Dataset, DatasetLayout]:
    """Load the dataset for the active layout, surfacing failures once."""
    layout = _resolve_layout(ctx)
    base_url = ctx.obj.get("base_url") or DEFAULT_BASE_URL
    try:
        dataset = _build_dataset(layout=layout, base_url=base_url, csv_path=csv_path)
    except DatasetLoadError as exc:
        logger.error("dataset.load_failed", layout=layout.name, error=str(exc))
        raise click.ClickException(f"Failed to load metrics data: {exc}") from exc
    return dataset, layout


def _echo_dataset_summary(action: str, dataset: Dataset, layout: DatasetLayout) -> None:
    """Emit a concise data volume summary for terminal feedback."""
    metrics = dataset.metrics()
    locations = dataset.dimension_values(layout.location_dimension)
    logger.info(
        "dataset.summary",
        action=action,
        layout=layout.name,
        records=len(dataset),
        metrics=len(metrics),
        locations=len(locations),
    )
    click.echo(
        f"{action}: {len(dataset)} records, {len(metrics)} metrics "
        f"across {len(locations)} locations ({layout.name} layout)."
    )


def _write_dataset(output: Path, dataset: Dataset) -> None:
    """Serialize a dataset to disk."""
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(dataset.to_dict(), indent=2, ensure_ascii=False))
    click.echo(f"Wrote dataset snapshot to {output}")
    logger.debug("dataset.snapshot_written", output=str(output))


csv_option = click.option(
    "--csv",
    "csv_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help=CSV_HELP,
)


@click.group()
@click.option(
    "--base-url",
    envvar="STUDIO_METRICS_BASE_URL",
    default=DEFAULT_BASE_URL,
    show_default=True,
    help=BASE_URL_HELP,
)
@click.option(
    "--layout",
    type=click.Choice(sorted(LAYOUTS), case_sensitive=False),
    envvar="STUDIO_METRICS_LAYOUT",
    default=DEFAULT_LAYOUT,
    show_default=True,
    help=LAYOUT_HELP,
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVEL_CHOICES, case_sensitive=False),
    envvar="STUDIO_METRICS_LOG_LEVEL",
    default="warning",
    show_default=True,
    help="Verbosity for structured logs.",
)
@click.option(
    "--log-format",
    type=click.Choice(LOG_FORMAT_CHOICES, case_sensitive=False),
    envvar="STUDIO_METRICS_LOG_FORMAT",
    default="console",
    show_default=True,
    help="Render logs as console-friendly text or JSON.",
)
@click.pass_context
def cli(
    ctx: click.Context,
    base_url: str,
    layout: str,
    log_level: str,
    log_format: str,
) -> None:
    """Load studio metric exports and render grouped pivot views."""
    configure_logging(level=log_level, json_output=log_format.lower() == "json")
    ctx.ensure_object(dict)
    ctx.obj.update({"base_url": base_url, "layout": layout.lower()})
    logger.bind(command_group="studio-metrics").debug(
        "cli.initialized",
        base_url=base_url,
        layout=layout.lower(),
        log_level=log_level.lower(),
        log_format=log_format.lower(),
    )


@cli.command("fetch-dataset")
@csv_option
@click.option(
    "--output",
    "output_path",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Optional path to save the parsed dataset as JSON.",
)
@click.pass_context
def fetch_dataset(ctx: click.Context, *, csv_path: Path | None, output_path: Path | None) -> None:
    """Load the export, parse every row, and report counts."""
    cmd_log = logger.bind(command="fetch-dataset")
    cmd_log.info("command.start", csv_path=str(csv_path) if csv_path else None)
    dataset, layout = _load_dataset(ctx, csv_path)
    _echo_dataset_summary("Loaded dataset", dataset, layout)
    if output_path:
        _write_dataset(output_path, dataset)
        cmd_log.info("dataset.written", output=str(output_path), records=len(dataset))


@cli.command("metrics")
@csv_option
@click.pass_context
def list_metrics(ctx: click.Context, *, csv_path: Path | None) -> None:
    """List the metrics and locations present in the export."""
    dataset, layout = _load_dataset(ctx, csv_path)
    click.echo("Metrics:")
    for metric in dataset.metrics():
        policy = "average" if metric in AVERAGE_METRICS else "sum"
        click.echo(f"  {metric} ({policy})")
    click.echo("Locations:")
    for location in dataset.dimension_values(layout.location_dimension):
        click.echo(f"  {location}")


@cli.command("periods")
@click.option(
    "--view",
    type=click.Choice(VIEW_CHOICES, case_sensitive=False),
    default=ViewMode.CHRONOLOGICAL.value,
    show_default=True,
    help="Column arrangement to describe.",
)
@click.pass_context
def periods(ctx: click.Context, *, view: str) -> None:
    """Print how the active layout's periods are grouped into columns."""
    layout = _resolve_layout(ctx)
    for group in compose_view(view.lower(), layout.catalog):
        click.echo(f"{group.label}: {', '.join(period.label for period in group.periods)}")


@cli.command("pivot")
@csv_option
@click.option("--metric", required=True, help="Metric whose rows populate the table.")
@click.option(
    "--group-by",
    default=None,
    help="Dimension to group rows by (defaults to the layout's usual grouping).",
)
@click.option(
    "--view",
    type=click.Choice(VIEW_CHOICES, case_sensitive=False),
    default=ViewMode.CHRONOLOGICAL.value,
    show_default=True,
    help="Column arrangement for the period columns.",
)
@click.option("--location", default=None, help="Restrict rows to a single location.")
@click.option(
    "--expand",
    "expanded",
    multiple=True,
    help="Show member rows beneath this group (repeatable).",
)
@click.option("--expand-all", is_flag=True, default=False, help="Expand every group.")
@click.option(
    "--average-metric",
    "average_metrics",
    multiple=True,
    help="Treat an extra metric as average-type in addition to the built-in set.",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice(OUTPUT_FORMAT_CHOICES, case_sensitive=False),
    default="table",
    show_default=True,
    help="Print a text table or the JSON document.",
)
@click.option(
    "--export",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Also write the table to .csv or .parquet.",
)
@click.option(
    "--raw",
    is_flag=True,
    default=False,
    help="Export unformatted numbers instead of display strings.",
)
@click.pass_context
def pivot(
    ctx: click.Context,
    *,
    csv_path: Path | None,
    metric: str,
    group_by: str | None,
    view: str,
    location: str | None,
    expanded: tuple[str, ...],
    expand_all: bool,
    average_metrics: tuple[str, ...],
    output_format: str,
    export: Path | None,
    raw: bool,
) -> None:
    """Group the selected metric and print its pivot table."""
    if export is not None and export.suffix.lower() not in {".csv", ".parquet"}:
        raise click.BadParameter("Export path must end with .csv or .parquet", param_hint="--export")
    cmd_log = logger.bind(command="pivot", metric=metric, view=view.lower())
    cmd_log.info("command.start", group_by=group_by, location=location)

    dataset, layout = _load_dataset(ctx, csv_path)
    if group_by is not None and group_by not in layout.dimensions:
        raise click.BadParameter(
            f"{group_by!r} is not a dimension of the {layout.name} layout; "
            f"choose from {', '.join(layout.dimensions)}.",
            param_hint="--group-by",
        )
    if metric not in dataset.metrics():
        cmd_log.warning("pivot.metric_missing", available=dataset.metrics())
        raise click.ClickException(f"No rows report the metric {metric!r}.")

    selection = SelectionState(
        metric=metric,
        dimension=group_by,
        view=view.lower(),
        expanded=frozenset(expanded),
        expand_all=expand_all,
        location=location,
    )
    table = build_pivot(
        dataset,
        selection,
        layout=layout,
        average_metrics=AVERAGE_METRICS | frozenset(average_metrics),
    )
    if not table.rows:
        raise click.ClickException("No rows matched the requested selection.")
    unknown_groups = sorted(set(expanded) - set(table.group_keys()))
    if unknown_groups:
        cmd_log.warning("pivot.expand_unknown", groups=unknown_groups)
        click.echo(f"Warning: no group named {', '.join(unknown_groups)}.", err=True)

    if output_format.lower() == "json":
        click.echo(json.dumps(PivotTableSchema().dump(table), indent=2, ensure_ascii=False))
    else:
        click.echo(f"{metric} by {table.dimension} ({table.view.value})")
        click.echo(pivot_frame(table).to_string(index=False))

    if export is not None:
        _export_table(table, export, formatted=not raw)
        cmd_log.info("pivot.exported", output=str(export), rows=len(table.rows))


def _export_table(table: PivotTable, path: Path, *, formatted: bool) -> None:
    """Write the pivot to CSV or parquet according to the file suffix."""
    path.parent.mkdir(parents=True, exist_ok=True)
    frame = pivot_frame(table, formatted=formatted)
    if path.suffix.lower() == ".csv":
        write_csv(frame, path)
    else:
        try:
            write_parquet(frame, path)
        except (ImportError, ValueError) as exc:  # pragma: no cover - optional deps
            raise click.ClickException(
                "Writing parquet requires pandas with pyarrow or fastparquet installed."
            ) from exc
    click.echo(f"Pivot written to {path}")


if __name__ == "__main__":
    cli()
