"""CLI entry point for the PnL forecast engine."""

from __future__ import annotations

import json
import sys
from datetime import datetime

import click

from .core.config import Settings, load_settings
from .core.enums import ExportFormat
from .core.errors import ConfigError, DataError

_DATE_FORMATS = ["%Y-%m-%d", "%Y-%m-%dT%H:%M:%S", "%Y-%m-%d %H:%M:%S"]


def _settings_from_options(
    config: str | None,
    model: str | None,
    since: datetime | None,
    exclude: tuple[str, ...],
) -> Settings:
    overrides: dict = {}
    if model is not None:
        overrides.setdefault("filter", {})["model_pattern"] = model
    if since is not None:
        overrides.setdefault("filter", {})["since"] = since
    if exclude:
        overrides.setdefault("filter", {})["excluded_categories"] = list(exclude)
    return load_settings(config_path=config, overrides=overrides)


def _execute(settings: Settings, source: str):
    import asyncio

    from .main import run

    try:
        return asyncio.run(run(settings, source=source))
    except DataError as exc:
        click.echo(f"Error: {exc}", err=True)
        sys.exit(2)


def _common_options(fn):
    fn = click.option("--exclude", multiple=True, help="Excluded category (repeatable)")(fn)
    fn = click.option("--since", type=click.DateTime(_DATE_FORMATS), default=None,
                      help="Keep trades closing after this time")(fn)
    fn = click.option("--model", default=None, help="Model name substring")(fn)
    fn = click.option("--source", default="postgres",
                      help='"postgres" or a CSV/Parquet ledger file')(fn)
    fn = click.option("--config", default=None, help="Config file path")(fn)
    return fn


@click.group()
def main() -> None:
    """PnL forecast trajectory engine."""


@main.command()
@_common_options
@click.option("--format", "fmt", type=click.Choice([f.value for f in ExportFormat]),
              default=ExportFormat.CSV.value, help="Output format")
@click.option("--output", type=click.Path(dir_okay=False, writable=True), default=None,
              help="Output file (default: stdout)")
def forecast(
    config: str | None,
    source: str,
    model: str | None,
    since: datetime | None,
    exclude: tuple[str, ...],
    fmt: str,
    output: str | None,
) -> None:
    """Build the actual + predicted PnL trajectory and export it."""
    from .export import TrajectoryExporter

    try:
        settings = _settings_from_options(config, model, since, exclude)
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc

    result = _execute(settings, source)
    exporter = TrajectoryExporter(percentiles=settings.forecast.percentiles)
    if ExportFormat(fmt) == ExportFormat.JSON:
        text = exporter.to_json(result.points)
    else:
        text = exporter.to_csv(result.points)

    if output:
        with open(output, "w", encoding="utf-8", newline="") as f:
            f.write(text)
        click.echo(f"Wrote {len(result.points)} points to {output}", err=True)
    else:
        click.echo(text, nl=False)


@main.command()
@_common_options
def stats(
    config: str | None,
    source: str,
    model: str | None,
    since: datetime | None,
    exclude: tuple[str, ...],
) -> None:
    """Print the statistics behind one trajectory run."""
    try:
        settings = _settings_from_options(config, model, since, exclude)
    except ConfigError as exc:
        raise click.UsageError(str(exc)) from exc

    result = _execute(settings, source)
    click.echo(json.dumps(result.summary(), indent=2, default=str))


if __name__ == "__main__":
    main()
