"""Click entry point for the ``buildgraph`` command."""

from __future__ import annotations

import json
from pathlib import Path

import click

from buildgraph import __version__
from buildgraph.analysis.engine import DETECTORS, AnalysisEngine, AnalysisReport, analyze_inventory
from buildgraph.config import load_config
from buildgraph.inventory.loader import InventoryError, load_inventory
from buildgraph.inventory.repository import RepositoryUnknownError, enumerate_digests
from buildgraph.models.config import BuildGraphConfig
from buildgraph.models.markers import Severity
from buildgraph.observability.logging import setup_logging

_LOG_LEVELS = ["debug", "info", "warning", "error"]

# Exit statuses
EXIT_OK = 0
EXIT_PROBLEMS = 1
EXIT_BAD_INPUT = 2


def _load_config() -> BuildGraphConfig:
    try:
        return load_config()
    except ValueError as exc:
        raise click.UsageError(f"invalid environment configuration: {exc}") from exc


def _render_text(report: AnalysisReport) -> str:
    if not report.markers:
        return "No problems found."
    lines = []
    for marker in report.markers:
        lines.append(f"{marker.severity}: [{marker.key}] {marker.node.display_name}: {marker.message}")
        if marker.suggestion:
            lines.append(f"  try: {marker.suggestion}")
    lines.append(f"{len(report.markers)} problem(s) found.")
    return "\n".join(lines)


def _render_json(report: AnalysisReport) -> str:
    payload = {
        "markers": [marker.to_dict() for marker in report.markers],
        "meta": {
            "detectors_run": report.meta.detectors_run,
            "markers_found": report.meta.markers_found,
            "duration_ms": round(report.meta.duration_ms, 3),
            "warnings": report.meta.warnings,
        },
    }
    return json.dumps(payload, indent=2)


@click.group()
@click.version_option(version=__version__, prog_name="buildgraph")
def cli() -> None:
    """Detect unpushable and circular build configurations."""


@cli.command()
@click.argument("inventory", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--format", "output_format", type=click.Choice(["text", "json"]), default=None, help="Output format.")
@click.option(
    "--detector",
    "detectors",
    type=click.Choice(sorted(DETECTORS)),
    multiple=True,
    help="Detector to run (repeatable). Defaults to BUILDGRAPH_DETECTORS.",
)
@click.option("--log-level", type=click.Choice(_LOG_LEVELS), default=None, help="Log level for stderr.")
@click.pass_context
def analyze(
    ctx: click.Context,
    inventory: Path,
    output_format: str | None,
    detectors: tuple[str, ...],
    log_level: str | None,
) -> None:
    """Analyze the objects in INVENTORY and print every problem found."""
    config = _load_config()
    setup_logging(log_level or config.log.level)

    engine = AnalysisEngine.from_names(list(detectors) or config.analysis.detectors)
    try:
        inv = load_inventory(inventory)
    except InventoryError as exc:
        click.echo(f"error: {exc}", err=True)
        ctx.exit(EXIT_BAD_INPUT)

    report = analyze_inventory(inv, engine)
    if (output_format or config.output.format) == "json":
        click.echo(_render_json(report))
    else:
        click.echo(_render_text(report))

    if any(marker.severity == Severity.ERROR for marker in report.markers):
        ctx.exit(EXIT_PROBLEMS)


@cli.command()
@click.argument("inventory", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("repository")
@click.pass_context
def images(ctx: click.Context, inventory: Path, repository: str) -> None:
    """Print the managed image digests stored in REPOSITORY (namespace/name)."""
    namespace, sep, name = repository.partition("/")
    if not sep or not name or "/" in name:
        raise click.BadParameter("expected namespace/name", param_hint="REPOSITORY")

    config = _load_config()
    setup_logging(config.log.level)

    try:
        inv = load_inventory(inventory)
    except InventoryError as exc:
        click.echo(f"error: {exc}", err=True)
        ctx.exit(EXIT_BAD_INPUT)

    try:
        digests = enumerate_digests(inv, namespace, name)
    except RepositoryUnknownError as exc:
        click.echo(f"error: {exc}", err=True)
        ctx.exit(EXIT_PROBLEMS)

    for digest in digests:
        click.echo(digest)
