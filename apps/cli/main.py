"""CLI application for update-dependents."""

import json
import logging
from pathlib import Path

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.text import Text

from core.config import RunOptions
from core.discover import DEFAULT_EXCLUDES
from core.errors import UpdateDependentsError
from core.models import ChangeEvent, DependencyKind, RunReport
from core.propagate import propagate
from core.report import format_change
from core.update import DEFAULT_PREFIX

__version__ = "0.1.0"

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger("update_dependents")

KIND_STYLES = {
    DependencyKind.DEPENDENCIES: "blue",
    DependencyKind.PEER: "green",
    DependencyKind.DEV: "red",
}


def configure_logging(verbose: bool) -> None:
    """Send log records to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_time=False, show_path=False)],
        force=True,
    )


def render_change(event: ChangeEvent, dry_run: bool) -> Text:
    """Format a change line with the dependency kind coloured."""
    action = "would update" if dry_run else "updated"
    return Text.assemble(
        f"{action} {event.dependent_name}.",
        (event.kind.value, KIND_STYLES[event.kind]),
        f".{event.target} from {event.from_range} to {event.to_range}",
    )


def format_json_output(report: RunReport) -> str:
    """Format a run report as JSON."""
    changes = []
    for event in report.events:
        changes.append({
            "dependent": event.dependent_name,
            "kind": event.kind.value,
            "from": event.from_range,
            "to": event.to_range,
            "path": str(event.manifest_path),
            "semver_delta": event.semver_delta,
            "message": format_change(event, report.dry_run),
        })

    failures = [
        {"dependent": f.dependent_name, "path": str(f.manifest_path), "error": f.error}
        for f in report.failures
    ]

    return json.dumps({
        "target": report.target,
        "version": report.new_version,
        "prefix": report.prefix,
        "dry_run": report.dry_run,
        "changes": changes,
        "written": [str(p) for p in report.written],
        "failures": failures,
        "warnings": report.warnings,
    }, indent=2)


def print_report(report: RunReport) -> None:
    """Print one line per change, followed by any write failures."""
    if not report.has_changes:
        console.print(f"No dependents of {report.target} need updating", markup=False)
        return

    written = set(report.written)
    for event in report.events:
        if report.dry_run or event.manifest_path in written:
            console.print(render_change(event, report.dry_run), soft_wrap=True)

    for failure in report.failures:
        console.print(
            f"failed to update {failure.dependent_name} ({failure.manifest_path}): {failure.error}",
            style="red",
            markup=False,
            soft_wrap=True,
        )


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"update-dependents {__version__}")
        raise typer.Exit()


app = typer.Typer(
    name="update-dependents",
    help="update-dependents - Bump the referenced version of a package in all of its dependents",
    add_completion=False,
)

@app.command()
def update(
    package_name: str | None = typer.Argument(None, help="Package whose dependents should be updated"),
    add: list[Path] | None = typer.Option(
        None, "--add", "-a", help="Path in which to search for dependents (repeatable, defaults to the current directory)"
    ),
    prefix: str = typer.Option(DEFAULT_PREFIX, "--prefix", "-p", help="Version range prefix, e.g. '~', '^' or ''"),
    set_version: str | None = typer.Option(
        None, "--set-version", "-s", help="Version to propagate (defaults to the version in the package's package.json)"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", "-d", help="Print what would be updated without changing files"),
    exclude: list[str] | None = typer.Option(
        None, "--exclude", "-x", help="Extra directory name to skip while scanning (repeatable)"
    ),
    format_type: str = typer.Option("text", "--format", help="Output format: text or json"),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
    version: bool = typer.Option(
        False, "--version", "-v", callback=_version_callback, is_eager=True, help="Show version info and exit"
    ),
) -> None:
    """Update the referenced version of PACKAGE_NAME in all of its dependents.

    If b depends on a, then a's entry in b's package.json is rewritten to the
    version found in a's package.json, with the given prefix (default '~').
    """
    configure_logging(verbose)

    if not package_name:
        console.print("You need to specify which package to work with", style="red")
        raise typer.Exit(1)

    if format_type not in ("text", "json"):
        console.print(f"Error: Unsupported format: {format_type}", style="red", markup=False)
        raise typer.Exit(1)

    try:
        options = RunOptions(
            target=package_name,
            roots=add or [Path.cwd()],
            prefix=prefix,
            new_version=set_version,
            dry_run=dry_run,
            exclude_dirs=DEFAULT_EXCLUDES | set(exclude or ()),
        )

        if dry_run and format_type == "text":
            console.print("This is a dry run…", style="red")

        report = propagate(options)

        if format_type == "json":
            console.print(format_json_output(report), markup=False, highlight=False, soft_wrap=True)
        else:
            print_report(report)

    except typer.Exit:
        raise
    except ValidationError as e:
        console.print(f"Error: Invalid options: {e.errors()[0]['msg']}", style="red", markup=False)
        raise typer.Exit(1)
    except UpdateDependentsError as e:
        console.print(f"Error: {e}", style="red", markup=False)
        raise typer.Exit(1)
    except Exception as e:
        logger.debug("Unexpected failure", exc_info=True)
        console.print(f"Error: {e}", style="red", markup=False)
        raise typer.Exit(1)

if __name__ == "__main__":
    app()
