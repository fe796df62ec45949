"""langfuse-provider CLI: run single resource operations against Langfuse.

This is an operator tool, not an engine: each command performs exactly one
lifecycle operation on one record. Exit codes: 0=OK, 1=ERROR, 2=REPLACEMENT_REQUIRED.
"""

from __future__ import annotations

import json
import logging
import sys
import traceback
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

import typer
import yaml
from rich.console import Console
from rich.table import Table

from langfuse_provider import __version__
from langfuse_provider.provider import LangfuseProvider
from langfuse_provider.resources.base import Resource, ResourceResponse
from langfuse_provider.resources.diagnostics import Severity
from langfuse_provider.settings import configure_logging, load_settings

logger = logging.getLogger(__name__)

console = Console(stderr=True)
out = Console()

app = typer.Typer(
    name="langfuse-provider",
    help=(
        "Manage Langfuse organizations, projects, API keys and memberships.\n\n"
        "Exit codes: 0=OK, 1=ERROR, 2=REPLACEMENT_REQUIRED."
    ),
    add_completion=False,
    no_args_is_help=True,
    epilog=(
        "Examples:\n"
        "  langfuse-provider schema langfuse_project\n"
        "  langfuse-provider create langfuse_organization --config org.yaml --out org.json\n"
        "  langfuse-provider import langfuse_project proj_1,org_1,pk-lf-...,sk-lf-..."
    ),
)

_state: Dict[str, Any] = {"host": None, "verbose": False}

MASK = "***"


def _version_callback(value: bool) -> None:
    if value:
        out.print(f"langfuse-provider v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    host: Optional[str] = typer.Option(None, "--host", help="Langfuse base URL (or LANGFUSE_HOST)."),
    verbose: bool = typer.Option(False, "--verbose", help="Debug logging and full tracebacks."),
    version: bool = typer.Option(
        False, "--version", help="Show version and exit.", callback=_version_callback, is_eager=True
    ),
) -> None:
    """Langfuse provider operator CLI."""
    _state["host"] = host
    _state["verbose"] = verbose
    configure_logging(verbose, load_settings().log_format)


# ── Helpers ──────────────────────────────────────────────────────


@contextmanager
def _provider() -> Iterator[LangfuseProvider]:
    """Configured provider whose connection pool is closed on exit."""
    provider = LangfuseProvider()
    config = {"host": _state["host"]} if _state["host"] else {}
    diags = provider.configure(config)
    if diags.has_error():
        for d in diags:
            console.print(f"[red bold]{d.summary}[/red bold]: {d.detail}")
        raise SystemExit(1)
    logger.debug("provider settings: %s", json.dumps(provider.settings.to_dict(), sort_keys=True))
    try:
        yield provider
    finally:
        provider.close()


def _resource(provider: LangfuseProvider, type_name: str) -> Resource:
    try:
        return provider.resource(type_name)
    except KeyError:
        known = ", ".join(sorted(provider.resource_types()))
        console.print(f"[red bold]Error:[/red bold] unknown resource type {type_name!r}. Known: {known}")
        raise SystemExit(1)


def _load_mapping(path: Path) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"File not found: {path}")
    text = path.read_text()
    data = json.loads(text) if path.suffix == ".json" else yaml.safe_load(text)
    if not isinstance(data, dict):
        raise ValueError(f"{path} must contain a mapping of attributes")
    return data


def _masked(resource: Resource, record: Dict[str, Any]) -> Dict[str, Any]:
    sensitive = set(resource.schema().sensitive_names)
    return {k: (MASK if k in sensitive and v else v) for k, v in record.items()}


def _finish(resource: Resource, response: ResourceResponse, out_path: Optional[Path]) -> None:
    for d in response.diagnostics:
        color = "red" if d.severity is Severity.ERROR else "yellow"
        console.print(f"[{color} bold]{d.severity.value.title()}: {d.summary}[/{color} bold]")
        if d.detail:
            console.print(f"  {d.detail}")
    if response.diagnostics.has_error():
        raise SystemExit(1)
    if response.removed:
        console.print("[yellow]Resource no longer exists remotely; drop it from state.[/yellow]")
        return
    if response.state is None:
        console.print("[green]Done.[/green]")
        return
    record = response.state.model_dump()
    if out_path is not None:
        out_path.write_text(json.dumps(record, indent=2, sort_keys=True) + "\n")
        console.print(f"[dim]Record written to {out_path}[/dim]")
    out.print_json(json.dumps(_masked(resource, record), sort_keys=True))


def _run_safe(fn) -> None:
    """Run a function with clean error handling."""
    try:
        fn()
    except SystemExit:
        raise
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted.[/yellow]")
        raise SystemExit(130)
    except Exception as e:
        console.print(f"\n[red bold]Error:[/red bold] {e}")
        if _state["verbose"]:
            console.print(traceback.format_exc())
        else:
            console.print("[dim]Run with --verbose for full traceback.[/dim]")
        raise SystemExit(1)


def _parse_config_or_exit(resource: Resource, path: Path):
    plan, diags = resource.parse_config(_load_mapping(path))
    if plan is None:
        _finish(resource, ResourceResponse(diagnostics=diags), None)
    return plan


# ── Commands ─────────────────────────────────────────────────────


@app.command()
def resources() -> None:
    """List the resource types this provider manages."""
    provider = LangfuseProvider()
    table = Table(title="Resource types")
    table.add_column("Type")
    table.add_column("Description")
    for name, cls in sorted(provider.resource_types().items()):
        table.add_row(name, cls().schema().description)
    out.print(table)


@app.command()
def schema(type_name: str = typer.Argument(..., help="Resource type, e.g. langfuse_project.")) -> None:
    """Show the attributes of a resource type."""
    provider = LangfuseProvider()
    resource = _resource(provider, type_name)
    table = Table(title=type_name)
    for col in ("Attribute", "Type", "Mode", "Sensitive", "Forces replacement", "Description"):
        table.add_column(col)
    for attr in resource.schema().attributes:
        mode = "required" if attr.required else "optional" if attr.optional else "computed"
        table.add_row(
            attr.name,
            attr.type,
            mode,
            "yes" if attr.sensitive else "",
            "yes" if attr.requires_replace else "",
            attr.description,
        )
    out.print(table)


@app.command()
def create(
    type_name: str = typer.Argument(...),
    config: Path = typer.Option(..., "--config", "-c", help="YAML/JSON file with declared attributes."),
    out_path: Optional[Path] = typer.Option(None, "--out", "-o", help="Write the resulting record here."),
) -> None:
    """Create a resource from declared configuration."""

    def _impl() -> None:
        with _provider() as provider:
            resource = _resource(provider, type_name)
            plan = _parse_config_or_exit(resource, config)
            _finish(resource, resource.create(plan), out_path)

    _run_safe(_impl)


@app.command()
def read(
    type_name: str = typer.Argument(...),
    state: Path = typer.Option(..., "--state", "-s", help="JSON record from a previous operation."),
    out_path: Optional[Path] = typer.Option(None, "--out", "-o"),
) -> None:
    """Refresh a record from the remote."""

    def _impl() -> None:
        with _provider() as provider:
            resource = _resource(provider, type_name)
            _finish(resource, resource.read(resource.parse_state(_load_mapping(state))), out_path)

    _run_safe(_impl)


@app.command()
def update(
    type_name: str = typer.Argument(...),
    config: Path = typer.Option(..., "--config", "-c"),
    state: Path = typer.Option(..., "--state", "-s"),
    out_path: Optional[Path] = typer.Option(None, "--out", "-o"),
) -> None:
    """Apply changed configuration to an existing record."""

    def _impl() -> None:
        with _provider() as provider:
            resource = _resource(provider, type_name)
            declared = _load_mapping(config)
            prior = _load_mapping(state)
            changed = resource.schema().replacement_attributes(declared, prior)
            if changed:
                console.print(
                    f"[yellow bold]Replacement required:[/yellow bold] {', '.join(changed)} changed. "
                    "Delete and create the resource instead."
                )
                raise SystemExit(2)
            plan = _parse_config_or_exit(resource, config)
            _finish(resource, resource.update(plan, resource.parse_state(prior)), out_path)

    _run_safe(_impl)


@app.command()
def delete(
    type_name: str = typer.Argument(...),
    state: Path = typer.Option(..., "--state", "-s"),
) -> None:
    """Delete the remote object behind a record."""

    def _impl() -> None:
        with _provider() as provider:
            resource = _resource(provider, type_name)
            _finish(resource, resource.delete(resource.parse_state(_load_mapping(state))), None)

    _run_safe(_impl)


@app.command("import")
def import_(
    type_name: str = typer.Argument(...),
    import_id: str = typer.Argument(..., help="Kind-specific import identifier."),
    out_path: Optional[Path] = typer.Option(None, "--out", "-o"),
) -> None:
    """Adopt an existing remote object."""

    def _impl() -> None:
        with _provider() as provider:
            resource = _resource(provider, type_name)
            _finish(resource, resource.import_state(import_id), out_path)

    _run_safe(_impl)


if __name__ == "__main__":
    sys.exit(app())
