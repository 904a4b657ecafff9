from __future__ import annotations

import json
import logging
import shutil
import textwrap
from contextlib import contextmanager
from enum import Enum
from typing import Iterator, Optional, Sequence

import typer

from .container import Container
from ..core.client import OsvClient
from ..core.domain.errors import ApiError, NotFoundError
from ..core.domain.models import Vulnerability


app = typer.Typer(add_completion=False, help="Query the OSV vulnerability database (https://osv.dev).")

EXIT_NOT_FOUND = 1
EXIT_API_ERROR = 2


class LogLevel(str, Enum):
    CRITICAL = "CRITICAL"
    ERROR = "ERROR"
    WARNING = "WARNING"
    INFO = "INFO"
    DEBUG = "DEBUG"


@app.callback()
def main(
    log_level: LogLevel = typer.Option(LogLevel.WARNING, "--log-level", help="Logging level for osv_client loggers"),
) -> None:
    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger("osv_client").setLevel(log_level.value)


@contextmanager
def provide_client() -> Iterator[OsvClient]:
    container = Container()
    container.init_resources()
    try:
        yield container.osv_client()
    finally:
        container.shutdown_resources()


@contextmanager
def _api_errors() -> Iterator[None]:
    try:
        yield
    except NotFoundError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=EXIT_NOT_FOUND)
    except ApiError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=EXIT_API_ERROR)


@app.command("package", help="List vulnerabilities affecting NAME at VERSION in an ecosystem.")
def package_cmd(
    name: str = typer.Argument(..., help="Package name (e.g., jinja2)"),
    version: str = typer.Argument(..., help="Package version (e.g., 2.4.1)"),
    ecosystem: str = typer.Option(..., "--ecosystem", "-e", help="Ecosystem (e.g., PyPI, npm, crates.io)"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw OSV records as a JSON array"),
) -> None:
    with _api_errors(), provide_client() as client:
        vulns = client.query_package(name, version, ecosystem)
    _print_result(vulns, as_json=as_json, subject=f"{name} {version}")


@app.command("commit", help="List vulnerabilities affecting a git commit (full SHA1).")
def commit_cmd(
    commit: str = typer.Argument(..., help="Full SHA1 commit hash"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw OSV records as a JSON array"),
) -> None:
    with _api_errors(), provide_client() as client:
        vulns = client.query_commit(commit)
    _print_result(vulns, as_json=as_json, subject=commit)


@app.command("vuln", help="Show one vulnerability by id (e.g., OSV-2020-484, GHSA-...).")
def vuln_cmd(
    vuln_id: str = typer.Argument(..., metavar="ID", help="Vulnerability identifier"),
    as_json: bool = typer.Option(False, "--json", help="Print the raw OSV record"),
) -> None:
    with _api_errors(), provide_client() as client:
        vuln = client.vulnerability(vuln_id)
    if as_json:
        typer.echo(vuln.to_json(indent=2))
    else:
        _print_detail(vuln)


def _wrap_width() -> int:
    return max(40, round(shutil.get_terminal_size().columns / 3 * 2))


def _print_result(vulns: Optional[Sequence[Vulnerability]], *, as_json: bool, subject: str) -> None:
    if as_json:
        typer.echo(json.dumps([v.to_dict() for v in vulns or []], ensure_ascii=False, indent=2))
        return
    if not vulns:
        typer.echo(f"No known vulnerabilities for {subject}")
        return
    _print_list(vulns)


def _print_list(vulns: Sequence[Vulnerability]) -> None:
    """Two columns: id and the wrapped summary (details when no summary is given)."""
    width = _wrap_width()
    typer.echo(f"{'ID':24} Details")
    for v in vulns:
        text = v.summary or v.details or "-"
        lines = textwrap.wrap(text, width) or ["-"]
        typer.echo(f"{v.id:24} {lines[0]}")
        for line in lines[1:]:
            typer.echo(f"{'':24} {line}")


def _print_detail(v: Vulnerability) -> None:
    typer.echo(f"ID: {v.id}")
    if v.aliases:
        typer.echo(f"Aliases: {', '.join(v.aliases)}")
    if v.summary:
        typer.echo(f"Summary: {v.summary}")
    typer.echo(f"Published: {v.published.isoformat()}")
    typer.echo(f"Modified:  {v.modified.isoformat()}")
    if v.withdrawn:
        typer.echo(f"Withdrawn: {v.withdrawn.isoformat()}")
    if v.severity:
        typer.echo("Severity:")
        for s in v.severity:
            typer.echo(f"  - {s.severity_type.value}: {s.score}")
    if v.affected:
        typer.echo("Affected:")
        for a in v.affected:
            typer.echo(f"  - [{a.package.ecosystem.value}] {a.package.name}")
            for r in a.ranges:
                events = ", ".join(f"{e.kind.value} {e.value}" for e in r.events)
                typer.echo(f"      {r.range_type.value}: {events}")
    if v.references:
        typer.echo("References:")
        for ref in v.references:
            typer.echo(f"  - {ref.reference_type.value}: {ref.url}")
    if v.details:
        typer.echo("Details:")
        for line in textwrap.wrap(v.details, _wrap_width()):
            typer.echo(f"  {line}")


if __name__ == "__main__":  # pragma: no cover
    app()
