"""CLI entry point for aumos-chunk-compliance.

Invoked as::

    chunk-compliance [OPTIONS] COMMAND [ARGS]...

or during development::

    python -m aumos_chunk_compliance.cli.main

Commands
--------
- scan         Scan a piece of text (or a file) and show the verdict
- process      Run one tenant pass over chunks loaded from a JSONL file
- config show  Print the effective configuration as YAML
- version      Show version information
"""
from __future__ import annotations

import json
import sys
from pathlib import Path

import click
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from aumos_chunk_compliance.config import ComplianceConfig, ConfigLoader
from aumos_chunk_compliance.errors import ComplianceError
from aumos_chunk_compliance.scanning.models import ComplianceReport, ComplianceResult

console = Console()
err_console = Console(stderr=True)

_DEFAULT_CONFIG = Path("compliance.yaml")

_RISK_STYLES: dict[str, str] = {
    "high": "bold red",
    "medium": "yellow",
    "low": "green",
    "unknown": "magenta",
}


def _load_config(config_path: str | None) -> ComplianceConfig:
    loader = ConfigLoader()
    path = Path(config_path) if config_path else _DEFAULT_CONFIG
    if not path.exists():
        if config_path:
            err_console.print(f"[red]Config not found:[/red] {path}")
            sys.exit(2)
        return loader.defaults()
    try:
        return loader.load(path)
    except ComplianceError as exc:
        err_console.print(f"[red]Invalid config:[/red] {exc}")
        sys.exit(2)


def _print_result(result: ComplianceResult) -> None:
    style = _RISK_STYLES.get(result.risk_level, "white")
    classification = result.data_classification
    console.print(
        Panel(
            f"Risk: [{style}]{result.risk_level.upper()}[/{style}]\n"
            f"Level: [cyan]{classification.level.value}[/cyan]  "
            f"Retention: [cyan]{classification.retention_days}[/cyan] days\n"
            f"Flags: {', '.join(result.compliance_flags) or '-'}\n"
            f"Actions: {', '.join(result.required_actions) or '-'}",
            title=f"Compliance Scan: {result.chunk_id}",
            border_style="blue",
        )
    )
    if result.pii_details:
        table = Table(title="PII Matches", box=box.SIMPLE)
        table.add_column("Type", style="cyan")
        table.add_column("Masked Value", style="magenta")
        table.add_column("Offset", justify="right")
        table.add_column("Confidence", justify="right")
        for match in result.pii_details:
            table.add_row(match.pii_type, match.value, str(match.position), f"{match.confidence:.2f}")
        console.print(table)


def _print_report(report: ComplianceReport) -> None:
    console.print(
        Panel(
            f"Chunks scanned: [cyan]{report.total_chunks_scanned}[/cyan]\n"
            f"PII detected:   [cyan]{report.pii_detected_count}[/cyan]\n"
            f"Violations:     [cyan]{len(report.compliance_violations)}[/cyan]\n"
            f"Duration:       [cyan]{report.scan_duration:.3f}s[/cyan]",
            title=f"Compliance Report: {report.tenant_id}",
            border_style="blue",
        )
    )
    if report.risk_distribution:
        table = Table(title="Risk Distribution", box=box.SIMPLE)
        table.add_column("Risk", style="cyan")
        table.add_column("Chunks", justify="right")
        for risk, count in sorted(report.risk_distribution.items()):
            table.add_row(risk, str(count))
        console.print(table)
    if report.compliance_violations:
        table = Table(title="Violations", box=box.SIMPLE)
        table.add_column("Chunk", style="dim")
        table.add_column("Type", style="cyan")
        table.add_column("Severity", style="magenta")
        table.add_column("Regulation")
        table.add_column("Action")
        for violation in report.compliance_violations:
            table.add_row(
                violation.chunk_id,
                violation.violation_type,
                violation.severity,
                violation.regulation,
                violation.required_action,
            )
        console.print(table)


# ---------------------------------------------------------------------------
# Root command group
# ---------------------------------------------------------------------------


@click.group()
@click.version_option(package_name="aumos-chunk-compliance")
def cli() -> None:
    """Chunk Compliance CLI — PII detection, regulation flags, and tenant reports."""


# ---------------------------------------------------------------------------
# version
# ---------------------------------------------------------------------------


@cli.command(name="version")
def version_command() -> None:
    """Show detailed version information."""
    from aumos_chunk_compliance import __version__

    console.print(
        Panel(
            f"[bold]aumos-chunk-compliance[/bold]  v[cyan]{__version__}[/cyan]\n"
            "Compliance scanning for multi-tenant document chunks.",
            title="Version",
            border_style="blue",
        )
    )


# ---------------------------------------------------------------------------
# scan
# ---------------------------------------------------------------------------


@cli.command(name="scan")
@click.argument("text", required=False)
@click.option(
    "--file",
    "-f",
    "file_path",
    type=click.Path(exists=True, dir_okay=False),
    help="Read the content to scan from a file.",
)
@click.option("--config", "-c", "config_path", type=click.Path(), help="Path to compliance.yaml.")
@click.option("--json", "as_json", is_flag=True, help="Print the result as JSON.")
@click.option("--strict", is_flag=True, help="Exit with status 1 when any compliance flag fires.")
def scan_command(
    text: str | None,
    file_path: str | None,
    config_path: str | None,
    as_json: bool,
    strict: bool,
) -> None:
    """Scan TEXT (or --file) and show the compliance verdict."""
    if file_path:
        content = Path(file_path).read_text(encoding="utf-8")
        chunk_id = Path(file_path).name
        metadata: dict[str, object] = {"source_path": file_path}
    elif text is not None:
        content = text
        chunk_id = "adhoc"
        metadata = {}
    else:
        err_console.print("[red]Provide TEXT or --file.[/red]")
        sys.exit(2)

    from aumos_chunk_compliance.convenience import ChunkScanner

    scanner = ChunkScanner(_load_config(config_path))
    result = scanner.scan_text(content, chunk_id=chunk_id, metadata=metadata)

    if as_json:
        click.echo(json.dumps(result.to_dict(), indent=2))
    else:
        _print_result(result)

    sys.exit(1 if strict and result.has_violations else 0)


# ---------------------------------------------------------------------------
# process
# ---------------------------------------------------------------------------


@cli.command(name="process")
@click.argument("chunks_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--tenant", "-t", "tenant_id", required=True, help="Tenant whose pending chunks are scanned.")
@click.option("--config", "-c", "config_path", type=click.Path(), help="Path to compliance.yaml.")
@click.option(
    "--audit-log",
    "audit_log",
    type=click.Path(dir_okay=False),
    help="Append the report to this JSONL audit log.",
)
@click.option("--json", "as_json", is_flag=True, help="Print the report as JSON.")
def process_command(
    chunks_file: str,
    tenant_id: str,
    config_path: str | None,
    audit_log: str | None,
    as_json: bool,
) -> None:
    """Run one tenant pass over chunks read from CHUNKS_FILE (JSONL).

    Each line is an object with ``chunk_id``, ``content``, ``tenant_id`` and
    optional ``metadata`` and ``compliance_status``.
    """
    from aumos_chunk_compliance.processing.batch_processor import BatchProcessor
    from aumos_chunk_compliance.processing.tenants import StaticTenantProvider
    from aumos_chunk_compliance.store import Chunk, ChunkStatus, InMemoryChunkStore

    store = InMemoryChunkStore()
    with Path(chunks_file).open("r", encoding="utf-8") as fh:
        for line_number, line in enumerate(fh, start=1):
            line = line.strip()
            if not line:
                continue
            try:
                raw = json.loads(line)
                store.add(
                    Chunk(
                        chunk_id=str(raw["chunk_id"]),
                        content=raw["content"],
                        tenant_id=str(raw["tenant_id"]),
                        metadata=dict(raw.get("metadata") or {}),
                        compliance_status=str(raw.get("compliance_status", ChunkStatus.PENDING.value)),
                    )
                )
            except (json.JSONDecodeError, KeyError, TypeError) as exc:
                err_console.print(f"[red]Invalid chunk on line {line_number}:[/red] {exc}")
                sys.exit(2)

    config = _load_config(config_path)
    processor = BatchProcessor(store, StaticTenantProvider([tenant_id]), config)
    try:
        report = processor.process_tenant(tenant_id)
    except ComplianceError as exc:
        err_console.print(f"[red]Tenant pass failed:[/red] {exc}")
        sys.exit(1)

    if audit_log:
        from aumos_chunk_compliance.audit.logger import ComplianceAuditLog

        ComplianceAuditLog(Path(audit_log)).record_report(report)

    if as_json:
        click.echo(json.dumps(report.to_dict(), indent=2))
    else:
        _print_report(report)


# ---------------------------------------------------------------------------
# config group
# ---------------------------------------------------------------------------


@cli.group(name="config")
def config_group() -> None:
    """Configuration commands."""


@config_group.command(name="show")
@click.option("--config", "-c", "config_path", type=click.Path(), help="Path to compliance.yaml.")
def config_show_command(config_path: str | None) -> None:
    """Print the effective configuration as YAML."""
    config = _load_config(config_path)
    click.echo(ConfigLoader().dump(config), nl=False)


# ---------------------------------------------------------------------------
# Entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    cli()
