"""alumod CLI -- operator tooling for the Alumni Connect moderation engine."""

from __future__ import annotations

import asyncio
import dataclasses
from pathlib import Path

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from alumod import __version__
from alumod.config import Settings
from alumod.log import configure_logging

console = Console()

_SEVERITY_STYLE = {"low": "blue", "medium": "yellow", "high": "red"}


def _severity(value: str) -> str:
    style = _SEVERITY_STYLE.get(value, "white")
    return f"[{style}]{value}[/]"


def _engine(ctx: click.Context):
    """Build the engine on first use and cache it on the context."""
    from alumod.moderation.engine import ModerationEngine
    from alumod.moderation.store import JsonDirectoryStore

    obj = ctx.find_root().obj
    if "engine" not in obj:
        settings: Settings = obj["settings"]
        obj["engine"] = ModerationEngine(JsonDirectoryStore(settings.moderation_dir))
    return obj["engine"]


@click.group()
@click.version_option(version=__version__)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Data directory (defaults to $ALUMOD_HOME or ~/.alumod)",
)
@click.option("--log-level", default=None, help="Log level, e.g. INFO or DEBUG")
@click.pass_context
def main(ctx: click.Context, data_dir: Path | None, log_level: str | None):
    """alumod -- content moderation for Alumni Connect.

    Scan posts and comments, review flagged content, and manage the
    escalating warnings issued to authors.
    """
    settings = Settings.from_env()
    if data_dir is not None:
        settings = dataclasses.replace(settings, home=data_dir)
    if log_level:
        settings = dataclasses.replace(settings, log_level=log_level.upper())
    configure_logging(settings.log_level)
    ctx.ensure_object(dict)
    ctx.obj["settings"] = settings


# ── Scanning ─────────────────────────────────────────────────────────


@main.command()
@click.argument("text")
@click.pass_context
def scan(ctx: click.Context, text: str):
    """Scan TEXT against the lexicon without recording anything."""
    result = _engine(ctx).scan(text)

    if not result.is_inappropriate:
        console.print("[green]Clean[/] -- no lexicon terms found.")
        return

    console.print(
        f"[red]Flagged[/] severity={_severity(result.severity.value)} "
        f"confidence={result.confidence:.1f}"
    )
    console.print(f"  Terms: {', '.join(result.detected_terms)}")


@main.command()
@click.argument("text")
@click.option("--user-id", required=True, help="Author's user id")
@click.option("--user-name", default="", help="Author's display name")
@click.option("--type", "content_type", default="post", type=click.Choice(["post", "comment"]))
@click.option("--content-id", default=None, help="Id of the post or comment")
@click.pass_context
def submit(
    ctx: click.Context,
    text: str,
    user_id: str,
    user_name: str,
    content_type: str,
    content_id: str | None,
):
    """Moderate TEXT as a new submission, recording alerts and warnings."""
    from alumod.moderation.gate import UNKNOWN_USER, new_content_id

    decision = _engine(ctx).moderate_and_record(
        text,
        user_id,
        user_name or UNKNOWN_USER,
        content_type,
        content_id or new_content_id(content_type),
    )

    if decision.warning is None:
        console.print("[green]Allowed[/] -- content is clean.")
        return

    verdict = "[red]Blocked[/]" if decision.should_block else "[yellow]Allowed with warning[/]"
    console.print(verdict)
    console.print(
        Panel(
            decision.warning.message,
            title=f"Warning ({decision.warning.severity.value}, {decision.warning.warning_type.value})",
        )
    )


@main.command()
@click.argument("text")
@click.pass_context
def classify(ctx: click.Context, text: str):
    """Ask the secondary AI classifier for advice on TEXT."""
    from alumod.classifier.classifier import build_classifier

    classifier = build_classifier(ctx.obj["settings"])
    advice = asyncio.run(classifier.advise(text))
    result = advice.result

    action_style = {"allow": "green", "warn": "yellow", "block": "red"}[result.suggested_action.value]
    console.print(
        f"Suggested action: [{action_style}]{result.suggested_action.value}[/] "
        f"(severity {_severity(result.severity.value)}, {result.confidence}% confidence)"
    )
    console.print(f"  {result.explanation}")
    for concern in result.concerns:
        console.print(f"  [yellow]![/] {concern}")


# ── Admin review ─────────────────────────────────────────────────────


@main.command()
@click.option("--pending", is_flag=True, help="Only show alerts awaiting review")
@click.pass_context
def alerts(ctx: click.Context, pending: bool):
    """List moderation alerts, most recent first."""
    engine = _engine(ctx)
    items = engine.get_pending_alerts() if pending else engine.get_all_alerts()

    if not items:
        console.print("[yellow]No moderation alerts.[/]")
        return

    table = Table(title=f"Moderation Alerts ({len(items)})")
    table.add_column("ID", style="dim")
    table.add_column("User", style="cyan")
    table.add_column("Type")
    table.add_column("Severity")
    table.add_column("Status")
    table.add_column("Terms")
    table.add_column("Content")

    for alert in items:
        table.add_row(
            alert.id,
            alert.user_name,
            alert.content_type.value,
            _severity(alert.severity.value),
            alert.status.value,
            ", ".join(alert.detected_terms),
            alert.flagged_content[:60],
        )

    console.print(table)


@main.command()
@click.argument("alert_id")
@click.option("--status", "new_status", required=True, type=click.Choice(["reviewed", "dismissed"]))
@click.pass_context
def review(ctx: click.Context, alert_id: str, new_status: str):
    """Mark ALERT_ID as reviewed or dismissed."""
    if not _engine(ctx).update_alert_status(alert_id, new_status):
        console.print(f"[red]Alert not found:[/] {alert_id}")
        ctx.exit(1)
    console.print(f"[green]v[/] Alert {alert_id} marked {new_status}")


@main.command()
@click.pass_context
def stats(ctx: click.Context):
    """Show the moderation dashboard counters."""
    s = _engine(ctx).get_moderation_stats()

    table = Table(title="Moderation Stats", show_header=False)
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Total alerts", str(s.total_alerts))
    table.add_row("Pending alerts", str(s.pending_alerts))
    table.add_row("Alerts today", str(s.today_alerts))
    table.add_row("High severity pending", str(s.high_severity_alerts))
    table.add_row("Warnings issued", str(s.total_warnings_issued))
    table.add_row("Active warnings", str(s.active_warnings))
    console.print(table)


# ── Warnings ─────────────────────────────────────────────────────────


@main.command()
@click.argument("user_id")
@click.option("--unread", is_flag=True, help="Only unacknowledged warnings")
@click.pass_context
def warnings(ctx: click.Context, user_id: str, unread: bool):
    """List USER_ID's active warnings."""
    engine = _engine(ctx)
    items = engine.get_unread_warnings(user_id) if unread else engine.get_active_warnings(user_id)

    if not items:
        console.print(f"[green]No active warnings for {user_id}.[/]")
        return

    table = Table(title=f"Warnings for {user_id} ({len(items)})")
    table.add_column("ID", style="dim")
    table.add_column("Severity")
    table.add_column("Type")
    table.add_column("Read", justify="center")
    table.add_column("Expires")
    table.add_column("Message")

    for w in items:
        table.add_row(
            w.id,
            _severity(w.severity.value),
            w.warning_type.value,
            "[green]Y[/]" if w.is_read else "[red]N[/]",
            w.expires_at[:19],
            w.message,
        )

    console.print(table)


@main.command()
@click.argument("warning_id")
@click.pass_context
def read(ctx: click.Context, warning_id: str):
    """Acknowledge WARNING_ID."""
    if not _engine(ctx).mark_read(warning_id):
        console.print(f"[red]Warning not found:[/] {warning_id}")
        ctx.exit(1)
    console.print(f"[green]v[/] Warning {warning_id} marked read")


@main.command()
@click.pass_context
def sweep(ctx: click.Context):
    """Delete expired warnings (warning counters are kept)."""
    removed = _engine(ctx).sweep_expired()
    console.print(f"Removed {removed} expired warning(s).")
