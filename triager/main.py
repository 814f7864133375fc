"""triager CLI — all commands."""

from typing import Annotated

import typer
from rich import print as rprint
from rich.table import Table

from triager.cache import InMemoryVersionCache
from triager.classifier import Classifier, parse_kind
from triager.detector import ChangeDetector
from triager.labeler import LabelApplier
from triager.log import configure_logging
from triager.models import Issue
from triager.pipeline import TriagePipeline
from triager.poller import Poller
from triager.settings import TriagerSettings, get_settings
from triager.source import resolve_upstream

app = typer.Typer(help="triager: label new and changed issues from their /kind marker", no_args_is_help=True)

ProfileOpt = Annotated[
    str | None,
    typer.Option("--profile", "-P", help="Profile name from ~/.config/triager/config.toml"),
]


# ---------------------------------------------------------------------------
# Wiring
# ---------------------------------------------------------------------------


def build_poller(settings: TriagerSettings) -> Poller:
    token = settings.github_token.get_secret_value() if settings.github_token else ""
    cache = InMemoryVersionCache(name=settings.cache_name, max_entries=settings.cache_max_entries)
    pipeline = TriagePipeline(
        detector=ChangeDetector(cache),
        classifier=Classifier(settings.taxonomy),
        applier=LabelApplier(token, timeout=settings.request_timeout),
    )
    try:
        source = resolve_upstream(settings)
    except ValueError as exc:
        rprint(f"[red]{exc}[/red]")
        raise typer.Exit(1) from exc
    return Poller(source, pipeline, interval=settings.poll_interval, max_workers=settings.max_workers)


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------


@app.command("run")
def run(
    profile: ProfileOpt = None,
    interval: Annotated[
        float | None,
        typer.Option("--interval", "-i", min=1, help="Seconds between polls (overrides poll_interval)"),
    ] = None,
) -> None:
    """Poll for new and changed issues until interrupted."""
    settings = get_settings(profile=profile)
    configure_logging(settings.log_level, json_output=settings.log_json)
    poller = build_poller(settings)
    if interval is not None:
        poller.interval = interval
    poller.run()


@app.command("poll-once")
def poll_once(profile: ProfileOpt = None) -> None:
    """Run a single poll and show the label outcomes."""
    settings = get_settings(profile=profile)
    configure_logging(settings.log_level, json_output=settings.log_json)
    poller = build_poller(settings)
    try:
        results = [r for r in poller.run_once() if r is not None]
    finally:
        poller.close()

    if not results:
        rprint("[dim]No labels to apply.[/dim]")
        return

    table = Table(title="Label outcomes")
    table.add_column("Outcome")
    table.add_column("Message")
    for result in results:
        style = "green" if result.succeeded else "red"
        table.add_row(f"[{style}]{result.outcome.value.upper()}[/{style}]", result.message)
    rprint(table)


@app.command("classify")
def classify(
    body: Annotated[str, typer.Argument(help="Issue body text to inspect")],
    label: Annotated[
        list[str] | None,
        typer.Option("--label", "-l", help="Label already on the issue (repeatable)"),
    ] = None,
    profile: Annotated[
        str | None,
        typer.Option("--profile", "-P", help="Use this profile's taxonomy instead of the built-in table"),
    ] = None,
) -> None:
    """Show which label a body would receive, without calling any API."""
    taxonomy = get_settings(profile=profile).taxonomy if profile else None
    issue = Issue(
        id=0,
        source_url="(dry-run)",
        title="",
        body=body,
        updated_at="",
        labels=frozenset(label or []),
    )
    request = Classifier(taxonomy).classify(issue)
    if request is None:
        kind = parse_kind(body)
        reason = "no /kind marker" if kind is None else f"kind '{kind}' unmapped or label already present"
        rprint(f"[dim]no action ({reason})[/dim]")
        return
    # No trailing newline — designed for shell substitution
    typer.echo(request.label, nl=False)


@app.command("config-show")
def config_show(profile: ProfileOpt = None) -> None:
    """Show resolved configuration (masks credentials)."""
    try:
        settings = get_settings(profile=profile)
    except typer.Exit:
        return

    def mask(val: str | None, prefix: str = "") -> str:
        if val is None:
            return "[dim](not set)[/dim]"
        if len(val) <= 5:
            return "***"
        return f"{prefix}...{val[-5:]}"

    def or_unset(val: object) -> str:
        return "[dim](not set)[/dim]" if val is None else str(val)

    table = Table(title="triager configuration")
    table.add_column("Field", style="bold")
    table.add_column("Value")

    table.add_row("upstream_url", or_unset(settings.upstream_url))
    table.add_row("github_repo", or_unset(settings.github_repo))
    table.add_row("namespace", or_unset(settings.namespace))
    table.add_row(
        "github_token",
        mask(settings.github_token.get_secret_value() if settings.github_token else None, prefix="ghp_"),
    )
    table.add_row("poll_interval", f"{settings.poll_interval}s")
    table.add_row("max_workers", str(settings.max_workers))
    table.add_row("request_timeout", f"{settings.request_timeout}s")
    table.add_row("cache", f"{settings.cache_name} (max {settings.cache_max_entries})")
    table.add_row("taxonomy", ", ".join(f"{k} → {v}" for k, v in settings.taxonomy.items()))
    table.add_row("log_level", settings.log_level)

    rprint(table)
