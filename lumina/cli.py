"""Lumina CLI -- moderation checks, rule inspection and local admin tasks."""

import asyncio
import sys

import click
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from lumina import __version__

console = Console()


@click.group()
@click.version_option(version=__version__)
def main():
    """Lumina -- a moderated, LLM-assisted personal journal.

    Check draft entries against the moderation gate, inspect the rule
    tables, and manage the local user and entry stores.
    """


# ── Check ────────────────────────────────────────────────────────────


@main.command()
@click.argument("text")
@click.option("--remote/--no-remote", default=False, help="Also call the remote moderation endpoint")
@click.option("--rules", "rules_path", default=None, type=click.Path(exists=True), help="Alternate rules YAML")
def check(text: str, remote: bool, rules_path: str | None):
    """Run TEXT through the moderation gate.

    Exits with status 1 when the entry is rejected.
    """
    from lumina.moderation.gate import ModerationGate
    from lumina.moderation.remote import RemoteModerator
    from lumina.moderation.rules import default_rules, load_rules

    rules = load_rules(rules_path) if rules_path else default_rules()
    gate = ModerationGate(remote=RemoteModerator() if remote else None, rules=rules)
    verdict = asyncio.run(gate.evaluate(text))

    if verdict.appropriate:
        console.print(Panel("[green]Accepted[/]", title="Moderation", expand=False))
        return

    body = (
        f"[bold red]Rejected[/] ([cyan]{verdict.category.value}[/])\n"
        f"Layer: {verdict.layer}  Rule: {verdict.rule}\n\n{verdict.reason}"
    )
    console.print(Panel(body, title="Moderation", expand=False))
    sys.exit(1)


# ── Rules ────────────────────────────────────────────────────────────


@main.command()
@click.option("--rules", "rules_path", default=None, type=click.Path(exists=True), help="Alternate rules YAML")
def rules(rules_path: str | None):
    """Show the rule tables in evaluation order."""
    from lumina.moderation.rules import default_rules, load_rules

    loaded = load_rules(rules_path) if rules_path else default_rules()
    console.print(f"\n[bold blue]Lumina[/] rules: {loaded.name} v{loaded.version}\n")

    for table_rules in (loaded.harmful, loaded.off_topic):
        table = Table(title=f"{table_rules.name} ({len(table_rules)} rules)")
        table.add_column("#", style="dim", width=3)
        table.add_column("Name", style="cyan")
        table.add_column("Group")
        table.add_column("Pattern")
        for i, rule in enumerate(table_rules.rules):
            table.add_row(str(i + 1), rule.name, rule.group, rule.pattern.pattern)
        console.print(table)

    remote = Table(title="Remote category priority")
    remote.add_column("#", style="dim", width=3)
    remote.add_column("Name", style="cyan")
    remote.add_column("Categories")
    for i, rule in enumerate(loaded.remote):
        remote.add_row(str(i + 1), rule.name, ", ".join(rule.categories))
    console.print(remote)

    console.print(f"\nJournaling keywords: {', '.join(loaded.journaling_keywords)}")


# ── Users ────────────────────────────────────────────────────────────


@main.command("create-user")
@click.argument("username")
@click.option("--hours", default=24 * 7, show_default=True, help="Session lifetime in hours")
def create_user(username: str, hours: int):
    """Create a user and print a bearer session token."""
    from lumina.auth.store import UserStore

    store = UserStore()
    try:
        user = store.create_user(username)
    except ValueError as exc:
        console.print(f"[red]{exc}[/]")
        sys.exit(1)
    session = store.create_session(user.id, expires_in_hours=hours)

    console.print(f"[green]Created user[/] {user.username} ({user.id})")
    console.print(f"Session token (expires {session.expires_at}):")
    console.print(session.token, soft_wrap=True)


# ── Insights ─────────────────────────────────────────────────────────


@main.command()
@click.argument("user_id")
@click.option("--top", default=5, show_default=True, help="Number of themes to show")
def insights(user_id: str, top: int):
    """Show the mood trend and top themes for USER_ID."""
    from lumina.journal.insights import mood_series, top_themes
    from lumina.journal.store import EntryStore

    entries = EntryStore().list_entries(user_id, newest_first=False)
    if not entries:
        console.print("[yellow]No entries yet. Start journaling![/]")
        return

    moods = Table(title=f"Mood trend ({len(entries)} entries)")
    moods.add_column("Date", style="dim")
    moods.add_column("Mood", justify="right", style="green")
    moods.add_column("Sentiment")
    for point in mood_series(entries):
        moods.add_row(point.created_at[:10], str(point.mood_score), point.sentiment_label)
    console.print(moods)

    themes = Table(title="Top themes")
    themes.add_column("Theme", style="cyan")
    themes.add_column("Entries", justify="right")
    for theme, count in top_themes(entries, limit=top):
        themes.add_row(theme, str(count))
    console.print(themes)


if __name__ == "__main__":
    main()
