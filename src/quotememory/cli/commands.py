"""CLI commands for QuoteMemory.

Commands:
- add: Store a new quote
- list: Show your quotes
- delete: Remove a quote
- stats: Quote and practice counts
- plans: Subscription plans
- practice: Memorize a quote, type it back, get a score
- serve: Run the Web API
"""

from __future__ import annotations

import asyncio
import os

import typer
from rich.console import Console

from quotememory.core.scoring import summarize_score
from quotememory.core.session_engine import (
    EmptyRecallError,
    MemorizationSession,
    PracticePhase,
    Results,
)
from quotememory.core.subscription import get_user_stats, load_plans
from quotememory.db.database import init_db
from quotememory.db.quotes_repository import Quote, QuoteValidationError
from quotememory.db.store import SqliteQuoteStore
from quotememory.utils.text_utils import format_attribution, truncate
from quotememory.utils.validators import (
    AmbiguousQuoteIdError,
    QuoteIdNotFoundError,
    resolve_quote_id,
    short_id,
)

USER_ENV = "QUOTEMEMORY_USER"
DEFAULT_USER = "local"

app = typer.Typer(
    name="qm",
    help="Store quotes and practice recalling them from memory.",
    no_args_is_help=True,
)

console = Console()

_BAND_STYLES = {
    "excellent": "green",
    "good": "yellow",
    "needs_practice": "red",
}


def _owner(user: str | None) -> str:
    """Resolve the acting user from --user or the environment."""
    return user or os.environ.get(USER_ENV, DEFAULT_USER)


def _resolve_quote_or_exit(prefix: str, quotes: list[Quote]) -> Quote:
    """Resolve quote_id prefix to one of the owner's quotes, or exit."""
    try:
        quote_id = resolve_quote_id(prefix, [q.quote_id for q in quotes])
    except (QuoteIdNotFoundError, AmbiguousQuoteIdError) as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)
    return next(q for q in quotes if q.quote_id == quote_id)


UserOption = typer.Option(None, "--user", "-u", help="User id (default: $QUOTEMEMORY_USER)")


@app.command()
def add(
    text: str = typer.Argument(..., help="Quote text"),
    author: str | None = typer.Option(None, "--author", "-a", help="Who said it"),
    category: str | None = typer.Option(None, "--category", "-c", help="e.g. Philosophy"),
    user: str | None = UserOption,
) -> None:
    """Store a new quote."""
    init_db()
    try:
        quote = SqliteQuoteStore().insert_quote(
            owner_id=_owner(user), text=text, author=author, category=category
        )
    except QuoteValidationError as e:
        console.print(f"[red]✗ {e}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Quote created[/green] [dim]{short_id(quote.quote_id)}[/dim]")


@app.command(name="list")
def list_cmd(user: str | None = UserOption) -> None:
    """Show your quotes, newest first."""
    from rich.table import Table

    init_db()
    quotes = SqliteQuoteStore().list_quotes(_owner(user))

    if not quotes:
        console.print("[yellow]No quotes yet.[/yellow] Add one with: qm add \"...\"")
        return

    table = Table(show_header=True, header_style="bold", title=f"Your Quotes ({len(quotes)})")
    table.add_column("ID", style="dim")
    table.add_column("Quote")
    table.add_column("Author")
    table.add_column("Category")
    table.add_column("Added", style="dim")

    for q in quotes:
        table.add_row(
            short_id(q.quote_id),
            truncate(q.text),
            q.author or "",
            q.category or "",
            q.created_at[:10],
        )

    console.print(table)


@app.command()
def delete(
    quote_id: str = typer.Argument(..., help="Quote ID or unique prefix"),
    user: str | None = UserOption,
) -> None:
    """Delete a quote. Practice history is kept."""
    init_db()
    owner_id = _owner(user)
    store = SqliteQuoteStore()
    quote = _resolve_quote_or_exit(quote_id, store.list_quotes(owner_id))

    if not store.delete_quote(quote.quote_id, owner_id):
        console.print(f"[red]✗ Failed to delete quote {short_id(quote.quote_id)}[/red]")
        raise typer.Exit(code=1)

    console.print(f"[green]✓ Quote deleted[/green] [dim]{short_id(quote.quote_id)}[/dim]")


@app.command()
def stats(user: str | None = UserOption) -> None:
    """Show quote and practice counts."""
    init_db()
    user_stats = get_user_stats(_owner(user))
    console.print(f"  [dim]quotes:[/dim]    {user_stats.quote_count}")
    console.print(f"  [dim]practices:[/dim] {user_stats.practice_count}")
    console.print(f"  [dim]plan:[/dim]      {user_stats.current_plan}")


@app.command()
def plans() -> None:
    """List subscription plans."""
    listing = load_plans()
    if listing.error:
        console.print(f"[red]✗ {listing.error}[/red]")
        raise typer.Exit(code=1)

    for plan in listing.plans:
        console.print(
            f"\n[bold]{plan.product}[/bold]  {plan.price}/{plan.interval}"
            f"  [dim]{plan.billing_period}[/dim]"
        )
        for feature in plan.features:
            console.print(f"  [green]✓[/green] {feature}")


@app.command()
def practice(
    quote_id: str | None = typer.Argument(None, help="Quote ID or unique prefix"),
    seconds: int | None = typer.Option(None, "--seconds", "-s", min=1, help="Memorize time"),
    tick: float | None = typer.Option(None, "--tick", hidden=True),
    user: str | None = UserOption,
) -> None:
    """Memorize a quote, then type it from memory."""
    init_db()
    session = MemorizationSession(
        owner_id=_owner(user),
        store=SqliteQuoteStore(),
        memorize_seconds=seconds,
        tick_seconds=tick,
    )
    session.load_quotes()

    if session.state.error:
        console.print(f"[red]✗ {session.state.error}[/red]")
        raise typer.Exit(code=1)
    if not session.quotes:
        console.print("[yellow]No quotes to memorize.[/yellow] Create some quotes first.")
        return

    if quote_id:
        quote = _resolve_quote_or_exit(quote_id, list(session.quotes))
    else:
        quote = _choose_quote(list(session.quotes))

    asyncio.run(_practice_rounds(session, quote))


def _choose_quote(quotes: list[Quote]) -> Quote:
    """Prompt for a quote by number."""
    console.print("\n[bold]Choose a Quote to Memorize[/bold]")
    for i, q in enumerate(quotes, 1):
        attribution = format_attribution(q.author)
        console.print(f"  {i}. \"{truncate(q.text)}\" [dim]{attribution}[/dim]")

    while True:
        raw = typer.prompt(f"Choose (1-{len(quotes)})").strip()
        if raw.isdigit() and 1 <= int(raw) <= len(quotes):
            return quotes[int(raw) - 1]
        console.print("[yellow]Invalid choice[/yellow]")


async def _practice_rounds(session: MemorizationSession, quote: Quote) -> None:
    """Run rounds on one quote until the user stops retrying."""
    session.select(quote.quote_id)
    try:
        while True:
            await _memorize(session)
            results = _type_and_submit(session)
            _print_results(results)

            if not typer.confirm("\nTry again?", default=False):
                break
            session.retry()
    finally:
        session.close()


async def _memorize(session: MemorizationSession) -> None:
    quote = session.selected_quote
    console.print("\n[bold]Memorize This Quote[/bold]")
    console.print(f"\n  [italic]\"{quote.text}\"[/italic]")
    if quote.author:
        console.print(f"  [dim]{format_attribution(quote.author)}[/dim]")

    with console.status("") as status:
        while session.phase is PracticePhase.MEMORIZING:
            status.update(f"[bold]{session.time_left}s[/bold] left")
            await asyncio.sleep(min(session.tick_seconds, 0.1))

    # Hide the quote before recall
    console.clear()


def _type_and_submit(session: MemorizationSession) -> Results:
    console.print("\n[bold]Type the Quote from Memory[/bold]")
    quote = session.selected_quote
    if quote.author:
        console.print(f"  [dim]Author: {quote.author}[/dim]")

    while True:
        session.update_recall(typer.prompt("Your answer", default="", show_default=False))
        try:
            return session.submit()
        except EmptyRecallError as e:
            console.print(f"[yellow]{e}[/yellow]")


def _print_results(results: Results) -> None:
    summary = summarize_score(results.accuracy)
    style = _BAND_STYLES[summary.band]

    console.print(f"\n[bold {style}]{summary.accuracy}%[/bold {style}]  {summary.feedback}")
    console.print(f"\n  [dim]original:[/dim] \"{results.quote.text}\"")
    console.print(f"  [dim]yours:[/dim]    \"{results.recall_text}\"")

    if results.warning:
        console.print(f"\n[yellow]⚠ {results.warning}[/yellow]")


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Bind address"),
    port: int = typer.Option(8000, "--port", "-p", help="Port"),
    reload: bool = typer.Option(False, "--reload", help="Auto-reload on changes"),
) -> None:
    """Run the Web API with uvicorn."""
    import uvicorn

    console.print(f"[blue]Serving QuoteMemory API on http://{host}:{port}[/blue]")
    uvicorn.run("quotememory.web.api:app", host=host, port=port, reload=reload)


if __name__ == "__main__":
    app()
