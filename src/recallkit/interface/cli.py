"""recallkit CLI: schedule single reviews, simulate review runs, inspect card files."""

import dataclasses
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Annotated

import typer
from pydantic import ValidationError

from recallkit.application.config import AppConfig, resolve_config
from recallkit.domain.errors import RecallkitError
from recallkit.domain.scheduling.models import ReviewResponse, ScheduleInfo

# ---------------------------------------------------------------------------
# Root app
# ---------------------------------------------------------------------------

app = typer.Typer(
    help="recallkit: spaced-repetition scheduling with review load balancing.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

config_app = typer.Typer(help="Manage recallkit configuration.")
app.add_typer(config_app, name="config")

# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

logging.basicConfig(
    level=logging.INFO,
    format="%(levelname)s:%(name)s:%(message)s",
    stream=sys.stderr,
)
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _load_config(ctx: typer.Context, **overrides) -> AppConfig:
    verbose = ctx.obj.get("verbose", 1) if ctx.obj else 1
    try:
        return resolve_config({"verbose": verbose, **overrides})
    except ValidationError as e:
        typer.secho(f"Invalid configuration:\n{e}", fg="red", err=True)
        raise typer.Exit(1) from e


def _parse_now(value: str | None) -> datetime:
    from recallkit.application.utils.dates import parse_iso, utc_now

    if value is None:
        return utc_now()
    try:
        return parse_iso(value)
    except ValueError as e:
        typer.secho(f"Invalid timestamp: {value}", fg="red", err=True)
        raise typer.Exit(2) from e


# ---------------------------------------------------------------------------
# Global callback
# ---------------------------------------------------------------------------


@app.callback()
def main_callback(
    ctx: typer.Context,
    verbose: Annotated[
        int,
        typer.Option(
            "--verbose", "-v", count=True, help="Increase verbosity. Repeat for more detail."
        ),
    ] = 1,
):
    """Global settings for recallkit."""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if verbose >= 2:
        logging.getLogger("recallkit").setLevel(logging.DEBUG)


# ---------------------------------------------------------------------------
# Root commands
# ---------------------------------------------------------------------------


@app.command()
def schedule(
    ctx: typer.Context,
    response: Annotated[ReviewResponse, typer.Argument(help="Learner response.")],
    interval: Annotated[
        int | None, typer.Option(help="Current interval in days. Omit for a new card.")
    ] = None,
    ease: Annotated[int | None, typer.Option(help="Current ease in percent.")] = None,
    review_count: Annotated[int, typer.Option(help="Reviews done so far.")] = 0,
    lapse_count: Annotated[int, typer.Option(help="Lapses so far.")] = 0,
    due: Annotated[
        str | None, typer.Option(help="Current due date (ISO-8601). Defaults to now.")
    ] = None,
    now: Annotated[str | None, typer.Option(help="Override the current time (ISO-8601).")] = None,
    no_load_balance: Annotated[
        bool, typer.Option("--no-load-balance", help="Disable due-date fuzzing.")
    ] = False,
):
    """[bold green]Schedule[/bold green] one review and print the outcome as JSON."""
    from recallkit.application.scheduler import Scheduler

    config = _load_config(ctx, load_balance=False if no_load_balance else None)
    current_time = _parse_now(now)

    current = None
    if interval is not None:
        current = ScheduleInfo(
            due_date=_parse_now(due) if due else current_time,
            interval=interval,
            ease=ease if ease is not None else config.base_ease,
            review_count=review_count,
            lapse_count=lapse_count,
        )

    scheduler = Scheduler(config.to_scheduler_settings(), clock=lambda: current_time)
    outcome = scheduler.schedule(response, current)
    typer.echo(json.dumps(outcome.to_dict(), indent=2))


@app.command()
def simulate(
    ctx: typer.Context,
    responses: Annotated[
        list[ReviewResponse], typer.Argument(help="Responses to replay, in order.")
    ],
    now: Annotated[str | None, typer.Option(help="Time of the first review (ISO-8601).")] = None,
    json_output: Annotated[bool, typer.Option("--json", help="Output as JSON.")] = False,
):
    """Replay responses on one new card, each review happening on its due date."""
    from recallkit.application.review_session import apply_outcome
    from recallkit.application.scheduler import Scheduler

    config = _load_config(ctx)
    clock = {"now": _parse_now(now)}
    scheduler = Scheduler(config.to_scheduler_settings(), clock=lambda: clock["now"])

    info: ScheduleInfo | None = None
    steps = []
    for response in responses:
        outcome = scheduler.schedule(response, info)
        info = apply_outcome(info, outcome, response)
        steps.append({"response": response.value, **info.to_dict()})
        clock["now"] = outcome.due_date

    if json_output:
        typer.echo(json.dumps(steps, indent=2))
        return

    for i, step in enumerate(steps, start=1):
        typer.echo(
            f"{i:>3}. {step['response']:<5} interval={step['interval']:<6} "
            f"ease={step['ease']:<4} due={step['due_date']}"
        )


@app.command()
def stats(
    cards_file: Annotated[Path, typer.Argument(help="YAML file with card records.")],
    days: Annotated[int, typer.Option(help="Forecast horizon in days.")] = 7,
    now: Annotated[str | None, typer.Option(help="Override the current time (ISO-8601).")] = None,
):
    """Print card statistics, due counts and a due forecast as JSON."""
    from recallkit.application import analytics
    from recallkit.infrastructure.card_file import load_cards

    current_time = _parse_now(now)
    try:
        cards = load_cards(cards_file)
    except RecallkitError as e:
        typer.secho(str(e), fg="red", err=True)
        raise typer.Exit(1) from e
    logger.debug(f"Loaded {len(cards)} cards from {cards_file}")

    summary = analytics.statistics(cards)
    typer.echo(
        json.dumps(
            {
                **dataclasses.asdict(summary),
                "due_now": len(analytics.cards_for_review(cards, now=current_time)),
                f"due_in_{days}_days": analytics.cards_due_in_days(cards, days, now=current_time),
                "forecast": analytics.due_forecast(cards, days, now=current_time),
            },
            indent=2,
        )
    )


@app.command()
def due(
    cards_file: Annotated[Path, typer.Argument(help="YAML file with card records.")],
    limit: Annotated[int | None, typer.Option(help="Show at most this many cards.")] = None,
    now: Annotated[str | None, typer.Option(help="Override the current time (ISO-8601).")] = None,
):
    """List cards that are due for review as JSON."""
    from recallkit.application.analytics import cards_for_review
    from recallkit.infrastructure.card_file import dump_card, load_cards

    current_time = _parse_now(now)
    try:
        cards = load_cards(cards_file)
    except RecallkitError as e:
        typer.secho(str(e), fg="red", err=True)
        raise typer.Exit(1) from e

    due_cards = cards_for_review(cards, now=current_time)
    if limit is not None:
        due_cards = due_cards[:limit]
    typer.echo(json.dumps([dump_card(card) for card in due_cards], indent=2))


# ---------------------------------------------------------------------------
# Config subgroup
# ---------------------------------------------------------------------------


@config_app.command("show")
def config_show(ctx: typer.Context):
    """Display final resolved configuration."""
    config = _load_config(ctx)
    typer.echo(json.dumps(config.model_dump(), indent=2))


@config_app.command("path")
def config_path():
    """Print the config file locations that are searched, in order."""
    from recallkit.application.config import config_file_candidates

    for candidate in config_file_candidates():
        marker = "*" if candidate.exists() else " "
        typer.echo(f"{marker} {candidate}")


def main():
    app()
