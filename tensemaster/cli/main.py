"""
Typer CLI for the Tense Master engine.

Commands:
    tm quiz COURSE TENSE        - Lesson quiz on one tense
    tm review COURSE            - 15-question course review
    tm daily MODE               - Daily challenge (classic, hard, time-attack)
    tm gauntlet cloze           - Context is King
    tm gauntlet detective       - Grammar Detective
    tm gauntlet identify        - Rapid Identification
    tm profile                  - Show XP, coins, streak and inventory
    tm progress                 - Per-course completion
    tm achievements             - Achievement list with unlocked marks
    tm shop list|buy|theme      - Browse, buy and apply
    tm leaderboard              - Top learners by XP
    tm login                    - Record a login (updates the streak)
    tm db init|seed             - Local database management

Usage:
    tm --help
    tm db init && tm db seed data/sample_content.json
    tm quiz present simple-present --user demo
"""

from __future__ import annotations

import asyncio
import sys
from collections.abc import AsyncIterator, Awaitable
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import TypeVar

import typer
from loguru import logger
from rich import print as rprint
from rich.console import Console
from rich.prompt import Prompt
from rich.table import Table

from config import get_settings
from tensemaster.content.achievements import ACHIEVEMENTS
from tensemaster.content.shop_items import SHOP_ITEMS
from tensemaster.core.errors import TenseMasterError
from tensemaster.core.modes import DAILY_MODES, ChallengeMode
from tensemaster.engine.gauntlet import detective_words, identification_options, split_story, toggle_selection
from tensemaster.engine.powerups import PowerUp
from tensemaster.engine.progress import course_completion
from tensemaster.engine.streaks import format_countdown
from tensemaster.session.notifications import NotificationSequencer, RichNotifier, plan_notifications
from tensemaster.session.quiz_session import QuizSession
from tensemaster.session.submission import SubmissionOutcome, SubmissionService

T = TypeVar("T")

app = typer.Typer(
    help="Tense Master: gamified English grammar quizzes",
    no_args_is_help=True,
)
gauntlet_app = typer.Typer(help="Grammar Gauntlet challenges")
shop_app = typer.Typer(help="AI Coin shop")
db_app = typer.Typer(help="Local database management (init, seed)")
app.add_typer(gauntlet_app, name="gauntlet")
app.add_typer(shop_app, name="shop")
app.add_typer(db_app, name="db")

console = Console()

UserOption = typer.Option(..., "--user", "-u", envvar="TM_USER", help="Learner id")

POWER_UP_KEYS = {
    "h": PowerUp.HINT,
    "f": PowerUp.FIFTY_FIFTY,
    "s": PowerUp.SKIP,
    "x": PowerUp.DOUBLE_XP,
}


# ========================================
# Setup
# ========================================


def configure_logging(level: str, log_file: Path | None = None) -> None:
    logger.remove()
    logger.add(
        sys.stderr,
        level=level,
        format="<dim>{time:HH:mm:ss}</dim> | <level>{level: <8}</level> | {message}",
    )
    if log_file:
        logger.add(log_file, level="DEBUG", rotation="1 MB")


@app.callback()
def main_callback(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log at DEBUG level"),
):
    settings = get_settings()
    configure_logging("DEBUG" if verbose else settings.log_level, settings.log_file)


@asynccontextmanager
async def open_service() -> AsyncIterator[SubmissionService]:
    """SubmissionService over the configured backend."""
    settings = get_settings()
    if settings.is_rest_backend():
        from tensemaster.integrations.rest_backend import RestBackend

        async with RestBackend.from_settings(settings) as backend:
            yield SubmissionService.from_settings(backend, backend, settings)
    else:
        from tensemaster.db.database import get_engine
        from tensemaster.db.store import SqlBackend

        backend = SqlBackend(get_engine())
        yield SubmissionService.from_settings(backend, backend, settings)


def run(coro: Awaitable[T]) -> T:
    """Run a coroutine, turning engine errors into a red message and exit code 1."""
    try:
        return asyncio.run(coro)
    except TenseMasterError as e:
        rprint(f"[red]✗[/red] {e}")
        raise typer.Exit(code=1) from e


async def announce(outcome: SubmissionOutcome) -> None:
    settings = get_settings()
    plan = plan_notifications(outcome, stagger_ms=settings.notification_stagger_ms)
    await NotificationSequencer(RichNotifier(console)).play(plan)


def show_result(outcome: SubmissionOutcome) -> None:
    result = outcome.result
    if hasattr(result, "score_percent"):
        rprint(
            f"\n[bold]Score:[/bold] {result.score_percent}% "
            f"({result.correct_count}/{result.total_count})"
        )
    else:
        rprint(
            f"\n[bold]Net score:[/bold] {result.net_score} "
            f"(found {len(result.correct)}, wrong {len(result.incorrect)}, missed {len(result.missed)})"
        )


# ========================================
# Quiz runner
# ========================================


def _ask_question(session: QuizSession, number: int, question_id: str) -> None:
    question = session.question(question_id)
    while not session.is_locked(question_id):
        options = session.visible_options(question_id)
        rprint(f"\n[bold cyan]{number}.[/bold cyan] {question.sentence}")
        hint = session.hint(question_id)
        if hint:
            rprint(f"   [yellow]Hint:[/yellow] {hint}")
        for i, option in enumerate(options, start=1):
            rprint(f"   [dim]{i})[/dim] {option}")

        choice = Prompt.ask("Answer (number, or h/f/s/x for power-ups)").strip().lower()
        if choice in POWER_UP_KEYS:
            try:
                session.use_power_up(POWER_UP_KEYS[choice], question_id)
            except TenseMasterError as e:
                rprint(f"[yellow]{e}[/yellow]")
            continue
        if choice.isdigit() and 1 <= int(choice) <= len(options):
            session.select_answer(question_id, options[int(choice) - 1])
        else:
            rprint("[yellow]Pick one of the listed options[/yellow]")


def _offer_second_chance(session: QuizSession) -> None:
    while session.config.allows_power_ups and session.available_power_ups(PowerUp.SECOND_CHANCE) > 0:
        pick = Prompt.ask("Second chance on question number (Enter to submit)", default="").strip()
        if not pick:
            return
        if not pick.isdigit() or not 1 <= int(pick) <= len(session.questions):
            continue
        question_id = session.questions[int(pick) - 1].id
        try:
            session.use_power_up(PowerUp.SECOND_CHANCE, question_id)
        except TenseMasterError as e:
            rprint(f"[yellow]{e}[/yellow]")
            continue
        _ask_question(session, int(pick), question_id)


def run_quiz(session: QuizSession) -> None:
    config = session.config
    rprint(f"[bold]{config.label}[/bold]: {len(session.questions)} questions")
    if config.time_limit_seconds:
        rprint(f"[yellow]You have {config.time_limit_seconds} seconds.[/yellow]")

    for number, question in enumerate(session.questions, start=1):
        if session.is_time_up():
            rprint("[red]Time's up![/red]")
            break
        _ask_question(session, number, question.id)

    if not session.is_time_up():
        _offer_second_chance(session)


async def _play_quiz(start: Awaitable[QuizSession], service: SubmissionService) -> None:
    session = await start
    run_quiz(session)
    outcome = await service.submit_quiz(session)
    show_result(outcome)
    await announce(outcome)


# ========================================
# Quiz commands
# ========================================


@app.command("quiz")
def quiz(
    course_id: str = typer.Argument(..., help="Course id, e.g. present"),
    tense_id: str = typer.Argument(..., help="Tense id, e.g. simple-present"),
    user: str = UserOption,
) -> None:
    """Take a 10-question lesson quiz."""

    async def _main():
        async with open_service() as service:
            await _play_quiz(service.start_quiz(user, course_id, tense_id), service)

    run(_main())


@app.command("review")
def review(
    course_id: str = typer.Argument(..., help="Built-in course id"),
    user: str = UserOption,
) -> None:
    """Take a 15-question course review."""

    async def _main():
        async with open_service() as service:
            await _play_quiz(service.start_review(user, course_id), service)

    run(_main())


@app.command("daily")
def daily(
    mode: str = typer.Argument("classic", help="classic, hard or time-attack"),
    user: str = UserOption,
) -> None:
    """Take today's challenge (once per day)."""
    try:
        challenge_mode = ChallengeMode(mode)
    except ValueError:
        challenge_mode = None
    if challenge_mode not in DAILY_MODES:
        rprint(f"[red]✗[/red] Unknown daily mode: {mode}")
        raise typer.Exit(code=1)

    async def _main():
        async with open_service() as service:
            profile = await service.get_profile(user)
            now = datetime.now(timezone.utc)
            if not service.policy.can_take_daily_challenge(profile.last_challenge_completed, now):
                wait = format_countdown(service.policy.time_until_next_day(now))
                rprint(f"[yellow]Challenge complete for today.[/yellow] Next one in {wait}")
                return
            await _play_quiz(service.start_daily(user, challenge_mode), service)

    run(_main())


# ========================================
# Gauntlet commands
# ========================================


@gauntlet_app.command("cloze")
def gauntlet_cloze(user: str = UserOption) -> None:
    """Context is King: fill each gap in a story."""

    async def _main():
        async with open_service() as service:
            challenge = await service.start_cloze()
            blanks = {blank.id: blank for blank in challenge.blanks}
            story = "".join(f"[{p}]" if isinstance(p, int) else p for p in split_story(challenge.story_template))
            rprint(f"\n{story}\n")

            answers: dict[int, str] = {}
            for blank_id, blank in blanks.items():
                listing = "  ".join(f"{i}) {o}" for i, o in enumerate(blank.options, start=1))
                choice = Prompt.ask(
                    f"[{blank_id}] {listing}",
                    choices=[str(i) for i in range(1, len(blank.options) + 1)],
                )
                answers[blank_id] = blank.options[int(choice) - 1]

            outcome = await service.submit_cloze(user, challenge, answers)
            show_result(outcome)
            await announce(outcome)

    run(_main())


@gauntlet_app.command("detective")
def gauntlet_detective(user: str = UserOption) -> None:
    """Grammar Detective: pick out every incorrect word."""

    async def _main():
        async with open_service() as service:
            challenge = await service.start_detective()
            words = detective_words(challenge.paragraph)
            rprint(" ".join(f"[dim]{i}:[/dim]{w}" for i, w in enumerate(words, start=1)))

            raw = Prompt.ask("Numbers of the incorrect words (space separated)", default="")
            selected: frozenset[str] = frozenset()
            for token in raw.split():
                if token.isdigit() and 1 <= int(token) <= len(words):
                    selected = toggle_selection(selected, words[int(token) - 1])

            outcome = await service.submit_detective(user, challenge, selected)
            show_result(outcome)
            for error in challenge.errors:
                rprint(f"  [red]{error.incorrect}[/red] -> [green]{error.correct}[/green]")
            await announce(outcome)

    run(_main())


@gauntlet_app.command("identify")
def gauntlet_identify(user: str = UserOption) -> None:
    """Rapid Identification: name the tense of each sentence."""

    async def _main():
        async with open_service() as service:
            challenges = await service.start_identification()
            answers: list[str | None] = []
            for number, challenge in enumerate(challenges, start=1):
                options = identification_options(challenge, service.rng)
                rprint(f"\n[bold cyan]{number}.[/bold cyan] {challenge.sentence}")
                for i, option in enumerate(options, start=1):
                    rprint(f"   [dim]{i})[/dim] {option}")
                choice = Prompt.ask("Tense", choices=[str(i) for i in range(1, len(options) + 1)])
                answers.append(options[int(choice) - 1])

            outcome = await service.submit_identification(user, challenges, answers)
            show_result(outcome)
            await announce(outcome)

    run(_main())


# ========================================
# Profile commands
# ========================================


@app.command("login")
def login(user: str = UserOption) -> None:
    """Record a login and update the daily streak."""

    async def _main():
        async with open_service() as service:
            streak = await service.record_login(user)
            rprint(f"[green]✓[/green] Welcome back! Streak: [bold]{streak}[/bold] day(s)")

    run(_main())


@app.command("profile")
def profile(user: str = UserOption) -> None:
    """Show a learner's profile."""

    async def _main():
        async with open_service() as service:
            p = await service.get_profile(user)

        table = Table(title=f"{p.username or p.id}")
        table.add_column("Field", style="cyan")
        table.add_column("Value")
        table.add_row("XP", str(p.xp))
        table.add_row("AI Coins", str(p.ai_coins))
        table.add_row("Streak", f"{p.streak_days} day(s)")
        table.add_row("Quizzes completed", str(p.total_quizzes_completed))
        table.add_row("Coins spent", str(p.total_coins_spent))
        table.add_row("Active theme", p.active_theme)
        table.add_row("Themes", ", ".join(p.purchased_themes))
        power_ups = ", ".join(f"{k} x{v}" for k, v in sorted(p.purchased_power_ups.items()) if v)
        table.add_row("Power-ups", power_ups or "-")
        table.add_row("Achievements", str(len(p.achievements)))
        console.print(table)

    run(_main())


@app.command("progress")
def progress(user: str = UserOption) -> None:
    """Show per-course completion."""

    async def _main():
        async with open_service() as service:
            p = await service.get_profile(user)
            catalog = await service.content.fetch_catalog()

        table = Table(title="Course Progress")
        table.add_column("Course", style="cyan")
        table.add_column("Completed", justify="right")
        table.add_column("Best scores")
        for course in catalog.all():
            done, total = course_completion(p.course_progress, course)
            scores = []
            for tense in course.tenses:
                entry = p.tense_progress(course.id, tense.id)
                if entry:
                    mark = "[green]✓[/green]" if entry.completed else ""
                    scores.append(f"{tense.name} {entry.score:.0f}%{mark}")
            table.add_row(course.name, f"{done}/{total}", ", ".join(scores) or "-")
        console.print(table)

    run(_main())


@app.command("achievements")
def achievements(user: str = UserOption) -> None:
    """List achievements, marking those unlocked."""

    async def _main():
        async with open_service() as service:
            p = await service.get_profile(user)

        table = Table(title="Achievements")
        table.add_column("", width=2)
        table.add_column("Name", style="cyan")
        table.add_column("Description")
        table.add_column("Reward", justify="right")
        for achievement in ACHIEVEMENTS:
            mark = "[green]✓[/green]" if p.has_achievement(achievement.id) else ""
            reward = achievement.reward
            table.add_row(mark, achievement.name, achievement.description, f"{reward.xp} XP / {reward.ai_coins} coins")
        console.print(table)

    run(_main())


@app.command("leaderboard")
def leaderboard(
    limit: int = typer.Option(10, "--limit", "-n", help="Rows to show"),
) -> None:
    """Show the top learners by XP."""

    async def _main():
        async with open_service() as service:
            entries = await service.leaderboard(limit)

        table = Table(title="Leaderboard")
        table.add_column("#", justify="right")
        table.add_column("Learner", style="cyan")
        table.add_column("XP", justify="right")
        for entry in entries:
            table.add_row(str(entry.rank), entry.username or entry.id, str(entry.xp))
        console.print(table)

    run(_main())


# ========================================
# Shop commands
# ========================================


@shop_app.command("list")
def shop_list() -> None:
    """List shop items."""
    table = Table(title="Shop")
    table.add_column("Id", style="dim")
    table.add_column("Item", style="cyan")
    table.add_column("Type")
    table.add_column("Cost", justify="right")
    table.add_column("Description")
    for item in SHOP_ITEMS:
        table.add_row(item.id, item.name, item.type, str(item.cost), item.description)
    console.print(table)


@shop_app.command("buy")
def shop_buy(
    item_id: str = typer.Argument(..., help="Item id from `tm shop list`"),
    user: str = UserOption,
) -> None:
    """Buy a theme or power-up."""

    async def _main():
        async with open_service() as service:
            result = await service.purchase(user, item_id)
        rprint(f"[green]✓[/green] Successfully purchased {result.item.name}!")
        for achievement in result.unlocked.newly:
            rprint(f"[bold yellow]Achievement Unlocked: {achievement.name}[/bold yellow]")

    run(_main())


@shop_app.command("theme")
def shop_theme(
    theme_id: str = typer.Argument(..., help="Owned theme id"),
    user: str = UserOption,
) -> None:
    """Apply an owned theme."""

    async def _main():
        async with open_service() as service:
            await service.apply_theme(user, theme_id)
        rprint("[green]✓[/green] Theme applied!")

    run(_main())


# ========================================
# Database commands
# ========================================


@db_app.command("init")
def db_init() -> None:
    """
    Initialize local database tables.

    Safe to run multiple times (idempotent).
    """
    from tensemaster.db.database import init_db

    init_db()
    rprint("[green]✓[/green] Database initialized!")


@db_app.command("seed")
def db_seed(
    path: Path = typer.Argument(..., exists=True, dir_okay=False, help="Seed JSON file"),
) -> None:
    """Load questions, challenges, courses and profiles from JSON."""
    from tensemaster.db.database import get_engine, init_db
    from tensemaster.db.store import seed_from_json

    init_db()
    counts = seed_from_json(get_engine(), path)
    rprint("[green]✓[/green] Seeded " + ", ".join(f"{n} {section}" for section, n in counts.items()))


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
