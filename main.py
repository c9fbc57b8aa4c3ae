# main.py
"""Main entry point for the morning briefing bot."""
import asyncio
import logging
import os
import sys
from datetime import date, datetime
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from briefing_bot.app import BriefingApp
from briefing_bot.config.settings import Settings
from briefing_bot.pipeline.models import RunResult


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='[%(asctime)s] %(levelname)s: %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)
logger = logging.getLogger(__name__)

app = typer.Typer(
    name="briefing-bot",
    help="Morning financial news briefing bot",
    add_completion=False,
)
console = Console()

CONFIG_PATH = Path("config/settings.yaml")


def validate_env_vars() -> None:
    """Validate required environment variables are set.

    Raises:
        SystemExit: If any required env var is missing.
    """
    required_vars = [
        "TELEGRAM_BOT_TOKEN",
        "TELEGRAM_CHAT_ID",
        "ANTHROPIC_API_KEY",
        "YOUTUBE_API_KEY",
    ]

    missing = [var for var in required_vars if not os.getenv(var)]

    if missing:
        logger.error(f"Missing required environment variables: {', '.join(missing)}")
        logger.error("Please check your .env file")
        sys.exit(1)


def print_startup_banner(settings: Settings) -> None:
    """Print system startup banner."""
    logger.info("=" * 60)
    logger.info(f"Starting {settings.system.name}")
    logger.info(f"Version: {settings.system.version}")
    logger.info(f"Timezone: {settings.pipeline.timezone}")
    logger.info("=" * 60)


def load_and_validate_config(config_path: Path = CONFIG_PATH) -> Settings:
    """Load and validate configuration.

    Returns:
        Settings object loaded from YAML.

    Raises:
        SystemExit: If config file missing, env vars invalid, or YAML parsing fails.
    """
    load_dotenv()
    logger.info("✓ Loaded environment variables")

    validate_env_vars()
    logger.info("✓ Environment variables validated")

    if not config_path.exists():
        logger.error(f"{config_path} not found")
        sys.exit(1)

    try:
        settings = Settings.from_yaml(config_path)
        logger.info(f"✓ Settings loaded from {config_path}")
    except Exception as e:
        logger.error(f"Failed to parse {config_path}: {e}")
        sys.exit(1)

    Path(settings.storage.data_dir).mkdir(parents=True, exist_ok=True)
    return settings


def print_run_result(result: Optional[RunResult]) -> None:
    if result is None:
        console.print("[red]Briefing failed; a failure notice was sent to the chat[/red]")
        raise typer.Exit(code=1)

    table = Table(title=f"{result.kind.value.capitalize()} briefing")
    table.add_column("Window")
    table.add_column("Items", justify="right")
    table.add_column("Recommendations", justify="right")
    table.add_column("Delivered")
    table.add_row(
        f"{result.window.start:%Y-%m-%d %H:%M} ~ {result.window.end:%Y-%m-%d %H:%M}",
        str(result.item_count),
        str(result.recommendations_recorded),
        "yes" if result.delivered else "no",
    )
    console.print(table)


async def _with_app(settings: Settings, action):
    briefing_app = BriefingApp(settings)
    await briefing_app.start()
    try:
        return await action(briefing_app)
    finally:
        await briefing_app.stop()


@app.command()
def run() -> None:
    """Run the bot: Telegram polling plus the briefing scheduler."""
    settings = load_and_validate_config()
    print_startup_banner(settings)

    async def _serve(briefing_app: BriefingApp) -> None:
        await briefing_app.serve()

    try:
        asyncio.run(_with_app(settings, _serve))
    except KeyboardInterrupt:
        logger.info("Shutting down")


@app.command()
def briefing(
    on: Optional[str] = typer.Option(None, "--date", "-d", help="Briefing date (YYYY-MM-DD)"),
) -> None:
    """Run a full morning briefing now."""
    briefing_date: Optional[date] = None
    if on:
        try:
            briefing_date = datetime.strptime(on, "%Y-%m-%d").date()
        except ValueError:
            console.print(f"[red]Invalid date {on!r}, expected YYYY-MM-DD[/red]")
            raise typer.Exit(code=2)

    settings = load_and_validate_config()
    result = asyncio.run(_with_app(settings, lambda a: a.run_briefing(briefing_date)))
    print_run_result(result)


@app.command()
def update() -> None:
    """Run an update briefing over the last few hours."""
    settings = load_and_validate_config()
    result = asyncio.run(_with_app(settings, lambda a: a.run_update()))
    print_run_result(result)


@app.command("weekly-review")
def weekly_review() -> None:
    """Send the weekly review of recorded BUY recommendations."""
    settings = load_and_validate_config()
    sent = asyncio.run(_with_app(settings, lambda a: a.run_weekly_review()))
    if sent:
        console.print("[green]Weekly review sent[/green]")
    else:
        console.print("[red]Weekly review was not sent, see log[/red]")
        raise typer.Exit(code=1)


@app.command("test-message")
def test_message(
    text: str = typer.Option("🧪 테스트 메시지입니다.", "--text", "-t", help="Message text"),
) -> None:
    """Send a test message to the configured chat."""
    settings = load_and_validate_config()
    sent = asyncio.run(_with_app(settings, lambda a: a.channel.send_message(text)))
    if sent:
        console.print("[green]Test message sent[/green]")
    else:
        console.print("[red]Test message failed, check TELEGRAM_BOT_TOKEN and TELEGRAM_CHAT_ID[/red]")
        raise typer.Exit(code=1)


@app.command()
def recommendations(
    days: int = typer.Option(7, "--days", "-n", help="How many days back to list"),
    limit: Optional[int] = typer.Option(None, "--limit", "-l", help="Maximum rows"),
) -> None:
    """List recorded recommendations, newest first."""
    settings = load_and_validate_config()
    briefing_app = BriefingApp(settings)
    rows = asyncio.run(briefing_app.store.recent(days=days, limit=limit))

    if not rows:
        console.print(f"[yellow]No recommendations in the last {days} days[/yellow]")
        return

    table = Table(title=f"Recommendations (last {days} days)")
    for column in ("Date", "Ticker", "Action", "Entry", "Current", "Return", "Status", "Source"):
        table.add_column(column)
    for rec in rows:
        table.add_row(
            rec.briefing_date.isoformat(),
            rec.ticker,
            rec.action.value,
            f"{rec.recommended_price:.2f}" if rec.recommended_price is not None else "-",
            f"{rec.current_price:.2f}" if rec.current_price is not None else "-",
            rec.return_display,
            rec.status.value,
            rec.item_title[:40],
        )
    console.print(table)


if __name__ == "__main__":
    app()
