"""CLI commands for voice2action."""

import asyncio
import signal
import sys
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import typer
from rich.console import Console
from rich.table import Table

from voice2action import __logo__, __version__

app = typer.Typer(
    name="voice2action",
    help=f"{__logo__} voice2action - voice commands to confirmed emails and calendar events",
    no_args_is_help=True,
)

console = Console()


def version_callback(value: bool):
    if value:
        console.print(f"{__logo__} voice2action v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: bool = typer.Option(
        None, "--version", "-v", callback=version_callback, is_eager=True
    ),
):
    """voice2action - voice-driven email and calendar assistant."""
    pass


def _configure_logging(verbose: bool, logs_dir: Path | None) -> None:
    from loguru import logger

    logger.remove()
    logger.add(sys.stderr, level="DEBUG" if verbose else "INFO")
    if logs_dir is not None:
        logs_dir.mkdir(parents=True, exist_ok=True)
        logger.add(
            logs_dir / "voice2action.log",
            level="DEBUG",
            rotation="10 MB",
            retention="7 days",
            encoding="utf-8",
        )


def _check_timezone(name: str) -> bool:
    try:
        ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError):
        return False
    return True


# ============================================================================
# Run
# ============================================================================


@app.command()
def run(
    verbose: bool = typer.Option(False, "--verbose", help="Debug logging"),
):
    """Start the Telegram assistant."""
    from loguru import logger

    from voice2action.app import build_context
    from voice2action.channels.telegram import TelegramChannel
    from voice2action.config.loader import load_config

    config = load_config()

    if not config.telegram.token:
        console.print("[red]Telegram bot token not set (VOICE2ACTION_TELEGRAM_TOKEN)[/red]")
        raise typer.Exit(1)
    if not _check_timezone(config.timezone):
        console.print(f"[red]Unknown timezone: {config.timezone}[/red]")
        raise typer.Exit(1)

    _configure_logging(verbose, config.logs_dir)
    console.print(f"{__logo__} Starting voice2action...")

    ctx = build_context(config)
    channel = TelegramChannel(config.telegram, ctx)

    async def _run() -> None:
        _shutdown_done = False

        async def _graceful_shutdown() -> None:
            nonlocal _shutdown_done
            if _shutdown_done:
                return
            _shutdown_done = True
            console.print("\nShutting down...")
            await channel.stop()

        loop = asyncio.get_running_loop()
        for sig in (signal.SIGTERM, signal.SIGINT):
            loop.add_signal_handler(
                sig,
                lambda: asyncio.ensure_future(_graceful_shutdown()),
            )

        try:
            await channel.start()
        except (KeyboardInterrupt, asyncio.CancelledError):
            await _graceful_shutdown()
        finally:
            pending = len(ctx.store)
            if pending:
                logger.info(f"Discarding {pending} unconfirmed action(s) on shutdown")

    asyncio.run(_run())


# ============================================================================
# Status / Resolve
# ============================================================================


def _secret(value: str | None) -> str:
    return "[green]✓ set[/green]" if value else "[dim]not set[/dim]"


@app.command()
def status():
    """Show the effective configuration."""
    from voice2action.config.loader import get_config_path, load_config

    config_path = get_config_path()
    config = load_config()

    console.print(f"{__logo__} voice2action Status\n")
    console.print(f"Config: {config_path} {'[green]✓[/green]' if config_path.exists() else '[red]✗[/red]'}")

    table = Table(title="Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value", style="yellow")

    table.add_row("Telegram token", _secret(config.telegram.token))
    table.add_row("Allowed users", ", ".join(config.telegram.allow_from) or "[dim]everyone[/dim]")
    table.add_row("LLM model", config.llm.model)
    table.add_row("LLM API key", _secret(config.llm.api_key))
    table.add_row("Speech-to-text key", _secret(config.transcription.api_key))
    table.add_row("Audio method", config.audio.processing_method)
    table.add_row("Max concurrent requests", str(config.limits.max_concurrent_requests))
    table.add_row("Confirmation TTL", f"{config.confirmations.ttl_seconds}s" if config.confirmations.ttl_seconds else "disabled")
    table.add_row("Timezone", config.timezone)
    token_path = config.google_token_path
    table.add_row("Google token", f"{token_path} {'[green]✓[/green]' if token_path.exists() else '[red]✗[/red]'}")

    console.print(table)


@app.command()
def resolve(
    text: str = typer.Argument(..., help="Command text to resolve"),
    offline: bool = typer.Option(False, "--offline", help="Keyword fallback only, no LLM call"),
):
    """Resolve one command and print the structured result."""
    from voice2action.config.loader import load_config
    from voice2action.intent.resolver import IntentResolver
    from voice2action.intent.types import Intent
    from voice2action.providers.litellm_provider import LiteLLMProvider

    config = load_config()

    backend = None
    if not offline:
        backend = LiteLLMProvider(
            api_key=config.llm.api_key or None,
            api_base=config.llm.api_base,
            default_model=config.llm.model,
        )
    resolver = IntentResolver(backend, timezone=config.timezone)
    result = asyncio.run(resolver.resolve_from_text(text))

    table = Table(title=f"Resolved via {resolver.mode}")
    table.add_column("Field", style="cyan")
    table.add_column("Value", style="green")
    table.add_row("intent", result.intent.value)
    if result.intent is Intent.EMAIL:
        table.add_row("recipient", result.recipient or "[dim](not specified)[/dim]")
        table.add_row("subject", result.subject)
        table.add_row("body", result.body)
    elif result.intent is Intent.CALENDAR:
        table.add_row("title", result.title)
        table.add_row("start", result.start_time.isoformat() if result.start_time else "-")
        table.add_row("end", result.end_time.isoformat() if result.end_time else "-")
        table.add_row("category", result.category.value)
        table.add_row("color", result.color_id)
        table.add_row("description", result.description)
    else:
        table.add_row("response", result.response)

    console.print(table)


if __name__ == "__main__":
    app()
