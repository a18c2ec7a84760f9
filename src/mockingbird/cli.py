"""CLI entry point for MockingBird."""

import logging
import os
from logging.handlers import RotatingFileHandler
from pathlib import Path

import click
from rich.console import Console

from . import __version__
from .client import HttpInterviewerClient, InterviewerClient
from .config import BACKENDS, CONFIG_FILE, Config, load_config, save_config
from .errors import MockingbirdError
from .timer import format_time
from .tui_textual import MockingbirdApp

console = Console()

LOG_FILE = Path.home() / ".cache" / "mockingbird" / "debug.log"


def get_username() -> str:
    """Login name from the environment, or an empty string."""
    return os.getenv("USER") or os.getenv("LOGNAME") or os.getenv("USERNAME") or ""


def configure_logging(debug_logging: bool) -> None:
    if debug_logging:
        # Debug logging enabled - use rotating file handler
        LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            LOG_FILE,
            maxBytes=5 * 1024 * 1024,  # 5MB
            backupCount=3,
        )
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            handlers=[handler],
        )
        logging.info("MockingBird starting (debug logging enabled)")
    else:
        # Default: only warn+ so TUI stays clean
        logging.basicConfig(
            level=logging.WARNING,
            format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        )


def make_client(config: Config) -> InterviewerClient:
    """Build the interviewer client for the configured backend."""
    if config.backend == "llm":
        # Imported lazily: litellm is slow to import and unused by the api backend
        from .llm import LLMInterviewerClient
        return LLMInterviewerClient(model=config.llm.model, api_base=config.llm.api_base)
    return HttpInterviewerClient(
        base_url=config.api.url,
        api_key=config.api.api_key,
        timeout=config.api.timeout,
    )


@click.group(invoke_without_command=True)
@click.option("--name", help="Name to greet (default: your login name)")
@click.option("--duration", type=click.IntRange(min=1), default=None, help="Interview length in seconds")
@click.option("--api-url", default=None, help="Interviewer API base URL for this run")
@click.option("--backend", type=click.Choice(BACKENDS), default=None, help="Interviewer backend for this run")
@click.option("--debug-logging/--no-debug-logging", default=None, help="Enable debug logging to file")
@click.option("--version", "-v", is_flag=True, help="Show version")
@click.pass_context
def main(ctx: click.Context, name: str | None, duration: int | None, api_url: str | None, backend: str | None, debug_logging: bool | None, version: bool) -> None:
    """MockingBird - a timed mock coding interview in your terminal."""
    if version:
        console.print(f"mockingbird v{__version__}")
        return

    if ctx.invoked_subcommand is None:
        config = load_config()
        # Apply CLI overrides (not saved to config file)
        if duration is not None:
            config.interview.duration_seconds = duration
        if api_url is not None:
            config.api.url = api_url
        if backend is not None:
            config.backend = backend
        if debug_logging is not None:
            config.debug_logging = debug_logging
        run_interview(config=config, username=name if name is not None else get_username())


def run_interview(config: Config | None = None, username: str = "") -> None:
    """Run the interview TUI until the user quits from the start screen."""
    if config is None:
        config = load_config()

    configure_logging(config.debug_logging)

    client = make_client(config)
    try:
        app = MockingbirdApp(client, interview=config.interview, username=username)
        app.run()
    except KeyboardInterrupt:
        pass
    finally:
        client.shutdown()
        console.print("\n[dim]Goodbye![/dim]")


@main.command()
@click.option("--api-url", help="Interviewer API base URL (e.g., http://localhost:3000)")
@click.option("--backend", type=click.Choice(BACKENDS), help="Interviewer backend")
@click.option("--model", help="LLM model name with litellm prefix (e.g., gemini/gemini-2.5-flash)")
@click.option("--llm-api-base", help="OpenAI-compatible server URL for the llm backend")
@click.option("--duration", type=click.IntRange(min=1), help="Interview length in seconds")
@click.option("--debug-logging/--no-debug-logging", default=None, help="Enable debug logging to file")
@click.option("--show", is_flag=True, help="Show current configuration")
def config(api_url: str | None, backend: str | None, model: str | None, llm_api_base: str | None, duration: int | None, debug_logging: bool | None, show: bool) -> None:
    """Configure MockingBird settings.

    Examples:
      mockingbird config --api-url http://localhost:3000   # Use a local API
      mockingbird config --backend llm --model openai/gpt-4o-mini
      mockingbird config --duration 1800                   # 30 minute interviews
      mockingbird config --show                            # Show current config
    """
    current_config = load_config()

    if show:
        console.print("\n[bold]Current Configuration:[/bold]")
        console.print(f"  Backend:       [cyan]{current_config.backend}[/cyan]")
        console.print(f"  Duration:      [cyan]{format_time(current_config.interview.duration_seconds)}[/cyan]")
        console.print(f"  Debug Logging: [cyan]{current_config.debug_logging}[/cyan]")

        console.print("\n[bold]API:[/bold]")
        console.print(f"  URL:     [cyan]{current_config.api.url}[/cyan]")
        has_key = current_config.api.api_key is not None
        console.print(f"  API Key: [{'green' if has_key else 'red'}]{'set' if has_key else 'not set'}[/] (MOCKINGBIRD_API_KEY)")

        console.print("\n[bold]LLM:[/bold]")
        console.print(f"  Model:    [cyan]{current_config.llm.model}[/cyan]")
        if current_config.llm.api_base:
            console.print(f"  API Base: [cyan]{current_config.llm.api_base}[/cyan]")

        console.print(f"\nConfig file: [dim]{CONFIG_FILE}[/dim]")
        for var in ("MOCKINGBIRD_API_URL", "MOCKINGBIRD_BACKEND", "MOCKINGBIRD_LLM_MODEL", "MOCKINGBIRD_DURATION"):
            if os.getenv(var):
                console.print(f"[yellow]Note:[/yellow] {var} is set: {os.getenv(var)}")
        return

    if not any([api_url, backend, model, llm_api_base, duration, debug_logging is not None]):
        console.print("Nothing to change. Use --show to view current configuration.")
        return

    if api_url:
        current_config.api.url = api_url
    if backend:
        current_config.backend = backend
    if model:
        current_config.llm.model = model
    if llm_api_base:
        current_config.llm.api_base = llm_api_base
    if duration:
        current_config.interview.duration_seconds = duration
    if debug_logging is not None:
        current_config.debug_logging = debug_logging

    save_config(current_config)

    console.print("\n[green]Configuration saved![/green]")
    console.print(f"  Backend:  [cyan]{current_config.backend}[/cyan]")
    if current_config.backend == "api":
        console.print(f"  API URL:  [cyan]{current_config.api.url}[/cyan]")
    else:
        console.print(f"  Model:    [cyan]{current_config.llm.model}[/cyan]")
    console.print(f"  Duration: [cyan]{format_time(current_config.interview.duration_seconds)}[/cyan]")
    console.print(f"\nSaved to: [dim]{CONFIG_FILE}[/dim]")


@main.command()
@click.option("--api-url", help="Interviewer API base URL (default: configured URL)")
def health(api_url: str | None) -> None:
    """Check that the interviewer API is reachable."""
    current_config = load_config()
    client = HttpInterviewerClient(
        base_url=api_url or current_config.api.url,
        api_key=current_config.api.api_key,
    )
    try:
        data = client.health()
    except MockingbirdError as exc:
        console.print(f"[red]Error:[/red] {exc}")
        raise SystemExit(1)
    finally:
        client.shutdown()
    console.print(f"[green]{data.get('status', 'ok')}[/green] {client.base_url} [dim]{data.get('timestamp', '')}[/dim]")


if __name__ == "__main__":
    main()
