"""CLI entry point for fittrack."""

import asyncio

import typer
import uvicorn

from fittrack import __version__
from fittrack.core.config import settings
from fittrack.core.database import create_engine, create_session_maker, get_session
from fittrack.core.logging import configure_logging
from fittrack.services.record_store import RecordStore
from fittrack.services.streak import StreakService

app = typer.Typer(
    name="fittrack",
    help="Local-first run streak and strength progression tracker",
    no_args_is_help=True,
)


@app.command()
def serve(
    host: str = typer.Option(None, help="Host to bind to (overrides config)"),
    port: int = typer.Option(None, help="Port to bind to (overrides config)"),
    reload: bool = typer.Option(False, help="Enable auto-reload for development"),
) -> None:
    """Start the local API server.

    Example:
        fittrack serve
        fittrack serve --port 8080 --reload
    """
    uvicorn.run(
        "fittrack.app:create_app",
        factory=True,
        host=host or settings.api_host,
        port=port or settings.api_port,
        reload=reload,
        log_level=settings.log_level.lower(),
    )


async def _current_streak(min_distance: float | None, min_duration: int | None) -> tuple[int, int]:
    engine = create_engine()
    try:
        async with get_session(create_session_maker(engine)) as session:
            service = StreakService(RecordStore(session))
            length = await service.compute_current_streak(min_distance, min_duration)
            remaining = await service.freezes_remaining()
    finally:
        await engine.dispose()
    return length, remaining


@app.command()
def streak(
    min_distance: float = typer.Option(None, help="Minimum distance for a day to count"),
    min_duration: int = typer.Option(None, help="Minimum duration in seconds for a day to count"),
) -> None:
    """Show the current run streak.

    Example:
        fittrack streak
        fittrack streak --min-distance 3 --min-duration 1200
    """
    configure_logging(settings.log_level)
    length, remaining = asyncio.run(_current_streak(min_distance, min_duration))
    typer.echo(f"Current streak: {length} day{'s' if length != 1 else ''}")
    typer.echo(f"Freezes left this month: {remaining}")


@app.command()
def version() -> None:
    """Show version information."""
    typer.echo(f"fittrack v{__version__}")


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
