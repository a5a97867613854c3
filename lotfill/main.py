import asyncio
from pathlib import Path

import typer

from lotfill.batch.console import TyperConsole
from lotfill.batch.exceptions import BatchError, MissingIdentifyingFieldError, NoPendingBatchError
from lotfill.batch.orchestrator import FillOrchestrator, build_orchestrator
from lotfill.config.settings import Settings
from lotfill.extraction.source import SourceDocument
from lotfill.logging.logger import Log

app = typer.Typer(
    name="lotfill",
    help="Fill lot forms from a document's metadata, one target at a time.",
    add_completion=False,
    no_args_is_help=True,
)

# Exit code for a unit that can be retried (refused, timed out, stale).
RETRY_EXIT_CODE = 2


def _open_orchestrator() -> FillOrchestrator:
    """Settings -> logging -> orchestrator, with any pending batch picked up."""
    settings = Settings()
    Log.configure(settings.log_level)
    Log.info(
        "lotfill configured",
        env=settings.app_env,
        pdf_engine=settings.pdf_engine,
        target_host=settings.target_host,
    )
    orchestrator = build_orchestrator(settings, TyperConsole())
    try:
        orchestrator.start()
    except MissingIdentifyingFieldError as exc:
        _fail(exc)
    return orchestrator


def _fail(exc: BatchError) -> None:
    Log.error(str(exc))
    typer.echo(f"Error: {exc}", err=True)
    raise typer.Exit(code=1)


@app.command()
def start(
    document: Path = typer.Argument(..., help="PDF document the lot metadata is read from"),
) -> None:
    """Extract a document and fill unit 1 into the current target."""
    orchestrator = _open_orchestrator()
    orchestrator.begin(SourceDocument(path=document))


@app.command("next")
def next_unit() -> None:
    """Open the next target and fill it."""
    orchestrator = _open_orchestrator()
    try:
        result = asyncio.run(orchestrator.advance())
    except NoPendingBatchError as exc:
        _fail(exc)
        return
    typer.echo(result.message)
    if not result.succeeded:
        raise typer.Exit(code=RETRY_EXIT_CODE)


@app.command()
def status() -> None:
    """Show the progress of the pending batch."""
    orchestrator = _open_orchestrator()
    if orchestrator.progress() is None:
        typer.echo("No pending batch.")


@app.command()
def abandon() -> None:
    """Forget the pending batch."""
    orchestrator = _open_orchestrator()
    orchestrator.abandon()
    typer.echo("Batch cleared.")


def main() -> None:
    """Entry point for the ``lotfill`` console script."""
    app()


if __name__ == "__main__":
    main()
