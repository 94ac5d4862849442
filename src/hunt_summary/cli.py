"""Hunt match summary CLI using Typer."""

from functools import partial
from pathlib import Path
from typing import Optional

import typer
from pydantic import ValidationError
from typing_extensions import Annotated

from .config import AppSettings, SchemaStrategy, get_settings, resolve_output_dir
from .errors import HuntSummaryError
from .hunt_logging import configure_logging, get_logger
from .pipelines.extract import ExtractionResult, ExtractionStatus, run_extraction
from .storage.snapshots import LocalSnapshotStore, SnapshotWriter
from .watch.watcher import FileWatcher, watch_loop

app = typer.Typer(help="Extract Hunt: Showdown player match data from 'attributes.xml' into CSV files", add_completion=False)


def _report(result: ExtractionResult) -> None:
    if result.status == ExtractionStatus.PROMOTED:
        typer.echo(result.text)
        typer.echo(f"New player summary saved: '{result.path}'")
    elif result.status == ExtractionStatus.UNCHANGED:
        typer.echo("Player summary unchanged, nothing saved")
    else:
        typer.echo("No finished match in attribute dump, nothing saved")


def _build_settings(**overrides) -> AppSettings:
    """Settings from env/.env with command-line values layered on top."""
    updates = {key: value for key, value in overrides.items() if value is not None}
    if not updates:
        return get_settings()
    base = get_settings().model_dump()
    base.update(updates)
    return AppSettings(**base)


@app.command()
def extract(
    input_path: Annotated[Optional[Path], typer.Option("--input", "-i", help="Path of 'attributes.xml'")] = None,
    output_dir: Annotated[Optional[Path], typer.Option("--output-dir", "-o", help="Output directory [default: <Documents>/Hunt/MatchData]")] = None,
    single: Annotated[bool, typer.Option("--single", "-s", help="Run once instead of watching for changes")] = False,
    zero_based: Annotated[bool, typer.Option("--zero-based", "-z", help="Zero-based numbering for teams and players")] = False,
    temp_file: Annotated[Optional[str], typer.Option("--temp-file", help="Filename for the staging CSV file")] = None,
    schema: Annotated[Optional[SchemaStrategy], typer.Option("--schema", help="Schema discovery strategy", case_sensitive=False)] = None,
    debounce: Annotated[Optional[float], typer.Option("--debounce", help="Seconds of quiet before a change triggers a run")] = None,
):
    """Write a timestamped CSV snapshot whenever the match data changes."""
    try:
        settings = _build_settings(
            INPUT_PATH=input_path,
            OUTPUT_DIR=output_dir,
            SINGLE=True if single else None,
            ZERO_BASED=True if zero_based else None,
            TEMP_FILE=temp_file,
            SCHEMA=schema,
            DEBOUNCE_S=debounce,
        )
    except ValidationError as e:
        typer.echo(f"Invalid configuration: {e}", err=True)
        raise typer.Exit(2)

    configure_logging(settings)
    logger = get_logger(__name__)

    writer = SnapshotWriter(LocalSnapshotStore(resolve_output_dir(settings)), staging_name=settings.TEMP_FILE)
    run_once = partial(
        run_extraction,
        settings.INPUT_PATH,
        writer,
        zero_based=settings.ZERO_BASED,
        strategy=settings.SCHEMA,
    )

    if settings.SINGLE:
        try:
            _report(run_once())
        except HuntSummaryError as e:
            typer.echo(f"Error: {e}", err=True)
            raise typer.Exit(1)
        return

    try:
        writer.store.ensure_dir()
        with FileWatcher(settings.INPUT_PATH, debounce_seconds=settings.DEBOUNCE_S) as watcher:
            typer.echo(f"Watching for changes to '{settings.INPUT_PATH}'...")
            watch_loop(watcher.events, run_once, on_result=_report)
    except HuntSummaryError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    except KeyboardInterrupt:
        logger.info("Watch stopped by user")
        typer.echo("Stopped watching.")


def main():
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    app()
