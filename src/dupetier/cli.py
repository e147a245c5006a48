"""CLI entrypoint for dupetier."""

import signal
import threading
from pathlib import Path

import typer

from dupetier.config import Config, load_config
from dupetier.errors import ConfigError, LibraryError, ScanCancelled
from dupetier.log import setup_logging
from dupetier.parser import parse_path
from dupetier.scan import ScanReport, scan_library

app = typer.Typer(
    name="dupetier",
    help="Find duplicate tracks and classify audio files by bitrate",
    no_args_is_help=True,
)


def _load(config_path: Path | None, verbose: bool) -> Config:
    try:
        config = load_config(config_path)
    except ConfigError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    log_file = Path(config.logging.log_file).expanduser() if config.logging.log_file else None
    setup_logging(config.logging.level, log_file, verbose=verbose)
    return config


def _scan(
    dirs: list[Path],
    config: Config,
    workers: int | None,
    parse: bool,
    exclude: Path | None = None,
) -> ScanReport:
    """Run a scan; Ctrl-C stops it cleanly after the current batch."""
    cancel = threading.Event()
    previous = signal.signal(signal.SIGINT, lambda *_: cancel.set())
    try:
        return scan_library(
            dirs,
            config.scan.extensions,
            exclude=exclude,
            parse=parse_path if parse else None,
            workers=workers or config.scan.workers,
            batch_size=config.scan.batch_size,
            cancel=cancel,
        )
    except LibraryError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1)
    except ScanCancelled as e:
        typer.echo(f"Interrupted: {e}", err=True)
        raise typer.Exit(130)
    finally:
        signal.signal(signal.SIGINT, previous)


def _echo_failures(report: ScanReport) -> None:
    if report.probe_failures:
        typer.echo(f"\nUnreadable audio ({len(report.probe_failures)}):")
        for o in report.probe_failures:
            typer.echo(f"  {o.path}: {o.error}")
    if report.parse_failures:
        typer.echo(f"\nUnparseable filenames ({len(report.parse_failures)}):")
        for o in report.parse_failures:
            typer.echo(f"  {o.path}: {o.error}")


@app.command()
def duplicates(
    dirs: list[Path] = typer.Option(..., "--dir", "-i", help="Directory to scan (repeat for several)"),
    output: Path = typer.Option(..., "--output", "-o", help="Directory to move duplicates into"),
    dry_run: bool = typer.Option(False, "--dry-run", "-d", help="Only report what would be moved"),
    workers: int | None = typer.Option(None, "--workers", "-w", min=1, help="Worker threads (default: CPU count)"),
    config_path: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Find duplicate tracks and move all but the best copy into OUTPUT."""
    from dupetier.file_ops import execute_plan
    from dupetier.grouping import find_duplicate_groups
    from dupetier.report import write_duplicate_csv
    from dupetier.resolve import build_plan

    config = _load(config_path, verbose)
    report = _scan(dirs, config, workers, parse=True, exclude=output)
    typer.echo(f"Scanned {report.total} files")

    groups = find_duplicate_groups(report.files)
    plan = build_plan(groups)
    typer.echo(f"Found {len(groups)} duplicate groups\n")
    if plan.groups:
        typer.echo(plan.render())

    outcomes = execute_plan(plan, output, dry_run=dry_run)
    if dry_run:
        typer.echo(f"\nDry run: {len(outcomes)} files would be moved, nothing was changed")
    else:
        failed = [o for o in outcomes if not o.ok]
        typer.echo(f"\nMoved {len(outcomes) - len(failed)} of {len(outcomes)} duplicates")
        for o in failed:
            typer.echo(f"  Failed: {o.decision.path}: {o.error.message}", err=True)

    write_duplicate_csv(plan, output / "duplicate_report.csv")
    _echo_failures(report)


@app.command()
def bitrate(
    directory: Path = typer.Option(..., "--dir", "-i", help="Directory to scan"),
    output: Path = typer.Option(..., "--output", "-o", help="CSV file to write"),
    workers: int | None = typer.Option(None, "--workers", "-w", min=1, help="Worker threads (default: CPU count)"),
    config_path: Path | None = typer.Option(None, "--config", help="Path to config.toml"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Classify every audio file into a bitrate tier and write a CSV report."""
    from dupetier.quality import bitrate_records, summarize_bitrates
    from dupetier.report import format_bitrate_summary, write_bitrate_csv

    config = _load(config_path, verbose)
    report = _scan([directory], config, workers, parse=False)

    records = bitrate_records(report.probed)
    write_bitrate_csv(records, output)
    typer.echo(format_bitrate_summary(summarize_bitrates(records)))
    typer.echo(f"\nReport written to {output}")
    _echo_failures(report)


if __name__ == "__main__":
    app()
