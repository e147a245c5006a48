"""Probe and parse a music library in parallel."""

import os
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from loguru import logger
from tqdm import tqdm

from dupetier.errors import DecodeError, DupetierError, ParseError, ScanCancelled
from dupetier.models import AudioProperties, ScannedFile, TrackIdentity
from dupetier.parser import parse_path
from dupetier.probe import AUDIO_EXTENSIONS, discover_audio_files, probe_file

BATCH_SIZE = 500

Probe = Callable[[Path], AudioProperties]
Parse = Callable[[Path], TrackIdentity]


class FileState(str, Enum):
    DISCOVERED = "discovered"
    PROBING = "probing"
    PROBED = "probed"
    PROBE_FAILED = "probe failed"
    PARSED = "parsed"
    PARSE_FAILED = "parse failed"


@dataclass(frozen=True)
class FileOutcome:
    """Terminal state of one file; each scanned file gets exactly one."""

    index: int
    root: Path
    path: Path
    state: FileState
    properties: AudioProperties | None = None
    identity: TrackIdentity | None = None
    error: DupetierError | None = None


@dataclass
class ScanReport:
    outcomes: list[FileOutcome] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.outcomes)

    @property
    def files(self) -> list[ScannedFile]:
        """Probed and parsed files, in discovery order, ready for grouping."""
        return [
            ScannedFile(o.index, o.root, o.path, o.identity, o.properties)
            for o in self.outcomes
            if o.state is FileState.PARSED
        ]

    @property
    def probed(self) -> list[tuple[Path, AudioProperties]]:
        return [(o.path, o.properties) for o in self.outcomes if o.properties is not None]

    @property
    def probe_failures(self) -> list[FileOutcome]:
        return [o for o in self.outcomes if o.state is FileState.PROBE_FAILED]

    @property
    def parse_failures(self) -> list[FileOutcome]:
        return [o for o in self.outcomes if o.state is FileState.PARSE_FAILED]


class _Accumulator:
    """Lock-guarded, write-once-per-file result store shared by workers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._outcomes: dict[int, FileOutcome] = {}

    def record(self, outcome: FileOutcome) -> None:
        with self._lock:
            if outcome.index in self._outcomes:
                raise RuntimeError(f"Duplicate outcome for {outcome.path}")
            self._outcomes[outcome.index] = outcome

    def ordered(self) -> list[FileOutcome]:
        with self._lock:
            return [self._outcomes[i] for i in sorted(self._outcomes)]


def _process(
    index: int,
    root: Path,
    path: Path,
    probe: Probe,
    parse: Parse | None,
    acc: _Accumulator,
) -> None:
    logger.debug("{} {}", FileState.PROBING.value, path)
    try:
        props = probe(path)
    except DecodeError as e:
        error = e
    except Exception as e:
        error = DecodeError(path, str(e))
    else:
        error = None

    if error is not None:
        logger.warning("Skipping {}: {}", path, error.message)
        acc.record(FileOutcome(index, root, path, FileState.PROBE_FAILED, error=error))
        return

    if parse is None:
        acc.record(FileOutcome(index, root, path, FileState.PROBED, properties=props))
        return

    try:
        identity = parse(path)
    except ParseError as e:
        logger.warning("Cannot parse {}: {}", path.name, e.kind.value)
        acc.record(FileOutcome(index, root, path, FileState.PARSE_FAILED, properties=props, error=e))
        return

    acc.record(FileOutcome(index, root, path, FileState.PARSED, properties=props, identity=identity))


def default_workers() -> int:
    return os.cpu_count() or 1


def scan_files(
    entries: list[tuple[Path, Path]],
    probe: Probe | None = None,
    parse: Parse | None = parse_path,
    workers: int | None = None,
    batch_size: int = BATCH_SIZE,
    cancel: threading.Event | None = None,
    progress: bool = True,
) -> ScanReport:
    """Probe (and optionally parse) every (root, path) entry on a worker pool.

    Work is submitted in batches; `cancel` is checked between batches and
    raises ScanCancelled, dropping whatever was collected so far. Outcomes
    come back sorted by discovery order no matter which worker finished first.
    """
    probe = probe or probe_file
    workers = workers or default_workers()
    acc = _Accumulator()
    logger.info("Scanning {} files with {} workers", len(entries), workers)

    with ThreadPoolExecutor(max_workers=workers) as executor, tqdm(
        total=len(entries), desc="Scanning tracks", unit="file", disable=not progress
    ) as bar:
        for start in range(0, len(entries), batch_size):
            if cancel is not None and cancel.is_set():
                raise ScanCancelled(f"Scan cancelled after {start} of {len(entries)} files")

            futures = [
                executor.submit(_process, start + offset, root, path, probe, parse, acc)
                for offset, (root, path) in enumerate(entries[start : start + batch_size])
            ]
            try:
                for future in as_completed(futures):
                    future.result()
                    bar.update(1)
            except BaseException:
                executor.shutdown(wait=False, cancel_futures=True)
                raise

    report = ScanReport(outcomes=acc.ordered())
    logger.info(
        "Scan complete: {} ok, {} probe failures, {} parse failures",
        report.total - len(report.probe_failures) - len(report.parse_failures),
        len(report.probe_failures),
        len(report.parse_failures),
    )
    return report


def scan_library(
    roots: Iterable[Path],
    extensions: Iterable[str] = AUDIO_EXTENSIONS,
    exclude: Path | None = None,
    **kwargs,
) -> ScanReport:
    """Discover audio files under the roots and scan them.

    Raises LibraryError before any per-file work if a root cannot be listed.
    """
    entries = discover_audio_files(roots, extensions, exclude=exclude)
    if not entries:
        logger.info("No audio files found")
        return ScanReport()
    return scan_files(entries, **kwargs)
