"""Carry out a resolution plan by moving discarded files."""

import shutil
from dataclasses import dataclass
from pathlib import Path

from loguru import logger

from dupetier.errors import FileSystemError
from dupetier.models import MoveDecision, ResolutionPlan


@dataclass(frozen=True)
class MoveOutcome:
    decision: MoveDecision
    destination: Path
    moved: bool
    error: FileSystemError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def destination_for(decision: MoveDecision, output_dir: Path) -> Path:
    """Mirror the file's subpath under its scan root inside output_dir."""
    try:
        relative = decision.path.relative_to(decision.root)
    except ValueError:
        relative = Path(decision.path.name)
    return output_dir / relative


def _free_name(destination: Path, taken: set[Path] | None = None) -> Path:
    """Append _duplicate_N before the suffix until the name is unused.

    `taken` holds names already claimed by earlier moves in a dry run.
    """
    taken = taken or set()

    def _used(candidate: Path) -> bool:
        return candidate.exists() or candidate in taken

    if not _used(destination):
        return destination
    counter = 1
    while True:
        candidate = destination.with_name(f"{destination.stem}_duplicate_{counter}{destination.suffix}")
        if not _used(candidate):
            return candidate
        counter += 1


def move_file(source: Path, destination: Path) -> Path:
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        target = _free_name(destination)
        shutil.move(str(source), str(target))
    except OSError as e:
        raise FileSystemError(source, e.strerror or str(e)) from e
    return target


def execute_plan(plan: ResolutionPlan, output_dir: Path, dry_run: bool = False) -> list[MoveOutcome]:
    """Move every discard in the plan. One failure never stops the rest.

    With dry_run the destinations, collision suffixes included, are computed
    but nothing on disk changes. Completed moves are never rolled back.
    """
    outcomes: list[MoveOutcome] = []
    planned: set[Path] = set()
    for decision in plan.decisions:
        destination = destination_for(decision, output_dir)
        if dry_run:
            target = _free_name(destination, planned)
            planned.add(target)
            outcomes.append(MoveOutcome(decision, target, moved=False))
            continue
        try:
            target = move_file(decision.path, destination)
        except FileSystemError as e:
            logger.warning("Failed to move {}: {}", decision.path, e.message)
            outcomes.append(MoveOutcome(decision, destination, moved=False, error=e))
            continue
        logger.info("Moved {} -> {}", decision.path, target)
        outcomes.append(MoveOutcome(decision, target, moved=True))
    return outcomes
