"""Bucket scanned files into duplicate groups by normalized identity."""

from collections.abc import Iterable

from dupetier.models import DuplicateGroup, NormalizedKey, ScannedFile
from dupetier.normalize import normalize_identity


def group_by_key(files: Iterable[ScannedFile]) -> dict[NormalizedKey, list[ScannedFile]]:
    """Single pass; members keep the order they were fed in."""
    buckets: dict[NormalizedKey, list[ScannedFile]] = {}
    for f in files:
        buckets.setdefault(normalize_identity(f.identity), []).append(f)
    return buckets


def find_duplicate_groups(files: Iterable[ScannedFile]) -> list[DuplicateGroup]:
    """Return every group with two or more members, ordered by first member."""
    # Dict insertion order follows each key's first member
    ordered = sorted(files, key=lambda f: f.index)
    return [
        DuplicateGroup(key=key, members=tuple(members))
        for key, members in group_by_key(ordered).items()
        if len(members) >= 2
    ]


def singletons(files: Iterable[ScannedFile], groups: list[DuplicateGroup]) -> list[ScannedFile]:
    grouped = {m.index for g in groups for m in g.members}
    return sorted((f for f in files if f.index not in grouped), key=lambda f: f.index)
