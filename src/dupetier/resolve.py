"""Pick the surviving copy of each duplicate group and explain the rest.

Nothing in this module touches the filesystem: it turns groups into a
ResolutionPlan, and executing (or only printing) that plan is up to the
caller. A dry run and a real run therefore see the same plan.
"""

from collections.abc import Iterable

from dupetier.models import (
    DuplicateGroup,
    GroupResolution,
    MoveDecision,
    ResolutionPlan,
    ScannedFile,
)
from dupetier.quality import quality_score

MB = 1_048_576


def _rank(f: ScannedFile) -> tuple:
    # Higher score wins; on a full tie the earlier scan index wins
    return (quality_score(f.properties), -f.index)


def pick_keeper(members: Iterable[ScannedFile]) -> ScannedFile:
    return max(members, key=_rank)


def _format_bitrate(kbps: int | None) -> str:
    return "unknown" if kbps is None else str(kbps)


def deciding_dimension(keeper: ScannedFile, other: ScannedFile) -> str:
    """Name the first quality field that separates keeper from other."""
    kq = quality_score(keeper.properties)
    oq = quality_score(other.properties)
    kp, op = keeper.properties, other.properties

    if kq.is_lossless != oq.is_lossless:
        return f"format: {kp.format.value} (lossless) vs {op.format.value} (lossy)"
    if kq.bitrate_kbps != oq.bitrate_kbps:
        return (
            f"bitrate: {_format_bitrate(kp.bitrate_kbps)} vs "
            f"{_format_bitrate(op.bitrate_kbps)} kbps"
        )
    if kq.file_size_bytes != oq.file_size_bytes:
        k_mb = f"{kq.file_size_bytes / MB:.2f} MB"
        o_mb = f"{oq.file_size_bytes / MB:.2f} MB"
        if k_mb == o_mb:
            return f"size: {kq.file_size_bytes} vs {oq.file_size_bytes} bytes"
        return f"size: {k_mb} vs {o_mb}"
    return "identical quality, kept first scanned file"


def build_reason(keeper: ScannedFile, other: ScannedFile) -> str:
    return f"Exact title match: '{keeper.identity.display()}'; {deciding_dimension(keeper, other)}"


def resolve_group(group: DuplicateGroup) -> GroupResolution:
    keeper = pick_keeper(group.members)
    discards = tuple(
        (
            member,
            MoveDecision(
                path=member.path,
                root=member.root,
                reason=build_reason(keeper, member),
                keeper=keeper.path,
            ),
        )
        for member in group.members
        if member is not keeper
    )
    return GroupResolution(key=group.key, keeper=keeper, discards=discards)


def build_plan(groups: Iterable[DuplicateGroup]) -> ResolutionPlan:
    return ResolutionPlan(groups=tuple(resolve_group(g) for g in groups))
