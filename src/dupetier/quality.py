"""Quality scoring and bitrate-tier classification."""

from collections import Counter
from collections.abc import Iterable
from pathlib import Path

import numpy as np

from dupetier.models import (
    AudioFormat,
    AudioProperties,
    BitrateRecord,
    BitrateSummary,
    BitrateTier,
    QualityScore,
)

# (tier, lowest kbps, highest kbps); gaps between bands are Unclassified
TIER_BANDS: tuple[tuple[BitrateTier, int, int | None], ...] = (
    (BitrateTier.HIGH_RES, 1500, None),
    (BitrateTier.LOSSLESS, 700, 1499),
    (BitrateTier.HIGH, 256, 400),
    (BitrateTier.STANDARD, 160, 255),
    (BitrateTier.LOW, 64, 159),
)


def is_lossless(fmt: AudioFormat) -> bool:
    return fmt.is_lossless


def quality_score(props: AudioProperties) -> QualityScore:
    return QualityScore(
        is_lossless=is_lossless(props.format),
        bitrate_kbps=props.bitrate_kbps or 0,
        file_size_bytes=props.file_size_bytes,
    )


def classify_bitrate(bitrate_kbps: int | None) -> BitrateTier:
    if bitrate_kbps is None:
        return BitrateTier.UNCLASSIFIED
    for tier, low, high in TIER_BANDS:
        if bitrate_kbps >= low and (high is None or bitrate_kbps <= high):
            return tier
    return BitrateTier.UNCLASSIFIED


def bitrate_records(probed: Iterable[tuple[Path, AudioProperties]]) -> list[BitrateRecord]:
    return [
        BitrateRecord(
            path=path,
            format=props.format,
            bitrate_kbps=props.bitrate_kbps,
            tier=classify_bitrate(props.bitrate_kbps),
        )
        for path, props in probed
    ]


def summarize_bitrates(records: list[BitrateRecord]) -> BitrateSummary:
    """Aggregate tier counts and min/average/max bitrate over the records."""
    counts = Counter(r.tier for r in records)
    bitrates = np.array(
        [r.bitrate_kbps for r in records if r.bitrate_kbps is not None], dtype=np.int64
    )

    summary = BitrateSummary(
        total_files=len(records),
        files_with_bitrate=int(bitrates.size),
        tier_counts={tier: counts[tier] for tier in BitrateTier if counts[tier]},
    )
    if bitrates.size:
        summary.average_bitrate = float(np.mean(bitrates))
        summary.min_bitrate = int(np.min(bitrates))
        summary.max_bitrate = int(np.max(bitrates))
    return summary
