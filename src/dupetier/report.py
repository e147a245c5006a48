"""CSV reports and console summaries."""

import csv
from pathlib import Path

from loguru import logger

from dupetier.models import BitrateRecord, BitrateSummary, BitrateTier, ResolutionPlan

BITRATE_HEADER = ["Path", "Format", "Bitrate (kbps)", "Tier"]
DUPLICATE_HEADER = [
    "Keeper",
    "Keeper Bitrate (kbps)",
    "Duplicate",
    "Duplicate Bitrate (kbps)",
    "Reason",
]


def _kbps(value: int | None) -> str:
    return "" if value is None else str(value)


def write_bitrate_csv(records: list[BitrateRecord], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(BITRATE_HEADER)
        for r in records:
            writer.writerow([str(r.path), r.format.value, _kbps(r.bitrate_kbps), r.tier.value])
    logger.info("Bitrate report written to {}", path)


def write_duplicate_csv(plan: ResolutionPlan, path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(DUPLICATE_HEADER)
        for group in plan.groups:
            keeper_kbps = _kbps(group.keeper.properties.bitrate_kbps)
            for member, decision in group.discards:
                writer.writerow([
                    str(group.keeper.path),
                    keeper_kbps,
                    str(member.path),
                    _kbps(member.properties.bitrate_kbps),
                    decision.reason,
                ])
    logger.info("Duplicate report written to {}", path)


def format_bitrate_summary(summary: BitrateSummary) -> str:
    lines = [
        "Bitrate Analysis Summary:",
        f"Total files: {summary.total_files}",
        f"Files with valid bitrate: {summary.files_with_bitrate}",
        f"Average bitrate: {summary.average_bitrate:.1f} kbps",
        f"Min bitrate: {summary.min_bitrate} kbps",
        f"Max bitrate: {summary.max_bitrate} kbps",
        "",
        "Bitrate Distribution:",
    ]
    for tier in BitrateTier:
        count = summary.tier_counts.get(tier, 0)
        if count:
            lines.append(f"{tier.value}: {count} files ({summary.percentage(tier):.1f}%)")
    return "\n".join(lines)
