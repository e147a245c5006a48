"""Data models for track identities, audio properties and resolution plans."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import NamedTuple


@dataclass(frozen=True)
class TrackIdentity:
    """What a filename says a track is."""

    artists: tuple[str, ...]
    title: str
    version: str | None = None

    def display(self) -> str:
        version = f" ({self.version})" if self.version else ""
        if self.artists:
            return f"{', '.join(self.artists)} - {self.title}{version}"
        return f"{self.title}{version}"


class VersionClass(str, Enum):
    ORIGINAL = "original"
    CLUB_MIX = "club mix"
    RADIO_EDIT = "radio edit"
    EXTENDED_MIX = "extended mix"
    REMASTER = "remaster"
    NAMED_EDIT = "named edit"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class NormalizedKey:
    artist_set: frozenset[str]
    clean_title: str
    version_class: VersionClass
    version_detail: str | None = None

    def as_text(self) -> str:
        """Deterministic single-line form, stable across runs."""
        artists = ", ".join(sorted(self.artist_set))
        version = self.version_detail if self.version_detail else self.version_class.value
        return f"{artists} - {self.clean_title} [{version}]"


class AudioFormat(str, Enum):
    FLAC = "FLAC"
    WAV = "WAV"
    AIFF = "AIFF"
    ALAC = "ALAC"
    MP3 = "MP3"
    OTHER = "OTHER"

    @property
    def is_lossless(self) -> bool:
        return self in LOSSLESS_FORMATS


LOSSLESS_FORMATS = frozenset({AudioFormat.FLAC, AudioFormat.WAV, AudioFormat.AIFF, AudioFormat.ALAC})


@dataclass(frozen=True)
class AudioProperties:
    format: AudioFormat
    bitrate_kbps: int | None
    file_size_bytes: int
    duration_secs: float | None = None
    sample_rate: int | None = None
    channels: int | None = None


class QualityScore(NamedTuple):
    """Ranking tuple; plain tuple comparison gives the quality order."""

    is_lossless: bool
    bitrate_kbps: int
    file_size_bytes: int


@dataclass(frozen=True)
class ScannedFile:
    """A file that was probed and parsed successfully."""

    index: int
    root: Path
    path: Path
    identity: TrackIdentity
    properties: AudioProperties


@dataclass(frozen=True)
class DuplicateGroup:
    key: NormalizedKey
    members: tuple[ScannedFile, ...]


@dataclass(frozen=True)
class MoveDecision:
    path: Path
    root: Path
    reason: str
    keeper: Path


@dataclass(frozen=True)
class GroupResolution:
    key: NormalizedKey
    keeper: ScannedFile
    discards: tuple[tuple[ScannedFile, MoveDecision], ...]

    @property
    def decisions(self) -> tuple[MoveDecision, ...]:
        return tuple(decision for _, decision in self.discards)


@dataclass(frozen=True)
class ResolutionPlan:
    groups: tuple[GroupResolution, ...] = ()

    @property
    def decisions(self) -> list[MoveDecision]:
        return [d for group in self.groups for d in group.decisions]

    def render(self) -> str:
        """Human-readable plan text; identical for dry-run and real runs."""
        lines: list[str] = []
        for group in self.groups:
            lines.append(f"Keep: {group.keeper.path}")
            for decision in group.decisions:
                lines.append(f"  Move: {decision.path}")
                lines.append(f"    Reason: {decision.reason}")
        return "\n".join(lines)


class BitrateTier(str, Enum):
    HIGH_RES = "High-Resolution (1500+ kbps)"
    LOSSLESS = "Lossless (700-1499 kbps)"
    HIGH = "High Bitrate (256-400 kbps)"
    STANDARD = "Standard Bitrate (160-255 kbps)"
    LOW = "Low Bitrate (64-159 kbps)"
    UNCLASSIFIED = "Unclassified"


@dataclass(frozen=True)
class BitrateRecord:
    path: Path
    format: AudioFormat
    bitrate_kbps: int | None
    tier: BitrateTier


@dataclass
class BitrateSummary:
    total_files: int
    files_with_bitrate: int
    tier_counts: dict[BitrateTier, int] = field(default_factory=dict)
    average_bitrate: float = 0.0
    min_bitrate: int = 0
    max_bitrate: int = 0

    def percentage(self, tier: BitrateTier) -> float:
        if not self.total_files:
            return 0.0
        return self.tier_counts.get(tier, 0) / self.total_files * 100.0
