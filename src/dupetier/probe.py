"""Find audio files on disk and probe their technical properties."""

import os
from collections.abc import Iterable
from pathlib import Path

from loguru import logger
from mutagen import File as MutagenFile
from mutagen import MutagenError
from mutagen.aiff import AIFF
from mutagen.flac import FLAC
from mutagen.mp3 import MP3
from mutagen.mp4 import MP4
from mutagen.wave import WAVE

from dupetier.errors import DecodeError, LibraryError
from dupetier.models import AudioFormat, AudioProperties

AUDIO_EXTENSIONS = frozenset({".mp3", ".flac", ".wav"})


def _check_root(root: Path) -> None:
    if not root.is_dir():
        raise LibraryError(f"{root} is not a directory")
    try:
        with os.scandir(root) as it:
            next(it, None)
    except OSError as e:
        raise LibraryError(f"Cannot list {root}: {e}") from e


def _is_within(path: Path, parent: Path) -> bool:
    try:
        path.relative_to(parent)
    except ValueError:
        return False
    return True


def discover_audio_files(
    roots: Iterable[Path],
    extensions: Iterable[str] = AUDIO_EXTENSIONS,
    exclude: Path | None = None,
) -> list[tuple[Path, Path]]:
    """Return (root, path) pairs for every audio file, in sorted traversal order.

    Every root is checked before any is walked, so an unlistable root fails
    the run up front.
    """
    roots = [Path(r).resolve() for r in roots]
    for root in roots:
        _check_root(root)

    wanted = {e.lower() for e in extensions}
    excluded = exclude.resolve() if exclude is not None else None

    found: list[tuple[Path, Path]] = []
    for root in roots:
        count = 0
        for p in sorted(root.rglob("*")):
            if p.suffix.lower() not in wanted or not p.is_file():
                continue
            if excluded is not None and _is_within(p, excluded):
                continue
            found.append((root, p))
            count += 1
        logger.info("Found {} audio files under {}", count, root)
    return found


def _audio_format(audio: object) -> AudioFormat:
    if isinstance(audio, FLAC):
        return AudioFormat.FLAC
    if isinstance(audio, WAVE):
        return AudioFormat.WAV
    if isinstance(audio, AIFF):
        return AudioFormat.AIFF
    if isinstance(audio, MP3):
        return AudioFormat.MP3
    if isinstance(audio, MP4) and getattr(audio.info, "codec", "") == "alac":
        return AudioFormat.ALAC
    return AudioFormat.OTHER


def _bitrate_kbps(info: object, size_bytes: int, duration: float | None) -> int | None:
    # Average over the whole file, then whatever the container reports
    if duration and duration > 0:
        return int(size_bytes * 8 / duration / 1000)
    bitrate = getattr(info, "bitrate", 0) or 0
    if bitrate > 0:
        return int(bitrate // 1000)
    return None


def probe_file(path: Path) -> AudioProperties:
    """Read format, bitrate and stream info from a single audio file."""
    try:
        size = path.stat().st_size
        audio = MutagenFile(str(path))
    except (MutagenError, OSError) as e:
        raise DecodeError(path, str(e)) from e

    if audio is None or audio.info is None:
        raise DecodeError(path, "unsupported or unrecognized audio format")

    info = audio.info
    duration = getattr(info, "length", None) or None
    return AudioProperties(
        format=_audio_format(audio),
        bitrate_kbps=_bitrate_kbps(info, size, duration),
        file_size_bytes=size,
        duration_secs=duration,
        sample_rate=getattr(info, "sample_rate", None) or None,
        channels=getattr(info, "channels", None) or None,
    )
