from collections.abc import Callable
from pathlib import Path

import pytest

from dupetier.models import AudioFormat, AudioProperties, ScannedFile
from dupetier.parser import parse_path

FORMATS = {".flac": AudioFormat.FLAC, ".wav": AudioFormat.WAV, ".mp3": AudioFormat.MP3}


@pytest.fixture
def make_file() -> Callable[..., ScannedFile]:
    """Build a ScannedFile from a filename; format follows the extension."""

    def _make(
        index: int,
        name: str,
        kbps: int | None = 320,
        size: int = 1000,
        root: Path = Path("/library"),
    ) -> ScannedFile:
        path = root / name
        props = AudioProperties(
            format=FORMATS.get(path.suffix.lower(), AudioFormat.OTHER),
            bitrate_kbps=kbps,
            file_size_bytes=size,
        )
        return ScannedFile(index=index, root=root, path=path, identity=parse_path(path), properties=props)

    return _make
