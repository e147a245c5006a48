"""Exceptions raised by the duplicate engine and its collaborators."""

from enum import Enum
from pathlib import Path


class DupetierError(Exception):
    pass


class ParseErrorKind(str, Enum):
    UNPARSEABLE = "unparseable"
    EMPTY_TITLE = "empty title"


class ParseError(DupetierError):
    """A filename could not be turned into a track identity."""

    def __init__(self, kind: ParseErrorKind, name: str) -> None:
        self.kind = kind
        self.name = name
        super().__init__(f"{kind.value}: {name!r}")


class DecodeError(DupetierError):
    """Audio could not be probed (corrupt, unreadable or unsupported)."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class FileSystemError(DupetierError):
    """A move could not be carried out for one file."""

    def __init__(self, path: Path, message: str) -> None:
        self.path = path
        self.message = message
        super().__init__(f"{path}: {message}")


class LibraryError(DupetierError):
    """A scan root cannot be listed. Fatal for the whole run."""


class ScanCancelled(DupetierError):
    pass


class ConfigError(DupetierError):
    pass
