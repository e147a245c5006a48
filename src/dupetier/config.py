"""Configuration loaded from an optional TOML file."""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from dupetier.errors import ConfigError
from dupetier.probe import AUDIO_EXTENSIONS
from dupetier.scan import BATCH_SIZE


@dataclass
class ScanConfig:
    extensions: list[str] = field(default_factory=lambda: sorted(AUDIO_EXTENSIONS))
    workers: int | None = None  # None means one per CPU core
    batch_size: int = BATCH_SIZE

    def validate(self) -> None:
        bad = [e for e in self.extensions if not e.startswith(".")]
        if bad:
            raise ConfigError(f"Extensions must start with '.': {bad}")
        if self.workers is not None and self.workers < 1:
            raise ConfigError(f"workers must be at least 1, got {self.workers}")
        if self.batch_size < 1:
            raise ConfigError(f"batch_size must be at least 1, got {self.batch_size}")


@dataclass
class LoggingConfig:
    level: str = "INFO"
    log_file: str | None = None

    def validate(self) -> None:
        if self.level.upper() not in {"TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"}:
            raise ConfigError(f"Unknown log level: {self.level}")


@dataclass
class Config:
    scan: ScanConfig = field(default_factory=ScanConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def get_config_dir() -> Path:
    config_home = os.environ.get("XDG_CONFIG_HOME")
    if config_home:
        return Path(config_home) / "dupetier"
    return Path.home() / ".config" / "dupetier"


def get_config_path() -> Path:
    return get_config_dir() / "config.toml"


def load_config(path: Path | None = None) -> Config:
    """Load configuration, falling back to defaults when no file exists.

    An explicitly given path must exist; the default location is optional.
    """
    config_path = path or get_config_path()
    if not config_path.exists():
        if path is not None:
            raise ConfigError(f"Config file not found: {config_path}")
        return Config()

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Cannot read {config_path}: {e}") from e

    config = Config()

    if "scan" in data:
        scan = data["scan"]
        config.scan = ScanConfig(
            extensions=[e.lower() for e in scan.get("extensions", config.scan.extensions)],
            workers=scan.get("workers", config.scan.workers),
            batch_size=scan.get("batch_size", config.scan.batch_size),
        )

    if "logging" in data:
        log = data["logging"]
        config.logging = LoggingConfig(
            level=log.get("level", config.logging.level),
            log_file=log.get("log_file", config.logging.log_file),
        )

    config.scan.validate()
    config.logging.validate()
    return config
