from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .hashing import DEFAULT_ALGORITHM, DEFAULT_CHUNK_SIZE
from .walker import DEFAULT_QUEUE_SIZE


@dataclass
class DefaultsConfig:
    manifest_file: Path = Path("hashes.json")
    directory: Path = Path(".")
    validation_file: Path = Path("validation.json")


@dataclass
class HashingConfig:
    algorithm: str = DEFAULT_ALGORITHM
    chunk_size: int = DEFAULT_CHUNK_SIZE


@dataclass
class WalkConfig:
    queue_size: int = DEFAULT_QUEUE_SIZE


@dataclass
class ValidationConfig:
    fail_on_invalid: bool = False


@dataclass
class LoggingConfig:
    dir: Optional[Path] = None
    file_name: str = "hasher.log"
    max_mb: int = 20
    backup_count: int = 5
    json: bool = False
    to_console: bool = True


@dataclass
class Config:
    log_level: str = "INFO"
    defaults: DefaultsConfig = field(default_factory=DefaultsConfig)
    hashing: HashingConfig = field(default_factory=HashingConfig)
    walk: WalkConfig = field(default_factory=WalkConfig)
    validation: ValidationConfig = field(default_factory=ValidationConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


def default_config() -> Config:
    return Config()


def load_config(path: str | Path) -> Config:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"config file not found: {config_path}")

    raw = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    if not isinstance(raw, dict):
        raise ValueError("config root must be a mapping")

    base_dir = config_path.resolve().parent

    defaults_raw = _as_dict(raw.get("defaults"))
    defaults = DefaultsConfig(
        manifest_file=Path(str(defaults_raw.get("manifest_file", "hashes.json"))),
        directory=Path(str(defaults_raw.get("directory", "."))),
        validation_file=Path(
            str(defaults_raw.get("validation_file", "validation.json"))
        ),
    )

    hashing_raw = _as_dict(raw.get("hashing"))
    hashing = HashingConfig(
        algorithm=str(hashing_raw.get("algorithm", DEFAULT_ALGORITHM)).lower(),
        chunk_size=max(1, int(hashing_raw.get("chunk_size", DEFAULT_CHUNK_SIZE))),
    )

    walk_raw = _as_dict(raw.get("walk"))
    walk = WalkConfig(
        queue_size=max(1, int(walk_raw.get("queue_size", DEFAULT_QUEUE_SIZE))),
    )

    validation_raw = _as_dict(raw.get("validation"))
    validation = ValidationConfig(
        fail_on_invalid=bool(validation_raw.get("fail_on_invalid", False)),
    )

    logging_raw = _as_dict(raw.get("logging"))
    log_dir = logging_raw.get("dir")
    logging_config = LoggingConfig(
        dir=_resolve_path(log_dir, base_dir) if log_dir else None,
        file_name=str(logging_raw.get("file_name", "hasher.log")),
        max_mb=int(logging_raw.get("max_mb", 20)),
        backup_count=int(logging_raw.get("backup_count", 5)),
        json=bool(logging_raw.get("json", False)),
        to_console=bool(logging_raw.get("to_console", True)),
    )

    return Config(
        log_level=str(raw.get("log_level", "INFO")),
        defaults=defaults,
        hashing=hashing,
        walk=walk,
        validation=validation,
        logging=logging_config,
    )


def _resolve_path(value: Any, base_dir: Path) -> Path:
    path = Path(str(value))
    if path.is_absolute():
        return path
    return base_dir / path


def _as_dict(value: Any) -> Dict[str, Any]:
    if isinstance(value, dict):
        return value
    return {}
