from __future__ import annotations

import hashlib
from pathlib import Path
from typing import Union

from .errors import ConfigError, HashError

DEFAULT_ALGORITHM = "sha1"
DEFAULT_CHUNK_SIZE = 1024 * 1024


def new_digest(algorithm: str = DEFAULT_ALGORITHM) -> "hashlib._Hash":
    try:
        h = hashlib.new(algorithm)
    except (ValueError, TypeError) as exc:
        raise ConfigError(f"unsupported hash algorithm: {algorithm}") from exc
    # shake_* digests have no fixed length
    if not h.digest_size:
        raise ConfigError(f"unsupported hash algorithm: {algorithm}")
    return h


def hash_file(
    path: Union[str, Path],
    algorithm: str = DEFAULT_ALGORITHM,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
) -> str:
    h = new_digest(algorithm)
    size = max(1, int(chunk_size))
    try:
        with open(path, "rb") as f:
            for chunk in iter(lambda: f.read(size), b""):
                h.update(chunk)
    except OSError as exc:
        raise HashError(str(path), exc) from exc
    return h.hexdigest()


def hash_bytes(data: bytes, algorithm: str = DEFAULT_ALGORITHM) -> str:
    h = new_digest(algorithm)
    h.update(data)
    return h.hexdigest()
