from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Optional, Union

from .errors import ManifestError, PreconditionError
from .hashing import DEFAULT_ALGORITHM, DEFAULT_CHUNK_SIZE, hash_file, new_digest
from .models import ExclusionSet, Manifest
from .utils.jsonio import read_json, write_json
from .walker import DEFAULT_QUEUE_SIZE, discover_files

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def require_directory(directory: PathLike) -> None:
    path = Path(directory)
    if not path.exists():
        raise PreconditionError(f"directory does not exist: {directory}")
    if not path.is_dir():
        raise PreconditionError(f"not a directory: {directory}")


def build_manifest(
    directory: PathLike,
    excludes: Optional[ExclusionSet] = None,
    *,
    algorithm: str = DEFAULT_ALGORITHM,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    queue_size: int = DEFAULT_QUEUE_SIZE,
) -> Manifest:
    """Hash every file under directory that is not excluded.

    Raises PreconditionError when the directory is absent and HashError on
    the first file that cannot be read.
    """
    require_directory(directory)
    new_digest(algorithm)
    excludes = excludes or ExclusionSet()

    logger.info("creating hashes for %s", directory)
    fingerprints: Dict[str, str] = {}
    for path in discover_files(directory, queue_size=queue_size):
        if excludes.contains(path):
            continue
        digest = hash_file(path, algorithm=algorithm, chunk_size=chunk_size)
        fingerprints[path] = digest
        logger.info("%s : %s", digest, path)

    return Manifest(fingerprints=fingerprints, excludes=excludes, algorithm=algorithm)


def write_manifest(manifest: Manifest, path: PathLike) -> Path:
    logger.info("writing %d hashes to %s", len(manifest.fingerprints), path)
    try:
        return write_json(path, manifest.to_record())
    except OSError as exc:
        raise ManifestError(f"cannot write manifest {path}: {exc}") from exc


def load_manifest(path: PathLike) -> Manifest:
    manifest_path = Path(path)
    if not manifest_path.is_file():
        raise PreconditionError(f"manifest file not found: {path}")
    try:
        raw = read_json(manifest_path)
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ManifestError(f"malformed manifest {path}: {exc}") from exc
    except OSError as exc:
        raise PreconditionError(f"cannot read manifest {path}: {exc}") from exc
    try:
        return Manifest.from_record(raw)
    except ManifestError as exc:
        raise ManifestError(f"malformed manifest {path}: {exc}") from exc


def create_manifest(
    manifest_path: PathLike,
    directory: PathLike,
    validation_path: Optional[PathLike] = None,
    *,
    algorithm: str = DEFAULT_ALGORITHM,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    queue_size: int = DEFAULT_QUEUE_SIZE,
) -> Manifest:
    excludes = ExclusionSet.from_paths(manifest_path, validation_path)
    manifest = build_manifest(
        directory,
        excludes,
        algorithm=algorithm,
        chunk_size=chunk_size,
        queue_size=queue_size,
    )
    write_manifest(manifest, manifest_path)
    return manifest
