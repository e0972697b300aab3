from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Optional, Set, Union

from .errors import HasherError
from .hashing import DEFAULT_CHUNK_SIZE, hash_file, new_digest
from .manifest import load_manifest, require_directory
from .models import Manifest, ValidationReport
from .utils.jsonio import write_json
from .walker import DEFAULT_QUEUE_SIZE, discover_files

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def validate_manifest(
    manifest: Manifest,
    directory: PathLike,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    queue_size: int = DEFAULT_QUEUE_SIZE,
) -> ValidationReport:
    """Re-hash the tree and classify each file against the manifest.

    Exclusions come from the manifest itself. Files on disk without a stored
    digest are compared against "" and so land in ``invalid``; stored paths
    that were never visited land in ``missing``.
    """
    require_directory(directory)
    new_digest(manifest.algorithm)

    logger.info("validating hashes for %s", directory)
    report = ValidationReport()
    seen: Set[str] = set()
    for path in discover_files(directory, queue_size=queue_size):
        if manifest.excludes.contains(path):
            continue
        seen.add(path)
        digest = hash_file(path, algorithm=manifest.algorithm, chunk_size=chunk_size)
        expected = manifest.fingerprints.get(path, "")
        if digest == expected:
            report.valid[path] = digest
            continue
        report.invalid[path] = digest
        logger.warning(
            "hash mismatch for %s: %s : %s", path, digest, expected or "new file"
        )

    for path, expected in manifest.fingerprints.items():
        if path in seen or manifest.excludes.contains(path):
            continue
        report.missing[path] = expected
        logger.warning("missing file %s: %s", path, expected)

    if report.all_valid:
        logger.info("all hashes match (%d files)", len(report.valid))
    else:
        logger.warning(
            "some hashes do not match: valid=%d invalid=%d missing=%d",
            len(report.valid),
            len(report.invalid),
            len(report.missing),
        )
    logger.info(summary_json(report))
    return report


def summary_json(report: ValidationReport) -> str:
    payload = {
        "event": "validation_summary",
        "all_valid": report.all_valid,
        "valid": len(report.valid),
        "invalid": len(report.invalid),
        "missing": len(report.missing),
    }
    return json.dumps(payload, separators=(",", ":"))


def write_report(report: ValidationReport, path: PathLike) -> Path:
    logger.info("writing validation to %s", path)
    try:
        return write_json(path, report.to_record())
    except OSError as exc:
        raise HasherError(f"cannot write validation {path}: {exc}") from exc


def create_validation(
    manifest_path: PathLike,
    directory: PathLike,
    validation_path: PathLike,
    *,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    queue_size: int = DEFAULT_QUEUE_SIZE,
    manifest: Optional[Manifest] = None,
) -> ValidationReport:
    if manifest is None:
        manifest = load_manifest(manifest_path)
    report = validate_manifest(
        manifest,
        directory,
        chunk_size=chunk_size,
        queue_size=queue_size,
    )
    write_report(report, validation_path)
    return report
