from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, Iterator, Union

from .errors import ManifestError
from .hashing import DEFAULT_ALGORITHM
from .walker import normalize_path


class ExclusionSet:
    """Paths that are never hashed or compared.

    A path matches either by its normalized form or by its absolute form,
    so "hashes.json", "./hashes.json" and "/abs/hashes.json" are the same
    entry when they resolve to the same file.
    """

    def __init__(self, paths: Iterable[Union[str, Path]] = ()) -> None:
        self._paths: FrozenSet[str] = frozenset(normalize_path(p) for p in paths)
        self._absolute: FrozenSet[str] = frozenset(_absolute(p) for p in self._paths)

    @classmethod
    def from_paths(cls, *paths: Union[str, Path, None]) -> "ExclusionSet":
        return cls(p for p in paths if p)

    def contains(self, path: Union[str, Path]) -> bool:
        normalized = normalize_path(path)
        if normalized in self._paths:
            return True
        return _absolute(normalized) in self._absolute

    def __contains__(self, path: object) -> bool:
        if not isinstance(path, (str, Path)):
            return False
        return self.contains(path)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._paths))

    def __len__(self) -> int:
        return len(self._paths)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ExclusionSet):
            return NotImplemented
        return self._paths == other._paths

    def __repr__(self) -> str:
        return f"ExclusionSet({sorted(self._paths)!r})"


def _absolute(path: str) -> str:
    return normalize_path(os.path.abspath(path))


@dataclass(frozen=True)
class Manifest:
    fingerprints: Dict[str, str] = field(default_factory=dict)
    excludes: ExclusionSet = field(default_factory=ExclusionSet)
    algorithm: str = DEFAULT_ALGORITHM

    def to_record(self) -> Dict[str, Any]:
        return {
            "Algorithm": self.algorithm,
            "Excludes": {path: {} for path in self.excludes},
            "Hashes": dict(sorted(self.fingerprints.items())),
        }

    @classmethod
    def from_record(cls, raw: Any) -> "Manifest":
        if not isinstance(raw, dict):
            raise ManifestError("manifest root must be an object")

        hashes = raw.get("Hashes")
        if hashes is None:
            hashes = {}
        if not isinstance(hashes, dict):
            raise ManifestError("manifest Hashes must be an object")
        fingerprints: Dict[str, str] = {}
        for path, digest in hashes.items():
            if not isinstance(digest, str):
                raise ManifestError(f"manifest digest for {path} must be a string")
            fingerprints[normalize_path(path)] = digest.lower()

        excludes = raw.get("Excludes")
        if excludes is None:
            excludes = {}
        if not isinstance(excludes, (dict, list)):
            raise ManifestError("manifest Excludes must be an object or list")
        for item in excludes:
            if not isinstance(item, str):
                raise ManifestError("manifest Excludes entries must be strings")

        algorithm = raw.get("Algorithm") or DEFAULT_ALGORITHM
        if not isinstance(algorithm, str):
            raise ManifestError("manifest Algorithm must be a string")

        return cls(
            fingerprints=fingerprints,
            excludes=ExclusionSet(excludes),
            algorithm=algorithm,
        )


@dataclass
class ValidationReport:
    valid: Dict[str, str] = field(default_factory=dict)
    invalid: Dict[str, str] = field(default_factory=dict)
    missing: Dict[str, str] = field(default_factory=dict)

    @property
    def all_valid(self) -> bool:
        return not self.invalid and not self.missing

    def to_record(self) -> Dict[str, Any]:
        return {
            "AllValid": self.all_valid,
            "Invalid": dict(sorted(self.invalid.items())),
            "Missing": dict(sorted(self.missing.items())),
            "Valid": dict(sorted(self.valid.items())),
        }
