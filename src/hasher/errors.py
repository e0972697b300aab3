from __future__ import annotations

from typing import Optional


class HasherError(RuntimeError):
    """Fatal condition that ends a build or validation run."""


class PreconditionError(HasherError):
    pass


class ManifestError(HasherError):
    pass


class ConfigError(HasherError):
    pass


class HashError(HasherError):
    def __init__(self, path: str, cause: Optional[BaseException] = None) -> None:
        message = f"file read error: {path}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.path = path
        self.cause = cause
