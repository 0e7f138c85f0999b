"""Error types raised by konflux-gen runs."""

from __future__ import annotations

from pathlib import Path


class KonfluxGenError(RuntimeError):
    """Base class for failures that abort a generation run."""


class ConfigurationError(KonfluxGenError):
    """Raised when run settings are missing or a pattern does not compile."""


class DiscoveryError(KonfluxGenError):
    """Raised when the configuration root cannot be traversed."""


class ParseError(KonfluxGenError):
    """Raised when a matched file cannot be converted into a Document."""

    def __init__(self, path: Path | str, cause: object) -> None:
        self.path = str(path)
        self.cause = cause
        super().__init__(f"Failed to parse CI config in {self.path}: {cause}")


class RenderError(KonfluxGenError):
    """Raised when a manifest template cannot be loaded or rendered."""


class WriteError(KonfluxGenError):
    """Raised when a rendered manifest cannot be persisted."""

    def __init__(self, path: Path | str, cause: object) -> None:
        self.path = str(path)
        self.cause = cause
        super().__init__(f"Failed to write {self.path}: {cause}")


__all__ = [
    "ConfigurationError",
    "DiscoveryError",
    "KonfluxGenError",
    "ParseError",
    "RenderError",
    "WriteError",
]
