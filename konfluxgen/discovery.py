"""Discovery of ci-operator configuration files in an openshift/release checkout."""

from __future__ import annotations

import os
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, List, Mapping

import yaml

from .errors import DiscoveryError, ParseError
from .filters import PatternSet, should_include
from .logging import get_logger
from .models import Document, ImageBuildStep, Metadata

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
}

# ci-operator writes the branch identity under this key; hand-written configs may use "metadata".
_METADATA_KEYS = ("zz_generated_metadata", "metadata")

_logger = get_logger("discovery")


def _raise_walk_error(error: OSError) -> None:
    raise DiscoveryError(f"failed while walking directory {error.filename!r}: {error}") from error


def _iter_files(root: Path) -> Iterator[tuple[Path, str]]:
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        # Sorted in place so traversal order does not depend on the filesystem.
        dirnames[:] = sorted(name for name in dirnames if name not in _EXCLUDED_DIRS)

        for filename in sorted(filenames):
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            yield current_dir / filename, rel_path


def _as_str(value: Any, field_name: str) -> str:
    # Unquoted YAML such as "1.10" or "on" loads as float/bool; reject instead of rewriting it.
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    raise TypeError(f"{field_name} must be a string, got {type(value).__name__} {value!r}")


def _parse_metadata(data: Mapping[str, Any]) -> Metadata:
    raw = None
    for key in _METADATA_KEYS:
        if key in data:
            raw = data[key]
            break
    if raw is None:
        return Metadata()
    if not isinstance(raw, dict):
        raise TypeError("metadata must be a mapping")
    return Metadata(
        org=_as_str(raw.get("org"), "metadata.org"),
        repo=_as_str(raw.get("repo"), "metadata.repo"),
        branch=_as_str(raw.get("branch"), "metadata.branch"),
        variant=_as_str(raw.get("variant"), "metadata.variant"),
    )


def _parse_images(data: Mapping[str, Any]) -> tuple[ImageBuildStep, ...]:
    raw = data.get("images")
    if raw is None:
        return ()
    if not isinstance(raw, list):
        raise TypeError("images must be a list")
    steps: List[ImageBuildStep] = []
    for index, entry in enumerate(raw):
        if not isinstance(entry, dict):
            raise TypeError(f"images[{index}] must be a mapping")
        steps.append(
            ImageBuildStep(
                to=_as_str(entry.get("to"), f"images[{index}].to"),
                from_=_as_str(entry.get("from"), f"images[{index}].from"),
                dockerfile_path=_as_str(entry.get("dockerfile_path"), f"images[{index}].dockerfile_path"),
                context_dir=_as_str(entry.get("context_dir"), f"images[{index}].context_dir"),
            )
        )
    return tuple(steps)


def parse_config(path: Path) -> Document:
    """Read one YAML file into a Document, raising ParseError on any failure."""
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ParseError(path, f"failed to read file: {exc}") from exc

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ParseError(path, f"failed to convert YAML: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ParseError(path, f"expected a mapping at the root, got {type(data).__name__}")

    try:
        metadata = _parse_metadata(data)
        images = _parse_images(data)
    except TypeError as exc:
        raise ParseError(path, exc) from exc

    return Document(
        metadata=metadata,
        images=images,
        path=str(path),
        raw=MappingProxyType(data),
    )


class ConfigScanner:
    """Walks a release checkout and parses every config selected by the patterns."""

    def scan(self, root: str | Path, includes: PatternSet, excludes: PatternSet) -> List[Document]:
        """Return parsed documents for files whose root-relative path is included."""
        # Keep the root as given so Document.path matches what the caller passed, symlinks included.
        root_path = Path(root).expanduser()
        if not root_path.exists():
            raise DiscoveryError(f"Release path not found: {root}")
        if not root_path.is_dir():
            raise DiscoveryError(f"Release path is not a directory: {root}")

        documents: List[Document] = []
        for path, rel_path in _iter_files(root_path):
            if not should_include(rel_path, includes, excludes):
                continue
            _logger.debug("Parsing file %s", path)
            documents.append(parse_config(path))
        return documents


def discover(root: str | Path, includes: PatternSet, excludes: PatternSet) -> List[Document]:
    return ConfigScanner().scan(root, includes, excludes)


__all__ = ["ConfigScanner", "discover", "parse_config"]
