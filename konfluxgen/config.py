"""Run settings for konflux-gen (config file plus command-line overrides)."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .errors import ConfigurationError
from .filters import PatternSet

OPENSHIFT_RELEASE_PATH_FLAG = "openshift-release-path"
APPLICATION_NAME_FLAG = "application-name"
INCLUDES_FLAG = "includes"
EXCLUDES_FLAG = "excludes"
EXCLUDE_IMAGES_FLAG = "exclude-images"
OUTPUT_FLAG = "output"


@dataclass(frozen=True)
class CompiledPatterns:
    """The three pattern sets of a run, compiled once before discovery."""

    includes: PatternSet
    excludes: PatternSet
    exclude_images: PatternSet


@dataclass
class GeneratorConfig:
    """Settings for a single generation run."""

    openshift_release_path: Optional[Path] = None
    application_name: Optional[str] = None
    includes: List[str] = field(default_factory=list)
    excludes: List[str] = field(default_factory=list)
    exclude_images: List[str] = field(default_factory=list)
    output: Optional[Path] = None
    templates_dir: Optional[Path] = None
    dry_run: bool = False

    def validate(self) -> None:
        """Raise ConfigurationError when a required setting is missing."""
        if self.openshift_release_path is None or not str(self.openshift_release_path).strip():
            raise ConfigurationError(f"expected {OPENSHIFT_RELEASE_PATH_FLAG!r} flag to be non empty")
        if not self.application_name:
            raise ConfigurationError(f"expected {APPLICATION_NAME_FLAG!r} flag to be non empty")
        if not self.includes:
            raise ConfigurationError(f"expected {INCLUDES_FLAG!r} flag to be non empty")
        if self.output is None and not self.dry_run:
            raise ConfigurationError(f"expected {OUTPUT_FLAG!r} flag to be non empty")

    def compile_patterns(self) -> CompiledPatterns:
        return CompiledPatterns(
            includes=PatternSet.compile(self.includes, flag=INCLUDES_FLAG),
            excludes=PatternSet.compile(self.excludes, flag=EXCLUDES_FLAG),
            exclude_images=PatternSet.compile(self.exclude_images, flag=EXCLUDE_IMAGES_FLAG),
        )

    def merged_with(
        self,
        *,
        openshift_release_path: Optional[Path] = None,
        application_name: Optional[str] = None,
        includes: Sequence[str] = (),
        excludes: Sequence[str] = (),
        exclude_images: Sequence[str] = (),
        output: Optional[Path] = None,
        templates_dir: Optional[Path] = None,
        dry_run: bool = False,
    ) -> "GeneratorConfig":
        """Return a copy where given scalars replace and given patterns extend."""
        return replace(
            self,
            openshift_release_path=openshift_release_path or self.openshift_release_path,
            application_name=application_name or self.application_name,
            includes=[*self.includes, *includes],
            excludes=[*self.excludes, *excludes],
            exclude_images=[*self.exclude_images, *exclude_images],
            output=output or self.output,
            templates_dir=templates_dir or self.templates_dir,
            dry_run=dry_run or self.dry_run,
        )


def load_config(config_path: Path) -> GeneratorConfig:
    """Load settings from a YAML file; relative paths resolve against its directory."""
    config_file = config_path.expanduser().resolve()
    if not config_file.is_file():
        raise ConfigurationError(f"Config file not found: {config_path}")

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigurationError(f"{config_file.name} must contain a mapping at the root")

    base = config_file.parent
    return GeneratorConfig(
        openshift_release_path=_as_path(data.get("openshift_release_path"), base),
        application_name=_as_str(data.get("application_name")),
        includes=_as_str_list(data.get("includes")),
        excludes=_as_str_list(data.get("excludes")),
        exclude_images=_as_str_list(data.get("exclude_images")),
        output=_as_path(data.get("output"), base),
        templates_dir=_as_path(data.get("templates_dir"), base),
        dry_run=_as_bool(data.get("dry_run")) or False,
    )


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise ConfigurationError(f"Failed to read {path}: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_str(value: Any) -> Optional[str]:
    return str(value) if isinstance(value, (str, int, float, bool)) else None


def _as_path(value: Any, base: Path) -> Optional[Path]:
    text = _as_str(value)
    if not text:
        return None
    path = Path(text).expanduser()
    return path if path.is_absolute() else base / path


def _as_bool(value: Any) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in {"true", "yes", "1"}:
            return True
        if lowered in {"false", "no", "0"}:
            return False
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float, bool))]
    return []


__all__ = [
    "CompiledPatterns",
    "GeneratorConfig",
    "load_config",
]
