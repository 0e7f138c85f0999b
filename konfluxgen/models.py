"""Core data models shared across konflux-gen components."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Tuple


@dataclass(frozen=True)
class Metadata:
    """Identity of the repository branch a ci-operator config builds."""

    org: str = ""
    repo: str = ""
    branch: str = ""
    variant: str = ""


@dataclass(frozen=True)
class ImageBuildStep:
    """A single image produced from a Dockerfile in the repository."""

    to: str
    from_: str = ""
    dockerfile_path: str = ""
    context_dir: str = ""


@dataclass(frozen=True)
class Document:
    """Parsed ci-operator configuration file."""

    metadata: Metadata
    images: Tuple[ImageBuildStep, ...]
    path: str
    raw: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}), compare=False)

    @property
    def org(self) -> str:
        return self.metadata.org

    @property
    def repo(self) -> str:
        return self.metadata.repo

    @property
    def branch(self) -> str:
        return self.metadata.branch


@dataclass(frozen=True)
class ComponentRecord:
    """Everything needed to render one component manifest."""

    application_name: str
    application_key: str
    component_key: str
    document: Document
    path: str
    image: ImageBuildStep
