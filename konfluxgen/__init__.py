"""Generate Konflux application and component manifests from ci-operator configs."""

from .generator import GenerationResult, Generator
from .naming import application_key, component_key, derive_name, sanitize, truncate

__all__ = [
    "GenerationResult",
    "Generator",
    "application_key",
    "component_key",
    "derive_name",
    "sanitize",
    "truncate",
]
