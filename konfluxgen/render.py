"""Template rendering and manifest persistence."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Template, TemplateError

from .errors import RenderError, WriteError
from .models import ComponentRecord
from .naming import sanitize, truncate

APPLICATION_TEMPLATE = "application.yaml.j2"
COMPONENT_TEMPLATE = "dockerfile-component.yaml.j2"
MANIFEST_SUFFIX = ".yaml"

_DEFAULT_TEMPLATES_DIR = Path(__file__).with_name("templates")


@dataclass(frozen=True)
class RenderedManifest:
    """A manifest body and the path it belongs at."""

    kind: str
    key: str
    path: Path
    content: str


class TemplateRenderer:
    """Renders application and component manifests from Jinja2 templates."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir
        self._env = self._create_env(templates_dir)
        self._templates: Dict[str, Template] = {}

    def render_application(self, record: ComponentRecord) -> str:
        return self._render(APPLICATION_TEMPLATE, record, f"application {record.application_key!r}")

    def render_component(self, record: ComponentRecord) -> str:
        return self._render(COMPONENT_TEMPLATE, record, f"component {record.component_key!r}")

    def _render(self, template_name: str, record: ComponentRecord, label: str) -> str:
        template = self._get_template(template_name)
        try:
            return template.render(
                application_name=record.application_name,
                application_key=record.application_key,
                component_key=record.component_key,
                config=record.document,
                image=record.image,
                path=record.path,
            )
        except TemplateError as exc:
            raise RenderError(f"failed to execute template for {label}: {exc}") from exc

    def _get_template(self, template_name: str) -> Template:
        cached = self._templates.get(template_name)
        if cached is not None:
            return cached
        try:
            template = self._env.get_template(template_name)
        except TemplateError as exc:
            raise RenderError(f"failed to parse template {template_name!r}: {exc}") from exc
        self._templates[template_name] = template
        return template

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories: List[str] = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(_DEFAULT_TEMPLATES_DIR))
        env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            undefined=StrictUndefined,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
        )
        env.filters["sanitize"] = sanitize
        # Registered under its own name so the built-in "truncate" stays available to override templates.
        env.filters["truncate_name"] = truncate
        return env


class ManifestWriter:
    """Lays out manifests below ``<output>/applications``."""

    def __init__(self, output: Path) -> None:
        self.output = output

    def application_path(self, app_key: str) -> Path:
        return self.output / "applications" / app_key / f"{app_key}{MANIFEST_SUFFIX}"

    def component_path(self, app_key: str, comp_key: str) -> Path:
        return self.output / "applications" / app_key / "components" / f"{comp_key}{MANIFEST_SUFFIX}"

    def write(self, manifest: RenderedManifest) -> Path:
        try:
            manifest.path.parent.mkdir(parents=True, exist_ok=True)
            manifest.path.write_text(manifest.content, encoding="utf-8")
        except OSError as exc:
            raise WriteError(manifest.path, exc) from exc
        return manifest.path


__all__ = ["ManifestWriter", "RenderedManifest", "TemplateRenderer"]
