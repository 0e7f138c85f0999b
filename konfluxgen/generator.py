"""Pipeline orchestration: discover configs, group images, render manifests."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .config import GeneratorConfig
from .discovery import ConfigScanner
from .grouping import GroupingMap, group_documents
from .logging import get_logger
from .models import Document
from .render import ManifestWriter, RenderedManifest, TemplateRenderer


@dataclass
class GenerationResult:
    """Outcome of a generation run."""

    documents: List[Document]
    grouping: GroupingMap
    manifests: List[RenderedManifest] = field(default_factory=list)
    dry_run: bool = False

    @property
    def paths(self) -> List[Path]:
        return [manifest.path for manifest in self.manifests]


class Generator:
    """Coordinates a single konflux-gen run."""

    def __init__(
        self,
        scanner: ConfigScanner | None = None,
        renderer: TemplateRenderer | None = None,
    ) -> None:
        self.scanner = scanner or ConfigScanner()
        self.renderer = renderer
        self.logger = get_logger("generator")

    def run(self, config: GeneratorConfig) -> GenerationResult:
        config.validate()
        patterns = config.compile_patterns()

        documents = self.scanner.scan(config.openshift_release_path, patterns.includes, patterns.excludes)  # type: ignore[arg-type]
        self.logger.info("Found %d configs", len(documents))

        grouping = group_documents(documents, config.application_name, patterns.exclude_images)  # type: ignore[arg-type]
        self.logger.debug("Grouped %d components", len(grouping))

        renderer = self.renderer or TemplateRenderer(config.templates_dir)
        writer = ManifestWriter(config.output or Path("."))
        manifests = self.plan(grouping, renderer, writer)

        if config.dry_run:
            for manifest in manifests:
                self.logger.info("Would write %s", manifest.path)
        else:
            for manifest in manifests:
                writer.write(manifest)
                self.logger.debug("Wrote %s", manifest.path)
            self.logger.info("Wrote %d manifests to %s", len(manifests), writer.output)

        return GenerationResult(
            documents=documents,
            grouping=grouping,
            manifests=manifests,
            dry_run=config.dry_run,
        )

    @staticmethod
    def plan(
        grouping: GroupingMap,
        renderer: TemplateRenderer,
        writer: ManifestWriter,
    ) -> List[RenderedManifest]:
        """Render every manifest in sorted key order without touching disk."""
        manifests: List[RenderedManifest] = []
        for app_key in sorted(grouping.application_keys()):
            components = grouping.components(app_key)
            if not components:
                continue
            comp_keys = sorted(components)
            manifests.append(
                RenderedManifest(
                    kind="application",
                    key=app_key,
                    path=writer.application_path(app_key),
                    content=renderer.render_application(components[comp_keys[0]]),
                )
            )
            for comp_key in comp_keys:
                manifests.append(
                    RenderedManifest(
                        kind="component",
                        key=comp_key,
                        path=writer.component_path(app_key, comp_key),
                        content=renderer.render_component(components[comp_key]),
                    )
                )
        return manifests


__all__ = ["GenerationResult", "Generator"]
