"""Groups image build steps into application and component records."""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, Mapping

from .filters import PatternSet
from .logging import get_logger
from .models import ComponentRecord, Document
from .naming import application_key, component_key

_logger = get_logger("grouping")


class GroupingMap:
    """Application key -> component key -> record, in insertion order.

    A second record for an existing pair replaces the first in place; the
    replacement is not an error.
    """

    def __init__(self) -> None:
        self._applications: Dict[str, Dict[str, ComponentRecord]] = {}

    def insert_or_replace(self, record: ComponentRecord) -> bool:
        """Store ``record`` and return True when it replaced an earlier one."""
        components = self._applications.setdefault(record.application_key, {})
        replaced = record.component_key in components
        components[record.component_key] = record
        return replaced

    def ensure_application(self, app_key: str) -> None:
        self._applications.setdefault(app_key, {})

    def components(self, app_key: str) -> Mapping[str, ComponentRecord]:
        return dict(self._applications.get(app_key, {}))

    def application_keys(self) -> list[str]:
        return list(self._applications)

    def records(self) -> Iterator[ComponentRecord]:
        for components in self._applications.values():
            yield from components.values()

    def to_dict(self) -> Dict[str, Dict[str, ComponentRecord]]:
        return {app_key: dict(components) for app_key, components in self._applications.items()}

    def __len__(self) -> int:
        return sum(len(components) for components in self._applications.values())

    def __contains__(self, app_key: object) -> bool:
        return app_key in self._applications


class GroupingAggregator:
    """Collects component records for the single application of a run."""

    def __init__(self, application_name: str, app_key: str, exclude_images: PatternSet) -> None:
        self.application_name = application_name
        self.app_key = app_key
        self.exclude_images = exclude_images
        self.grouping = GroupingMap()

    def add(self, document: Document) -> None:
        self.grouping.ensure_application(self.app_key)
        for image in document.images:
            if self.exclude_images.matches_any(image.to):
                _logger.debug("Excluding image %s from %s", image.to, document.path)
                continue
            comp_key = component_key(document.org, document.repo, document.branch, image.to)
            record = ComponentRecord(
                application_name=self.application_name,
                application_key=self.app_key,
                component_key=comp_key,
                document=document,
                path=document.path,
                image=image,
            )
            if self.grouping.insert_or_replace(record):
                _logger.debug("Component %s from %s replaces an earlier entry", comp_key, document.path)


def group_documents(
    documents: Iterable[Document],
    application_name: str,
    exclude_images: PatternSet,
) -> GroupingMap:
    """Group every non-excluded image of ``documents`` under one application."""
    aggregator = GroupingAggregator(
        application_name,
        application_key(application_name),
        exclude_images,
    )
    for document in documents:
        aggregator.add(document)
    return aggregator.grouping


__all__ = ["GroupingAggregator", "GroupingMap", "group_documents"]
