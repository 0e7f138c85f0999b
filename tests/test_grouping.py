"""Tests for konfluxgen.grouping."""

from __future__ import annotations

import logging

import pytest

from konfluxgen import grouping as grouping_module
from konfluxgen.filters import PatternSet
from konfluxgen.grouping import GroupingAggregator, GroupingMap, group_documents
from konfluxgen.models import ComponentRecord, Document, ImageBuildStep, Metadata


def _document(path: str, *images: str, org: str = "o", repo: str = "r", branch: str = "main") -> Document:
    return Document(
        metadata=Metadata(org=org, repo=repo, branch=branch),
        images=tuple(ImageBuildStep(to=image) for image in images),
        path=path,
    )


def test_group_documents_builds_two_level_map() -> None:
    documents = [
        _document("org/repo/release.yaml", "web"),
        _document("org/repo/other.yaml", "worker"),
        _document("org/api/main.yaml", "api", repo="api"),
    ]

    grouping = group_documents(documents, "My App", PatternSet())

    assert grouping.application_keys() == ["My-App"]
    components = grouping.components("My-App")
    assert list(components) == ["o-r-main-web", "o-r-main-worker", "o-api-main-api"]
    record = components["o-api-main-api"]
    assert record.application_name == "My App"
    assert record.application_key == "My-App"
    assert record.document is documents[2]
    assert record.path == "org/api/main.yaml"
    assert record.image == ImageBuildStep(to="api")
    assert len(grouping) == 3


def test_duplicate_component_is_silently_replaced_by_last(caplog: pytest.LogCaptureFixture) -> None:
    first = _document("first.yaml", "web")
    second = _document("second.yaml", "web")
    caplog.set_level(logging.DEBUG, logger="konfluxgen")

    grouping = group_documents([first, second], "app", PatternSet())

    components = grouping.components("app")
    assert list(components) == ["o-r-main-web"]
    assert components["o-r-main-web"].document is second
    assert components["o-r-main-web"].path == "second.yaml"
    assert not [record for record in caplog.records if record.levelno >= logging.WARNING]
    assert any("replaces an earlier entry" in record.getMessage() for record in caplog.records)


def test_excluded_images_never_reach_the_map() -> None:
    documents = [_document("a.yaml", "web", "web-test", "must-gather")]

    grouping = group_documents(documents, "app", PatternSet.compile(["-test$", "^must-gather$"]))

    assert list(grouping.components("app")) == ["o-r-main-web"]
    assert all(record.image.to == "web" for record in grouping.records())


def test_application_key_is_computed_once_per_run(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[str] = []
    original = grouping_module.application_key

    def _counting(name: str) -> str:
        calls.append(name)
        return original(name)

    monkeypatch.setattr(grouping_module, "application_key", _counting)

    group_documents([_document(f"{index}.yaml", f"img{index}") for index in range(5)], "app", PatternSet())

    assert calls == ["app"]


def test_no_documents_produces_empty_map() -> None:
    grouping = group_documents([], "app", PatternSet())

    assert grouping.application_keys() == []
    assert len(grouping) == 0
    assert "app" not in grouping


def test_document_with_only_excluded_images_keeps_empty_application() -> None:
    grouping = group_documents([_document("a.yaml", "web")], "app", PatternSet.compile(["web"]))

    assert "app" in grouping
    assert grouping.components("app") == {}


def test_insert_or_replace_keeps_original_position() -> None:
    grouping = GroupingMap()
    document = _document("a.yaml", "x")

    def record(key: str, path: str) -> ComponentRecord:
        return ComponentRecord(
            application_name="app",
            application_key="app",
            component_key=key,
            document=document,
            path=path,
            image=ImageBuildStep(to="x"),
        )

    assert grouping.insert_or_replace(record("one", "1")) is False
    assert grouping.insert_or_replace(record("two", "2")) is False
    assert grouping.insert_or_replace(record("one", "3")) is True

    assert list(grouping.components("app")) == ["one", "two"]
    assert grouping.to_dict()["app"]["one"].path == "3"


def test_aggregator_uses_given_application_key() -> None:
    aggregator = GroupingAggregator("Display Name", "fixed-key", PatternSet())
    aggregator.add(_document("a.yaml", "web"))

    assert aggregator.grouping.application_keys() == ["fixed-key"]
    record = aggregator.grouping.components("fixed-key")["o-r-main-web"]
    assert record.application_name == "Display Name"
