"""End-to-end tests for konfluxgen.generator."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from konfluxgen.config import GeneratorConfig
from konfluxgen.discovery import ConfigScanner
from konfluxgen.errors import ConfigurationError, ParseError
from konfluxgen.generator import Generator

from tests._fixtures.release_builder import ReleaseRepoBuilder


class _FailingScanner(ConfigScanner):
    def scan(self, root, includes, excludes):  # pragma: no cover - must not run
        raise AssertionError("discovery should not start")


def _scenario(release_repo: ReleaseRepoBuilder) -> None:
    release_repo.write_config("org/repo/release.yaml", org="o", repo="r", branch="main", images=["web"])
    release_repo.write_config("org/repo/other.yaml", org="o", repo="r", branch="main", images=["worker"])


def test_run_groups_and_writes_manifests(release_repo: ReleaseRepoBuilder, tmp_path: Path) -> None:
    _scenario(release_repo)
    output = tmp_path / "out"

    result = Generator().run(
        GeneratorConfig(
            openshift_release_path=release_repo.path(),
            application_name="My App",
            includes=[".*"],
            output=output,
        )
    )

    assert len(result.documents) == 2
    assert result.grouping.application_keys() == ["My-App"]
    assert sorted(result.grouping.components("My-App")) == ["o-r-main-web", "o-r-main-worker"]

    app_dir = output / "applications" / "My-App"
    assert sorted(path.relative_to(output).as_posix() for path in result.paths) == [
        "applications/My-App/My-App.yaml",
        "applications/My-App/components/o-r-main-web.yaml",
        "applications/My-App/components/o-r-main-worker.yaml",
    ]
    application = yaml.safe_load((app_dir / "My-App.yaml").read_text(encoding="utf-8"))
    assert application["metadata"]["name"] == "My-App"
    component = yaml.safe_load((app_dir / "components" / "o-r-main-web.yaml").read_text(encoding="utf-8"))
    assert component["metadata"]["name"] == "o-r-main-web"
    assert component["spec"]["application"] == "My-App"
    assert component["spec"]["source"]["git"]["url"] == "https://github.com/o/r.git"


def test_run_lists_manifests_in_sorted_order(release_repo: ReleaseRepoBuilder, tmp_path: Path) -> None:
    release_repo.write_config("org/repo/main.yaml", org="o", repo="r", branch="main", images=["zz", "aa", "mm"])

    result = Generator().run(
        GeneratorConfig(
            openshift_release_path=release_repo.path(),
            application_name="app",
            includes=[".*"],
            output=tmp_path / "out",
        )
    )

    assert [(manifest.kind, manifest.key) for manifest in result.manifests] == [
        ("application", "app"),
        ("component", "o-r-main-aa"),
        ("component", "o-r-main-mm"),
        ("component", "o-r-main-zz"),
    ]


def test_dry_run_writes_nothing(release_repo: ReleaseRepoBuilder, tmp_path: Path) -> None:
    _scenario(release_repo)
    output = tmp_path / "out"

    result = Generator().run(
        GeneratorConfig(
            openshift_release_path=release_repo.path(),
            application_name="My App",
            includes=[".*"],
            output=output,
            dry_run=True,
        )
    )

    assert result.dry_run is True
    assert len(result.paths) == 3
    assert not output.exists()


def test_excluded_images_produce_no_component_files(release_repo: ReleaseRepoBuilder, tmp_path: Path) -> None:
    _scenario(release_repo)
    output = tmp_path / "out"

    Generator().run(
        GeneratorConfig(
            openshift_release_path=release_repo.path(),
            application_name="My App",
            includes=[".*"],
            exclude_images=["^worker$"],
            output=output,
        )
    )

    components = output / "applications" / "My-App" / "components"
    assert sorted(path.name for path in components.iterdir()) == ["o-r-main-web.yaml"]


@pytest.mark.parametrize(
    "overrides, flag",
    [
        ({"openshift_release_path": None}, "openshift-release-path"),
        ({"application_name": ""}, "application-name"),
        ({"includes": []}, "includes"),
        ({"output": None}, "output"),
    ],
)
def test_missing_settings_fail_before_discovery(tmp_path: Path, overrides: dict, flag: str) -> None:
    settings = {
        "openshift_release_path": tmp_path,
        "application_name": "app",
        "includes": [".*"],
        "output": tmp_path / "out",
    }
    settings.update(overrides)

    with pytest.raises(ConfigurationError) as excinfo:
        Generator(scanner=_FailingScanner()).run(GeneratorConfig(**settings))

    assert flag in str(excinfo.value)


def test_invalid_regex_fails_before_discovery(tmp_path: Path) -> None:
    config = GeneratorConfig(
        openshift_release_path=tmp_path,
        application_name="app",
        includes=[".*"],
        exclude_images=["[bad"],
        output=tmp_path / "out",
    )

    with pytest.raises(ConfigurationError) as excinfo:
        Generator(scanner=_FailingScanner()).run(config)

    assert "exclude-images" in str(excinfo.value)


def test_parse_error_aborts_without_output(release_repo: ReleaseRepoBuilder, tmp_path: Path) -> None:
    _scenario(release_repo)
    release_repo.write({"org/repo/broken.yaml": "images: [\n"})
    output = tmp_path / "out"

    with pytest.raises(ParseError):
        Generator().run(
            GeneratorConfig(
                openshift_release_path=release_repo.path(),
                application_name="My App",
                includes=[".*"],
                output=output,
            )
        )

    assert not output.exists()
