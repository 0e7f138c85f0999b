"""CLI entrypoint for konflux-gen."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from .config import (
    APPLICATION_NAME_FLAG,
    EXCLUDE_IMAGES_FLAG,
    EXCLUDES_FLAG,
    INCLUDES_FLAG,
    OPENSHIFT_RELEASE_PATH_FLAG,
    OUTPUT_FLAG,
    GeneratorConfig,
    load_config,
)
from .errors import KonfluxGenError
from .generator import Generator
from .logging import configure_logging


_PATTERN_FLAGS = frozenset(f"--{flag}" for flag in (INCLUDES_FLAG, EXCLUDES_FLAG, EXCLUDE_IMAGES_FLAG))


def _bind_pattern_values(argv: Sequence[str]) -> list[str]:
    """Join each pattern flag with its value so patterns like "-test$" are not read as options."""
    bound: list[str] = []
    index = 0
    while index < len(argv):
        token = argv[index]
        if token == "--":
            bound.extend(argv[index:])
            break
        if token in _PATTERN_FLAGS and index + 1 < len(argv):
            bound.append(f"{token}={argv[index + 1]}")
            index += 2
            continue
        bound.append(token)
        index += 1
    return bound


class _ArgumentParser(argparse.ArgumentParser):
    def parse_known_args(self, args=None, namespace=None):  # type: ignore[override]
        if args is None:
            args = sys.argv[1:]
        return super().parse_known_args(_bind_pattern_values(args), namespace)


def _build_parser() -> argparse.ArgumentParser:
    parser = _ArgumentParser(
        prog="konflux-gen",
        description="Generate Konflux applications and components from ci-operator configs.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        default=False,
        help="Only report warnings and errors on the console.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write a debug-level log of the run to this file.",
    )
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="YAML file with default settings; flags override scalars and extend pattern lists.",
    )
    parser.add_argument(
        f"--{OPENSHIFT_RELEASE_PATH_FLAG}",
        dest="openshift_release_path",
        type=Path,
        default=None,
        help="openshift/release repository path",
    )
    parser.add_argument(
        f"--{APPLICATION_NAME_FLAG}",
        dest="application_name",
        default=None,
        help="Konflux application name",
    )
    parser.add_argument(
        f"--{OUTPUT_FLAG}",
        dest="output",
        type=Path,
        default=None,
        help="output path",
    )
    parser.add_argument(
        f"--{INCLUDES_FLAG}",
        dest="includes",
        action="append",
        default=[],
        metavar="REGEX",
        help="Regex to select CI config files to include (repeatable)",
    )
    parser.add_argument(
        f"--{EXCLUDES_FLAG}",
        dest="excludes",
        action="append",
        default=[],
        metavar="REGEX",
        help="Regex to select CI config files to exclude (repeatable)",
    )
    parser.add_argument(
        f"--{EXCLUDE_IMAGES_FLAG}",
        dest="exclude_images",
        action="append",
        default=[],
        metavar="REGEX",
        help="Regex to select CI config images to exclude (repeatable)",
    )
    parser.add_argument(
        "--templates-dir",
        type=Path,
        default=None,
        help="Directory with template overrides (application.yaml.j2, dockerfile-component.yaml.j2).",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Render manifests and list their paths without writing them.",
    )
    return parser


def _resolve_config(args: argparse.Namespace) -> GeneratorConfig:
    base = load_config(args.config) if args.config is not None else GeneratorConfig()
    return base.merged_with(
        openshift_release_path=args.openshift_release_path,
        application_name=args.application_name,
        includes=args.includes,
        excludes=args.excludes,
        exclude_images=args.exclude_images,
        output=args.output,
        templates_dir=args.templates_dir,
        dry_run=bool(args.dry_run),
    )


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for konflux-gen."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(verbose=bool(args.verbose), quiet=bool(args.quiet), log_file=args.log_file)
        config = _resolve_config(args)
        result = Generator().run(config)
    except KonfluxGenError as exc:
        parser.exit(1, f"konflux-gen failed: {exc}\n")

    if result.dry_run:
        for path in result.paths:
            print(path)


if __name__ == "__main__":
    main(sys.argv[1:])
