"""Command-line front end.

Usage::

    python -m initgen --build-system gradle-4 --language java \\
        --platform-version 2.0.0.M1 --group-id com.example --artifact-id demo
    python -m initgen --description-file demo.yaml --output ./projects --zip demo.zip
"""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError
from rich.markup import escape

from .archive import archive_project
from .config import GeneratorConfig
from .description import ProjectDescription
from .errors import ConfigurationError, ProjectGenerationError
from .generator import ProjectGenerator
from .log import configure_logging
from .manifest import ComponentManifest
from .utils import console, format_duration, print_error, print_success, print_summary_table, sanitize_name

_FIELD_OPTIONS: dict[str, str] = {
    "build_system": "--build-system",
    "language": "--language",
    "platform_version": "--platform-version",
    "packaging": "--packaging",
    "group_id": "--group-id",
    "artifact_id": "--artifact-id",
    "version": "--version",
    "name": "--name",
    "description": "--description",
    "base_directory": "--base-dir",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="initgen",
        description="Generate a buildable project skeleton from a description",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Examples:\n"
            "  initgen --build-system gradle-4 --language java --artifact-id demo\n"
            "  initgen --description-file demo.yaml --zip demo.zip\n"
        ),
    )
    parser.add_argument(
        "--description-file", "-f",
        type=Path,
        default=None,
        help="YAML file with description attributes (options below override it)",
    )
    for field, option in _FIELD_OPTIONS.items():
        parser.add_argument(option, dest=field, default=None)
    parser.add_argument(
        "--output", "-o",
        type=Path,
        default=None,
        help="Parent of the generated project directory (default: $INITGEN_OUTPUT_DIR or ./output)",
    )
    parser.add_argument("--zip", type=Path, default=None, help="Write the project as a zip archive here instead of a directory")
    parser.add_argument("--manifest", type=Path, default=None, help="Registration manifest (YAML)")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def load_description(args: argparse.Namespace) -> ProjectDescription:
    """Merge the description file (if any) with command-line options."""
    attributes: dict[str, Any] = {}
    if args.description_file is not None:
        raw = yaml.safe_load(args.description_file.read_text(encoding="utf-8")) or {}
        if not isinstance(raw, dict):
            raise ValueError(f"{args.description_file} must contain a mapping")
        attributes.update({key.replace("-", "_"): value for key, value in raw.items()})
    for field in _FIELD_OPTIONS:
        value = getattr(args, field)
        if value is not None:
            attributes[field] = value
    description = ProjectDescription(**attributes)
    if description.base_directory is not None:
        description.base_directory = sanitize_name(description.base_directory)
    return description


def main(argv: list[str] | None = None) -> None:
    """CLI entry point for ``python -m initgen``."""
    args = build_parser().parse_args(argv)

    config = GeneratorConfig.from_env()
    if args.output is not None:
        config.output_dir = args.output
    elif config.output_dir is None:
        config.output_dir = Path("./output")
    if args.manifest is not None:
        config.manifest_path = args.manifest
    configure_logging("DEBUG" if args.verbose else config.log_level, console=console)

    try:
        description = load_description(args)
    except (OSError, ValueError, ValidationError, yaml.YAMLError) as exc:
        print_error(f"Error: invalid description: {escape(str(exc))}")
        sys.exit(1)

    try:
        manifest = ComponentManifest.load(config.manifest_path)
    except ConfigurationError as exc:
        print_error(f"Error: {escape(str(exc))}")
        sys.exit(1)

    generator = ProjectGenerator(manifest=manifest, config=config)
    started = time.monotonic()
    try:
        if args.zip is not None:
            result = generator.generate(description, archive_project)
            args.zip.parent.mkdir(parents=True, exist_ok=True)
            args.zip.write_bytes(result.value)
            location = args.zip
        else:
            result = generator.generate(description)
            location = result.value
    except ProjectGenerationError as exc:
        print_error(f"Error: {escape(str(exc))}")
        sys.exit(1)

    summary = {
        "Build system": str(description.build_system or "-"),
        "Language": str(description.language or "-"),
        "Platform version": str(description.platform_version or "-"),
        "Packaging": str(description.packaging or "-"),
        "Build plugins": ", ".join(p.id for p in result.build.plugins) if result.build else "-",
        "Output": str(location),
        "Duration": format_duration(time.monotonic() - started),
    }
    print_summary_table(summary, title="Generated project")
    print_success("Project generated successfully!")


if __name__ == "__main__":
    main()
