"""Shared pytest fixtures for the initgen test suite.

Provides reusable fixtures for:
- Project descriptions (Gradle 3, Gradle 4, Maven) and their resolved snapshots
- An in-memory resource resolver
- Generators writing into a temporary directory
"""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest

from initgen.config import GeneratorConfig
from initgen.description import ProjectDescription, ResolvedProjectDescription
from initgen.errors import ResourceUnavailable
from initgen.generator import ProjectGenerator
from initgen.resources import ResourceResolver


# ---------------------------------------------------------------------------
# Resources
# ---------------------------------------------------------------------------


class MemoryResourceResolver(ResourceResolver):
    """Serves resources from a dict and records every lookup."""

    def __init__(self, resources: dict[str, bytes | str] | None = None) -> None:
        self.resources = {
            key: value.encode("utf-8") if isinstance(value, str) else value
            for key, value in (resources or {}).items()
        }
        self.requests: list[tuple[str, str]] = []

    def resolve(self, owner_id: str, pattern: str) -> bytes:
        self.requests.append((owner_id, pattern))
        if pattern not in self.resources:
            raise ResourceUnavailable(pattern, owner_id)
        return self.resources[pattern]


@pytest.fixture
def memory_resolver_factory() -> Callable[..., MemoryResourceResolver]:
    """Factory building a ``MemoryResourceResolver`` from a dict."""
    return MemoryResourceResolver


@pytest.fixture
def memory_resolver() -> MemoryResourceResolver:
    """Resolver serving small, recognisable gitignore fragments."""
    return MemoryResourceResolver(
        {
            "git/gitignore": "### generic ###\n.idea\n",
            "gradle/gitignore": "### Gradle ###\n.gradle\n",
            "maven/gitignore": "### Maven ###\n/target/\n",
        }
    )


# ---------------------------------------------------------------------------
# Descriptions
# ---------------------------------------------------------------------------


@pytest.fixture
def gradle_description() -> ProjectDescription:
    """Gradle 4, Java, Spring Boot 2.0.0.M1, jar packaging."""
    return ProjectDescription(
        build_system="gradle-4",
        language="java",
        platform_version="2.0.0.M1",
        packaging="jar",
        group_id="com.example",
        artifact_id="demo",
    )


@pytest.fixture
def gradle3_description() -> ProjectDescription:
    """Gradle 3, Java, Spring Boot 1.5.9.RELEASE, jar packaging."""
    return ProjectDescription(
        build_system="gradle-3",
        language="java",
        platform_version="1.5.9.RELEASE",
        packaging="jar",
        group_id="com.example",
        artifact_id="demo",
    )


@pytest.fixture
def maven_description() -> ProjectDescription:
    """Maven, Java, Spring Boot 2.1.0.RELEASE, jar packaging."""
    return ProjectDescription(
        build_system="maven",
        language="java",
        platform_version="2.1.0.RELEASE",
        packaging="jar",
        group_id="com.example",
        artifact_id="demo",
    )


@pytest.fixture
def resolved_gradle(gradle_description: ProjectDescription) -> ResolvedProjectDescription:
    return gradle_description.resolve()


# ---------------------------------------------------------------------------
# Generators
# ---------------------------------------------------------------------------


@pytest.fixture
def output_dir(tmp_path: Path) -> Path:
    """Parent directory of the per-request project roots."""
    return tmp_path / "generated"


@pytest.fixture
def generator(output_dir: Path) -> ProjectGenerator:
    """Generator using the bundled manifest and resources."""
    return ProjectGenerator(config=GeneratorConfig(output_dir=output_dir))
