"""Customizers adding the default Spring Boot starters to any build model."""

from __future__ import annotations

from ..conditions import OnPackaging
from ..context import ComponentDefinition
from .customizers import BuildCustomizer
from .model import Build

BOOT_GROUP = "org.springframework.boot"


def _default_starters(build: Build) -> None:
    build.add_dependency(BOOT_GROUP, "spring-boot-starter")
    build.add_dependency(BOOT_GROUP, "spring-boot-starter-test", scope="test")


def _war_starter(build: Build) -> None:
    build.add_dependency(BOOT_GROUP, "spring-boot-starter-tomcat", scope="provided")


def starter_components() -> list[ComponentDefinition]:
    """Starter customizers, shared by every build system."""
    return [
        ComponentDefinition(
            name="defaultStarterContributor",
            factory=lambda: BuildCustomizer(Build, _default_starters, name="defaultStarterContributor"),
            provides=BuildCustomizer,
        ),
        ComponentDefinition(
            name="warStarterContributor",
            factory=lambda: BuildCustomizer(Build, _war_starter, name="warStarterContributor"),
            provides=BuildCustomizer,
            condition=OnPackaging("war"),
        ),
    ]
