"""Pydantic v2 models for project descriptions.

``ProjectDescription`` is the caller's mutable intent.  It is turned into a
frozen ``ResolvedProjectDescription`` exactly once per generation request,
after every ``DescriptionCustomizer`` has run; conditions and components only
ever see the resolved snapshot.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..ordering import Order
from .version import Version


# ---------------------------------------------------------------------------
# Attribute models
# ---------------------------------------------------------------------------


class BuildSystem(BaseModel):
    """A build system family, optionally pinned to a major version."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Build system family, e.g. 'gradle'")
    version: str | None = Field(default=None, description="Dialect version, e.g. '4'")

    @classmethod
    def parse(cls, text: str) -> "BuildSystem":
        """Parse ``"gradle"`` or ``"gradle-4"`` into a ``BuildSystem``."""
        family, _, version = text.strip().lower().partition("-")
        return cls(id=family, version=version or None)

    def __str__(self) -> str:
        return f"{self.id}-{self.version}" if self.version else self.id


class Language(BaseModel):
    """A JVM language and the bytecode level it targets."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Language id, e.g. 'java'")
    jvm_version: str = Field(default="1.8", description="Source/target compatibility")

    def __str__(self) -> str:
        return self.id


class Packaging(BaseModel):
    """Archive packaging of the generated project (``jar`` or ``war``)."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)

    def __str__(self) -> str:
        return self.id


# ---------------------------------------------------------------------------
# Shorthand coercion
# ---------------------------------------------------------------------------


def _coerce_build_system(value: Any) -> Any:
    if isinstance(value, str):
        return BuildSystem.parse(value)
    return value


def _coerce_language(value: Any) -> Any:
    if isinstance(value, str):
        return Language(id=value.strip().lower())
    return value


def _coerce_packaging(value: Any) -> Any:
    if isinstance(value, str):
        return Packaging(id=value.strip().lower())
    return value


def _coerce_version(value: Any) -> Any:
    # YAML reads "2.0" as a float
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        value = str(value)
    if isinstance(value, str):
        return Version.parse(value)
    return value


class _DescriptionFields(BaseModel):
    """Fields shared by the mutable description and its resolved snapshot."""

    build_system: BuildSystem | None = Field(default=None)
    language: Language | None = Field(default=None)
    platform_version: Version | None = Field(default=None)
    packaging: Packaging | None = Field(default=None)
    group_id: str | None = Field(default=None)
    artifact_id: str | None = Field(default=None)
    version: str | None = Field(default=None, description="Version of the generated project")
    name: str | None = Field(default=None)
    description: str | None = Field(default=None)
    base_directory: str | None = Field(
        default=None, description="Directory, relative to the generation root, holding the project"
    )

    @field_validator("build_system", mode="before")
    @classmethod
    def _build_system(cls, value: Any) -> Any:
        return _coerce_build_system(value)

    @field_validator("language", mode="before")
    @classmethod
    def _language(cls, value: Any) -> Any:
        return _coerce_language(value)

    @field_validator("packaging", mode="before")
    @classmethod
    def _packaging(cls, value: Any) -> Any:
        return _coerce_packaging(value)

    @field_validator("platform_version", mode="before")
    @classmethod
    def _platform_version(cls, value: Any) -> Any:
        return _coerce_version(value)


# ---------------------------------------------------------------------------
# Description / resolved snapshot
# ---------------------------------------------------------------------------


class ResolvedProjectDescription(_DescriptionFields):
    """Immutable snapshot of a ``ProjectDescription``.

    Any attempt to assign a field raises ``pydantic.ValidationError``.
    """

    model_config = ConfigDict(frozen=True)


class ProjectDescription(_DescriptionFields):
    """Mutable description of the project to generate.

    String shorthands are accepted for typed attributes::

        description = ProjectDescription(
            build_system="gradle",
            language="java",
            platform_version="2.0.0.M1",
            packaging="jar",
            group_id="com.example",
            artifact_id="demo",
        )
    """

    model_config = ConfigDict(validate_assignment=True)

    def resolve(self) -> ResolvedProjectDescription:
        """Return a frozen copy of the description as it is right now."""
        return ResolvedProjectDescription.model_validate(self.model_dump())


# ---------------------------------------------------------------------------
# Description customizers
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DescriptionCustomizer:
    """Ordered mutation applied to a ``ProjectDescription`` before resolution."""

    customize: Callable[[ProjectDescription], None]
    order: Order = None
