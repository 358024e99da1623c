"""Activation conditions evaluated against a resolved description.

Every component registers one condition.  Conditions are frozen dataclasses
with a pure ``matches`` method, so they can be evaluated any number of times
before (and without) constructing the component they guard.  Composition is
AND-only: ``OnBuildSystem("gradle") & OnLanguage("java")``.  A component that
needs OR semantics registers once per alternative.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from .description import ResolvedProjectDescription, Version


class Condition(ABC):
    """Predicate over a ``ResolvedProjectDescription``."""

    @abstractmethod
    def matches(self, description: ResolvedProjectDescription) -> bool:
        """Return whether the guarded component should be active."""

    def __and__(self, other: "Condition") -> "AllOf":
        if not isinstance(other, Condition):
            return NotImplemented
        return AllOf(_flatten(self) + _flatten(other))


@dataclass(frozen=True)
class Always(Condition):
    """Matches every description."""

    def matches(self, description: ResolvedProjectDescription) -> bool:
        return True


ALWAYS = Always()


@dataclass(frozen=True)
class OnLanguage(Condition):
    """Matches when the description's language has the given id."""

    language_id: str

    def matches(self, description: ResolvedProjectDescription) -> bool:
        language = description.language
        return language is not None and language.id == self.language_id


@dataclass(frozen=True)
class OnBuildSystem(Condition):
    """Matches a build system family, or one exact version of it.

    ``OnBuildSystem("gradle")`` matches any Gradle; ``OnBuildSystem("gradle",
    "4")`` only matches a description whose build system is Gradle 4.
    """

    build_system_id: str
    version: str | None = None

    def matches(self, description: ResolvedProjectDescription) -> bool:
        build_system = description.build_system
        if build_system is None or build_system.id != self.build_system_id:
            return False
        if self.version is None:
            return True
        return build_system.version == self.version


@dataclass(frozen=True)
class OnPlatformVersion(Condition):
    """Matches when the platform version is at least ``minimum``."""

    minimum: Version

    def __init__(self, minimum: Version | str) -> None:
        if isinstance(minimum, str):
            minimum = Version.parse(minimum)
        object.__setattr__(self, "minimum", minimum)

    def matches(self, description: ResolvedProjectDescription) -> bool:
        version = description.platform_version
        return version is not None and version >= self.minimum


@dataclass(frozen=True)
class OnPackaging(Condition):
    """Matches when the description's packaging has the given id."""

    packaging_id: str

    def matches(self, description: ResolvedProjectDescription) -> bool:
        packaging = description.packaging
        return packaging is not None and packaging.id == self.packaging_id


@dataclass(frozen=True)
class AllOf(Condition):
    """Logical AND of several conditions; an empty ``AllOf`` always matches."""

    conditions: tuple[Condition, ...] = field(default_factory=tuple)

    def __init__(self, *conditions: Condition | tuple[Condition, ...]) -> None:
        flat: list[Condition] = []
        for condition in conditions:
            if isinstance(condition, tuple):
                flat.extend(condition)
            else:
                flat.append(condition)
        object.__setattr__(self, "conditions", tuple(flat))

    def matches(self, description: ResolvedProjectDescription) -> bool:
        return all(condition.matches(description) for condition in self.conditions)


def _flatten(condition: Condition) -> tuple[Condition, ...]:
    if isinstance(condition, AllOf):
        return condition.conditions
    return (condition,)


def matches(description: ResolvedProjectDescription, condition: Condition) -> bool:
    """Evaluate *condition* against *description*."""
    return condition.matches(description)
