"""In-memory build models.

A build model is the mutable representation of a build descriptor before it
is rendered.  One instance exists per request and per kind; every customizer
of the request mutates that same instance.
"""

from __future__ import annotations

from typing import Any, ClassVar, TypeVar

from pydantic import BaseModel, Field


class Dependency(BaseModel):
    """A library dependency of the generated project."""

    group_id: str
    artifact_id: str
    version: str | None = None
    scope: str = Field(default="compile", description="e.g. compile, runtime, test, provided")

    @property
    def coordinates(self) -> str:
        """``group:artifact[:version]`` notation."""
        base = f"{self.group_id}:{self.artifact_id}"
        return f"{base}:{self.version}" if self.version else base


class Plugin(BaseModel):
    """A build plugin identified by id (Gradle) or ``group:artifact`` (Maven)."""

    id: str
    version: str | None = None


class Build(BaseModel):
    """Attributes shared by every build system."""

    build_system_id: ClassVar[str] = ""

    group_id: str | None = None
    artifact_id: str | None = None
    version: str | None = None
    name: str | None = None
    description: str | None = None
    dependencies: list[Dependency] = Field(default_factory=list)
    plugins: list[Plugin] = Field(default_factory=list)

    def add_dependency(
        self,
        group_id: str,
        artifact_id: str,
        version: str | None = None,
        scope: str = "compile",
    ) -> Dependency:
        """Add a dependency unless one with the same coordinates and scope exists."""
        for existing in self.dependencies:
            if (existing.group_id, existing.artifact_id, existing.scope) == (group_id, artifact_id, scope):
                return existing
        dependency = Dependency(group_id=group_id, artifact_id=artifact_id, version=version, scope=scope)
        self.dependencies.append(dependency)
        return dependency

    def add_plugin(self, plugin_id: str, version: str | None = None) -> Plugin:
        """Declare a plugin; declaring the same id twice keeps the first."""
        for existing in self.plugins:
            if existing.id == plugin_id:
                return existing
        plugin = Plugin(id=plugin_id, version=version)
        self.plugins.append(plugin)
        return plugin

    def has_plugin(self, plugin_id: str) -> bool:
        return any(plugin.id == plugin_id for plugin in self.plugins)


class GradleBuildscript(BaseModel):
    """The ``buildscript {}`` block of a Gradle build."""

    dependencies: list[str] = Field(default_factory=list)
    ext: dict[str, str] = Field(default_factory=dict)

    def dependency(self, coordinates: str) -> None:
        if coordinates not in self.dependencies:
            self.dependencies.append(coordinates)


class GradleBuild(Build):
    """A Gradle ``build.gradle`` model."""

    build_system_id: ClassVar[str] = "gradle"

    applied_plugins: list[str] = Field(default_factory=list)
    source_compatibility: str | None = None
    repositories: list[str] = Field(default_factory=lambda: ["mavenCentral()"])
    buildscript: GradleBuildscript = Field(default_factory=GradleBuildscript)

    def apply_plugin(self, plugin_id: str) -> None:
        """Add an ``apply plugin:`` statement."""
        if plugin_id not in self.applied_plugins:
            self.applied_plugins.append(plugin_id)

    def has_plugin(self, plugin_id: str) -> bool:
        return super().has_plugin(plugin_id) or plugin_id in self.applied_plugins


class MavenParent(BaseModel):
    """The ``<parent>`` of a Maven project."""

    group_id: str
    artifact_id: str
    version: str


class MavenBuild(Build):
    """A Maven ``pom.xml`` model.

    ``plugins`` holds build plugins as ``group:artifact`` ids.
    """

    build_system_id: ClassVar[str] = "maven"

    packaging: str = "jar"
    parent: MavenParent | None = None
    properties: dict[str, str] = Field(default_factory=dict)

    def set_property(self, key: str, value: str) -> None:
        self.properties[key] = value


B = TypeVar("B", bound=Build)


def new_build_model(kind: type[B], **attributes: Any) -> B:
    """Create an empty build model of *kind*.

    Raises:
        TypeError: If *kind* is not a ``Build`` subclass.
    """
    if not (isinstance(kind, type) and issubclass(kind, Build)):
        raise TypeError(f"{kind!r} is not a build model kind")
    return kind(**attributes)
