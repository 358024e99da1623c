"""Gradle project generation components.

Everything here is gated on ``OnBuildSystem("gradle")``; components specific
to one Gradle generation additionally require that exact version.
"""

from __future__ import annotations

from typing import Any

from ..conditions import OnBuildSystem, OnLanguage, OnPackaging, OnPlatformVersion
from ..context import ComponentDefinition, Many
from ..contributors import (
    GitIgnoreContributor,
    MultipleResourcesProjectContributor,
    ProjectContributor,
    TemplatedProjectContributor,
)
from ..description import ResolvedProjectDescription
from ..resources import ResourceResolver
from ..templates import TemplateRenderer
from .customizers import BuildCustomizer, apply_customizers
from .model import GradleBuild, new_build_model

GRADLE = OnBuildSystem("gradle")
GRADLE_3 = OnBuildSystem("gradle", "3")
GRADLE_4 = OnBuildSystem("gradle", "4")

DEPENDENCY_MANAGEMENT_PLUGIN = "io.spring.dependency-management"
BOOT_PLUGIN = "org.springframework.boot"

_WRAPPER_FILES = ("gradlew", "gradlew.bat", "gradle/wrapper/gradle-wrapper.properties")

_CONFIGURATIONS: dict[str, str] = {
    "compile": "implementation",
    "runtime": "runtimeOnly",
    "test": "testImplementation",
}


# ---------------------------------------------------------------------------
# Build model
# ---------------------------------------------------------------------------


def gradle_build(
    description: ResolvedProjectDescription, customizers: list[BuildCustomizer]
) -> GradleBuild:
    """Create the request's ``GradleBuild`` and run every customizer on it."""
    build = new_build_model(
        GradleBuild,
        group_id=description.group_id or "com.example",
        artifact_id=description.artifact_id or "demo",
        version=description.version or "0.0.1-SNAPSHOT",
        name=description.name,
        description=description.description,
    )
    return apply_customizers(customizers, build)


def _configuration(build: GradleBuild, scope: str) -> str:
    if scope == "provided":
        return "providedRuntime" if build.has_plugin("war") else "compileOnly"
    return _CONFIGURATIONS.get(scope, scope)


def gradle_template_context(build: GradleBuild) -> dict[str, Any]:
    """Flatten a ``GradleBuild`` into the variables of ``build.gradle.j2``."""
    plugins = []
    for plugin in build.plugins:
        line = f"id '{plugin.id}'"
        if plugin.version:
            line += f" version '{plugin.version}'"
        plugins.append(line)
    dependencies = [
        f"{_configuration(build, dependency.scope)} '{dependency.coordinates}'"
        for dependency in build.dependencies
    ]
    return {
        "build": build,
        "plugins": plugins,
        "applied_plugins": build.applied_plugins,
        "buildscript_dependencies": build.buildscript.dependencies,
        "buildscript_ext": build.buildscript.ext,
        "dependencies": dependencies,
    }


# ---------------------------------------------------------------------------
# Contributors
# ---------------------------------------------------------------------------


class GradleBuildProjectContributor(TemplatedProjectContributor):
    """Writes ``build.gradle`` from the request's build model."""

    def __init__(self, build: GradleBuild, renderer: TemplateRenderer) -> None:
        super().__init__(
            renderer,
            "gradle/build.gradle.j2",
            "build.gradle",
            lambda: gradle_template_context(build),
        )


class SettingsGradleProjectContributor(TemplatedProjectContributor):
    """Writes ``settings.gradle``."""

    def __init__(self, build: GradleBuild, renderer: TemplateRenderer) -> None:
        super().__init__(
            renderer,
            "gradle/settings.gradle.j2",
            "settings.gradle",
            lambda: {"build": build},
        )


class GradleWrapperContributor(MultipleResourcesProjectContributor):
    """Copies the wrapper scripts of one Gradle generation."""

    def __init__(self, resolver: ResourceResolver, gradle_version: str) -> None:
        super().__init__(
            resolver,
            f"gradle/{gradle_version}/wrapper",
            _WRAPPER_FILES,
            executable=("gradlew",),
        )
        self.gradle_version = gradle_version


# ---------------------------------------------------------------------------
# Customizers
# ---------------------------------------------------------------------------


def _default_customizer(description: ResolvedProjectDescription) -> BuildCustomizer[GradleBuild]:
    def customize(build: GradleBuild) -> None:
        if description.language is not None:
            build.source_compatibility = description.language.jvm_version

    return BuildCustomizer(GradleBuild, customize, name="defaultGradleBuildCustomizer")


def _java_plugin() -> BuildCustomizer[GradleBuild]:
    return BuildCustomizer(GradleBuild, lambda build: build.add_plugin("java"), name="javaPluginContributor")


def _war_plugin() -> BuildCustomizer[GradleBuild]:
    return BuildCustomizer(GradleBuild, lambda build: build.add_plugin("war"), name="warPluginContributor")


def _dependency_management_plugin() -> BuildCustomizer[GradleBuild]:
    return BuildCustomizer(
        GradleBuild,
        lambda build: build.apply_plugin(DEPENDENCY_MANAGEMENT_PLUGIN),
        name="applyDependencyManagementPluginContributor",
    )


def _gradle3_boot_plugin(description: ResolvedProjectDescription) -> BuildCustomizer[GradleBuild]:
    def customize(build: GradleBuild) -> None:
        if description.platform_version is None:
            return
        build.buildscript.ext["springBootVersion"] = str(description.platform_version)
        build.buildscript.dependency(
            f"org.springframework.boot:spring-boot-gradle-plugin:{description.platform_version}"
        )
        build.apply_plugin(BOOT_PLUGIN)

    return BuildCustomizer(GradleBuild, customize, name="springBootPluginContributor")


def _gradle4_boot_plugin(description: ResolvedProjectDescription) -> BuildCustomizer[GradleBuild]:
    def customize(build: GradleBuild) -> None:
        if description.platform_version is not None:
            build.add_plugin(BOOT_PLUGIN, str(description.platform_version))

    return BuildCustomizer(GradleBuild, customize, name="springBootPluginContributor")


# ---------------------------------------------------------------------------
# Registrations
# ---------------------------------------------------------------------------


def gradle_components() -> list[ComponentDefinition]:
    """Candidate components for Gradle projects."""
    return [
        ComponentDefinition(
            name="gradleGitIgnoreContributor",
            factory=lambda resolver: GitIgnoreContributor(resolver, "gradle/gitignore"),
            provides=ProjectContributor,
            condition=GRADLE,
            requires=(ResourceResolver,),
        ),
        ComponentDefinition(
            name="gradleBuild",
            factory=gradle_build,
            provides=GradleBuild,
            condition=GRADLE,
            requires=(ResolvedProjectDescription, Many(BuildCustomizer)),
        ),
        ComponentDefinition(
            name="defaultGradleBuildCustomizer",
            factory=_default_customizer,
            provides=BuildCustomizer,
            condition=GRADLE,
            requires=(ResolvedProjectDescription,),
        ),
        ComponentDefinition(
            name="javaPluginContributor",
            factory=_java_plugin,
            provides=BuildCustomizer,
            condition=GRADLE & OnLanguage("java"),
        ),
        ComponentDefinition(
            name="warPluginContributor",
            factory=_war_plugin,
            provides=BuildCustomizer,
            condition=GRADLE & OnPackaging("war"),
        ),
        ComponentDefinition(
            name="applyDependencyManagementPluginContributor",
            factory=_dependency_management_plugin,
            provides=BuildCustomizer,
            condition=GRADLE & OnPlatformVersion("2.0.0.M1"),
        ),
        ComponentDefinition(
            name="gradle3SpringBootPluginContributor",
            factory=_gradle3_boot_plugin,
            provides=BuildCustomizer,
            condition=GRADLE_3,
            requires=(ResolvedProjectDescription,),
        ),
        ComponentDefinition(
            name="gradle4SpringBootPluginContributor",
            factory=_gradle4_boot_plugin,
            provides=BuildCustomizer,
            condition=GRADLE_4,
            requires=(ResolvedProjectDescription,),
        ),
        ComponentDefinition(
            name="gradle3WrapperContributor",
            factory=lambda resolver: GradleWrapperContributor(resolver, "3"),
            provides=ProjectContributor,
            condition=GRADLE_3,
            requires=(ResourceResolver,),
        ),
        ComponentDefinition(
            name="gradle4WrapperContributor",
            factory=lambda resolver: GradleWrapperContributor(resolver, "4"),
            provides=ProjectContributor,
            condition=GRADLE_4,
            requires=(ResourceResolver,),
        ),
        ComponentDefinition(
            name="settingsGradleProjectContributor",
            factory=SettingsGradleProjectContributor,
            provides=ProjectContributor,
            condition=GRADLE,
            requires=(GradleBuild, TemplateRenderer),
        ),
        ComponentDefinition(
            name="gradleBuildProjectContributor",
            factory=GradleBuildProjectContributor,
            provides=ProjectContributor,
            condition=GRADLE,
            requires=(GradleBuild, TemplateRenderer),
        ),
    ]
