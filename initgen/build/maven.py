"""Maven project generation components, gated on ``OnBuildSystem("maven")``."""

from __future__ import annotations

from typing import Any

from ..conditions import OnBuildSystem, OnPackaging
from ..context import ComponentDefinition, Many
from ..contributors import GitIgnoreContributor, ProjectContributor, TemplatedProjectContributor
from ..description import ResolvedProjectDescription
from ..resources import ResourceResolver
from ..templates import TemplateRenderer
from .customizers import BuildCustomizer, apply_customizers
from .model import MavenBuild, MavenParent, new_build_model

MAVEN = OnBuildSystem("maven")

BOOT_MAVEN_PLUGIN = "org.springframework.boot:spring-boot-maven-plugin"


def maven_build(
    description: ResolvedProjectDescription, customizers: list[BuildCustomizer]
) -> MavenBuild:
    """Create the request's ``MavenBuild`` and run every customizer on it."""
    build = new_build_model(
        MavenBuild,
        group_id=description.group_id or "com.example",
        artifact_id=description.artifact_id or "demo",
        version=description.version or "0.0.1-SNAPSHOT",
        name=description.name,
        description=description.description,
    )
    return apply_customizers(customizers, build)


def maven_template_context(build: MavenBuild) -> dict[str, Any]:
    """Split ``group:artifact`` plugin ids for ``pom.xml.j2``."""
    plugins = []
    for plugin in build.plugins:
        group_id, _, artifact_id = plugin.id.partition(":")
        plugins.append({"group_id": group_id, "artifact_id": artifact_id, "version": plugin.version})
    return {"build": build, "plugins": plugins}


class MavenBuildProjectContributor(TemplatedProjectContributor):
    """Writes ``pom.xml`` from the request's build model."""

    def __init__(self, build: MavenBuild, renderer: TemplateRenderer) -> None:
        super().__init__(
            renderer,
            "maven/pom.xml.j2",
            "pom.xml",
            lambda: maven_template_context(build),
        )


def _default_customizer(description: ResolvedProjectDescription) -> BuildCustomizer[MavenBuild]:
    def customize(build: MavenBuild) -> None:
        if description.language is not None:
            build.set_property("java.version", description.language.jvm_version)
        if description.platform_version is not None:
            build.parent = MavenParent(
                group_id="org.springframework.boot",
                artifact_id="spring-boot-starter-parent",
                version=str(description.platform_version),
            )

    return BuildCustomizer(MavenBuild, customize, name="defaultMavenBuildCustomizer")


def _war_packaging() -> BuildCustomizer[MavenBuild]:
    def customize(build: MavenBuild) -> None:
        build.packaging = "war"

    return BuildCustomizer(MavenBuild, customize, name="warPackagingCustomizer")


def _boot_plugin() -> BuildCustomizer[MavenBuild]:
    return BuildCustomizer(
        MavenBuild,
        lambda build: build.add_plugin(BOOT_MAVEN_PLUGIN),
        name="springBootMavenPluginContributor",
    )


def maven_components() -> list[ComponentDefinition]:
    """Candidate components for Maven projects."""
    return [
        ComponentDefinition(
            name="mavenGitIgnoreContributor",
            factory=lambda resolver: GitIgnoreContributor(resolver, "maven/gitignore"),
            provides=ProjectContributor,
            condition=MAVEN,
            requires=(ResourceResolver,),
        ),
        ComponentDefinition(
            name="mavenBuild",
            factory=maven_build,
            provides=MavenBuild,
            condition=MAVEN,
            requires=(ResolvedProjectDescription, Many(BuildCustomizer)),
        ),
        ComponentDefinition(
            name="defaultMavenBuildCustomizer",
            factory=_default_customizer,
            provides=BuildCustomizer,
            condition=MAVEN,
            requires=(ResolvedProjectDescription,),
        ),
        ComponentDefinition(
            name="warPackagingCustomizer",
            factory=_war_packaging,
            provides=BuildCustomizer,
            condition=MAVEN & OnPackaging("war"),
        ),
        ComponentDefinition(
            name="springBootMavenPluginContributor",
            factory=_boot_plugin,
            provides=BuildCustomizer,
            condition=MAVEN,
        ),
        ComponentDefinition(
            name="mavenBuildProjectContributor",
            factory=MavenBuildProjectContributor,
            provides=ProjectContributor,
            condition=MAVEN,
            requires=(MavenBuild, TemplateRenderer),
        ),
    ]
