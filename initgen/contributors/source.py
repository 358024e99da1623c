"""Source tree contributors.

Java projects get ``src/main/java`` and ``src/test/java`` laid out below the
project's package, with the application entry point, a context-loads test,
``src/main/resources/application.properties`` and, for ``war`` packaging, a
servlet initializer.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from ..conditions import OnLanguage, OnPackaging
from ..context import ComponentDefinition
from ..description import ResolvedProjectDescription, Version
from ..templates import TemplateRenderer
from .base import ProjectContributor, TemplatedProjectContributor, append_to_file

JAVA = OnLanguage("java")

JUNIT5_SINCE = Version.parse("2.2.0.M1")
SERVLET_SUPPORT_MOVED_IN = Version.parse("2.0.0.M1")


def _package_segment(text: str) -> str:
    segment = re.sub(r"[^a-z0-9_]", "", text.lower())
    if segment[:1].isdigit():
        segment = f"_{segment}"
    return segment


def _class_name(text: str) -> str:
    words = [word for word in re.split(r"[^A-Za-z0-9]+", text) if word]
    name = "".join(word[0].upper() + word[1:] for word in words)
    if not name or name[0].isdigit():
        return "Application"
    return name if name.endswith("Application") else f"{name}Application"


# ---------------------------------------------------------------------------
# Layout
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class SourceLayout:
    """Where the sources of one request go and what they are called."""

    language: str
    package_name: str
    application_name: str
    platform_version: Version | None = None

    @classmethod
    def for_description(cls, description: ResolvedProjectDescription) -> "SourceLayout":
        group_id = description.group_id or "com.example"
        artifact_id = description.artifact_id or "demo"
        segments = [_package_segment(part) for part in f"{group_id}.{artifact_id}".split(".")]
        return cls(
            language=description.language.id,
            package_name=".".join(segment for segment in segments if segment) or "com.example",
            application_name=_class_name(description.name or artifact_id),
            platform_version=description.platform_version,
        )

    @property
    def main_directory(self) -> str:
        return f"src/main/{self.language}"

    @property
    def test_directory(self) -> str:
        return f"src/test/{self.language}"

    @property
    def package_path(self) -> str:
        return self.package_name.replace(".", "/")

    def main_source(self, class_name: str) -> str:
        """Project-relative path of a main source file for *class_name*."""
        return f"{self.main_directory}/{self.package_path}/{class_name}.{self.language}"

    def test_source(self, class_name: str) -> str:
        """Project-relative path of a test source file for *class_name*."""
        return f"{self.test_directory}/{self.package_path}/{class_name}.{self.language}"

    def _at_least(self, minimum: Version) -> bool:
        # No platform version means the current generation.
        return self.platform_version is None or self.platform_version >= minimum

    def template_context(self) -> dict[str, Any]:
        if self._at_least(SERVLET_SUPPORT_MOVED_IN):
            servlet_initializer = "org.springframework.boot.web.servlet.support.SpringBootServletInitializer"
        else:
            servlet_initializer = "org.springframework.boot.web.support.SpringBootServletInitializer"
        return {
            "package_name": self.package_name,
            "application_name": self.application_name,
            "junit5": self._at_least(JUNIT5_SINCE),
            "servlet_initializer_class": servlet_initializer,
        }


# ---------------------------------------------------------------------------
# Contributors
# ---------------------------------------------------------------------------


class ApplicationPropertiesContributor(ProjectContributor):
    """Creates an empty ``src/main/resources/application.properties``."""

    path = "src/main/resources/application.properties"

    def contribute(self, project_root: Path) -> None:
        append_to_file(project_root / self.path, b"")


def _source_file(
    renderer: TemplateRenderer, layout: SourceLayout, template: str, filename: str
) -> TemplatedProjectContributor:
    return TemplatedProjectContributor(
        renderer, f"{layout.language}/{template}", filename, layout.template_context
    )


def _main_application(layout: SourceLayout, renderer: TemplateRenderer) -> TemplatedProjectContributor:
    return _source_file(renderer, layout, "Application.java.j2", layout.main_source(layout.application_name))


def _application_tests(layout: SourceLayout, renderer: TemplateRenderer) -> TemplatedProjectContributor:
    return _source_file(
        renderer, layout, "ApplicationTests.java.j2", layout.test_source(f"{layout.application_name}Tests")
    )


def _servlet_initializer(layout: SourceLayout, renderer: TemplateRenderer) -> TemplatedProjectContributor:
    return _source_file(renderer, layout, "ServletInitializer.java.j2", layout.main_source("ServletInitializer"))


def source_components() -> list[ComponentDefinition]:
    """Components writing the source tree of Java projects."""
    return [
        ComponentDefinition(
            name="sourceLayout",
            factory=SourceLayout.for_description,
            provides=SourceLayout,
            condition=JAVA,
            requires=(ResolvedProjectDescription,),
        ),
        ComponentDefinition(
            name="mainApplicationContributor",
            factory=_main_application,
            provides=ProjectContributor,
            condition=JAVA,
            requires=(SourceLayout, TemplateRenderer),
        ),
        ComponentDefinition(
            name="applicationTestsContributor",
            factory=_application_tests,
            provides=ProjectContributor,
            condition=JAVA,
            requires=(SourceLayout, TemplateRenderer),
        ),
        ComponentDefinition(
            name="servletInitializerContributor",
            factory=_servlet_initializer,
            provides=ProjectContributor,
            condition=JAVA & OnPackaging("war"),
            requires=(SourceLayout, TemplateRenderer),
        ),
        ComponentDefinition(
            name="applicationPropertiesContributor",
            factory=ApplicationPropertiesContributor,
            provides=ProjectContributor,
            condition=JAVA,
        ),
    ]
