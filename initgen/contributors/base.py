"""Project contributors and their ordered execution.

A contributor writes into the generated project directory.  Output files are
always opened for appending: when two contributors target the same file (for
example a generic and a build-specific ``.gitignore``) the later one adds to
what the earlier one wrote instead of replacing it.
"""

from __future__ import annotations

import stat
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Iterable

from ..errors import ProjectIOError, ResourceUnavailable
from ..log import get_logger
from ..ordering import Order
from ..resources import ResourceResolver
from ..templates import TemplateRenderer

logger = get_logger("contributors")


class ProjectContributor(ABC):
    """Writes part of the generated project."""

    order: Order = None

    @abstractmethod
    def contribute(self, project_root: Path) -> None:
        """Write this contributor's output under *project_root*."""

    @property
    def owner_id(self) -> str:
        cls = type(self)
        return f"{cls.__module__}.{cls.__qualname__}"


# ---------------------------------------------------------------------------
# File helpers
# ---------------------------------------------------------------------------


def append_to_file(path: Path, content: bytes) -> Path:
    """Create *path* (and its parents) if needed, then append *content*.

    Raises:
        ProjectIOError: If the directories or the file cannot be written.
    """
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ProjectIOError(f"Cannot create directory {path.parent}: {exc}", path.parent) from exc
    try:
        with path.open("ab") as handle:
            handle.write(content)
    except OSError as exc:
        raise ProjectIOError(f"Cannot write {path}: {exc}", path) from exc
    return path


def make_executable(path: Path) -> None:
    """Set the executable bits on a file."""
    try:
        current = path.stat().st_mode
        path.chmod(current | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    except OSError as exc:
        raise ProjectIOError(f"Cannot make {path} executable: {exc}", path) from exc


# ---------------------------------------------------------------------------
# Resource-backed contributors
# ---------------------------------------------------------------------------


class SingleResourceProjectContributor(ProjectContributor):
    """Appends the bytes of one resource to one file of the project."""

    def __init__(self, resolver: ResourceResolver, filename: str, resource_pattern: str) -> None:
        self.resolver = resolver
        self.filename = filename
        self.resource_pattern = resource_pattern

    def contribute(self, project_root: Path) -> None:
        output = project_root / self.filename
        if not output.exists():
            append_to_file(output, b"")
        content = self.resolver.resolve(self.owner_id, self.resource_pattern)
        append_to_file(output, content)


class MultipleResourcesProjectContributor(ProjectContributor):
    """Copies several resources below a common prefix into the project.

    Args:
        resolver: Source of the resource bytes.
        root: Resource prefix, e.g. ``"gradle/4"``.
        files: Paths relative to *root*; each is written to the same relative
            path in the project.
        executable: Relative paths that get the executable bit.
    """

    def __init__(
        self,
        resolver: ResourceResolver,
        root: str,
        files: Iterable[str],
        executable: Iterable[str] = (),
    ) -> None:
        self.resolver = resolver
        self.root = root.rstrip("/")
        self.files = list(files)
        self.executable = set(executable)

    def contribute(self, project_root: Path) -> None:
        for relative in self.files:
            content = self.resolver.resolve(self.owner_id, f"{self.root}/{relative}")
            output = append_to_file(project_root / relative, content)
            if relative in self.executable:
                make_executable(output)


class TemplatedProjectContributor(ProjectContributor):
    """Renders a template and appends the result to a project file.

    ``context_factory`` is called at contribution time so the rendered output
    reflects the build model after every customizer has run.
    """

    def __init__(
        self,
        renderer: TemplateRenderer,
        template: str,
        filename: str,
        context_factory: Callable[[], dict[str, Any]],
    ) -> None:
        self.renderer = renderer
        self.template = template
        self.filename = filename
        self.context_factory = context_factory

    def contribute(self, project_root: Path) -> None:
        content = self.renderer.render(self.template, self.context_factory())
        append_to_file(project_root / self.filename, content.encode("utf-8"))


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------


class ProjectContributors:
    """Runs the contributors of a request sequentially, in the given order."""

    def __init__(self, contributors: Iterable[ProjectContributor]) -> None:
        self.contributors = list(contributors)

    def contribute(self, project_root: Path) -> None:
        """Invoke every contributor against *project_root*.

        The first failure stops execution.  ``ResourceUnavailable`` and
        ``ProjectIOError`` propagate unchanged; any other ``OSError`` is
        wrapped in ``ProjectIOError``.
        """
        for contributor in self.contributors:
            name = type(contributor).__name__
            logger.debug("Running contributor %s", name)
            try:
                contributor.contribute(project_root)
            except ResourceUnavailable as exc:
                logger.error("Contributor %s could not resolve %s", name, exc.pattern)
                raise
            except ProjectIOError as exc:
                logger.error("Contributor %s failed to write %s: %s", name, exc.path, exc)
                raise
            except OSError as exc:
                logger.error("Contributor %s failed with an I/O error: %s", name, exc)
                raise ProjectIOError(f"{name} failed: {exc}", project_root) from exc

    def __len__(self) -> int:
        return len(self.contributors)
