"""Project generation orchestrator.

Takes a ``ProjectDescription`` and produces a project skeleton:

1. **Resolving** -- description customizers run against the caller's
   description, which is then frozen into a ``ResolvedProjectDescription``.
2. **Generating** -- a fresh ``GenerationContext`` is created, core services
   and every component listed in the registration manifest are registered,
   the caller's context customizer runs, and the context is sealed.  The
   result processor then runs against the sealed context; by default it
   writes the project through the ordered contributors.
3. **Completed** / **Failed** -- the context is disposed either way.  Every
   failure reaches the caller as a ``ProjectGenerationError``.

Quick usage::

    from initgen import ProjectDescription, ProjectGenerator

    description = ProjectDescription(
        build_system="gradle-4",
        language="java",
        platform_version="2.0.0.M1",
        packaging="jar",
        group_id="com.example",
        artifact_id="demo",
    )
    result = ProjectGenerator().generate(description)
    print(result.value, result.build)
"""

from __future__ import annotations

import tempfile
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Generic, Iterable, TypeVar

from .build import Build
from .config import GeneratorConfig
from .context import GenerationContext, Many
from .contributors import ProjectContributor, ProjectContributors
from .description import DescriptionCustomizer, ProjectDescription, ResolvedProjectDescription
from .errors import ProjectGenerationError, ProjectIOError, ResourceUnavailable
from .log import get_logger
from .manifest import ComponentManifest
from .ordering import order_key
from .resources import BundledResourceResolver, ResourceResolver
from .templates import TemplateRenderer

T = TypeVar("T")

logger = get_logger("generator")

PROJECT_DIR_PREFIX = "initgen-"

ContextCustomizer = Callable[[GenerationContext], None]
ResultProcessor = Callable[[GenerationContext], T]


class GenerationState(str, Enum):
    """States of one generation request."""

    RESOLVING = "resolving"
    GENERATING = "generating"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class ProjectGenerationResult(Generic[T]):
    """Outcome of a successful request.

    Attributes:
        value: Whatever the result processor returned; the project root
            directory for the default processor.
        build: The request's build model, or ``None`` when no build-system
            specific component was active.
    """

    value: T
    build: Build | None = None


# ---------------------------------------------------------------------------
# Project directory
# ---------------------------------------------------------------------------


class ProjectDirectoryFactory:
    """Creates the root directory a request generates into."""

    def __init__(self, output_dir: Path | None = None) -> None:
        self.output_dir = output_dir

    def create_project_directory(self, description: ResolvedProjectDescription) -> Path:
        """Return a new, empty generation root for one request.

        The root is a fresh ``initgen-*`` directory below the configured
        output directory (created on demand), or below the system temporary
        directory when none is configured.  Requests never share a root, so
        append-only contributors cannot write onto an earlier project.
        """
        try:
            if self.output_dir is not None:
                self.output_dir.mkdir(parents=True, exist_ok=True)
            return Path(tempfile.mkdtemp(prefix=PROJECT_DIR_PREFIX, dir=self.output_dir))
        except OSError as exc:
            raise ProjectIOError(f"Cannot create project directory: {exc}", self.output_dir) from exc


def initialize_project_directory(root: Path, description: ResolvedProjectDescription) -> Path:
    """Return the directory contributors write into.

    That is ``root / base_directory`` (created on demand) when the
    description names a base directory, otherwise *root* itself.
    """
    if not description.base_directory:
        return root
    directory = root / description.base_directory
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ProjectIOError(f"Cannot create base directory {directory}: {exc}", directory) from exc
    return directory


def contribute_project(context: GenerationContext) -> Path:
    """Default result processor: write the project and return its root."""
    description = context.get(ResolvedProjectDescription)
    project_root = context.get(ProjectDirectoryFactory).create_project_directory(description)
    project_directory = initialize_project_directory(project_root, description)
    contributors = context.get(ProjectContributors)
    logger.debug("Running %d contributor(s) in %s", len(contributors), project_directory)
    contributors.contribute(project_directory)
    return project_root


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------


class ProjectGenerator:
    """Generates projects from descriptions.

    A generator holds no per-request state and can serve concurrent requests
    from several threads, as long as each request uses its own description.

    Args:
        context_customizer: Called with each request's context after the core
            services and manifest components are registered, before sealing.
        description_customizers: Applied, in order, to each description
            before it is resolved.
        manifest: Registration manifest; defaults to
            ``config.manifest_path`` or the bundled manifest, read per request.
        resource_resolver: Source of resources; defaults to a
            ``BundledResourceResolver`` over ``config.resource_dir``, created
            per request.
        config: Generator settings.
    """

    def __init__(
        self,
        context_customizer: ContextCustomizer | None = None,
        *,
        description_customizers: Iterable[DescriptionCustomizer] = (),
        manifest: ComponentManifest | None = None,
        resource_resolver: ResourceResolver | None = None,
        config: GeneratorConfig | None = None,
    ) -> None:
        self.config = config or GeneratorConfig()
        self.context_customizer = context_customizer
        self.description_customizers = list(description_customizers)
        self.manifest = manifest
        self.resource_resolver = resource_resolver

    # -- Public API --------------------------------------------------------

    def generate(
        self,
        description: ProjectDescription,
        processor: ResultProcessor[T] | None = None,
    ) -> ProjectGenerationResult[T]:
        """Generate a project for *description*.

        Args:
            description: What to generate.  Description customizers mutate
                it before it is resolved.
            processor: Called with the sealed context to produce the result
                value.  Defaults to :func:`contribute_project`, which writes
                the project and returns its root directory.

        Returns:
            The processor's value and the request's build model, if any.

        Raises:
            ProjectGenerationError: If anything fails; ``cause`` holds the
                root failure.
        """
        process = processor or contribute_project
        state = GenerationState.RESOLVING
        context: GenerationContext | None = None
        try:
            resolved = self._resolve(description)
            state = self._transition(state, GenerationState.GENERATING)
            context = self._create_context(resolved)
            context.seal()
            value = process(context)
            build = context.get_optional(Build)
            self._transition(state, GenerationState.COMPLETED)
            return ProjectGenerationResult(value=value, build=build)
        except Exception as exc:
            self._transition(state, GenerationState.FAILED)
            self._log_failure(exc)
            raise ProjectGenerationError("Failed to generate project", exc) from exc
        finally:
            if context is not None:
                context.dispose()

    # -- Resolving ---------------------------------------------------------

    def _resolve(self, description: ProjectDescription) -> ResolvedProjectDescription:
        indexed = list(enumerate(self.description_customizers))
        indexed.sort(key=lambda item: order_key(item[1].order, item[0]))
        for _, customizer in indexed:
            customizer.customize(description)
        return description.resolve()

    # -- Generating --------------------------------------------------------

    def _create_context(self, resolved: ResolvedProjectDescription) -> GenerationContext:
        context = GenerationContext(resolved)
        context.require_unique(Build)

        resolver = self.resource_resolver or BundledResourceResolver(self.config.resource_dir)
        context.register_instance(resolved, ResolvedProjectDescription)
        context.register_instance(self.config, GeneratorConfig)
        context.register_instance(resolver, ResourceResolver, owned=self.resource_resolver is None)
        context.register_component(
            "templateRenderer", TemplateRenderer, TemplateRenderer, requires=(ResourceResolver,)
        )
        context.register_component(
            "projectDirectoryFactory",
            lambda config: ProjectDirectoryFactory(config.output_dir),
            ProjectDirectoryFactory,
            requires=(GeneratorConfig,),
        )
        context.register_component(
            "projectContributors",
            ProjectContributors,
            ProjectContributors,
            requires=(Many(ProjectContributor),),
        )

        manifest = self.manifest or ComponentManifest.load(self.config.manifest_path)
        context.register_all(manifest.definitions())

        if self.context_customizer is not None:
            self.context_customizer(context)
        return context

    # -- Diagnostics -------------------------------------------------------

    @staticmethod
    def _transition(current: GenerationState, target: GenerationState) -> GenerationState:
        logger.debug("Generation request %s -> %s", current.value, target.value)
        return target

    @staticmethod
    def _log_failure(exc: Exception) -> None:
        if isinstance(exc, ResourceUnavailable):
            logger.error("Project generation failed, resource unavailable: %s", exc.pattern)
        elif isinstance(exc, ProjectIOError):
            logger.error("Project generation failed writing %s: %s", exc.path, exc)
        else:
            logger.error("Project generation failed: %s", exc)
