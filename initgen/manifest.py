"""Registration manifest: the list of component sources to register.

The manifest is a YAML document::

    components:
      - initgen.contributors.scm:scm_components
      - initgen.build.gradle:gradle_components

Each entry references a callable (``module:attribute``) returning an iterable
of ``ComponentDefinition``.  The generator enumerates the manifest once per
request, when it builds the request's context.
"""

from __future__ import annotations

import importlib
from pathlib import Path
from typing import Callable, Iterable

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .context import ComponentDefinition
from .errors import ConfigurationError
from .log import get_logger

logger = get_logger("manifest")

DEFAULT_MANIFEST_PATH = Path(__file__).parent / "resources" / "manifest.yaml"

ComponentSource = Callable[[], Iterable[ComponentDefinition]]


class ComponentManifest(BaseModel):
    """Ordered list of component source references."""

    components: list[str] = Field(default_factory=list)

    @field_validator("components")
    @classmethod
    def _check_references(cls, value: list[str]) -> list[str]:
        for reference in value:
            module, _, attribute = reference.partition(":")
            if not module or not attribute:
                raise ValueError(f"Expected 'module:attribute', got {reference!r}")
        return value

    # -- Loading -----------------------------------------------------------

    @classmethod
    def load(cls, path: str | Path | None = None) -> "ComponentManifest":
        """Read a manifest file; defaults to the bundled manifest.

        Raises:
            ConfigurationError: If the file is missing or malformed.
        """
        manifest_path = Path(path) if path is not None else DEFAULT_MANIFEST_PATH
        try:
            raw = yaml.safe_load(manifest_path.read_text(encoding="utf-8"))
        except OSError as exc:
            raise ConfigurationError(f"Cannot read manifest {manifest_path}: {exc}") from exc
        except yaml.YAMLError as exc:
            raise ConfigurationError(f"Invalid YAML in manifest {manifest_path}: {exc}") from exc
        try:
            return cls.model_validate(raw or {})
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid manifest {manifest_path}: {exc}") from exc

    # -- Enumeration -------------------------------------------------------

    def sources(self) -> list[ComponentSource]:
        """Import and return every referenced component source."""
        return [_import_reference(reference) for reference in self.components]

    def definitions(self) -> list[ComponentDefinition]:
        """Return the definitions of every source, in manifest order."""
        definitions: list[ComponentDefinition] = []
        for reference, source in zip(self.components, self.sources()):
            produced = list(source())
            for definition in produced:
                if not isinstance(definition, ComponentDefinition):
                    raise ConfigurationError(
                        f"{reference} produced {type(definition).__name__}, expected ComponentDefinition"
                    )
            logger.debug("Source %s contributed %d candidate(s)", reference, len(produced))
            definitions.extend(produced)
        return definitions


def _import_reference(reference: str) -> ComponentSource:
    module_name, _, attribute = reference.partition(":")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ConfigurationError(f"Cannot import component source module {module_name!r}: {exc}") from exc
    source = getattr(module, attribute, None)
    if not callable(source):
        raise ConfigurationError(f"Component source {reference!r} is not a callable")
    return source
