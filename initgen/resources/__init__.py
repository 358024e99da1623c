"""Resource resolution for contributors and templates.

Contributors never read files directly: they ask a ``ResourceResolver`` for
the bytes behind a pattern such as ``"gradle/gitignore"``.  The bundled
implementation serves the files shipped in this directory (or in a directory
configured through ``GeneratorConfig.resource_dir``).
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import Path

from ..errors import ResourceUnavailable
from ..log import get_logger

logger = get_logger("resources")

_DEFAULT_RESOURCE_DIR = Path(__file__).parent
_FILE_PREFIX = "file:"


class ResourceResolver(ABC):
    """Resolves resource patterns to raw bytes."""

    @abstractmethod
    def resolve(self, owner_id: str, pattern: str) -> bytes:
        """Return the content behind *pattern*.

        Args:
            owner_id: Identifier of the component asking, used in diagnostics.
            pattern: Resource location, relative to the resolver's root or
                prefixed with ``file:`` for an absolute filesystem path.

        Raises:
            ResourceUnavailable: If nothing exists at *pattern*.
        """

    def resolve_text(self, owner_id: str, pattern: str) -> str:
        """Return the content behind *pattern* decoded as UTF-8."""
        return self.resolve(owner_id, pattern).decode("utf-8")


class BundledResourceResolver(ResourceResolver):
    """Serves resources from a directory, caching each pattern once read."""

    def __init__(self, resource_dir: str | Path | None = None) -> None:
        self.resource_dir = Path(resource_dir) if resource_dir is not None else _DEFAULT_RESOURCE_DIR
        self._cache: dict[str, bytes] = {}

    def resolve(self, owner_id: str, pattern: str) -> bytes:
        if pattern in self._cache:
            return self._cache[pattern]
        path = self._locate(pattern)
        if not path.is_file():
            logger.debug("Resource %s requested by %s not found at %s", pattern, owner_id, path)
            raise ResourceUnavailable(pattern, owner_id)
        content = path.read_bytes()
        self._cache[pattern] = content
        return content

    def _locate(self, pattern: str) -> Path:
        if pattern.startswith(_FILE_PREFIX):
            return Path(pattern[len(_FILE_PREFIX):])
        candidate = (self.resource_dir / pattern).resolve()
        root = self.resource_dir.resolve()
        if root not in candidate.parents:
            raise ResourceUnavailable(pattern)
        return candidate


__all__ = ["BundledResourceResolver", "ResourceResolver"]
