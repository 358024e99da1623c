"""Exception hierarchy for project generation.

Every failure raised inside a generation request is one of the classes below.
``ProjectGenerator.generate`` wraps whatever escapes a request into a single
``ProjectGenerationError`` whose ``cause`` is the root failure, so callers only
need to catch one type while diagnostics can still tell a missing template
from a broken filesystem.
"""

from __future__ import annotations

from pathlib import Path


class InitgenError(Exception):
    """Base class for every error raised by initgen."""


# ---------------------------------------------------------------------------
# Configuration errors
# ---------------------------------------------------------------------------


class ConfigurationError(InitgenError):
    """Raised when the component registry cannot be assembled.

    Covers ambiguous providers, missing dependencies, dependency cycles and
    unresolvable manifest entries.  Never retried.
    """


class ContextStateError(ConfigurationError):
    """Raised when a generation context is used outside its lifecycle."""


class ComponentNotFoundError(ConfigurationError, LookupError):
    """Raised when no active component is assignable to the requested type."""

    def __init__(self, component_type: type) -> None:
        self.component_type = component_type
        super().__init__(f"No active component of type {component_type.__name__}")


# ---------------------------------------------------------------------------
# Contribution errors
# ---------------------------------------------------------------------------


class ResourceUnavailable(InitgenError):
    """Raised when a resource or template cannot be resolved."""

    def __init__(self, pattern: str, owner_id: str = "") -> None:
        self.pattern = pattern
        self.owner_id = owner_id
        message = f"Resource not found: {pattern}"
        if owner_id:
            message += f" (requested by {owner_id})"
        super().__init__(message)


class ProjectIOError(InitgenError):
    """Raised when writing the generated project to disk fails."""

    def __init__(self, message: str, path: Path | None = None) -> None:
        self.path = path
        super().__init__(message)


# ---------------------------------------------------------------------------
# Request-level failure
# ---------------------------------------------------------------------------


class ProjectGenerationError(InitgenError):
    """Raised to the caller when a generation request fails as a whole."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        self.cause = cause
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
