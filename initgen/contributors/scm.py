"""Version control contributors."""

from __future__ import annotations

from ..context import ComponentDefinition
from ..ordering import HIGHEST_PRECEDENCE
from ..resources import ResourceResolver
from .base import ProjectContributor, SingleResourceProjectContributor


class GitIgnoreContributor(SingleResourceProjectContributor):
    """Appends ignore patterns to ``.gitignore``.

    Runs before every other contributor so files written later in the same
    request are already covered by the patterns.
    """

    order = HIGHEST_PRECEDENCE

    def __init__(self, resolver: ResourceResolver, resource_pattern: str = "git/gitignore") -> None:
        super().__init__(resolver, ".gitignore", resource_pattern)


def scm_components() -> list[ComponentDefinition]:
    """Components contributing VCS metadata to every project."""
    return [
        ComponentDefinition(
            name="gitIgnoreContributor",
            factory=GitIgnoreContributor,
            provides=ProjectContributor,
            requires=(ResourceResolver,),
        ),
    ]
