"""Project description models.

Usage::

    from initgen.description import ProjectDescription

    description = ProjectDescription(build_system="gradle", language="java")
    resolved = description.resolve()
"""

from initgen.description.models import (
    BuildSystem,
    DescriptionCustomizer,
    Language,
    Packaging,
    ProjectDescription,
    ResolvedProjectDescription,
)
from initgen.description.version import Version

__all__ = [
    "BuildSystem",
    "DescriptionCustomizer",
    "Language",
    "Packaging",
    "ProjectDescription",
    "ResolvedProjectDescription",
    "Version",
]
