"""Build models, customizers and build-system specific components."""

from initgen.build.customizers import BuildCustomizer, apply_customizers
from initgen.build.model import (
    Build,
    Dependency,
    GradleBuild,
    GradleBuildscript,
    MavenBuild,
    MavenParent,
    Plugin,
    new_build_model,
)

__all__ = [
    "Build",
    "BuildCustomizer",
    "Dependency",
    "GradleBuild",
    "GradleBuildscript",
    "MavenBuild",
    "MavenParent",
    "Plugin",
    "apply_customizers",
    "new_build_model",
]
