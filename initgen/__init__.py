"""initgen -- generates buildable project skeletons from declarative descriptions.

Components (contributors writing files, customizers mutating the build model)
are activated per request by conditions over the resolved description, then
run in a deterministic order.

Quick usage::

    from initgen import ProjectDescription, ProjectGenerator

    description = ProjectDescription(
        build_system="gradle",
        language="java",
        platform_version="2.0.0.M1",
        packaging="war",
        artifact_id="demo",
    )
    result = ProjectGenerator().generate(description)
"""

from initgen.build import Build, BuildCustomizer, GradleBuild, MavenBuild
from initgen.conditions import OnBuildSystem, OnLanguage, OnPackaging, OnPlatformVersion
from initgen.config import GeneratorConfig
from initgen.context import ComponentDefinition, GenerationContext, Many
from initgen.contributors import ProjectContributor
from initgen.description import DescriptionCustomizer, ProjectDescription, ResolvedProjectDescription
from initgen.errors import (
    ConfigurationError,
    ProjectGenerationError,
    ProjectIOError,
    ResourceUnavailable,
)
from initgen.generator import ProjectGenerationResult, ProjectGenerator
from initgen.ordering import DEFAULT_ORDER, HIGHEST_PRECEDENCE

__all__ = [
    "Build",
    "BuildCustomizer",
    "ComponentDefinition",
    "ConfigurationError",
    "DEFAULT_ORDER",
    "DescriptionCustomizer",
    "GenerationContext",
    "GeneratorConfig",
    "GradleBuild",
    "HIGHEST_PRECEDENCE",
    "Many",
    "MavenBuild",
    "OnBuildSystem",
    "OnLanguage",
    "OnPackaging",
    "OnPlatformVersion",
    "ProjectContributor",
    "ProjectDescription",
    "ProjectGenerationError",
    "ProjectGenerationResult",
    "ProjectGenerator",
    "ProjectIOError",
    "ResolvedProjectDescription",
    "ResourceUnavailable",
]
