"""Contributors write the generated project to disk."""

from initgen.contributors.base import (
    MultipleResourcesProjectContributor,
    ProjectContributor,
    ProjectContributors,
    SingleResourceProjectContributor,
    TemplatedProjectContributor,
    append_to_file,
)
from initgen.contributors.scm import GitIgnoreContributor, scm_components
from initgen.contributors.source import ApplicationPropertiesContributor, SourceLayout, source_components

__all__ = [
    "ApplicationPropertiesContributor",
    "GitIgnoreContributor",
    "MultipleResourcesProjectContributor",
    "ProjectContributor",
    "ProjectContributors",
    "SingleResourceProjectContributor",
    "SourceLayout",
    "TemplatedProjectContributor",
    "append_to_file",
    "scm_components",
    "source_components",
]
