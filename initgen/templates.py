"""Jinja2 template rendering for build descriptors.

Provides the TemplateRenderer class which loads Jinja2 templates through a
``ResourceResolver`` (under the ``templates/`` prefix) and renders them with a
context dictionary built from the build model and the resolved description.
Missing templates surface as ``ResourceUnavailable``, the same failure a
contributor sees for any other missing resource.

Output of ``*.xml.j2`` templates is HTML/XML-escaped by Jinja2; other
templates render values verbatim.
"""

from __future__ import annotations

from typing import Any

from jinja2 import Environment, FunctionLoader, StrictUndefined, select_autoescape

from .resources import ResourceResolver

TEMPLATE_PREFIX = "templates"


# ---------------------------------------------------------------------------
# TemplateRenderer
# ---------------------------------------------------------------------------


class TemplateRenderer:
    """Renders Jinja2 templates resolved through a ``ResourceResolver``.

    Template names are relative to the ``templates/`` resource prefix, e.g.
    ``"gradle/build.gradle.j2"``.
    """

    def __init__(self, resolver: ResourceResolver) -> None:
        self.resolver = resolver
        self.env = Environment(
            loader=FunctionLoader(self._load),
            autoescape=select_autoescape(["xml.j2"], default_for_string=False),
            keep_trailing_newline=True,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )
        # Register custom filters
        self.env.filters["quote"] = _quote_filter

    def _load(self, name: str) -> str:
        return self.resolver.resolve_text(type(self).__name__, f"{TEMPLATE_PREFIX}/{name}")

    # -- Rendering ---------------------------------------------------------

    def render(self, template_path: str, context: dict[str, Any]) -> str:
        """Render a single template with the provided context.

        Args:
            template_path: Path relative to the ``templates/`` prefix.
            context: Dictionary of variables available inside the template.

        Returns:
            The rendered template content as a string.

        Raises:
            ResourceUnavailable: If the template cannot be resolved.
        """
        template = self.env.get_template(template_path)
        return template.render(**context)


# ---------------------------------------------------------------------------
# Jinja2 custom filters
# ---------------------------------------------------------------------------


def _quote_filter(value: Any) -> str:
    """Render *value* as a single-quoted Groovy string literal."""
    text = str(value).replace("\\", "\\\\").replace("'", "\\'")
    return f"'{text}'"
