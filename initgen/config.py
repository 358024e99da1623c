"""Generator configuration.

Typed settings for the generator.  Pydantic v2 models validate at
construction time and serialise to/from JSON or environment variables
without boiler-plate.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field, field_validator

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class GeneratorConfig(BaseModel):
    """Settings shared by every request of a ``ProjectGenerator``.

    Attributes:
        output_dir: Parent directory of generated projects.  Every request
            generates into its own fresh ``initgen-*`` directory below it, or
            below the system temporary directory when unset.
        resource_dir: Root of the resources served to contributors.  Defaults
            to the resources bundled with the package.
        manifest_path: Registration manifest.  Defaults to the bundled one.
        log_level: Level used by front ends configuring logging.
    """

    output_dir: Path | None = Field(default=None)
    resource_dir: Path | None = Field(default=None)
    manifest_path: Path | None = Field(default=None)
    log_level: str = Field(default="INFO")

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(_LOG_LEVELS)}")
        return level

    # ------------------------------------------------------------------
    # Serialisation helpers
    # ------------------------------------------------------------------

    def save(self, path: Path) -> Path:
        """Persist the configuration to a JSON file.

        Returns:
            The path where the file was written.
        """
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(self.model_dump_json(indent=2), encoding="utf-8")
        return target

    @classmethod
    def load(cls, path: Path) -> "GeneratorConfig":
        """Load a previously-saved configuration from JSON."""
        raw = Path(path).read_text(encoding="utf-8")
        return cls.model_validate_json(raw)

    @classmethod
    def from_env(cls) -> "GeneratorConfig":
        """Build a ``GeneratorConfig`` from environment variables.

        Recognised variables (all optional):
            INITGEN_OUTPUT_DIR, INITGEN_RESOURCE_DIR, INITGEN_MANIFEST,
            INITGEN_LOG_LEVEL.
        """
        kwargs: dict[str, Any] = {}
        if os.environ.get("INITGEN_OUTPUT_DIR"):
            kwargs["output_dir"] = Path(os.environ["INITGEN_OUTPUT_DIR"])
        if os.environ.get("INITGEN_RESOURCE_DIR"):
            kwargs["resource_dir"] = Path(os.environ["INITGEN_RESOURCE_DIR"])
        if os.environ.get("INITGEN_MANIFEST"):
            kwargs["manifest_path"] = Path(os.environ["INITGEN_MANIFEST"])
        if os.environ.get("INITGEN_LOG_LEVEL"):
            kwargs["log_level"] = os.environ["INITGEN_LOG_LEVEL"]
        return cls(**kwargs)
