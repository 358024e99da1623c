"""Zip archive result processor.

Usage::

    result = ProjectGenerator().generate(description, archive_project)
    Path("demo.zip").write_bytes(result.value)
"""

from __future__ import annotations

import io
import shutil
import zipfile
from pathlib import Path

from .context import GenerationContext
from .generator import contribute_project


def archive_project(context: GenerationContext) -> bytes:
    """Write the project, then return it as an in-memory zip archive.

    The request's project directory is removed once it has been zipped.
    """
    project_root = contribute_project(context)
    try:
        return zip_directory(project_root)
    finally:
        shutil.rmtree(project_root, ignore_errors=True)


def zip_directory(root: Path) -> bytes:
    """Zip every file below *root*, keeping relative paths and file modes.

    Entries are sorted so the same tree always yields the same entry order.
    """
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        for path in sorted(p for p in root.rglob("*") if p.is_file()):
            info = zipfile.ZipInfo.from_file(path, arcname=path.relative_to(root).as_posix())
            info.compress_type = zipfile.ZIP_DEFLATED
            archive.writestr(info, path.read_bytes())
    return buffer.getvalue()
