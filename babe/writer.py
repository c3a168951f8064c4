from __future__ import annotations

import logging
import shutil
from pathlib import Path

from .errors import OutputDirError
from .scanner import ScannedFile

logger = logging.getLogger(__name__)

OUTPUT_DIR_NAME = "public"
MARKDOWN_SUFFIX = ".md"
TEMPLATE_SUFFIX = ".hbs"


def output_path(output_dir: Path, relative_path: str) -> Path | None:
    rel = relative_path.strip("/")
    if rel.endswith(MARKDOWN_SUFFIX):
        return output_dir / rel[: -len(MARKDOWN_SUFFIX)] / "index.html"
    if rel.endswith(TEMPLATE_SUFFIX):
        return output_dir / rel[: -len(TEMPLATE_SUFFIX)]
    return None


def write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def write(output_dir: Path, relative_path: str, html_text: str) -> Path | None:
    path = output_path(output_dir, relative_path)
    if path is None:
        return None
    logger.info("Writing: %s", path)
    write_text(path, html_text)
    return path


def copy_asset(output_dir: Path, file: ScannedFile) -> Path:
    dest = output_dir / file.relative_path.strip("/")
    dest.parent.mkdir(parents=True, exist_ok=True)
    logger.debug("Copying: %s -> %s", file.path, dest)
    shutil.copy2(file.path, dest)
    return dest


def clean_output_dir(output_dir: Path, project_root: Path) -> None:
    if not output_dir.exists():
        return
    output_resolved = output_dir.resolve()
    root_resolved = project_root.resolve()
    if output_resolved == root_resolved:
        raise OutputDirError("Refusing to clean project root.")
    if not output_resolved.is_relative_to(root_resolved):
        raise OutputDirError("Refusing to clean output directory outside project root.")
    shutil.rmtree(output_dir)
