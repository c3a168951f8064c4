from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

from .config import Configuration, load_config
from .content import parse, slug_from_path
from .helpers import HELPERS
from .query import CONTENT_PATTERNS, evaluate_all
from .render import Renderer
from .scanner import IGNORE_PATTERNS, scan
from .templates import compose
from .writer import OUTPUT_DIR_NAME, clean_output_dir, copy_asset, write

logger = logging.getLogger(__name__)

PAGE_PATTERNS = [
    IGNORE_PATTERNS["dot_files"],
    IGNORE_PATTERNS["non_template_files"],
    IGNORE_PATTERNS["template_dirs"],
]
ASSET_PATTERNS = [
    IGNORE_PATTERNS["dot_files"],
    IGNORE_PATTERNS["markdown_files"],
    IGNORE_PATTERNS["template_files"],
    IGNORE_PATTERNS["config_files"],
]


@dataclass(frozen=True)
class BuildContext:
    base_dir: Path
    config: Configuration
    output_dir: Path
    workers: int = 1


def create_context(base_dir: Path, workers: int = 1) -> BuildContext:
    base_dir = Path(base_dir)
    return BuildContext(
        base_dir=base_dir,
        config=load_config(base_dir),
        output_dir=base_dir / OUTPUT_DIR_NAME,
        workers=workers,
    )


def global_data(context: BuildContext) -> dict:
    data = dict(context.config.static)
    dynamic = evaluate_all(context.base_dir, context.config.dynamic, workers=context.workers)
    for name, result in dynamic.items():
        data[name] = result.to_data()
    return data


def build_site(context: BuildContext, clean: bool = False) -> list[Path]:
    """Run one full build and return the paths of every file written."""
    if clean:
        clean_output_dir(context.output_dir, context.base_dir)

    shared = global_data(context)
    items = parse(scan(context.base_dir, CONTENT_PATTERNS), workers=context.workers)
    page_files = scan(context.base_dir, PAGE_PATTERNS)
    templates = compose(context.base_dir, items, page_files, workers=context.workers)
    renderer = Renderer(HELPERS, templates.partials)

    written: list[Path] = []
    for item in items:
        layout = templates.layout_for(item)
        data = {**item.to_data(), **shared, f"is_{item.slug}": True}
        path = write(context.output_dir, item.relative_path, renderer.render(layout, data))
        if path is not None:
            written.append(path)

    for page in templates.pages:
        rel = page.relative_path or page.name
        data = {**shared, f"is_{slug_from_path(rel)}": True}
        path = write(context.output_dir, rel, renderer.render(page, data))
        if path is not None:
            written.append(path)

    for asset in scan(context.base_dir, ASSET_PATTERNS):
        written.append(copy_asset(context.output_dir, asset))

    logger.info("Built %d content items and %d pages", len(items), len(templates.pages))
    return written


def run(base_dir: Path, workers: int = 1, clean: bool = False) -> list[Path]:
    return build_site(create_context(base_dir, workers=workers), clean=clean)
