"""Layout and partial discovery.

Layouts live in ``_layouts/<name>.hbs`` and partials in
``_partials/<name>.hbs`` under the site's base directory. Only the layouts
referenced by content items (plus ``default``) are loaded, and only the
partials reachable from those layouts and from the freestanding templates
are read. Each partial file is read at most once per composition, no matter
how many templates reference it or whether the references form a cycle.
"""

from __future__ import annotations

import logging
import re
from collections import deque
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from .content import ContentItem
from .errors import LayoutNotFoundError, PartialNotFoundError
from .scanner import ScannedFile
from .utils import resolve_workers

logger = logging.getLogger(__name__)

LAYOUTS_DIR = "_layouts"
PARTIALS_DIR = "_partials"
TEMPLATE_SUFFIX = ".hbs"
DEFAULT_LAYOUT = "default"
PARTIAL_RE = re.compile(r"\{\{~?>\s*([^\s}~]+)")
COMMENT_RE = re.compile(r"\{\{~?!--.*?--~?\}\}|\{\{~?![^}]*\}\}", re.DOTALL)


@dataclass(frozen=True)
class TemplateLayout:
    name: str
    contents: str
    relative_path: str | None = None


@dataclass(frozen=True)
class TemplatePartial:
    name: str
    contents: str


@dataclass
class ComposedTemplates:
    layouts: dict[str, TemplateLayout] = field(default_factory=dict)
    partials: dict[str, TemplatePartial] = field(default_factory=dict)
    pages: list[TemplateLayout] = field(default_factory=list)

    def layout_for(self, item: ContentItem) -> TemplateLayout:
        name = layout_name(item)
        layout = self.layouts.get(name)
        if layout is None:
            raise LayoutNotFoundError(name, item.relative_path)
        return layout


def read_template(path: Path) -> str:
    return path.read_text(encoding="utf-8")


def layout_name(item: ContentItem) -> str:
    value = item.meta.get("layout")
    if value is None or value == "":
        return DEFAULT_LAYOUT
    return str(value).strip()


def find_partial_names(text: str) -> list[str]:
    names: list[str] = []
    for match in PARTIAL_RE.finditer(COMMENT_RE.sub("", text)):
        name = match.group(1).strip()
        if name and name not in names:
            names.append(name)
    return names


def template_path(base_dir: Path, directory: str, name: str) -> Path:
    return base_dir / directory / f"{name}{TEMPLATE_SUFFIX}"


def load_layouts(base_dir: Path, items: Iterable[ContentItem], workers: int = 1) -> dict[str, TemplateLayout]:
    requested: dict[str, str] = {}
    for item in items:
        requested.setdefault(layout_name(item), item.relative_path)
    requested.setdefault(DEFAULT_LAYOUT, "")

    def load(entry: tuple[str, str]) -> TemplateLayout | None:
        name, source = entry
        path = template_path(base_dir, LAYOUTS_DIR, name)
        if not path.is_file():
            if source:
                raise LayoutNotFoundError(name, source)
            return None
        return TemplateLayout(name=name, contents=read_template(path))

    entries = list(requested.items())
    layout_workers = min(resolve_workers(workers), len(entries))
    if layout_workers > 1:
        with ThreadPoolExecutor(max_workers=layout_workers) as executor:
            loaded = list(executor.map(load, entries))
    else:
        loaded = [load(entry) for entry in entries]
    return {layout.name: layout for layout in loaded if layout is not None}


def load_pages(files: Iterable[ScannedFile]) -> list[TemplateLayout]:
    pages = []
    for file in files:
        name = file.relative_path.strip("/")
        if name.endswith(TEMPLATE_SUFFIX):
            name = name[: -len(TEMPLATE_SUFFIX)]
        pages.append(TemplateLayout(name=name, contents=read_template(file.path), relative_path=file.relative_path))
    return pages


def discover_partials(base_dir: Path, templates: Iterable[TemplateLayout]) -> dict[str, TemplatePartial]:
    """Resolve every partial reachable from ``templates``.

    Names are marked as seen when they are queued, before their files are
    read, so self references and reference cycles end the walk instead of
    re-queuing the same partial.
    """
    seen: set[str] = set()
    queue: deque[tuple[str, str]] = deque()
    for template in templates:
        for name in find_partial_names(template.contents):
            if name not in seen:
                seen.add(name)
                queue.append((name, template.relative_path or template.name))

    partials: dict[str, TemplatePartial] = {}
    while queue:
        name, referenced_by = queue.popleft()
        path = template_path(base_dir, PARTIALS_DIR, name)
        if not path.is_file():
            raise PartialNotFoundError(name, referenced_by)
        logger.debug("Reading partial: %s", path)
        partial = TemplatePartial(name=name, contents=read_template(path))
        partials[name] = partial
        for nested in find_partial_names(partial.contents):
            if nested not in seen:
                seen.add(nested)
                queue.append((nested, f"{PARTIALS_DIR}/{name}{TEMPLATE_SUFFIX}"))
    return partials


def compose(
    base_dir: Path,
    items: Iterable[ContentItem],
    template_files: Iterable[ScannedFile],
    workers: int = 1,
) -> ComposedTemplates:
    layouts = load_layouts(base_dir, items, workers=workers)
    pages = load_pages(template_files)
    partials = discover_partials(base_dir, [*pages, *layouts.values()])
    logger.debug("Composed %d layouts, %d partials, %d pages", len(layouts), len(partials), len(pages))
    return ComposedTemplates(layouts=layouts, partials=partials, pages=pages)
