"""Dynamic content collections.

A collection is described by a ``DynamicConfigurationItem``: the items
under ``from`` are scanned and parsed, stably sorted by ``sortBy``, cut to
``limit`` and finally split into groups by ``groupBy``. The result is either
a ``FlatResult`` or a ``GroupedResult`` depending on whether grouping was
requested.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Mapping, Union

from .config import DynamicConfigurationItem
from .content import ContentItem, parse
from .scanner import IGNORE_PATTERNS, scan

CONTENT_PATTERNS = [IGNORE_PATTERNS["dot_files"], IGNORE_PATTERNS["non_markdown_files"]]
DATE_SEGMENTS = {"year": 0, "month": 1, "day": 2}


@dataclass(frozen=True)
class ContentGroup:
    group: str
    items: list[ContentItem]

    def to_data(self) -> dict:
        return {"group": self.group, "items": [item.to_data() for item in self.items]}


@dataclass(frozen=True)
class FlatResult:
    items: list[ContentItem]

    def to_data(self) -> list[dict]:
        return [item.to_data() for item in self.items]


@dataclass(frozen=True)
class GroupedResult:
    groups: list[ContentGroup]

    def to_data(self) -> list[dict]:
        return [group.to_data() for group in self.groups]


QueryResult = Union[FlatResult, GroupedResult]


def field_text(item: ContentItem, key: str) -> str:
    value = item.get(key)
    return "" if value is None else str(value)


def sort_items(items: list[ContentItem], key: str, descending: bool = False) -> list[ContentItem]:
    return sorted(items, key=lambda item: field_text(item, key), reverse=descending)


def group_items(items: list[ContentItem], key_fn: Callable[[ContentItem], str]) -> list[ContentGroup]:
    grouped: dict[str, list[ContentItem]] = {}
    for item in items:
        grouped.setdefault(key_fn(item), []).append(item)
    return [ContentGroup(group=key, items=values) for key, values in grouped.items()]


def grouping_key(group_by: str) -> Callable[[ContentItem], str]:
    grouper, _, modifier = group_by.partition("|")
    grouper = grouper.strip()
    modifier = modifier.strip()
    if grouper == "date" and modifier in DATE_SEGMENTS:
        index = DATE_SEGMENTS[modifier]

        def date_segment(item: ContentItem) -> str:
            segments = field_text(item, "date").split("-")
            return segments[index].strip() if index < len(segments) else ""

        return date_segment
    return lambda item: field_text(item, grouper)


def evaluate(
    base_dir: Path,
    config: DynamicConfigurationItem | None = None,
    workers: int = 1,
) -> QueryResult:
    scan_root = base_dir / config.source if config and config.source else base_dir
    items = parse(scan(scan_root, CONTENT_PATTERNS), workers=workers)
    if config is None:
        return FlatResult(items)

    if config.sort_by:
        items = sort_items(items, config.sort_by, config.descending)
    if config.limit:
        items = items[: config.limit]
    if config.group_by:
        return GroupedResult(group_items(items, grouping_key(config.group_by)))
    return FlatResult(items)


def evaluate_all(
    base_dir: Path,
    config: Mapping[str, DynamicConfigurationItem],
    workers: int = 1,
) -> dict[str, QueryResult]:
    return {name: evaluate(base_dir, item, workers=workers) for name, item in config.items()}
