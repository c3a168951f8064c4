from __future__ import annotations

import datetime as dt
import html as html_lib
import math
import os
import re
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Union

import markdown

from .scanner import ScannedFile
from .utils import resolve_workers

MetaValue = Union[str, bool, dt.date]

WORDS_PER_MINUTE = 225
MARKDOWN_EXTENSIONS = ["fenced_code", "tables", "toc", "codehilite"]
MARKDOWN_EXTENSION_CONFIGS = {"codehilite": {"guess_lang": False}}

ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
TAG_RE = re.compile(r"<[^>]+>")
LIST_MARKER_RE = re.compile(r"^(?P<indent>[ \t]*)(?:[-+*]|\d+[.)])\s+")
FENCE_RE = re.compile(r"^(?P<indent>[ \t]*)(`{3,}|~{3,})")
DOUBLE_QUOTE_RE = re.compile(r"^(?P<indent>[ \t]*)>>(?!>)(?P<rest>.*)$")
CJK_RE = re.compile(r"[\u3040-\u30ff\u3400-\u4dbf\u4e00-\u9fff\uac00-\ud7af]")
WORD_RE = re.compile(r"[A-Za-z0-9]+(?:'[A-Za-z0-9]+)?")


@dataclass(frozen=True)
class ContentItem:
    path: Path
    relative_path: str
    modified_at: dt.datetime
    entry: str
    slug: str
    time_to_read: str
    meta: dict[str, MetaValue] = field(default_factory=dict)

    def get(self, key: str) -> object:
        return self.to_data().get(key)

    def to_data(self) -> dict:
        data = {
            "path": self.path.as_posix(),
            "relative_path": self.relative_path,
            "modified_at": self.modified_at,
            "entry": self.entry,
            "slug": self.slug,
            "time_to_read": self.time_to_read,
        }
        data.update(self.meta)
        return data


def slug_from_path(relative_path: str) -> str:
    stem, _ = os.path.splitext(relative_path.strip("/"))
    return stem.replace("/", "_")


def parse_meta_value(value: str) -> MetaValue:
    if value == "true":
        return True
    if value == "false":
        return False
    if ISO_DATE_RE.match(value):
        try:
            return dt.date.fromisoformat(value)
        except ValueError:
            return value
    return value


def parse_front_matter(text: str) -> tuple[dict[str, MetaValue], str]:
    clean_text = text.lstrip("\ufeff")
    lines = clean_text.splitlines()
    if not lines or lines[0].strip() != "---":
        return {}, clean_text

    end = None
    for i in range(1, len(lines)):
        if lines[i].strip() == "---":
            end = i
            break
    if end is None:
        return {}, clean_text

    meta: dict[str, MetaValue] = {}
    for line in lines[1:end]:
        line = line.strip()
        if not line or line.startswith("#") or ":" not in line:
            continue
        key, value = line.split(":", 1)
        meta[key.strip()] = parse_meta_value(value.strip())
    body = "\n".join(lines[end + 1 :])
    return meta, body


def normalize_list_spacing(text: str) -> str:
    lines = text.splitlines()
    out: list[str] = []
    in_fence = False
    fence_marker = ""
    for line in lines:
        fence_match = FENCE_RE.match(line)
        if fence_match:
            marker = fence_match.group(2)
            if not in_fence:
                in_fence = True
                fence_marker = marker
            elif marker == fence_marker:
                in_fence = False
                fence_marker = ""
            out.append(line)
            continue
        if in_fence:
            out.append(line)
            continue
        quote_match = DOUBLE_QUOTE_RE.match(line)
        if quote_match:
            rest = quote_match.group("rest").lstrip()
            if rest:
                line = f'{quote_match.group("indent")}> {rest}'
            else:
                line = f'{quote_match.group("indent")}>'
        list_match = LIST_MARKER_RE.match(line)
        if list_match:
            if not list_match.group("indent"):
                if out and out[-1].strip() and not LIST_MARKER_RE.match(out[-1]):
                    out.append("")
        out.append(line)
    return "\n".join(out)


def render_markdown(body: str) -> str:
    md = markdown.Markdown(
        extensions=MARKDOWN_EXTENSIONS,
        extension_configs=MARKDOWN_EXTENSION_CONFIGS,
    )
    return md.convert(normalize_list_spacing(body))


def strip_tags(html_text: str) -> str:
    return TAG_RE.sub("", html_text)


def count_words(text: str) -> int:
    text = html_lib.unescape(text)
    cjk_count = len(CJK_RE.findall(text))
    text = CJK_RE.sub(" ", text)
    word_count = len(WORD_RE.findall(text))
    return cjk_count + word_count


def time_to_read(entry: str) -> str:
    return str(math.ceil(count_words(strip_tags(entry)) / WORDS_PER_MINUTE))


def parse_file(file: ScannedFile) -> ContentItem:
    raw_text = file.path.read_text(encoding="utf-8")
    meta, body = parse_front_matter(raw_text)
    entry = render_markdown(body)
    return ContentItem(
        path=file.path,
        relative_path=file.relative_path,
        modified_at=file.modified_at,
        entry=entry,
        slug=slug_from_path(file.relative_path),
        time_to_read=time_to_read(entry),
        meta=meta,
    )


def parse(files: Iterable[ScannedFile], workers: int = 1) -> list[ContentItem]:
    files = list(files)
    parse_workers = min(resolve_workers(workers), len(files)) if files else 1
    if parse_workers > 1:
        with ThreadPoolExecutor(max_workers=parse_workers) as executor:
            return list(executor.map(parse_file, files))
    return [parse_file(file) for file in files]
