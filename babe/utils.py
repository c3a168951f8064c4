from __future__ import annotations

import os
from pathlib import Path

BASE_DIR_ENV = "BABE_DIR"


def parse_int(value: object, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        return default


def resolve_workers(workers: int) -> int:
    if workers <= 0:
        workers = os.cpu_count() or 1
    return max(1, min(workers, 32))


def resolve_base_dir(value: str | None = None) -> Path:
    value = (value or os.environ.get(BASE_DIR_ENV) or "").strip()
    if not value:
        return Path.cwd()
    return Path(value).expanduser().resolve()
