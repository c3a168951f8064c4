from __future__ import annotations

import logging
import time
from pathlib import Path
from typing import Callable

from .scanner import IGNORE_PATTERNS, ScannedFile, scan

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.25


def snapshot(base_dir: Path) -> list[ScannedFile]:
    return scan(base_dir, [IGNORE_PATTERNS["dot_files"]])


class Watcher:
    """Re-runs ``rebuild`` whenever the source tree listing changes.

    Polling compares full snapshots, so any added, removed or modified file
    triggers a rebuild. A change seen while a rebuild is still running is
    left for the next tick instead of starting a second rebuild. ``poll``
    itself runs ``rebuild`` synchronously; the ``building`` flag guards
    callers that poll re-entrantly or from another thread.
    """

    def __init__(self, base_dir: Path, rebuild: Callable[[], object], interval: float = POLL_INTERVAL):
        self.base_dir = Path(base_dir)
        self.rebuild = rebuild
        self.interval = interval
        self.building = False
        self.previous = snapshot(self.base_dir)

    def poll(self) -> bool:
        current = snapshot(self.base_dir)
        if current == self.previous or self.building:
            return False
        self.building = True
        try:
            self.rebuild()
        except Exception:
            logger.exception("Rebuild failed; still watching %s", self.base_dir)
        finally:
            self.building = False
            self.previous = current
        return True

    def run(self, max_polls: int | None = None, sleep: Callable[[float], None] = time.sleep) -> None:
        logger.info("Watching %s ...", self.base_dir)
        polls = 0
        while max_polls is None or polls < max_polls:
            sleep(self.interval)
            if self.poll():
                logger.info("Watching %s ...", self.base_dir)
            polls += 1
