from __future__ import annotations

from pathlib import Path


class BabeError(Exception):
    pass


class ConfigError(BabeError):
    def __init__(self, path: Path, reason: str):
        super().__init__(f"Invalid config file {path}: {reason}")
        self.path = path
        self.reason = reason


class LayoutNotFoundError(BabeError):
    def __init__(self, name: str, source: str):
        super().__init__(f"Layout '{name}' requested by {source} does not exist")
        self.name = name
        self.source = source


class PartialNotFoundError(BabeError):
    def __init__(self, name: str, referenced_by: str):
        super().__init__(f"Partial '{name}' referenced by {referenced_by} does not exist")
        self.name = name
        self.referenced_by = referenced_by


class OutputDirError(BabeError):
    pass
