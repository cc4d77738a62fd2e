from __future__ import annotations

from pathlib import Path
from typing import List, Tuple

FileFailure = Tuple[Path, Path, BaseException]


class CopyModulesError(Exception):
    """Base exception for all copy-modules errors."""


class ConfigError(CopyModulesError):
    """Configuration validation failed."""


class MaterializeError(CopyModulesError):
    """One or more files could not be copied into the destination tree."""

    def __init__(self, failures: List[FileFailure]):
        self.failures = list(failures)
        lines = [f"{len(self.failures)} file(s) failed to materialize"]
        for source, destination, exc in self.failures:
            lines.append(f"  {source} -> {destination}: {exc}")
        super().__init__("\n".join(lines))
