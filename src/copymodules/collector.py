from __future__ import annotations

import asyncio
import os
from pathlib import Path
from typing import Optional, Set

from .logging import CopyModulesLogger
from .models import BuildReport


def _is_regular_file(path: Path) -> bool:
    # isfile() answers False for directories and for paths that vanished
    # after the build reported them.
    return os.path.isfile(path)


async def collect_dependency_files(
    report: BuildReport,
    logger: Optional[CopyModulesLogger] = None,
) -> Set[Path]:
    """Return the de-duplicated set of regular files the build consumed."""
    cwd = report.resolve_working_directory()
    candidates = sorted({Path(os.path.abspath(cwd / p)) for p in report.dependency_paths()})

    checks = await asyncio.gather(*(asyncio.to_thread(_is_regular_file, p) for p in candidates))
    files = {path for path, is_file in zip(candidates, checks) if is_file}

    if logger:
        logger.info(
            "dependencies_collected",
            reported=len(candidates),
            files=len(files),
            excluded=len(candidates) - len(files),
        )
    return files
