from __future__ import annotations

import os
from itertools import chain
from pathlib import Path
from typing import Iterable, Optional, Set, Union

from .collector import collect_dependency_files
from .config import CopyModulesConfig
from .logging import CopyModulesLogger
from .manifests import locate_manifests
from .models import BuildReport, CopyOperation, OutputPlan
from .paths import map_to_destination


def build_output_plan(
    files: Iterable[Union[str, Path]],
    manifests: Iterable[Union[str, Path]],
    working_directory: Path,
    destination: Path,
) -> OutputPlan:
    """Map every unique source onto its destination. Pure; no filesystem access.

    Sources are normalized to absolute paths (relative ones against
    working_directory) before de-duplication, so one file never yields two copies.
    """
    cwd = Path(os.path.abspath(working_directory))
    sources = sorted({Path(os.path.abspath(cwd / s)) for s in chain(files, manifests)})
    copies = tuple(
        CopyOperation(source=s, destination=map_to_destination(s, cwd, destination))
        for s in sources
    )
    return OutputPlan(copies=copies)


async def compute_output_plan(
    report: BuildReport,
    config: CopyModulesConfig,
    logger: Optional[CopyModulesLogger] = None,
) -> OutputPlan:
    """Collect dependency files, optionally add their manifests, and plan the copies."""
    files = await collect_dependency_files(report, logger=logger)

    manifests: Set[Path] = set()
    if config.include_manifests:
        manifests, cache = await locate_manifests(files, manifest_name=config.manifest_name)
        if logger:
            logger.info(
                "manifests_located",
                manifests=len(manifests),
                directories_searched=len(cache.searched),
                probes=cache.probes,
            )

    return build_output_plan(
        files,
        manifests,
        working_directory=report.resolve_working_directory(),
        destination=config.destination,
    )
