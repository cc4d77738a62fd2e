from __future__ import annotations

import asyncio
import shutil
from pathlib import Path
from typing import Iterable, List, Optional, Union

from .config import CopyModulesConfig
from .errors import FileFailure, MaterializeError
from .logging import CopyModulesLogger
from .models import CopyOperation, CopyOutcome, CopyResult, MaterializeResult, OutputPlan
from .plan import build_output_plan


def _copy_no_overwrite(source: Path, destination: Path) -> CopyOutcome:
    destination.parent.mkdir(parents=True, exist_ok=True)
    try:
        fsrc = source.open("rb")
    except FileNotFoundError:
        return CopyOutcome.SOURCE_MISSING
    with fsrc:
        try:
            # Exclusive create: an existing destination is never overwritten.
            fdst = destination.open("xb")
        except FileExistsError:
            return CopyOutcome.ALREADY_PRESENT
        try:
            with fdst:
                shutil.copyfileobj(fsrc, fdst)
        except BaseException:
            # Only a completed copy may occupy the destination.
            destination.unlink(missing_ok=True)
            raise
    try:
        shutil.copystat(source, destination)
    except FileNotFoundError:
        pass  # source removed after its bytes were copied
    return CopyOutcome.COPIED


async def _materialize_one(
    operation: CopyOperation, logger: Optional[CopyModulesLogger]
) -> CopyResult:
    outcome = await asyncio.to_thread(_copy_no_overwrite, operation.source, operation.destination)
    if logger and outcome != CopyOutcome.COPIED:
        logger.info(
            "copy_skipped",
            source=operation.source,
            destination=operation.destination,
            reason=outcome.value,
        )
    return CopyResult(operation=operation, outcome=outcome)


async def materialize(
    plan: OutputPlan,
    *,
    logger: Optional[CopyModulesLogger] = None,
) -> MaterializeResult:
    """
    Copy every planned source to its destination, concurrently.

    Missing sources and existing destinations are skipped. Any other OSError is
    collected; once every copy has settled, the failures are raised together as
    a MaterializeError. Completed copies are left in place.
    """
    settled = await asyncio.gather(
        *(_materialize_one(op, logger) for op in plan.copies),
        return_exceptions=True,
    )

    result = MaterializeResult()
    failures: List[FileFailure] = []
    for operation, outcome in zip(plan.copies, settled):
        if isinstance(outcome, CopyResult):
            result.results.append(outcome)
        elif isinstance(outcome, OSError):
            failures.append((operation.source, operation.destination, outcome))
            if logger:
                logger.error(
                    "copy_failed",
                    source=operation.source,
                    destination=operation.destination,
                    error=outcome,
                )
        else:
            raise outcome

    if failures:
        raise MaterializeError(failures)

    if logger:
        logger.info("materialize_complete", **result.counts())
    return result


async def materialize_files(
    files: Iterable[Union[str, Path]],
    manifests: Iterable[Union[str, Path]],
    config: CopyModulesConfig,
    working_directory: Optional[Path] = None,
    *,
    logger: Optional[CopyModulesLogger] = None,
) -> MaterializeResult:
    """Map files and manifests onto config.destination and copy them."""
    plan = build_output_plan(
        files,
        manifests,
        working_directory=Path(working_directory or Path.cwd()),
        destination=config.destination,
    )
    return await materialize(plan, logger=logger)
