from __future__ import annotations

from pathlib import Path
from typing import Any, Optional, Protocol, Union

from .config import CopyModulesConfig, load_config
from .constants import EMIT_PHASE, PLUGIN_NAME
from .logging import CopyModulesLogger
from .materializer import materialize
from .models import BuildReport, MaterializeResult
from .plan import compute_output_plan


class HookHost(Protocol):
    def tap(self, phase: str, name: str, callback: Any) -> None: ...


class CopyModulesPlugin:
    """
    Mirror the raw source of every file a build consumed into a separate tree.

    Downstream tools can then analyze just the code that ships. Files keep their
    location relative to the build's working directory; ".." segments become
    "__..__" so files from outside the working directory stay under the
    destination. With include_manifests, the nearest package manifest of each
    file is copied as well.
    """

    def __init__(
        self,
        config: Optional[CopyModulesConfig] = None,
        *,
        destination: Optional[Union[str, Path]] = None,
        include_manifests: Optional[bool] = None,
        manifest_name: Optional[str] = None,
        logger: Optional[CopyModulesLogger] = None,
    ):
        self.config = config or load_config(
            destination=destination,
            include_manifests=include_manifests,
            manifest_name=manifest_name,
        )
        self.logger = logger or CopyModulesLogger()

    @property
    def destination(self) -> Path:
        return self.config.destination

    def apply(self, hooks: HookHost) -> None:
        hooks.tap(EMIT_PHASE, PLUGIN_NAME, self.handle_emit)

    async def handle_emit(self, report: Union[BuildReport, dict]) -> MaterializeResult:
        if not isinstance(report, BuildReport):
            report = BuildReport.from_dict(report)

        self.logger.info(
            "copy_modules_starting",
            destination=self.destination,
            include_manifests=self.config.include_manifests,
            modules=len(report.modules),
        )
        with self.logger.stage("plan"):
            plan = await compute_output_plan(report, self.config, logger=self.logger)
        with self.logger.stage("materialize"):
            return await materialize(plan, logger=self.logger)
