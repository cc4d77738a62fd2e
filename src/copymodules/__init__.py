"""Mirror the files a build consumed into a separate tree for static analysis."""

from .config import CopyModulesConfig, load_config
from .errors import ConfigError, CopyModulesError, MaterializeError
from .hooks import BuildHooks
from .manifests import SearchCache, locate_manifests
from .collector import collect_dependency_files
from .materializer import materialize, materialize_files
from .models import (
    BuildModule,
    BuildReport,
    CopyOperation,
    CopyOutcome,
    CopyResult,
    MaterializeResult,
    OutputPlan,
)
from .paths import map_to_destination, rewrite_parent_segments
from .plan import build_output_plan, compute_output_plan
from .plugin import CopyModulesPlugin

__all__ = [
    "CopyModulesConfig",
    "load_config",
    "ConfigError",
    "CopyModulesError",
    "MaterializeError",
    "BuildHooks",
    "SearchCache",
    "locate_manifests",
    "collect_dependency_files",
    "materialize",
    "materialize_files",
    "BuildModule",
    "BuildReport",
    "CopyOperation",
    "CopyOutcome",
    "CopyResult",
    "MaterializeResult",
    "OutputPlan",
    "map_to_destination",
    "rewrite_parent_segments",
    "build_output_plan",
    "compute_output_plan",
    "CopyModulesPlugin",
]
