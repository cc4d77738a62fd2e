from __future__ import annotations

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple


def _as_path_set(entries: Any) -> frozenset[str]:
    if not entries:
        return frozenset()
    if isinstance(entries, (str, os.PathLike)):
        entries = [entries]
    return frozenset(os.fspath(e) for e in entries if e)


@dataclass(frozen=True)
class BuildModule:
    """One compiled module and the files the bundler read to build it."""

    identifier: str
    file_dependencies: frozenset[str] = frozenset()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BuildModule":
        build_info = data.get("buildInfo") or data.get("build_info") or {}
        deps = (
            data.get("fileDependencies")
            or data.get("file_dependencies")
            or (build_info.get("fileDependencies") if isinstance(build_info, Mapping) else None)
            or (build_info.get("file_dependencies") if isinstance(build_info, Mapping) else None)
        )
        identifier = data.get("identifier") or data.get("name") or data.get("id") or ""
        return cls(identifier=str(identifier), file_dependencies=_as_path_set(deps))


@dataclass(frozen=True)
class BuildReport:
    """Completed build, as reported by the host to the emit hook."""

    modules: Tuple[BuildModule, ...] = ()
    working_directory: Optional[Path] = None

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BuildReport":
        modules = tuple(
            BuildModule.from_dict(m) for m in data.get("modules") or [] if isinstance(m, Mapping)
        )
        loose = _as_path_set(data.get("fileDependencies") or data.get("file_dependencies"))
        if loose:
            modules = modules + (BuildModule(identifier="<report>", file_dependencies=loose),)
        cwd = data.get("context") or data.get("working_directory")
        return cls(modules=modules, working_directory=Path(cwd) if cwd else None)

    @classmethod
    def from_files(
        cls, files: Iterable[Any], working_directory: Optional[Path] = None
    ) -> "BuildReport":
        return cls(
            modules=(BuildModule(identifier="<files>", file_dependencies=_as_path_set(list(files))),),
            working_directory=working_directory,
        )

    def dependency_paths(self) -> List[str]:
        """All reported dependency paths, duplicates included."""
        paths: List[str] = []
        for module in self.modules:
            paths.extend(module.file_dependencies)
        return paths

    def resolve_working_directory(self) -> Path:
        return Path(os.path.abspath(self.working_directory or Path.cwd()))


@dataclass(frozen=True)
class CopyOperation:
    source: Path
    destination: Path


@dataclass(frozen=True)
class OutputPlan:
    copies: Tuple[CopyOperation, ...] = ()

    def __len__(self) -> int:
        return len(self.copies)

    def destinations(self) -> List[Path]:
        return [op.destination for op in self.copies]


class CopyOutcome(str, Enum):
    COPIED = "copied"
    ALREADY_PRESENT = "already_present"
    SOURCE_MISSING = "source_missing"


@dataclass(frozen=True)
class CopyResult:
    operation: CopyOperation
    outcome: CopyOutcome


@dataclass
class MaterializeResult:
    results: List[CopyResult] = field(default_factory=list)

    def _count(self, outcome: CopyOutcome) -> int:
        return sum(1 for r in self.results if r.outcome == outcome)

    @property
    def copied(self) -> int:
        return self._count(CopyOutcome.COPIED)

    @property
    def skipped(self) -> int:
        return len(self.results) - self.copied

    def counts(self) -> Dict[str, int]:
        counts = {outcome.value: self._count(outcome) for outcome in CopyOutcome}
        counts["total"] = len(self.results)
        return counts
