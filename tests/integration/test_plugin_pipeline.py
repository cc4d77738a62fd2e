"""Integration tests for the emit-hook pipeline."""

from __future__ import annotations

import json
import os
import shutil
from pathlib import Path

import pytest

from copymodules import BuildHooks, BuildReport, CopyModulesPlugin, MaterializeError
from copymodules.errors import ConfigError
from copymodules.logging import CopyModulesLogger


def _tree(root: Path) -> set[str]:
    return {
        Path(dirpath, name).relative_to(root).as_posix()
        for dirpath, _, names in os.walk(root)
        for name in names
    }


def _report(project: Path) -> dict:
    """Stats-style report as a bundler would hand it to the emit hook."""
    return {
        "context": str(project),
        "modules": [
            {
                "identifier": "./src/b.js",
                "buildInfo": {
                    "fileDependencies": [
                        str(project / "src" / "b.js"),
                        str(project / "src"),
                    ]
                },
            },
            {
                "identifier": "./src/subfolder/a.js",
                "fileDependencies": [str(project / "src" / "subfolder" / "a.js")],
            },
            {
                "identifier": "foo-pkg",
                "fileDependencies": [
                    str(project / "node_modules" / "foo-pkg" / "foo.js"),
                    str(project / "src" / "b.js"),
                ],
            },
            {
                "identifier": "bar-pkg",
                "fileDependencies": [str(project / "node_modules" / "bar-pkg" / "lib" / "bar.js")],
            },
            {
                "identifier": "outside-cwd-pkg",
                "fileDependencies": [
                    str(project.parent / "node_modules" / "outside-cwd-pkg" / "outside-cwd.js")
                ],
            },
        ],
    }


JS_FILES = {
    "src/b.js",
    "src/subfolder/a.js",
    "node_modules/foo-pkg/foo.js",
    "node_modules/bar-pkg/lib/bar.js",
    "__..__/node_modules/outside-cwd-pkg/outside-cwd.js",
}

MANIFESTS = {
    "package.json",
    "node_modules/foo-pkg/package.json",
    "node_modules/bar-pkg/package.json",
    "__..__/node_modules/outside-cwd-pkg/package.json",
}


@pytest.mark.anyio
async def test_copies_referenced_files(project: Path, tmp_path: Path) -> None:
    out = tmp_path / "copied_modules"
    plugin = CopyModulesPlugin(destination=out)

    result = await plugin.handle_emit(_report(project))

    assert _tree(out) == JS_FILES
    assert result.copied == len(JS_FILES)
    assert (out / "src" / "b.js").read_text() == (project / "src" / "b.js").read_text()


@pytest.mark.anyio
async def test_copies_manifests_when_enabled(project: Path, tmp_path: Path) -> None:
    out = tmp_path / "copied_modules"
    plugin = CopyModulesPlugin(destination=out, include_manifests=True)

    await plugin.handle_emit(_report(project))

    assert _tree(out) == JS_FILES | MANIFESTS


@pytest.mark.anyio
async def test_handles_files_with_no_parent_manifest(project: Path, tmp_path: Path) -> None:
    isolated = tmp_path / "isolated"
    work = isolated / "proj"
    for rel in sorted(JS_FILES):
        src_rel = rel.replace("__..__", "..")
        dest = work / src_rel
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(project / src_rel, dest)

    report = _report(project)
    text = json.dumps(report).replace(str(project.parent), str(isolated))
    out = tmp_path / "copied_modules"
    plugin = CopyModulesPlugin(destination=out, include_manifests=True)

    await plugin.handle_emit(json.loads(text))

    assert _tree(out) == JS_FILES


@pytest.mark.anyio
async def test_second_run_is_idempotent(project: Path, tmp_path: Path) -> None:
    out = tmp_path / "copied_modules"
    plugin = CopyModulesPlugin(destination=out, include_manifests=True)

    first = await plugin.handle_emit(_report(project))
    before = {p: (out / p).read_bytes() for p in _tree(out)}
    second = await plugin.handle_emit(_report(project))

    assert second.copied == 0
    assert second.skipped == first.copied
    assert {p: (out / p).read_bytes() for p in _tree(out)} == before


@pytest.mark.anyio
async def test_plugin_taps_emit_phase(project: Path, tmp_path: Path) -> None:
    out = tmp_path / "copied_modules"
    hooks = BuildHooks()
    CopyModulesPlugin(destination=out).apply(hooks)

    assert hooks.taps("emit") == ["CopyModulesPlugin"]
    await hooks.call("emit", BuildReport.from_dict(_report(project)))
    assert _tree(out) == JS_FILES


@pytest.mark.anyio
async def test_io_failure_fails_the_build(project: Path, tmp_path: Path) -> None:
    out = tmp_path / "copied_modules"
    out.mkdir()
    (out / "src").write_text("a file where a directory belongs")
    hooks = BuildHooks()
    CopyModulesPlugin(destination=out).apply(hooks)

    with pytest.raises(MaterializeError) as excinfo:
        await hooks.call("emit", _report(project))

    failed = {f[0] for f in excinfo.value.failures}
    assert failed == {project / "src" / "b.js", project / "src" / "subfolder" / "a.js"}
    # Unaffected files still landed.
    assert (out / "node_modules" / "foo-pkg" / "foo.js").exists()


@pytest.mark.anyio
async def test_destination_relative_to_cwd_at_construction(
    project: Path, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    plugin = CopyModulesPlugin(destination="rel-out")
    monkeypatch.chdir(project)

    assert plugin.destination == tmp_path / "rel-out"
    report = BuildReport.from_files([project / "src" / "b.js"])
    await plugin.handle_emit(report)
    assert _tree(tmp_path / "rel-out") == {"src/b.js"}


@pytest.mark.anyio
async def test_plugin_logs_stages(project: Path, tmp_path: Path, capsys) -> None:
    plugin = CopyModulesPlugin(
        destination=tmp_path / "out", logger=CopyModulesLogger("build-42")
    )
    await plugin.handle_emit(_report(project))

    events = [json.loads(line) for line in capsys.readouterr().err.strip().splitlines()]
    assert all(e["build_id"] == "build-42" for e in events)
    stage_ends = [e["stage"] for e in events if e["message"] == "stage_end"]
    assert stage_ends == ["plan", "materialize"]
    complete = next(e for e in events if e["message"] == "materialize_complete")
    assert complete["copied"] == len(JS_FILES)


def test_plugin_without_destination_fails_fast(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("COPY_MODULES_DESTINATION", raising=False)
    with pytest.raises(ConfigError):
        CopyModulesPlugin()
