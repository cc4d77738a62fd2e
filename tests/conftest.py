from __future__ import annotations

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest


@pytest.fixture(params=["asyncio"])
def anyio_backend(request):
    """Restrict anyio tests to asyncio only (trio is not installed)."""
    return request.param


def _touch(path: Path, content: str = "") -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    return path


@pytest.fixture
def project(tmp_path: Path) -> Path:
    """
    Small bundler-style project:

        <tmp>/proj/package.json
        <tmp>/proj/src/b.js, src/subfolder/a.js
        <tmp>/proj/node_modules/foo-pkg/{foo.js,package.json}
        <tmp>/proj/node_modules/bar-pkg/{lib/bar.js,package.json}
        <tmp>/node_modules/outside-cwd-pkg/{outside-cwd.js,package.json}
    """
    root = tmp_path / "proj"
    _touch(root / "package.json", '{"name": "proj"}')
    _touch(root / "src" / "b.js", "require('./subfolder/a')")
    _touch(root / "src" / "subfolder" / "a.js", "module.exports = 1")
    _touch(root / "node_modules" / "foo-pkg" / "foo.js", "module.exports = 'foo'")
    _touch(root / "node_modules" / "foo-pkg" / "package.json", '{"name": "foo-pkg"}')
    _touch(root / "node_modules" / "bar-pkg" / "lib" / "bar.js", "module.exports = 'bar'")
    _touch(root / "node_modules" / "bar-pkg" / "package.json", '{"name": "bar-pkg"}')
    _touch(tmp_path / "node_modules" / "outside-cwd-pkg" / "outside-cwd.js", "// outside")
    _touch(tmp_path / "node_modules" / "outside-cwd-pkg" / "package.json", '{"name": "outside"}')
    return root


@pytest.fixture
def touch():
    return _touch
