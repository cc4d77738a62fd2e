from __future__ import annotations

import os
from pathlib import Path
from typing import Union

from .constants import PARENT_DIR_SENTINEL, PARENT_DIR_TOKEN

PathLike = Union[str, "os.PathLike[str]"]


def rewrite_parent_segments(relative: PathLike) -> Path:
    """Replace every ".." segment of a relative path with the sentinel token."""
    parts = [
        PARENT_DIR_SENTINEL if part == PARENT_DIR_TOKEN else part
        for part in Path(relative).parts
    ]
    return Path(*parts) if parts else Path()


def map_to_destination(
    source: PathLike,
    working_directory: PathLike,
    output_root: PathLike,
) -> Path:
    """
    Map an absolute dependency path onto its mirrored location under output_root.

    The path is taken relative to working_directory, so files outside the working
    tree get leading ".." segments. Those are rewritten to "__..__" and the result
    can never resolve above output_root:

        /outside/pkg/x.js, cwd=/proj, root=/out -> /out/__..__/outside/pkg/x.js
    """
    for name, value in (
        ("source", source),
        ("working_directory", working_directory),
        ("output_root", output_root),
    ):
        if not os.fspath(value):
            raise ValueError(f"{name} must not be empty")

    relative = os.path.relpath(os.path.abspath(source), os.path.abspath(working_directory))
    return Path(output_root) / rewrite_parent_segments(relative)
