from __future__ import annotations

import asyncio
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional, Set, Tuple

from .constants import DEFAULT_MANIFEST_NAME


@dataclass
class SearchCache:
    """
    Directories already searched for a manifest during one discovery pass.

    A directory is recorded whether or not it held a manifest. The cache belongs to
    a single pass: create it per call (or pass one in explicitly) and drop it after.
    """

    searched: Set[Path] = field(default_factory=set)
    probes: int = 0

    def claim(self, directory: Path) -> bool:
        """Mark directory as searched. Returns False if another chain already claimed it."""
        if directory in self.searched:
            return False
        self.searched.add(directory)
        return True


async def _probe(directory: Path, manifest_name: str, cache: SearchCache) -> Optional[Path]:
    cache.probes += 1
    candidate = directory / manifest_name
    if await asyncio.to_thread(os.path.isfile, candidate):
        return candidate
    return None


async def _walk_up(start: Path, manifest_name: str, cache: SearchCache) -> Optional[Path]:
    directory = start
    while True:
        # Claim before awaiting the probe so sibling chains stop here instead of
        # probing the same directory; the claiming chain carries on upward.
        if not cache.claim(directory):
            return None
        found = await _probe(directory, manifest_name, cache)
        if found is not None:
            return found
        parent = directory.parent
        if parent == directory:
            return None
        directory = parent


async def locate_manifests(
    files: Iterable[Path],
    *,
    manifest_name: str = DEFAULT_MANIFEST_NAME,
    cache: Optional[SearchCache] = None,
) -> Tuple[Set[Path], SearchCache]:
    """
    Find the nearest manifest above each dependency file.

    Every distinct directory is probed at most once per pass, so the number of
    probes is bounded by the distinct ancestor directories of the input. Files
    with no manifest anywhere above them contribute nothing.
    """
    cache = cache if cache is not None else SearchCache()
    starts = sorted({Path(os.path.abspath(f)).parent for f in files})
    found = await asyncio.gather(*(_walk_up(d, manifest_name, cache) for d in starts))
    return {m for m in found if m is not None}, cache
