from __future__ import annotations

import inspect
from typing import Any, Awaitable, Callable, Dict, List, Tuple, Union

HookCallback = Callable[[Any], Union[Awaitable[Any], Any]]


class BuildHooks:
    """Named lifecycle phases a build pipeline exposes to its plugins."""

    def __init__(self) -> None:
        self._taps: Dict[str, List[Tuple[str, HookCallback]]] = {}

    def tap(self, phase: str, name: str, callback: HookCallback) -> None:
        self._taps.setdefault(phase, []).append((name, callback))

    def taps(self, phase: str) -> List[str]:
        return [name for name, _ in self._taps.get(phase, [])]

    async def call(self, phase: str, payload: Any) -> List[Any]:
        """Run every callback tapped into phase, in registration order.

        The first callback to raise fails the phase; later callbacks do not run.
        """
        results: List[Any] = []
        for _, callback in self._taps.get(phase, []):
            value = callback(payload)
            if inspect.isawaitable(value):
                value = await value
            results.append(value)
        return results
