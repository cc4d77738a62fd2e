from __future__ import annotations

import json
import sys
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import PurePath
from typing import Any, Dict, Iterator, Optional, TextIO


class CopyModulesLogger:
    """Structured JSON logger, one object per line on stderr."""

    def __init__(self, build_id: Optional[str] = None, stream: Optional[TextIO] = None):
        self.build_id = build_id or str(uuid.uuid4())
        self._stream = stream

    def info(self, message: str, **kwargs: Any) -> None:
        self._emit("info", message, **kwargs)

    def warning(self, message: str, **kwargs: Any) -> None:
        self._emit("warning", message, **kwargs)

    def error(self, message: str, **kwargs: Any) -> None:
        self._emit("error", message, **kwargs)

    @contextmanager
    def stage(self, name: str) -> Iterator[None]:
        """Context manager that tracks stage timing."""
        start = datetime.now(timezone.utc)
        self.info("stage_start", stage=name)
        status = "ok"
        try:
            yield
        except Exception as exc:
            status = "error"
            self.error("stage_error", stage=name, error=str(exc))
            raise
        finally:
            end = datetime.now(timezone.utc)
            duration_ms = int((end - start).total_seconds() * 1000)
            self.info("stage_end", stage=name, duration_ms=duration_ms, status=status)

    def _emit(self, level: str, message: str, **kwargs: Any) -> None:
        payload: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": level,
            "build_id": self.build_id,
            "message": message,
        }
        payload.update(self._sanitize(kwargs))

        stream = self._stream or sys.stderr
        stream.write(json.dumps(payload, ensure_ascii=False) + "\n")
        stream.flush()

    @staticmethod
    def _sanitize(fields: Dict[str, Any]) -> Dict[str, Any]:
        return {key: CopyModulesLogger._jsonable(value) for key, value in fields.items()}

    @staticmethod
    def _jsonable(value: Any) -> Any:
        if isinstance(value, PurePath):
            return value.as_posix()
        if isinstance(value, (set, frozenset)):
            return sorted(CopyModulesLogger._jsonable(v) for v in value)
        if isinstance(value, (list, tuple)):
            return [CopyModulesLogger._jsonable(v) for v in value]
        if isinstance(value, BaseException):
            return f"{type(value).__name__}: {value}"
        return value
