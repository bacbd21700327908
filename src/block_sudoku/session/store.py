from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Optional, Protocol


logger = logging.getLogger(__name__)


class SnapshotStore(Protocol):
    """Where a session keeps its snapshot between runs."""

    def save(self, payload: dict) -> None: ...

    def load(self) -> Optional[Any]: ...

    def clear(self) -> None: ...


class MemorySnapshotStore:
    def __init__(self, payload: Optional[Any] = None) -> None:
        self.payload = payload
        self.saves = 0

    def save(self, payload: dict) -> None:
        self.payload = payload
        self.saves += 1

    def load(self) -> Optional[Any]:
        return self.payload

    def clear(self) -> None:
        self.payload = None


class JsonFileSnapshotStore:
    """Keeps the snapshot as a JSON document on disk."""

    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path)

    def save(self, payload: dict) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(payload), encoding="utf-8")
        os.replace(tmp, self.path)

    def load(self) -> Optional[Any]:
        if not self.path.exists():
            return None
        try:
            return json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            logger.warning("Could not read snapshot %s: %s", self.path, exc)
            return None

    def clear(self) -> None:
        try:
            self.path.unlink()
        except FileNotFoundError:
            pass
