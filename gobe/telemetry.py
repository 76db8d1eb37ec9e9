"""Thread-safe store of named numeric metrics."""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Mapping


class Telemetry:
    """Named metrics with the time they were last changed."""

    def __init__(self, id: str = "default", name: str = "default", type: str = "default") -> None:
        self.id = id
        self.name = name
        self.type = type
        self._lock = threading.RLock()
        self._metrics: dict[str, float] = {}
        self._last_updated = datetime.now()

    @property
    def metrics(self) -> dict[str, float]:
        with self._lock:
            return dict(self._metrics)

    @property
    def last_updated(self) -> datetime:
        with self._lock:
            return self._last_updated

    def update_metrics(self, data: Mapping[str, float]) -> None:
        """Merge ``data`` into the metrics and stamp the update time."""
        with self._lock:
            self._last_updated = datetime.now()
            self._metrics.update(data)

    def reset_metrics(self) -> None:
        """Drop every metric and stamp the update time."""
        with self._lock:
            self._metrics = {}
            self._last_updated = datetime.now()