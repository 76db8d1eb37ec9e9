"""Per-client request tracing with a simple rate window, persisted as JSON lines."""

from __future__ import annotations

import json
import os
import re
import threading
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Mapping

from gobe.fileutils import screening_by_ram_size
from gobe.logger import log

REQUEST_LIMIT = 5
REQUEST_WINDOW = timedelta(seconds=60)
DEFAULT_FILE_NAME = "requests_tracer.json"

_FIELDS = frozenset(
    {
        "ip",
        "port",
        "last_user_agent",
        "user_agents",
        "endpoint",
        "method",
        "time_list",
        "count",
    }
)
_WHITESPACE = re.compile(r"\s*")

Clock = Callable[[], datetime]


def _default_path() -> str:
    return os.path.abspath(os.path.join(".", DEFAULT_FILE_NAME))


class RequestsTracer:
    """Requests seen from one client address."""

    def __init__(
        self,
        ip: str,
        port: str = "",
        endpoint: str = "",
        method: str = "",
        last_user_agent: str = "",
        user_agents: list[str] | None = None,
        time_list: list[datetime] | None = None,
        count: int = 1,
        file_path: str | os.PathLike = "",
    ) -> None:
        self.ip = ip
        self.port = port
        self.endpoint = endpoint
        self.method = method
        self.last_user_agent = last_user_agent
        self.user_agents = list(user_agents or [])
        self.time_list = list(time_list or [])
        self.count = count
        self.valid = True
        self.error: str | None = None
        self._file_path = str(file_path)
        self._old_file_path = ""
        self._request_window = REQUEST_WINDOW
        self._request_limit = REQUEST_LIMIT

    @property
    def file_path(self) -> str:
        return self._file_path

    @file_path.setter
    def file_path(self, value: str | os.PathLike) -> None:
        self._file_path = str(value) if value else _default_path()

    @property
    def old_file_path(self) -> str:
        """Previous file path; defaults to the tracer file in the working directory."""
        if not self._old_file_path:
            self._old_file_path = _default_path()
        return self._old_file_path

    @property
    def request_window(self) -> timedelta:
        return self._request_window

    @request_window.setter
    def request_window(self, window: timedelta) -> None:
        if window <= timedelta(0):
            log("error", "Request window cannot be negative or zero")
            raise ValueError("request window cannot be negative or zero")
        self._request_window = window

    @property
    def request_limit(self) -> int:
        return self._request_limit

    @request_limit.setter
    def request_limit(self, limit: int) -> None:
        if limit <= 0:
            log("error", "Request limit cannot be negative or zero")
            raise ValueError("request limit cannot be negative or zero")
        self._request_limit = limit

    def to_dict(self) -> dict[str, Any]:
        """The persisted fields as a JSON-ready mapping."""
        return {
            "ip": self.ip,
            "port": self.port,
            "last_user_agent": self.last_user_agent,
            "user_agents": list(self.user_agents),
            "endpoint": self.endpoint,
            "method": self.method,
            "time_list": [t.isoformat() for t in self.time_list],
            "count": self.count,
        }

    def _record(self, now: datetime, user_agent: str) -> None:
        self.count += 1
        self.time_list.append(now)
        self.last_user_agent = user_agent
        self.user_agents.append(user_agent)
        if len(self.time_list) < 2:
            return
        last, previous, first = self.time_list[-1], self.time_list[-2], self.time_list[0]
        if last - previous <= self._request_window:
            log("info", f"Request limit exceeded for IP: {self.ip}, Count: {self.count}")
            self.valid = False
            self.error = f"request limit exceeded for IP: {self.ip}, Count: {self.count}"
        elif last - first > self._request_window:
            log("info", f"Request window exceeded for IP: {self.ip}, Count: {self.count}")
            self.count = 1
            self.time_list = [last]
            self.user_agents = [user_agent]
            self.valid = True
            self.error = None
        elif self.count > self._request_limit:
            log("info", f"Request limit exceeded for IP: {self.ip}, Count: {self.count}")
            self.valid = False
            self.error = f"request limit exceeded for IP: {self.ip}, Count: {self.count}"
        else:
            log("info", f"Request limit not exceeded for IP: {self.ip}, Count: {self.count}")
            self.valid = True
            self.error = None


def tracer_from_dict(data: Mapping[str, Any]) -> RequestsTracer:
    """Build a tracer from its persisted fields; unknown fields are rejected."""
    if not isinstance(data, Mapping):
        raise ValueError(f"tracer record must be an object, got {type(data).__name__}")
    unknown = set(data) - _FIELDS
    if unknown:
        raise ValueError(f"unknown field(s): {', '.join(sorted(unknown))}")
    try:
        times = [datetime.fromisoformat(t) for t in data.get("time_list") or []]
    except (TypeError, ValueError) as err:
        raise ValueError(f"invalid time_list: {err}") from err
    return RequestsTracer(
        ip=data.get("ip", ""),
        port=data.get("port", ""),
        endpoint=data.get("endpoint", ""),
        method=data.get("method", ""),
        last_user_agent=data.get("last_user_agent", ""),
        user_agents=data.get("user_agents") or [],
        time_list=times,
        count=int(data.get("count", 0)),
    )


class TracerRegistry:
    """Tracers keyed by client address."""

    def __init__(self, clock: Clock = datetime.now) -> None:
        self.tracers: dict[str, RequestsTracer] = {}
        self._clock = clock
        self._lock = threading.RLock()

    def trace(
        self,
        ip: str,
        port: str,
        endpoint: str,
        method: str,
        user_agent: str,
        file_path: str | os.PathLike,
    ) -> RequestsTracer:
        """Record a request from ``ip`` and return its updated tracer."""
        now = self._clock()
        file_path = str(file_path)
        with self._lock:
            tracer = self.tracers.get(ip)
            if tracer is None:
                tracer = RequestsTracer(
                    ip=ip,
                    port=port,
                    endpoint=endpoint,
                    method=method,
                    last_user_agent=user_agent,
                    user_agents=[user_agent],
                    time_list=[now],
                    count=1,
                    file_path=file_path,
                )
            else:
                tracer._record(now, user_agent)
                if tracer.file_path != file_path:
                    log("info", f"File path changed for IP: {tracer.ip}, Count: {tracer.count}")
                    tracer._old_file_path = tracer.file_path
                    tracer._file_path = file_path
            self.tracers[ip] = tracer
            return tracer

    def load_from_file(self, file_path: str | os.PathLike) -> dict[str, RequestsTracer]:
        """Load tracers from a file of JSON records; a missing file is created empty."""
        path = Path(file_path)
        if not path.exists():
            log("warn", f"File does not exist: {path}, creating new file")
            path.touch()
            return {}
        text = path.read_text(encoding="utf-8")
        decoder = json.JSONDecoder()
        pos = 0
        with self._lock:
            while True:
                pos = _WHITESPACE.match(text, pos).end()
                if pos >= len(text):
                    break
                try:
                    record, pos = decoder.raw_decode(text, pos)
                except json.JSONDecodeError as err:
                    log("error", f"Erro ao decodificar:{err}")
                    break
                try:
                    tracer = tracer_from_dict(record)
                except ValueError as err:
                    log("error", f"Erro ao decodificar:{err}")
                    continue
                log("info", f"Decoded request tracer: {tracer.ip}")
                self.tracers[tracer.ip] = tracer
            if self.tracers:
                log("info", f"Loaded {len(self.tracers)} request tracers")
            else:
                log("warn", "No request tracers loaded from file")
            return dict(self.tracers)


def is_duplicate_request(tracer: RequestsTracer, mem_total_mb: int) -> bool:
    """True when the tracer's file already holds a record for the same address and port."""
    path = tracer.file_path
    if screening_by_ram_size(mem_total_mb, path) == "strings":
        try:
            text = Path(path).read_text(encoding="utf-8")
        except OSError as err:
            log("error", f"Erro ao ler arquivo: {err}")
            return False
        return any(
            tracer.ip in line and tracer.port in line for line in text.split("\n")
        )
    try:
        handle = open(path, encoding="utf-8")
    except OSError as err:
        log("error", f"Erro ao abrir arquivo: {err}")
        return False
    with handle:
        for line in handle:
            try:
                existing = json.loads(line)
            except json.JSONDecodeError:
                continue
            if (
                isinstance(existing, dict)
                and existing.get("ip", "") == tracer.ip
                and existing.get("port", "") == tracer.port
            ):
                return True
    return False


def update_tracer_in_file(tracer: RequestsTracer) -> None:
    """Rewrite the records in the tracer's file that match its address and port."""
    path = Path(tracer.file_path)
    lines = path.read_text(encoding="utf-8").split("\n")
    replacement = json.dumps(tracer.to_dict(), separators=(",", ":"))
    for index, line in enumerate(lines):
        if not line:
            continue
        try:
            existing = json.loads(line)
        except json.JSONDecodeError:
            continue
        if (
            isinstance(existing, dict)
            and existing.get("ip", "") == tracer.ip
            and existing.get("port", "") == tracer.port
        ):
            lines[index] = replacement
    path.write_text("\n".join(lines), encoding="utf-8")