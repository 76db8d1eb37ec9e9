"""Bundled locks, a condition variable and a wait group."""

from __future__ import annotations

import threading
from typing import Any, Callable

from gobe.logger import log

Validator = Callable[[Any], bool]


class WaitGroup:
    """Counter that lets threads wait until it drops to zero."""

    def __init__(self) -> None:
        self._count = 0
        self._cond = threading.Condition()

    @property
    def count(self) -> int:
        with self._cond:
            return self._count

    def add(self, delta: int) -> None:
        with self._cond:
            count = self._count + delta
            if count < 0:
                raise ValueError("negative WaitGroup counter")
            self._count = count
            if count == 0:
                self._cond.notify_all()

    def done(self) -> None:
        self.add(-1)

    def wait(self, timeout: float | None = None) -> bool:
        """Block until the counter is zero; False if the timeout ran out."""
        with self._cond:
            return self._cond.wait_for(lambda: self._count == 0, timeout)


class Mutexes:
    """A write lock, a read lock, a guarded shared value with a condition, and a wait group."""

    def __init__(self) -> None:
        self._write = threading.Lock()
        self._readers = 0
        self._readers_guard = threading.Lock()
        self._cond = threading.Condition(threading.RLock())
        self._shared_ctx: Any = None
        self._shared_validate: Validator | None = None
        self.wait_group = WaitGroup()

    def __enter__(self) -> "Mutexes":
        self.lock()
        return self

    def __exit__(self, *exc: object) -> None:
        self.unlock()

    def lock(self) -> None:
        self._write.acquire()

    def unlock(self) -> None:
        self._write.release()

    def try_lock(self) -> bool:
        return self._write.acquire(blocking=False)

    def rlock(self) -> None:
        with self._readers_guard:
            self._readers += 1

    def runlock(self) -> None:
        with self._readers_guard:
            if self._readers == 0:
                raise RuntimeError("runlock of unlocked read lock")
            self._readers -= 1

    def try_rlock(self) -> bool:
        self.rlock()
        return True

    @property
    def shared_ctx(self) -> Any:
        with self._cond:
            return self._shared_ctx

    @shared_ctx.setter
    def shared_ctx(self, value: Any) -> None:
        with self._cond:
            self._shared_ctx = value

    @property
    def shared_ctx_validate(self) -> Validator | None:
        with self._cond:
            return self._shared_validate

    @shared_ctx_validate.setter
    def shared_ctx_validate(self, validate: Validator | None) -> None:
        with self._cond:
            self._shared_validate = validate

    def wait_cond(self) -> None:
        with self._cond:
            self._cond.wait()

    def wait_cond_with_timeout(self, timeout: float) -> bool:
        """Wait for a signal; False when ``timeout`` seconds pass first."""
        with self._cond:
            return self._cond.wait(timeout)

    def signal_cond(self) -> bool:
        """Wake one waiter unless the shared-value validator rejects it."""
        with self._cond:
            if self._shared_validate is not None:
                try:
                    ok = self._shared_validate(self._shared_ctx)
                except Exception:
                    ok = False
                if not ok:
                    log("warn", "Condition signal aborted due to validation failure")
                    return False
            log("info", "Signaling condition variable")
            self._cond.notify()
            return True

    def broadcast_cond(self) -> None:
        with self._cond:
            self._cond.notify_all()

    def add(self, delta: int) -> None:
        self.wait_group.add(delta)

    def done(self) -> None:
        self.wait_group.done()

    def wait(self) -> None:
        self.wait_group.wait()