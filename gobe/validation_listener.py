"""Listeners, filters and handlers notified about validation results."""

from __future__ import annotations

import threading
from enum import Enum
from typing import Callable

from gobe.logger import log
from gobe.reference import Reference
from gobe.validation import ValidationResult

Handler = Callable[[ValidationResult], None]
Filter = Callable[[ValidationResult], bool]


class ListenerType(str, Enum):
    """When a listener is called relative to validation."""

    BEFORE = "before"
    AFTER = "after"
    ERROR = "error"
    SUCCESS = "success"
    DEFAULT = "default"


class FilterType(str, Enum):
    """What a filter applies to."""

    EVENT = "event"
    LISTENER = "listener"
    RESULT = "result"


class ValidationListener:
    """Dispatches validation results to listeners registered by reference."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self.filters: dict[FilterType, Filter] = {}
        self.handlers: list[Handler] = []
        self.listeners: dict[Reference, dict[ListenerType, Handler]] = {}

    def add_filter(self, filter_type: FilterType | str, fn: Filter) -> None:
        if fn is None:
            log("error", "RegisterListener: filter is nil")
            raise ValueError("filter is nil")
        with self._lock:
            self.filters[FilterType(filter_type)] = fn

    def remove_filter(self, filter_type: FilterType | str) -> None:
        with self._lock:
            self.filters.pop(FilterType(filter_type), None)

    def add_handler(self, handler: Handler) -> None:
        with self._lock:
            self.handlers.append(handler)

    def remove_handler(self, handler: Handler) -> None:
        """Remove the first registration of ``handler``, if any."""
        with self._lock:
            for index, registered in enumerate(self.handlers):
                if registered is handler:
                    del self.handlers[index]
                    break

    def add_listener(
        self, reference: Reference, listener_type: ListenerType | str, handler: Handler
    ) -> None:
        with self._lock:
            self.listeners.setdefault(reference, {})[ListenerType(listener_type)] = handler

    def remove_listener(self, reference: Reference, listener_type: ListenerType | str) -> None:
        """Remove one listener; a reference left with none is dropped."""
        with self._lock:
            by_type = self.listeners.get(reference)
            if by_type is None:
                return
            by_type.pop(ListenerType(listener_type), None)
            if not by_type:
                del self.listeners[reference]

    def get_filters(self) -> dict[str, Filter]:
        with self._lock:
            return {k.value: v for k, v in self.filters.items() if v is not None}

    def get_handlers(self) -> list[Handler]:
        with self._lock:
            return list(self.handlers)

    def get_listeners(self) -> dict[Reference, dict[ListenerType, Handler]]:
        with self._lock:
            return dict(self.listeners)

    def get_listeners_by_name(self, name: str) -> dict[ListenerType, Handler] | None:
        """Listeners of the first reference with this name, or None."""
        with self._lock:
            for reference, by_type in self.listeners.items():
                if reference.name == name:
                    return by_type
            return None

    def get_listeners_keys(self) -> dict[str, Reference]:
        with self._lock:
            return {reference.name: reference for reference in self.listeners}

    def register_listener(self, reference: Reference, handler: Handler) -> None:
        """Register ``handler`` as the default listener of ``reference``."""
        if handler is None:
            log("error", "RegisterListener: handler is nil")
            raise ValueError("handler is nil")
        self.add_listener(reference, ListenerType.DEFAULT, handler)

    def trigger(self, event: str, result: ValidationResult) -> list[threading.Thread]:
        """Dispatch ``result`` to the listeners named ``event`` on background threads.

        Nothing is dispatched if any filter rejects the result. The started
        threads are returned so callers may join them.
        """
        if result is None:
            log("error", "RegisterListener: result is nil")
            raise ValueError("result is nil")
        if not event:
            log("error", "RegisterListener: event is empty")
            raise ValueError("event is empty")
        with self._lock:
            by_type = self.get_listeners_by_name(event)
            if by_type is None:
                return []
            filters = [f for f in self.filters.values() if f is not None]
            listeners = [h for h in by_type.values() if h is not None]
        for fn in filters:
            if not fn(result):
                log("info", "RegisterListener: filter failed")
                return []
        threads = []
        for listener in listeners:
            thread = threading.Thread(target=listener, args=(result,), daemon=True)
            thread.start()
            threads.append(thread)
        return threads