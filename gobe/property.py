"""Named, validated values that can be saved and loaded in several formats."""

from __future__ import annotations

import os
import threading
import uuid
from pathlib import Path
from typing import Any, Callable

from gobe.logger import log
from gobe.mapper import Mapper, MapperError
from gobe.reference import Reference, new_reference
from gobe.telemetry import Telemetry
from gobe.validation import Validation, ValidationError

Callback = Callable[[Any], Any]


class PropertyValue:
    """A thread-safe value with a name, an identifier and optional validators."""

    def __init__(self, name: str, value: Any = None) -> None:
        self.reference: Reference = new_reference(name)
        self.validation = Validation()
        self._lock = threading.RLock()
        self._value = value
        log(
            "debug",
            "Created new PropertyValue instance for:",
            self.reference.name,
            "ID:",
            self.reference.id,
        )

    @property
    def name(self) -> str:
        return self.reference.name

    @property
    def id(self) -> uuid.UUID:
        return self.reference.id

    def get(self) -> Any:
        """Return the current value."""
        with self._lock:
            return self._value

    def set(self, value: Any) -> None:
        """Store ``value`` after running any registered validators."""
        if value is None:
            log("error", f"Set: value is nil ({self.name})")
            raise ValueError("value is nil")
        if self.validation.check_if_will_validate():
            result = self.validation.validate(value)
            if not result.is_valid:
                log("error", f"Set: validation error ({self.name}): {result}")
                raise ValidationError(f"validation error: {result}")
        with self._lock:
            self._value = value
        log("debug", "Setting value for:", self.name, "ID:", self.id)

    def clear(self) -> None:
        """Drop the stored value."""
        with self._lock:
            self._value = None
        log("debug", "Clearing value for:", self.name, "ID:", self.id)

    def is_nil(self) -> bool:
        with self._lock:
            return self._value is None

    def serialize(self, file_path: str | os.PathLike, format: str) -> bytes:
        """Encode the value in ``format``."""
        value = self.get()
        if value is None:
            raise ValueError("value is nil")
        try:
            return Mapper(value, file_path).serialize(format)
        except MapperError as err:
            log("error", "Failed to serialize data:", err)
            raise

    def deserialize(self, data: bytes | str, format: str, file_path: str | os.PathLike) -> None:
        """Decode ``data`` into the value and store the result."""
        value = self.get()
        if value is None:
            raise ValueError("value is nil")
        try:
            result = Mapper(value, file_path).deserialize(data, format)
        except MapperError as err:
            log("error", "Failed to deserialize data:", err)
            raise
        with self._lock:
            self._value = result


class Property:
    """A named value with an optional change callback and metrics."""

    def __init__(
        self,
        name: str,
        value: Any = None,
        with_metrics: bool = False,
        callback: Callback | None = None,
    ) -> None:
        self.prop = PropertyValue(name, value)
        self.callback = callback
        self.metrics: Telemetry | None = Telemetry() if with_metrics else None

    @property
    def name(self) -> str:
        return self.prop.name

    @property
    def reference(self) -> tuple[uuid.UUID, str]:
        return self.prop.id, self.prop.name

    @property
    def value(self) -> Any:
        return self.prop.get()

    @value.setter
    def value(self, new_value: Any) -> None:
        self.prop.set(new_value)
        if self.callback is not None:
            try:
                self.callback(new_value)
            except Exception as err:
                log("error", "Error in callback function:", err)

    def serialize(self, format: str, file_path: str | os.PathLike = "") -> bytes:
        """Encode the value in ``format``."""
        return Mapper(self.value, file_path).serialize(format)

    def deserialize(
        self, data: bytes | str, format: str, file_path: str | os.PathLike = ""
    ) -> None:
        """Decode ``data`` into the value; empty data leaves it unchanged."""
        if not data:
            return
        try:
            result = Mapper(self.value, file_path).deserialize(data, format)
        except MapperError as err:
            log("error", "Failed to deserialize data:", err)
            raise
        self.value = result

    def save_to_file(self, file_path: str | os.PathLike, format: str) -> None:
        """Write the encoded value to ``file_path``, replacing its content."""
        try:
            data = self.serialize(format, file_path)
        except MapperError as err:
            log("error", "Failed to serialize data:", err)
            raise
        try:
            Path(file_path).write_bytes(data)
        except OSError as err:
            log("error", "Failed to write to file:", err)
            raise

    def load_from_file(self, filename: str | os.PathLike, format: str) -> None:
        """Read ``filename`` and decode its content into the value."""
        data = Path(filename).read_bytes()
        self.deserialize(data, format, filename)