"""Prioritised validators and the results they produce."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from typing import Any, Callable

from gobe.reference import Reference, new_reference


class ValidationError(ValueError):
    """Raised when validators are misused or missing."""


@dataclass
class ValidationResult:
    """Outcome of one validation, with free-form metadata."""

    is_valid: bool
    message: str = ""
    error: Exception | None = None
    metadata: dict[str, Any] = field(default_factory=dict)
    callback: Callable[["ValidationResult"], None] | None = None
    reference: Reference = field(
        default_factory=lambda: new_reference("ValidationResult"), compare=False
    )
    _lock: threading.RLock = field(
        default_factory=threading.RLock, init=False, repr=False, compare=False
    )

    @property
    def name(self) -> str:
        return self.reference.name

    def __str__(self) -> str:
        with self._lock:
            if self.is_valid:
                return "Validation is valid"
            if self.error is not None:
                return f"Validation is invalid: {self.error}"
            return f"Validation is invalid: {self.message}"

    def get_metadata(self, key: str = "") -> Any:
        """Return the value under ``key``, or a copy of all metadata for an empty key."""
        with self._lock:
            if not key:
                return dict(self.metadata)
            return self.metadata.get(key)

    def set_metadata(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``; key "all" replaces the whole mapping."""
        with self._lock:
            if value is None or not key:
                return
            if key == "all":
                if isinstance(value, dict):
                    self.metadata = dict(value)
                    return
                if isinstance(value, ValidationResult):
                    self.metadata = dict(value.metadata)
                    return
            self.metadata[key] = value

    def metadata_keys(self) -> list[str]:
        with self._lock:
            return list(self.metadata)


ValidatorCallable = Callable[..., ValidationResult]


@dataclass
class ValidationFunc:
    """A validator function with its priority and last result."""

    priority: int
    func: ValidatorCallable | None
    result: ValidationResult | None = None


class Validation:
    """A set of validators keyed by priority, run lowest priority first."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._validators: dict[int, ValidationFunc] = {}
        self._is_valid = False
        self._has_validation = False

    def check_if_will_validate(self) -> bool:
        """Refresh and return whether any validator is registered."""
        with self._lock:
            self._has_validation = any(
                v.func is not None for v in self._validators.values()
            )
            return self._has_validation

    def validate(self, value: Any, *args: Any) -> ValidationResult:
        """Run the validators in priority order, stopping at the first failure."""
        if value is None:
            return ValidationResult(False, "value is nil", ValidationError("value is nil"))
        with self._lock:
            if not self._has_validation:
                return ValidationResult(
                    False,
                    "validation has no validators",
                    ValidationError("validation has no validators"),
                )
            self._is_valid = True
            for priority in sorted(self._validators):
                validator = self._validators[priority]
                if validator.func is None:
                    continue
                result = validator.func(value, *args)
                validator.result = result
                if result is not None and not result.is_valid:
                    self._is_valid = False
                    break
            message = "validation is valid" if self._is_valid else "validation is invalid"
            return ValidationResult(self._is_valid, message)

    def add_validator(self, validator: ValidationFunc) -> None:
        with self._lock:
            if validator.func is None:
                raise ValidationError("validator function is nil")
            if validator.priority < 0:
                raise ValidationError("priority must be greater than or equal to 0")
            if validator.priority in self._validators:
                raise ValidationError(
                    f"validator with priority {validator.priority} already exists"
                )
            self._validators[validator.priority] = validator
            self.check_if_will_validate()

    def remove_validator(self, priority: int) -> None:
        with self._lock:
            if self._validators.pop(priority, None) is None:
                raise ValidationError(f"validator with priority {priority} does not exist")
            self.check_if_will_validate()

    def get_validator(self, priority: int) -> ValidationFunc:
        with self._lock:
            if not self._has_validation:
                raise ValidationError("validation has no validators")
            try:
                return self._validators[priority]
            except KeyError:
                raise ValidationError(
                    f"validator with priority {priority} does not exist"
                ) from None

    def get_validators(self) -> dict[int, ValidationFunc]:
        with self._lock:
            if not self._has_validation:
                return {}
            return {p: self._validators[p] for p in sorted(self._validators)}

    def get_results(self) -> dict[int, ValidationResult | None]:
        with self._lock:
            if not self._has_validation:
                return {}
            return {p: self._validators[p].result for p in sorted(self._validators)}

    def clear_results(self) -> None:
        with self._lock:
            for validator in self._validators.values():
                validator.result = None

    def is_valid(self) -> bool:
        with self._lock:
            return self._has_validation and self._is_valid