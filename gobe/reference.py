"""Named references carrying a unique identifier."""

from __future__ import annotations

import sys
import uuid
from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class Reference:
    """A name paired with a unique identifier."""

    name: str
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    def __str__(self) -> str:
        return f"ID: {self.id}, Name: {self.name}"


def new_reference(name: str) -> Reference:
    """Create a reference; an empty name is replaced by the caller's location."""
    if not name:
        try:
            frame = sys._getframe(1)
        except ValueError:
            name = "unknown"
        else:
            code = frame.f_code
            module = Path(code.co_filename).stem
            name = f"{module}.{code.co_name}:{frame.f_lineno}"
    return Reference(name)