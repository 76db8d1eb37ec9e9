"""Serialization of objects to and from JSON, YAML, XML, TOML and env text."""

from __future__ import annotations

import dataclasses
import io
import json
import os
import tomllib
from pathlib import Path
from typing import Any

import tomli_w
import xmltodict
import yaml
from dotenv import dotenv_values

from gobe.logger import log

_ALIASES = {
    "json": "json",
    "js": "json",
    "yaml": "yaml",
    "yml": "yaml",
    "xml": "xml",
    "html": "xml",
    "toml": "toml",
    "tml": "toml",
    "env": "env",
    "envs": "env",
    ".env": "env",
    "environment": "env",
}
_SERIALIZE_FORMATS = frozenset({"json", "yaml", "xml", "toml", "env"})
# Formats whose files hold one document spread over several lines.
_DOCUMENT_FORMATS = frozenset({"yaml", "xml", "toml"})


class MapperError(ValueError):
    """Raised when an object cannot be serialized or deserialized."""


def _to_plain(obj: Any) -> Any:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return dataclasses.asdict(obj)
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return obj


def _jsonable(obj: Any) -> Any:
    return json.loads(json.dumps(_to_plain(obj), default=str))


def _drop_none(obj: Any) -> Any:
    if isinstance(obj, dict):
        return {k: _drop_none(v) for k, v in obj.items() if v is not None}
    if isinstance(obj, list):
        return [_drop_none(v) for v in obj if v is not None]
    return obj


def _marshal_env(env: dict[str, str]) -> str:
    lines = []
    for key, value in env.items():
        try:
            lines.append(f"{key}={int(value)}")
        except ValueError:
            lines.append(f"{key}={json.dumps(value)}")
    return "\n".join(sorted(lines))


def _field_names(obj: Any) -> set[str] | None:
    if dataclasses.is_dataclass(obj) and not isinstance(obj, type):
        return {f.name for f in dataclasses.fields(obj)}
    if hasattr(obj, "__dict__"):
        return set(vars(obj))
    return None


class Mapper:
    """Reads and writes one object in a chosen text format, optionally via a file."""

    def __init__(self, obj: Any, file_path: str | os.PathLike = "") -> None:
        self.object = obj
        self.file_path = file_path

    def serialize(self, format: str) -> bytes:
        """Return the object encoded in ``format``."""
        if format not in _SERIALIZE_FORMATS:
            raise MapperError(f"unsupported format: {format}")
        try:
            if format == "json":
                text = json.dumps(_to_plain(self.object), separators=(",", ":"), default=str)
            elif format == "yaml":
                text = yaml.safe_dump(_jsonable(self.object), sort_keys=False)
            elif format == "xml":
                root = "root" if isinstance(self.object, dict) else type(self.object).__name__
                text = xmltodict.unparse({root: _jsonable(self.object)}, full_document=False)
            elif format == "toml":
                plain = _drop_none(_jsonable(self.object))
                if not isinstance(plain, dict):
                    raise MapperError(f"type not supported for toml: {type(self.object).__name__}")
                text = tomli_w.dumps(plain)
            else:
                env = self.object
                if not isinstance(env, dict) or not all(
                    isinstance(k, str) and isinstance(v, str) for k, v in env.items()
                ):
                    raise MapperError(f"type not supported for env: {type(env).__name__}")
                text = _marshal_env(env)
        except MapperError:
            raise
        except (TypeError, ValueError) as err:
            raise MapperError(f"error serializing data: {err}") from err
        return text.encode("utf-8")

    def _parse(self, data: bytes | str, fmt: str) -> Any:
        text = data.decode("utf-8") if isinstance(data, bytes) else data
        try:
            if fmt == "json":
                return json.loads(text)
            if fmt == "yaml":
                return yaml.safe_load(text)
            if fmt == "xml":
                parsed = xmltodict.parse(text)
                if isinstance(parsed, dict) and len(parsed) == 1:
                    return next(iter(parsed.values()))
                return parsed
            if fmt == "toml":
                return tomllib.loads(text)
            values = dotenv_values(stream=io.StringIO(text))
            return {k: "" if v is None else v for k, v in values.items()}
        except (ValueError, yaml.YAMLError, tomllib.TOMLDecodeError) as err:
            raise MapperError(f"error deserializing data: {err}") from err
        except Exception as err:  # xml parser errors
            raise MapperError(f"error deserializing data: {err}") from err

    def _merge(self, parsed: Any) -> None:
        target = self.object
        if target is None:
            self.object = parsed
        elif isinstance(target, dict) and isinstance(parsed, dict):
            target.update(parsed)
        elif isinstance(target, list) and isinstance(parsed, list):
            target[:] = parsed
        elif isinstance(parsed, dict) and (names := _field_names(target)) is not None:
            for key, value in parsed.items():
                if key in names:
                    setattr(target, key, value)
        else:
            self.object = parsed

    def deserialize(self, data: bytes | str, format: str) -> Any:
        """Decode ``data`` into the object and return the object."""
        if not data:
            raise MapperError("data is empty")
        fmt = _ALIASES.get(format)
        if fmt is None:
            raise MapperError(f"unsupported format: {format}")
        if fmt == "env" and not isinstance(self.object, dict):
            log("error", f"Type not valid for env: {type(self.object).__name__}")
            raise MapperError("object is not valid for env")
        self._merge(self._parse(data, fmt))
        return self.object

    def serialize_to_file(self, format: str) -> None:
        """Append the serialized object, followed by a newline, to the file."""
        data = self.serialize(format)
        log("debug", f"Serialized object: {data.decode('utf-8')}")
        with open(self.file_path, "a", encoding="utf-8") as out:
            out.write(data.decode("utf-8") + "\n")

    def deserialize_from_file(self, format: str) -> Any:
        """Read the file into the object and return it.

        Line formats hold one record per line: a dict collects every record,
        a list gathers them, any other object needs exactly one.
        """
        path = Path(self.file_path)
        if not path.exists():
            log("error", f"File does not exist: {path}")
            raise FileNotFoundError(f"file does not exist: {path}")
        fmt = _ALIASES.get(format)
        if fmt is None:
            raise MapperError(f"unsupported format: {format}")
        text = path.read_text(encoding="utf-8")
        if fmt in _DOCUMENT_FORMATS:
            records = [text] if text.strip() else []
        else:
            records = [line for line in text.splitlines() if line]

        target = self.object
        if isinstance(target, list):
            for record in records:
                parsed = self._parse(record, fmt)
                if isinstance(parsed, list):
                    target.extend(parsed)
                else:
                    target.append(parsed)
        elif isinstance(target, dict):
            for record in records:
                self.deserialize(record, format)
        else:
            if not records:
                raise MapperError("no object found in the file")
            if len(records) > 1:
                raise MapperError("multiple objects found in the file")
            self.deserialize(records[0], format)
        log("debug", f"File {path} deserialized successfully")
        return self.object


def sanitize_quotes_and_spaces(text: str) -> str:
    """Strip surrounding whitespace and quotes, turning single quotes into double."""
    return text.strip().replace("'", '"').strip('"')


def levenshtein(s: str, t: str) -> int:
    """Edit distance between two strings."""
    if not s:
        return len(t)
    if not t:
        return len(s)
    prev = list(range(len(t) + 1))
    for i, sc in enumerate(s, start=1):
        curr = [i]
        for j, tc in enumerate(t, start=1):
            cost = 0 if sc == tc else 1
            curr.append(min(prev[j] + 1, curr[j - 1] + 1, prev[j - 1] + cost))
        prev = curr
    return prev[-1]


def is_equal(a: str, b: str) -> bool:
    """True when the strings differ by at most a quarter of the longer length."""
    a, b = sanitize_quotes_and_spaces(a), sanitize_quotes_and_spaces(b)
    return levenshtein(a, b) <= max(len(a), len(b)) // 4


def auto_encode(value: Any, format: str, file_path: str | os.PathLike = "") -> bytes:
    """Serialize ``value`` in ``format``."""
    try:
        return Mapper(value, file_path).serialize(format)
    except MapperError as err:
        log("error", f"AutoEncode: unknown type for serialization ({type(value).__name__}): {err}")
        raise MapperError(f"error: {err}") from err


def auto_decode(data: bytes | str, target: Any, format: str) -> Any:
    """Deserialize ``data`` into ``target`` and return the result."""
    try:
        result = Mapper(target, "").deserialize(data, format)
    except MapperError as err:
        log("error", f"AutoDecode: unknown type for deserialization ({type(target).__name__}): {err}")
        raise MapperError(f"error: {err}") from err
    if result is None:
        raise MapperError("deserialized object is nil")
    return result