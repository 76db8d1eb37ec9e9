"""Server configuration with defaults, persisted in a chosen text format."""

from __future__ import annotations

import base64
import dataclasses
import os
import secrets
import threading
from dataclasses import InitVar, dataclass, field
from pathlib import Path
from typing import Any, Mapping

from gobe.logger import log
from gobe.mapper import Mapper, MapperError
from gobe.reference import Reference, new_reference

DEFAULT_CONFIG_PATH = "$HOME/.gobe/config/gobe.yaml"
DEFAULT_NAME = "GoBE"
DEFAULT_BIND = "0.0.0.0"
DEFAULT_PORT = "3666"
DEFAULT_FORMAT = "yaml"
JWT_KEY_LENGTH = 32


def _coerce(current: Any, value: Any) -> Any:
    """Bring a decoded value back to the type of the field it replaces."""
    if isinstance(current, bool):
        if isinstance(value, str):
            return value.strip().lower() == "true"
        return bool(value)
    if isinstance(current, int):
        if value is None or value == "":
            return 0
        return int(value)
    if isinstance(current, str):
        return "" if value is None else str(value)
    if isinstance(current, list):
        if value is None:
            return []
        if isinstance(value, list):
            return ["" if v is None else str(v) for v in value]
        return [str(value)]
    return value


def _apply_fields(obj: Any, data: Mapping[str, Any]) -> None:
    for f in dataclasses.fields(obj):
        if f.name not in data:
            continue
        current = getattr(obj, f.name)
        value = data[f.name]
        if isinstance(current, TLSConfig):
            tls = TLSConfig()
            if isinstance(value, Mapping):
                _apply_fields(tls, value)
            value = tls
        else:
            value = _coerce(current, value)
        setattr(obj, f.name, value)


@dataclass
class TLSConfig:
    """Certificate files and verification settings for TLS."""

    cert_file: str = ""
    key_file: str = ""
    ca_file: str = ""
    enabled: bool = False
    skip_verify: bool = False
    strict_host_key: bool = False
    min_version: str = "TLS1.2"


@dataclass
class GoBEConfig:
    """Server settings; durations are whole seconds."""

    name: InitVar[str] = DEFAULT_NAME
    file_path: str = ""
    worker_threads: int = 2
    rate_limit_limit: int = 0
    rate_limit_burst: int = 0
    request_window: int = 60
    proxy_enabled: bool = False
    proxy_host: str = ""
    proxy_port: str = ""
    proxy_bind_addr: str = ""
    base_path: str = "/"
    port: str = DEFAULT_PORT
    bind_address: str = DEFAULT_BIND
    timeouts: int = 30
    max_connections: int = 100
    log_level: str = "info"
    log_format: str = "text"
    log_dir: str = "gobe.log"
    request_logging: bool = False
    metrics_enabled: bool = False
    jwt_secret_key: str = ""
    refresh_token_expiration: int = 24 * 60 * 60
    access_token_expiration: int = 60 * 60
    tls_config: TLSConfig = field(default_factory=TLSConfig)
    allowed_origins: list[str] = field(default_factory=lambda: ["*"])
    api_key_auth: bool = False
    api_key: str = ""
    config_format: str = DEFAULT_FORMAT

    def __post_init__(self, name: str) -> None:
        self.reference: Reference = new_reference(name)
        self._lock = threading.RLock()

    def set_jwt_secret_key(self, key: str) -> None:
        """Set the signing key; an empty key is replaced by a random one."""
        if not key:
            log("error", "JWT secret key is empty")
            key = base64.b64encode(secrets.token_bytes(JWT_KEY_LENGTH)).decode("ascii")
        self.jwt_secret_key = key

    def save(self) -> None:
        """Write the configuration to its file in its configured format."""
        with self._lock:
            data = Mapper(self, self.file_path).serialize(self.config_format)
            path = Path(self.file_path)
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data + b"\n")

    def load(self) -> None:
        """Read the configuration file and overwrite the fields it names."""
        with self._lock:
            try:
                data = Mapper({}, self.file_path).deserialize_from_file(self.config_format)
            except (MapperError, OSError) as err:
                log("error", f"Failed to load config: {err}")
                raise
            _apply_fields(self, data)


def new_gobe_config(
    name: str = "",
    file_path: str | os.PathLike = "",
    config_format: str = "",
    bind: str = "",
    port: str = "",
) -> GoBEConfig:
    """Build a configuration; a missing file is written, an existing one is read."""
    config_format = config_format or DEFAULT_FORMAT
    path = str(file_path) if file_path else os.path.expandvars(DEFAULT_CONFIG_PATH)
    cfg = GoBEConfig(
        name=name or DEFAULT_NAME,
        file_path=path,
        bind_address=bind or DEFAULT_BIND,
        port=port or DEFAULT_PORT,
        config_format=config_format,
    )
    try:
        os.stat(path)
    except FileNotFoundError:
        try:
            cfg.save()
        except (MapperError, OSError) as err:
            log("error", f"Failed to write config file: {err}")
    except OSError as err:
        log("error", f"Failed to stat config file: {err}")
    else:
        try:
            cfg.load()
        except (MapperError, OSError):
            pass
    return cfg


@dataclass
class ContactForm:
    """A message submitted through a contact form."""

    token: str = ""
    name: str = ""
    email: str = ""
    message: str = ""