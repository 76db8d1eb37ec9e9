"""Encoding checks, worker limits and boot identifiers."""

from __future__ import annotations

import re
import subprocess
from typing import Any

from gobe.logger import log

BOOT_ID_PATH = "/proc/sys/kernel/random/boot_id"

_BASE64 = "^([A-Za-z0-9+/]{4})*([A-Za-z0-9+/]{3}=|[A-Za-z0-9+/]{2}==)?$"
_BASE64_TEXT = re.compile(_BASE64)
_BASE64_BYTES = re.compile(_BASE64.encode("ascii"))
_URL_ENCODED = re.compile(r"^[a-zA-Z0-9%_.-]+$")
_BASE62 = re.compile(r"^[a-zA-Z0-9_]+$")


def validate_worker_limit(value: Any) -> None:
    """Raise unless ``value`` is a non-negative integer."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError("invalid type for worker limit")
    if value < 0:
        raise ValueError("worker limit cannot be negative")


def is_base64_string(text: str) -> bool:
    return _BASE64_TEXT.fullmatch(text) is not None


def is_base64_bytes(data: bytes) -> bool:
    return _BASE64_BYTES.fullmatch(bytes(data)) is not None


def is_url_encoded(text: str) -> bool:
    return _URL_ENCODED.fullmatch(text) is not None


def is_base62_string(text: str) -> bool:
    """Letters, digits and underscores, not starting with a digit."""
    if not text or text[0].isdecimal():
        return False
    return _BASE62.fullmatch(text) is not None


def get_boot_id() -> str:
    """The kernel's identifier for the current boot."""
    with open(BOOT_ID_PATH, encoding="utf-8") as handle:
        return handle.read().strip()


def get_boot_time_mac() -> str:
    out = subprocess.check_output(["sysctl", "-n", "kern.boottime"])
    return out.decode("utf-8", errors="replace").strip()


def get_boot_time_windows() -> str:
    out = subprocess.check_output(
        [
            "powershell",
            "-Command",
            "(Get-WmiObject Win32_OperatingSystem).LastBootUpTime",
        ]
    )
    return out.decode("utf-8", errors="replace").strip()


def process_file_name(process_name: str, pid: int) -> str:
    """Name of the pid file for a process; empty when the boot id is unavailable."""
    try:
        boot_id = get_boot_id()
    except OSError as err:
        log("error", f"Failed to get boot ID: {err}")
        return ""
    return f"{process_name}_{pid}_{boot_id}.pid"