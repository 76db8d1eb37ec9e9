"""Character classes, file screening and copying."""

from __future__ import annotations

import os
import shutil

from gobe.logger import log

_SHELL_SPECIAL = frozenset("*#$@!?-0123456789")
_ALPHA_NUM = frozenset("_0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ")

_LOW_MEMORY_MB = 100
_LARGE_FILE_BYTES = 5 * 1024 * 1024


def is_shell_special_var(char: str) -> bool:
    """True for single characters that name a special shell parameter."""
    return len(char) == 1 and char in _SHELL_SPECIAL


def is_alpha_num(char: str) -> bool:
    """True for an ASCII letter, digit or underscore."""
    return len(char) == 1 and char in _ALPHA_NUM


def screening_by_ram_size(mem_total_mb: int, file_path: str | os.PathLike) -> str:
    """Choose how to scan a file: "strings", "json", or "fallback" if it cannot be read."""
    try:
        size = os.stat(file_path).st_size
    except OSError as err:
        log("error", f"Erro ao obter tamanho do arquivo: {err}")
        return "fallback"
    if mem_total_mb < _LOW_MEMORY_MB and size > _LARGE_FILE_BYTES:
        return "strings"
    return "json"


def copy_file(src: str | os.PathLike, dst: str | os.PathLike) -> int:
    """Copy ``src`` to ``dst`` and return the number of bytes written."""
    with open(src, "rb") as source, open(dst, "wb") as destination:
        shutil.copyfileobj(source, destination)
        return destination.tell()