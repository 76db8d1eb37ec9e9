"""Version reporting and checks against the latest published release."""

from __future__ import annotations

import argparse
import json
import os
import re
import urllib.error
import urllib.request
from pathlib import Path
from typing import Sequence

from gobe.logger import log

MODULE_ALIAS = "GoBE"
MODULE_NAME = "gobe"
GIT_MODEL_URL = os.environ.get(
    "GOBE_GIT_URL", f"https://example.com/{MODULE_NAME}/{MODULE_NAME}.git"
)
CURRENT_VERSION_FALLBACK = "v1.0.1"
_VERSION_FILE = Path(__file__).with_name("CLI_VERSION")
_INT = re.compile(r"[+-]?[0-9]+")
_TIMEOUT = 10


def _repo_url(url: str) -> str:
    return url.removesuffix(".git")


def _current_version() -> str:
    try:
        return _VERSION_FILE.read_text(encoding="utf-8").strip()
    except OSError:
        return ""


def parse_version(text: str) -> list[int] | None:
    """Split ``major.minor.patch`` into three integers; None if it does not parse."""
    parts = text.split(".")
    if len(parts) > 3 or not all(_INT.fullmatch(p) for p in parts):
        return None
    numbers = [int(p) for p in parts]
    return numbers + [0] * (3 - len(numbers))


def compare_versions(v1: Sequence[int], v2: Sequence[int]) -> int:
    """Return 1, -1 or 0 as ``v1`` is greater than, less than or equal to ``v2``."""
    if len(v1) != len(v2):
        raise ValueError("version length mismatch")
    for a, b in zip(v1, v2):
        if a > b:
            return 1
        if a < b:
            return -1
    return 0


def _get_latest_tag(repo_url: str) -> str:
    try:
        with urllib.request.urlopen(f"{repo_url}/tags", timeout=_TIMEOUT) as resp:
            if resp.status != 200:
                raise RuntimeError(f"failed to fetch tags: {resp.status}")
            tags = json.loads(resp.read())
    except urllib.error.HTTPError as err:
        raise RuntimeError(f"failed to fetch tags: {err.code} {err.reason}") from err
    if not tags:
        raise ValueError("no tags found")
    return tags[0]["name"]


class VersionService:
    """Knows the running version and can look up the latest one."""

    def __init__(
        self,
        current_version: str | None = None,
        latest_version: str = "",
        git_model_url: str = GIT_MODEL_URL,
    ) -> None:
        self.current_version = _current_version() if current_version is None else current_version
        self.latest_version = latest_version
        self.git_model_url = git_model_url

    def _update_latest_version(self) -> None:
        self.latest_version = _get_latest_tag(_repo_url(self.git_model_url))

    def get_latest_version(self) -> str:
        """Return the latest tag, fetching it once if not yet known."""
        if not self.latest_version:
            self._update_latest_version()
        return self.latest_version

    def is_latest_version(self) -> bool:
        """True when the current version is not older than the latest."""
        latest_text = self.get_latest_version()
        current = parse_version(self.current_version)
        latest = parse_version(latest_text)
        if current is None or latest is None:
            raise ValueError("error parsing versions")
        return compare_versions(current, latest) <= 0


def get_version() -> str:
    """The running version, or the fallback when none is recorded."""
    return _current_version() or CURRENT_VERSION_FALLBACK


def get_git_model_url() -> str:
    return GIT_MODEL_URL


def get_version_info() -> str:
    log("info", "Version: " + get_version())
    log("info", "Git repository: " + get_git_model_url())
    return f"Version: {get_version()}\nGit repository: {get_git_model_url()}"


def get_latest_version_from_git() -> str:
    """Follow the latest-release link and return the tag it lands on, or an error text."""
    url = _repo_url(GIT_MODEL_URL) + "/releases/latest"
    try:
        with urllib.request.urlopen(url, timeout=_TIMEOUT) as resp:
            final_url = resp.geturl()
    except urllib.error.HTTPError as err:
        status = f"{err.code} {err.reason}"
        log("error", "ErrorCtx fetching latest version: " + status)
        log("error", "Url: " + url)
        body = err.read().decode("utf-8", errors="replace")
        return f"ErrorCtx: {status}\nResponse: {body}"
    except OSError as err:
        log("error", f"ErrorCtx fetching latest version: {err}")
        log("error", url)
        return str(err)
    path = urllib.parse.urlparse(final_url).path
    return path.split("/")[-1]


def get_latest_version_info() -> str:
    latest = get_latest_version_from_git()
    log("info", "Latest version: " + latest)
    return "Latest version: " + latest


def get_version_info_with_latest_and_check() -> str:
    if get_version() == get_latest_version_from_git():
        log("info", "You are using the latest version.")
        head = "You are using the latest version."
    else:
        log("warn", "You are using an outdated version.")
        head = "You are using an outdated version."
    return f"{head}\n{get_version_info()}\n{get_latest_version_info()}"


def main(argv: Sequence[str] | None = None) -> int:
    """Print version information; ``latest`` and ``check`` query the release feed."""
    parser = argparse.ArgumentParser(
        prog="version", description=f"Print the version number of {MODULE_ALIAS}"
    )
    sub = parser.add_subparsers(dest="command")
    sub.add_parser("latest", help=f"Print the latest version number of {MODULE_ALIAS}")
    sub.add_parser(
        "check", help=f"Check if the current version is the latest version of {MODULE_ALIAS}"
    )
    args = parser.parse_args(argv)
    if args.command == "latest":
        print(get_latest_version_info())
    elif args.command == "check":
        print(get_version_info_with_latest_and_check())
    else:
        print(get_version_info())
    return 0