from __future__ import annotations

import os
from importlib import metadata
from pathlib import Path


DISTRIBUTION_NAME = "commitment-ledger"
_DEFAULT_APP_VERSION = "1.0.0"
# Written next to the package by frozen builds, which carry no dist-info.
_VERSION_FILE = Path(__file__).with_name("app_version.txt")


def _stamped_file_version(path: Path) -> str | None:
    try:
        raw = path.read_text(encoding="utf-8").strip()
    except OSError:
        return None
    return raw or None


def _installed_version() -> str | None:
    try:
        return metadata.version(DISTRIBUTION_NAME) or None
    except metadata.PackageNotFoundError:
        return None


def get_app_version() -> str:
    """Version stamped on every support event.

    Resolution order: ``CL_APP_VERSION``, the build's ``app_version.txt``,
    the installed ``commitment-ledger`` distribution, then ``1.0.0``.
    """
    override = (os.getenv("CL_APP_VERSION") or "").strip()
    if override:
        return override
    return _stamped_file_version(_VERSION_FILE) or _installed_version() or _DEFAULT_APP_VERSION


__all__ = ["DISTRIBUTION_NAME", "get_app_version"]
