# infra/path.py
from __future__ import annotations
import os
import sys
from pathlib import Path

APP_NAME = "CommitmentLedger"
COMPANY_NAME = "SiteOffice"
DB_FILENAME = "commitment_ledger.db"


def _platform_data_root() -> Path:
    if sys.platform.startswith("win"):
        return Path(os.getenv("APPDATA", Path.home() / "AppData" / "Roaming"))
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support"
    return Path(os.getenv("XDG_DATA_HOME", Path.home() / ".local" / "share"))


def user_data_dir() -> Path:
    """
    Per-user directory holding the ledger database and logs.

    ``CL_DATA_DIR`` overrides the location; otherwise, e.g.:

    Windows:
        C:\\Users\\<User>\\AppData\\Roaming\\SiteOffice\\CommitmentLedger
    macOS:
        ~/Library/Application Support/SiteOffice/CommitmentLedger
    Linux:
        ~/.local/share/SiteOffice/CommitmentLedger
    """
    override = (os.getenv("CL_DATA_DIR") or "").strip()
    path = Path(override).expanduser() if override else _platform_data_root() / COMPANY_NAME / APP_NAME
    try:
        path.mkdir(parents=True, exist_ok=True)
        return path
    except OSError:
        fallback = Path.home() / f".{APP_NAME}"
        fallback.mkdir(parents=True, exist_ok=True)
        return fallback


def default_db_path() -> Path:
    return user_data_dir() / DB_FILENAME


def default_db_url() -> str:
    return f"sqlite:///{default_db_path().as_posix()}"
