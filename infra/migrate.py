from pathlib import Path
import sys

from alembic import command
from alembic.config import Config


def _app_dir() -> Path:
    """
    Directory the running app lives in.
    Frozen builds: the unpacked bundle (sys._MEIPASS) or the executable's folder.
    Dev: the project root (infra -> project root).
    """
    if getattr(sys, "frozen", False):
        meipass = getattr(sys, "_MEIPASS", None)
        if meipass:
            return Path(meipass).resolve()
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[1]


def _script_location(app_dir: Path) -> Path:
    candidates = [
        app_dir / "migration",
        app_dir / "_internal" / "migration",
        app_dir / "CommitmentLedger" / "migration",
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    raise RuntimeError(
        "Alembic script_location missing. Tried the following locations: "
        + ", ".join(str(p) for p in candidates)
    )


def run_migrations(db_url: str, revision: str = "head") -> None:
    """Upgrade the ledger schema at ``db_url`` to ``revision``."""
    script_location = _script_location(_app_dir())
    alembic_ini = script_location / "alembic.ini"
    if not alembic_ini.exists():
        raise RuntimeError(f"Alembic config missing: {alembic_ini}")

    cfg = Config(str(alembic_ini))
    cfg.set_main_option("script_location", str(script_location))
    cfg.set_main_option("sqlalchemy.url", db_url)
    cfg.attributes["configure_logger"] = False

    command.upgrade(cfg, revision)
