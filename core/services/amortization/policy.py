from __future__ import annotations

import os


YEAR_BASIS_CALENDAR = "calendar"
YEAR_BASIS_ACTUAL = "actual_365_25"

_ACTUAL_ALIASES = {"actual_365_25", "actual/365.25", "365.25", "actual"}


def resolve_year_basis(value: str | None = None) -> str:
    raw = value if value is not None else os.getenv("CL_YEAR_BASIS", YEAR_BASIS_CALENDAR)
    token = (raw or "").strip().lower()
    if token in _ACTUAL_ALIASES:
        return YEAR_BASIS_ACTUAL
    return YEAR_BASIS_CALENDAR


__all__ = ["YEAR_BASIS_CALENDAR", "YEAR_BASIS_ACTUAL", "resolve_year_basis"]
