from __future__ import annotations

from uuid import uuid4


def generate_id() -> str:
    return str(uuid4())


def normalize_id(value: object) -> str | None:
    """Strip an incoming id; blank ids mean "no reference"."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


__all__ = ["generate_id", "normalize_id"]
