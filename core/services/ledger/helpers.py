from __future__ import annotations

import math

from core.exceptions import ValidationError

RISK_HIGH = "HIGH"
RISK_MEDIUM = "MEDIUM"
RISK_LOW = "LOW"


def utilization_percent(used: float, limit: float) -> float:
    if not limit:
        return 0.0
    return used / limit * 100.0


def progress_percent(realized: float, total: float) -> float:
    if not total or total <= 0:
        return 0.0
    return min(100.0, realized / total * 100.0)


def risk_level(utilization: float) -> str:
    if utilization > 80:
        return RISK_HIGH
    if utilization > 60:
        return RISK_MEDIUM
    return RISK_LOW


def require_positive_amount(value, label: str = "Payment amount") -> float:
    try:
        amount = float(value)
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{label} must be a number.", code="INVALID_AMOUNT") from exc
    if not math.isfinite(amount) or amount <= 0:
        raise ValidationError(f"{label} must be greater than zero.", code="INVALID_AMOUNT")
    return amount


__all__ = [
    "RISK_HIGH",
    "RISK_MEDIUM",
    "RISK_LOW",
    "utilization_percent",
    "progress_percent",
    "risk_level",
    "require_positive_amount",
]
