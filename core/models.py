"""Compatibility exports for domain models."""

from core.domain import *  # noqa: F401,F403
from core.domain import __all__  # noqa: F401
