"""Record kinds (fitness, tax, insurance, ...)."""

from rtotrack.kinds.base import KindPolicy
from rtotrack.kinds.registry import get_kind, list_kinds

__all__ = [
    "KindPolicy",
    "get_kind",
    "list_kinds",
]
