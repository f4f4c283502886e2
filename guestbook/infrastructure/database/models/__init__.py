from .base import Base
from .entry import Entry


__all__ = [
    "Base",
    "Entry",
]
