from .entry_repository import EntryRepository


__all__ = [
    "EntryRepository",
]
