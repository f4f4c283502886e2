from .entry_service import EntryService


__all__ = [
    "EntryService",
]
