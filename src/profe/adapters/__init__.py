"""Adapters - I/O implementations of ports."""

from .firebase_agenda import FirebaseAgendaAdapter, AgendaStoreError
from .file_cache import FileAgendaCache

__all__ = [
    "FirebaseAgendaAdapter",
    "AgendaStoreError",
    "FileAgendaCache",
]
