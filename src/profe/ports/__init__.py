"""Ports - interfaces/protocols for external dependencies."""

from .agenda_repo import AgendaRepository
from .agenda_cache import AgendaCache

__all__ = [
    "AgendaRepository",
    "AgendaCache",
]
