"""Agenda repository interface."""

from typing import Protocol

from profe.core.agenda import CalendarItem


class AgendaRepository(Protocol):
    """Interface for reading and writing agenda items in the remote store."""

    def fetch_all(self) -> list[CalendarItem]:
        """Fetch the general agenda (all classes)."""
        ...

    def fetch_by_class(self, institution_id: str, class_id: str) -> list[CalendarItem]:
        """Fetch the agenda of a single class."""
        ...

    def upsert(self, item: CalendarItem) -> bool:
        """Create or replace an item in the general agenda."""
        ...

    def upsert_for_class(self, institution_id: str, class_id: str, item: CalendarItem) -> bool:
        """Create or replace an item in a class agenda."""
        ...

    def delete(self, item_id: str) -> bool:
        """Delete an item from the general agenda."""
        ...

    def delete_for_class(self, institution_id: str, class_id: str, item_id: str) -> bool:
        """Delete an item from a class agenda."""
        ...
