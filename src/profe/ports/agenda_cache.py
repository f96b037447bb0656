"""Local agenda cache interface."""

from typing import Protocol

from profe.core.agenda import CalendarItem


class AgendaCache(Protocol):
    """Interface for the on-device copy of the agenda."""

    def load_all(self) -> list[CalendarItem] | None:
        """Load the cached general agenda. Returns None if nothing is cached."""
        ...

    def save_all(self, items: list[CalendarItem]) -> None:
        ...

    def load_class(self, institution_id: str, class_id: str) -> list[CalendarItem] | None:
        """Load a cached class agenda. Returns None if nothing is cached."""
        ...

    def save_class(self, institution_id: str, class_id: str, items: list[CalendarItem]) -> None:
        ...
