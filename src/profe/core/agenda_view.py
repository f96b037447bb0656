"""Agenda list state: current items plus filter, materialized as rows."""

from datetime import date
from typing import Callable, Iterable

from .agenda import AgendaFilter, CalendarItem, DisplayRow, FilterMode, build_agenda


class AgendaView:
    """
    Holds the working set of items and the active filter.

    Every setter rebuilds the rows from scratch, so the rows are always a
    function of the last items and filter given. The reference date for
    FROM_TODAY is read from `today` at rebuild time.
    """

    def __init__(
        self,
        agenda_filter: AgendaFilter | None = None,
        today: Callable[[], date] = date.today,
    ):
        self._today = today
        self._items: tuple[CalendarItem, ...] = ()
        self._filter = agenda_filter or AgendaFilter.from_today()
        self._rows: tuple[DisplayRow, ...] = ()

    @property
    def items(self) -> list[CalendarItem]:
        return list(self._items)

    @property
    def agenda_filter(self) -> AgendaFilter:
        return self._filter

    @property
    def show_past(self) -> bool:
        return self._filter.mode is FilterMode.SHOW_ALL

    @property
    def is_empty(self) -> bool:
        return not self._rows

    def set_items(self, items: Iterable[CalendarItem]) -> None:
        """Replace the whole working set."""
        self._items = tuple(items)
        self._rebuild()

    def set_filter(self, agenda_filter: AgendaFilter) -> None:
        self._filter = agenda_filter
        self._rebuild()

    def set_filter_mode(self, mode: FilterMode, exact_day: date | None = None) -> None:
        """Switch filter mode. EXACT_DAY needs `exact_day` and turns show-past off."""
        if mode is FilterMode.EXACT_DAY:
            self.set_filter(AgendaFilter.exact(exact_day))
        else:
            self.set_filter(AgendaFilter(mode))

    def set_show_past(self, enabled: bool) -> None:
        """Toggle past items. Enabling clears any exact-day filter."""
        self.set_filter(AgendaFilter.show_all() if enabled else AgendaFilter.from_today())

    def get_rows(self) -> list[DisplayRow]:
        return list(self._rows)

    def _rebuild(self) -> None:
        self._rows = tuple(build_agenda(self._items, self._filter, self._today()))
