"""Functional core - pure business logic with no I/O."""

from .agenda import (
    AgendaFilter,
    CalendarItem,
    DisplayRow,
    FilterMode,
    HeaderRow,
    ItemRow,
    OccurrenceEntry,
    RowKind,
    build_agenda,
    build_rows,
    expand,
    filter_occurrences,
    format_header_label,
)
from .agenda_view import AgendaView

__all__ = [
    # Items and rows
    "CalendarItem",
    "OccurrenceEntry",
    "DisplayRow",
    "HeaderRow",
    "ItemRow",
    "RowKind",
    # Filtering
    "AgendaFilter",
    "FilterMode",
    # Pipeline
    "expand",
    "filter_occurrences",
    "build_rows",
    "build_agenda",
    "format_header_label",
    # State
    "AgendaView",
]
