"""Pure agenda domain logic - no I/O dependencies."""

import re
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Callable, Iterable, Iterator

MULTI_DAY_KINDS = frozenset({"plano de aula", "plano", "evento"})

MONTHS_PT = (
    "janeiro",
    "fevereiro",
    "março",
    "abril",
    "maio",
    "junho",
    "julho",
    "agosto",
    "setembro",
    "outubro",
    "novembro",
    "dezembro",
)

WEEKDAYS_PT = (
    "segunda-feira",
    "terça-feira",
    "quarta-feira",
    "quinta-feira",
    "sexta-feira",
    "sábado",
    "domingo",
)

_FRACTION_PATTERN = re.compile(r"\.(\d+)")


def _six_digit_fraction(match: re.Match) -> str:
    return "." + match.group(1)[:6].ljust(6, "0")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp as written by the remote store.

    Fractional seconds of any length are cut or zero-padded to microseconds.
    """
    value = _FRACTION_PATTERN.sub(_six_digit_fraction, value.strip())
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


def local_naive(dt: datetime) -> datetime:
    """Convert an offset-aware datetime to naive local time."""
    if dt.tzinfo is None:
        return dt
    return dt.astimezone().replace(tzinfo=None)


@dataclass
class CalendarItem:
    """A stored agenda entry: lesson, lesson plan, event or exam."""

    id: str
    title: str
    kind: str
    start: datetime
    end: datetime
    description: str = ""
    institution_id: str = ""
    institution_name: str = ""
    class_id: str = ""
    class_name: str = ""
    created_at: datetime | None = None

    def span(self) -> tuple[datetime, datetime]:
        """Start and end, swapped if the stored end precedes the start."""
        if self.end < self.start:
            return self.end, self.start
        return self.start, self.end

    def is_multi_day_kind(self) -> bool:
        return self.kind.strip().lower() in MULTI_DAY_KINDS

    def has_class(self) -> bool:
        return bool(self.institution_id.strip() and self.class_id.strip())

    def format_time(self) -> str:
        """Format the item time for display, e.g. "08:00-09:00 • terça-feira"."""
        start, end = self.span()
        weekday = WEEKDAYS_PT[start.weekday()]
        return f"{start.strftime('%H:%M')}-{end.strftime('%H:%M')} • {weekday}"

    def is_past(self, now: datetime) -> bool:
        return self.span()[1] < now

    @classmethod
    def from_dict(cls, data: dict) -> "CalendarItem":
        created = data.get("createdAt")
        return cls(
            id=data.get("id") or "",
            title=data.get("title") or "",
            kind=data.get("type") or "Aula",
            start=local_naive(parse_timestamp(data["start"])),
            end=local_naive(parse_timestamp(data["end"])),
            description=data.get("description") or "",
            institution_id=data.get("institutionId") or "",
            institution_name=data.get("institutionName") or "",
            class_id=data.get("classId") or "",
            class_name=data.get("className") or "",
            created_at=parse_timestamp(created) if created else None,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "institutionId": self.institution_id,
            "institutionName": self.institution_name,
            "classId": self.class_id,
            "className": self.class_name,
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "type": self.kind,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class OccurrenceEntry:
    """One (day, item) pairing. `item` is the canonical item, never a copy."""

    day: date
    item: CalendarItem


class RowKind(Enum):
    HEADER = "header"
    ITEM = "item"


@dataclass(frozen=True)
class HeaderRow:
    day: date
    label: str
    kind: RowKind = field(default=RowKind.HEADER, init=False)


@dataclass(frozen=True)
class ItemRow:
    item: CalendarItem
    kind: RowKind = field(default=RowKind.ITEM, init=False)


DisplayRow = HeaderRow | ItemRow


class FilterMode(Enum):
    FROM_TODAY = "from_today"
    SHOW_ALL = "show_all"
    EXACT_DAY = "exact_day"


@dataclass(frozen=True)
class AgendaFilter:
    """The single active date predicate."""

    mode: FilterMode = FilterMode.FROM_TODAY
    day: date | None = None

    def __post_init__(self):
        if self.mode is FilterMode.EXACT_DAY and self.day is None:
            raise ValueError("EXACT_DAY filter requires a day")
        if self.mode is not FilterMode.EXACT_DAY and self.day is not None:
            raise ValueError(f"{self.mode.name} filter does not take a day")

    @classmethod
    def from_today(cls) -> "AgendaFilter":
        return cls(FilterMode.FROM_TODAY)

    @classmethod
    def show_all(cls) -> "AgendaFilter":
        return cls(FilterMode.SHOW_ALL)

    @classmethod
    def exact(cls, day: date) -> "AgendaFilter":
        return cls(FilterMode.EXACT_DAY, day)

    def accepts(self, day: date, reference_date: date) -> bool:
        match self.mode:
            case FilterMode.EXACT_DAY:
                return day == self.day
            case FilterMode.FROM_TODAY:
                return day >= reference_date
            case FilterMode.SHOW_ALL:
                return True


def iter_occurrences(item: CalendarItem) -> Iterator[OccurrenceEntry]:
    """Yield the days an item occupies on the agenda."""
    start, end = item.span()
    start_day, end_day = start.date(), end.date()

    if not item.is_multi_day_kind() or start_day == end_day:
        yield OccurrenceEntry(start_day, item)
        return

    day = start_day
    while day <= end_day:
        yield OccurrenceEntry(day, item)
        day += timedelta(days=1)


class Expansion:
    """
    Lazy expansion of items into occurrences.

    Each iteration walks the items again, so the expansion can be consumed
    any number of times.
    """

    def __init__(self, items: Iterable[CalendarItem]):
        self._items = tuple(items)

    def __iter__(self) -> Iterator[OccurrenceEntry]:
        for item in self._items:
            yield from iter_occurrences(item)


def expand(items: Iterable[CalendarItem]) -> Expansion:
    """
    Expand items into per-day occurrences, in input order.

    Multi-day kinds spanning several dates produce one occurrence per date;
    everything else produces a single occurrence on its start date.
    Pure function - no I/O.
    """
    return Expansion(items)


def filter_occurrences(
    occurrences: Iterable[OccurrenceEntry],
    agenda_filter: AgendaFilter,
    reference_date: date,
) -> list[OccurrenceEntry]:
    """
    Keep the occurrences accepted by the active filter.

    Pure function - no I/O.
    """
    return [o for o in occurrences if agenda_filter.accepts(o.day, reference_date)]


def format_header_label(day: date) -> str:
    """Portuguese long date, e.g. "01 de março de 2024"."""
    return f"{day.day:02d} de {MONTHS_PT[day.month - 1]} de {day.year}"


def sort_occurrences(occurrences: Iterable[OccurrenceEntry]) -> list[OccurrenceEntry]:
    """Sort by day, then start time of day. Ties keep input order."""
    return sorted(occurrences, key=lambda o: (o.day, o.item.span()[0].time()))


def build_rows(
    occurrences: Iterable[OccurrenceEntry],
    label_for: Callable[[date], str] = format_header_label,
) -> list[DisplayRow]:
    """
    Build the day-grouped row list.

    A header row precedes the first item of each distinct day.
    Pure function - no I/O.
    """
    rows: list[DisplayRow] = []
    current_day: date | None = None

    for occurrence in sort_occurrences(occurrences):
        if occurrence.day != current_day:
            rows.append(HeaderRow(occurrence.day, label_for(occurrence.day)))
            current_day = occurrence.day
        rows.append(ItemRow(occurrence.item))

    return rows


def build_agenda(
    items: Iterable[CalendarItem],
    agenda_filter: AgendaFilter,
    reference_date: date,
) -> list[DisplayRow]:
    """Expand, filter and group items into display rows."""
    occurrences = filter_occurrences(expand(items), agenda_filter, reference_date)
    return build_rows(occurrences)
