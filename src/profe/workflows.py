"""Agenda workflow layer between the CLI and the data collaborators.

AgendaController owns the scope (all classes or one class), loads the cached
agenda before the remote one, and pushes every change to both the general
and the per-class agenda.
"""

import logging
from dataclasses import dataclass, replace
from datetime import date
from pathlib import Path
from typing import Callable

import requests

from .adapters.file_cache import FileAgendaCache
from .adapters.firebase_agenda import AgendaStoreError, FirebaseAgendaAdapter
from .config import CACHE_DIR, Config, Session
from .core.agenda import AgendaFilter, CalendarItem, DisplayRow, FilterMode
from .core.agenda_view import AgendaView
from .ports import AgendaCache, AgendaRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AgendaScope:
    """A single class whose agenda is shown instead of the general one."""

    institution_id: str
    class_id: str
    institution_name: str = ""
    class_name: str = ""

    def is_complete(self) -> bool:
        return bool(self.institution_id.strip() and self.class_id.strip())


def describe_scope(scope: AgendaScope | None) -> str:
    if scope is None:
        return "Geral (todas as turmas)"
    return f"Turma: {scope.institution_name} • {scope.class_name}"


class AgendaController:
    """Loads, refreshes and edits the agenda for one user."""

    def __init__(
        self,
        repo: AgendaRepository,
        cache: AgendaCache,
        view: AgendaView | None = None,
        scope: AgendaScope | None = None,
    ):
        self.repo = repo
        self.cache = cache
        self.view = view or AgendaView()
        self.scope = scope

    # ============== Loading ==============

    def load(self) -> None:
        """Show the cached agenda, then replace it with the remote one."""
        if not self.view.items:
            cached = self._load_cache()
            if cached:
                self.view.set_items(sorted(cached, key=lambda i: i.start))
                logger.debug(f"Loaded {len(cached)} cached items")
        self.refresh()

    def refresh(self) -> bool:
        """Fetch the current scope. On failure the previous items stay."""
        if self.scope is not None and not self.scope.is_complete():
            return False

        try:
            if self.scope is None:
                items = self.repo.fetch_all()
            else:
                items = self.repo.fetch_by_class(self.scope.institution_id, self.scope.class_id)
        except (requests.RequestException, AgendaStoreError) as e:
            logger.warning(f"Agenda fetch failed, keeping {len(self.view.items)} items: {e}")
            return False

        self.view.set_items(items)
        self._save_cache(items)
        logger.info(f"Fetched {len(items)} agenda items ({describe_scope(self.scope)})")
        return True

    def select_all(self) -> None:
        self.scope = None
        self.view.set_items([])
        self.load()

    def select_class(self, scope: AgendaScope) -> None:
        self.scope = scope
        self.view.set_items([])
        self.load()

    # ============== Editing ==============

    def add(self, item: CalendarItem) -> CalendarItem | None:
        """Save a copy of item to the general agenda and, if linked, its class.

        Returns the saved copy, or None if the general agenda rejected it.
        The caller's item is left untouched.
        """
        item = replace(item)
        if self.scope is not None:
            item.institution_id = self.scope.institution_id
            item.class_id = self.scope.class_id
            item.institution_name = item.institution_name or self.scope.institution_name
            item.class_name = item.class_name or self.scope.class_name

        if not self.repo.upsert(item):
            return None
        if item.has_class():
            self.repo.upsert_for_class(item.institution_id, item.class_id, item)

        self.view.set_items([*self.view.items, item])
        self._persist()
        return item

    def update(self, item_id: str, **changes) -> CalendarItem | None:
        """Apply changes to the item with this id. Returns the saved item."""
        items = self.view.items
        index = self._index_of(items, item_id)
        if index is None:
            return None

        updated = replace(items[index], **changes)
        if not self.repo.upsert(updated):
            return None
        if updated.has_class():
            self.repo.upsert_for_class(updated.institution_id, updated.class_id, updated)

        items[index] = updated
        self.view.set_items(items)
        self._persist()
        return updated

    def delete(self, item_id: str) -> bool:
        items = self.view.items
        index = self._index_of(items, item_id)
        if index is None:
            return False

        item = items.pop(index)
        self.repo.delete(item.id)
        if item.has_class():
            self.repo.delete_for_class(item.institution_id, item.class_id, item.id)

        self.view.set_items(items)
        self._persist()
        return True

    # ============== View ==============

    def rows(self) -> list[DisplayRow]:
        return self.view.get_rows()

    def find(self, item_id: str) -> CalendarItem | None:
        index = self._index_of(self.view.items, item_id)
        return None if index is None else self.view.items[index]

    def set_filter_mode(self, mode: FilterMode, exact_day: date | None = None) -> None:
        self.view.set_filter_mode(mode, exact_day)

    def set_show_past(self, enabled: bool) -> None:
        self.view.set_show_past(enabled)

    # ============== Cache ==============

    @staticmethod
    def _index_of(items: list[CalendarItem], item_id: str) -> int | None:
        return next((i for i, item in enumerate(items) if item.id == item_id), None)

    def _load_cache(self) -> list[CalendarItem] | None:
        if self.scope is None:
            return self.cache.load_all()
        return self.cache.load_class(self.scope.institution_id, self.scope.class_id)

    def _save_cache(self, items: list[CalendarItem]) -> None:
        if self.scope is None:
            self.cache.save_all(items)
        else:
            self.cache.save_class(self.scope.institution_id, self.scope.class_id, items)

    def _persist(self) -> None:
        self._save_cache(sorted(self.view.items, key=lambda i: i.start))


def get_cache(config: Config) -> FileAgendaCache:
    """Resolve cache directory from config."""
    if config.cache_dir:
        return FileAgendaCache(Path(config.cache_dir).expanduser())
    return FileAgendaCache(CACHE_DIR)


def default_scope(config: Config) -> AgendaScope | None:
    scope = AgendaScope(
        institution_id=config.institution_id,
        class_id=config.class_id,
        institution_name=config.institution_name,
        class_name=config.class_name,
    )
    return scope if scope.is_complete() else None


def build_controller(
    config: Config,
    session: Session | None = None,
    today: Callable[[], date] = date.today,
) -> AgendaController:
    """Wire the Firebase adapter, file cache and view from config."""
    view = AgendaView(AgendaFilter(FilterMode(config.default_filter)), today=today)
    return AgendaController(
        repo=FirebaseAgendaAdapter(config, session or Session.load()),
        cache=get_cache(config),
        view=view,
        scope=default_scope(config),
    )
