"""File-based agenda cache adapter."""

import json
import logging
from pathlib import Path

from profe.core.agenda import CalendarItem

logger = logging.getLogger(__name__)


class FileAgendaCache:
    """
    File-based agenda cache.

    Implements AgendaCache protocol. The general agenda and each class
    agenda get their own JSON file.
    """

    def __init__(self, cache_dir: Path | str):
        self.cache_dir = Path(cache_dir).expanduser()

    def _all_path(self) -> Path:
        return self.cache_dir / "agenda_all.json"

    def _class_path(self, institution_id: str, class_id: str) -> Path:
        return self.cache_dir / f"agenda_{institution_id}_{class_id}.json"

    def _save(self, path: Path, items: list[CalendarItem]) -> None:
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps([i.to_dict() for i in items], indent=2, ensure_ascii=False))

    def _load(self, path: Path) -> list[CalendarItem] | None:
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text())
            return [CalendarItem.from_dict(doc) for doc in data]
        except (json.JSONDecodeError, KeyError, ValueError, TypeError, AttributeError) as e:
            logger.warning(f"Ignoring unreadable cache {path.name}: {e}")
            return None

    def load_all(self) -> list[CalendarItem] | None:
        return self._load(self._all_path())

    def save_all(self, items: list[CalendarItem]) -> None:
        self._save(self._all_path(), items)

    def load_class(self, institution_id: str, class_id: str) -> list[CalendarItem] | None:
        return self._load(self._class_path(institution_id, class_id))

    def save_class(self, institution_id: str, class_id: str, items: list[CalendarItem]) -> None:
        self._save(self._class_path(institution_id, class_id), items)
