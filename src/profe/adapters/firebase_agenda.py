"""Firebase Realtime Database adapter - HTTP client for agenda items."""

import logging
import uuid

import requests

from profe.config import Config, Session, load_config
from profe.core.agenda import CalendarItem

logger = logging.getLogger(__name__)


class AgendaStoreError(Exception):
    """Raised when the remote agenda cannot be addressed."""

    pass


class FirebaseAgendaAdapter:
    """
    Firebase Realtime Database agenda adapter.

    Implements AgendaRepository protocol. Items live under
    users/{uid}/schedule/all and users/{uid}/schedule/byClass/{inst}/{cls},
    keyed by item id. No business logic - just I/O.
    """

    def __init__(self, config: Config | None = None, session: Session | None = None):
        self.config = config or load_config()
        self.session = session or Session.load()
        self._http = requests.Session()

    def _base(self) -> str:
        if not self.config.firebase_db_url:
            raise AgendaStoreError("Missing FIREBASE_DB_URL. Add it to config/profe.conf")
        if not self.session.uid:
            raise AgendaStoreError("No session. Run 'profe login' first.")
        return f"{self.config.firebase_db_url}/users/{self.session.uid}/schedule"

    def _url(self, *parts: str) -> str:
        return "/".join([self._base(), *parts]) + ".json"

    def _params(self) -> dict:
        if not self.session.id_token.strip():
            return {}
        return {"auth": self.session.id_token}

    def _fetch(self, url: str) -> list[CalendarItem]:
        resp = self._http.get(url, params=self._params())
        resp.raise_for_status()
        data = resp.json() or {}

        items = []
        for key, doc in data.items():
            try:
                item = CalendarItem.from_dict(doc)
            except (KeyError, ValueError, TypeError, AttributeError) as e:
                logger.warning(f"Skipping malformed agenda item {key}: {e}")
                continue
            if not item.id.strip():
                item.id = key
            items.append(item)

        return sorted(items, key=lambda i: i.start)

    def _put(self, url: str, item: CalendarItem) -> bool:
        resp = self._http.put(url, params=self._params(), json=item.to_dict())
        if not resp.ok:
            logger.warning(f"Upsert of {item.id} failed: {resp.status_code}")
        return resp.ok

    def _delete(self, url: str) -> bool:
        resp = self._http.delete(url, params=self._params())
        if not resp.ok:
            logger.warning(f"Delete of {url} failed: {resp.status_code}")
        return resp.ok

    @staticmethod
    def _ensure_id(item: CalendarItem) -> None:
        if not item.id.strip():
            item.id = uuid.uuid4().hex

    def fetch_all(self) -> list[CalendarItem]:
        """Fetch the general agenda."""
        return self._fetch(self._url("all"))

    def fetch_by_class(self, institution_id: str, class_id: str) -> list[CalendarItem]:
        """Fetch a class agenda."""
        return self._fetch(self._url("byClass", institution_id, class_id))

    def upsert(self, item: CalendarItem) -> bool:
        self._ensure_id(item)
        return self._put(self._url("all", item.id), item)

    def upsert_for_class(self, institution_id: str, class_id: str, item: CalendarItem) -> bool:
        self._ensure_id(item)
        return self._put(self._url("byClass", institution_id, class_id, item.id), item)

    def delete(self, item_id: str) -> bool:
        return self._delete(self._url("all", item_id))

    def delete_for_class(self, institution_id: str, class_id: str, item_id: str) -> bool:
        return self._delete(self._url("byClass", institution_id, class_id, item_id))
