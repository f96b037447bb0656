"""Tests for the Firebase agenda adapter."""

from datetime import datetime
from unittest.mock import MagicMock

import pytest
import requests

from profe.adapters.firebase_agenda import AgendaStoreError, FirebaseAgendaAdapter
from profe.config import Config, Session
from profe.core.agenda import CalendarItem

DB_URL = "https://profe-test.firebaseio.com"


def response(payload=None, ok: bool = True, status_code: int = 200) -> MagicMock:
    resp = MagicMock()
    resp.ok = ok
    resp.status_code = status_code
    resp.json.return_value = payload
    return resp


@pytest.fixture
def adapter():
    adapter = FirebaseAgendaAdapter(
        config=Config(firebase_db_url=DB_URL),
        session=Session(uid="u1", id_token="tok"),
    )
    adapter._http = MagicMock()
    return adapter


@pytest.fixture
def item():
    return CalendarItem(
        id="ev1",
        title="Prova de matemática",
        kind="Prova",
        start=datetime(2024, 3, 5, 8),
        end=datetime(2024, 3, 5, 10),
    )


class TestFetch:
    def test_fetch_all_url_and_auth(self, adapter):
        adapter._http.get.return_value = response({})
        adapter.fetch_all()
        adapter._http.get.assert_called_once_with(
            f"{DB_URL}/users/u1/schedule/all.json",
            params={"auth": "tok"},
        )

    def test_fetch_by_class_url(self, adapter):
        adapter._http.get.return_value = response(None)
        assert adapter.fetch_by_class("inst", "cls") == []
        url = adapter._http.get.call_args.args[0]
        assert url == f"{DB_URL}/users/u1/schedule/byClass/inst/cls.json"

    def test_no_token_sends_no_auth(self, adapter):
        adapter.session.id_token = ""
        adapter._http.get.return_value = response({})
        adapter.fetch_all()
        assert adapter._http.get.call_args.kwargs["params"] == {}

    def test_backfills_id_from_key_and_sorts(self, adapter):
        adapter._http.get.return_value = response(
            {
                "k2": {"id": "", "title": "Late", "type": "Aula",
                       "start": "2024-03-05T14:00:00", "end": "2024-03-05T15:00:00"},
                "k1": {"id": "own", "title": "Early", "type": "Aula",
                       "start": "2024-03-05T08:00:00", "end": "2024-03-05T09:00:00"},
            }
        )
        items = adapter.fetch_all()
        assert [i.title for i in items] == ["Early", "Late"]
        assert [i.id for i in items] == ["own", "k2"]

    def test_skips_malformed_documents(self, adapter, caplog):
        adapter._http.get.return_value = response(
            {
                "bad": {"title": "No dates"},
                "null": None,
                "ok": {"title": "Fine", "start": "2024-03-05T08:00:00", "end": "2024-03-05T09:00:00"},
            }
        )
        items = adapter.fetch_all()
        assert [i.id for i in items] == ["ok"]
        assert "Skipping malformed agenda item bad" in caplog.text

    def test_http_error_propagates(self, adapter):
        resp = response()
        resp.raise_for_status.side_effect = requests.HTTPError("401")
        adapter._http.get.return_value = resp
        with pytest.raises(requests.HTTPError):
            adapter.fetch_all()

    def test_missing_session(self):
        adapter = FirebaseAgendaAdapter(config=Config(firebase_db_url=DB_URL), session=Session())
        with pytest.raises(AgendaStoreError, match="profe login"):
            adapter.fetch_all()

    def test_missing_db_url(self):
        adapter = FirebaseAgendaAdapter(config=Config(), session=Session(uid="u1"))
        with pytest.raises(AgendaStoreError, match="FIREBASE_DB_URL"):
            adapter.fetch_all()


class TestWrite:
    def test_upsert_puts_document(self, adapter, item):
        adapter._http.put.return_value = response()
        assert adapter.upsert(item) is True
        adapter._http.put.assert_called_once_with(
            f"{DB_URL}/users/u1/schedule/all/ev1.json",
            params={"auth": "tok"},
            json=item.to_dict(),
        )

    def test_upsert_assigns_missing_id(self, adapter, item):
        item.id = ""
        adapter._http.put.return_value = response()
        adapter.upsert(item)
        assert len(item.id) == 32
        assert adapter._http.put.call_args.args[0].endswith(f"/all/{item.id}.json")

    def test_upsert_for_class(self, adapter, item):
        adapter._http.put.return_value = response()
        adapter.upsert_for_class("inst", "cls", item)
        assert adapter._http.put.call_args.args[0] == f"{DB_URL}/users/u1/schedule/byClass/inst/cls/ev1.json"

    def test_upsert_failure_returns_false(self, adapter, item):
        adapter._http.put.return_value = response(ok=False, status_code=500)
        assert adapter.upsert(item) is False

    def test_delete(self, adapter):
        adapter._http.delete.return_value = response()
        assert adapter.delete("ev1") is True
        adapter._http.delete.assert_called_once_with(
            f"{DB_URL}/users/u1/schedule/all/ev1.json",
            params={"auth": "tok"},
        )

    def test_delete_for_class_failure(self, adapter):
        adapter._http.delete.return_value = response(ok=False, status_code=404)
        assert adapter.delete_for_class("inst", "cls", "ev1") is False
