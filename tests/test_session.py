"""Tests for session cookies and session records."""

from unittest.mock import MagicMock

from bookpoll.models import Session
from bookpoll.session import (
    SESSION_COOKIE_NAME,
    ensure_session,
    get_or_create_session,
    remember_voter_name,
    session_cookie,
    session_id_from_cookie,
    set_session_name,
)
from bookpoll.storage import MemoryStore, StorageError, get_session, save_session


class TestSessionCookie:
    def test_reads_session_id(self):
        header = f"theme=dark; {SESSION_COOKIE_NAME}=abc-123"
        assert session_id_from_cookie(header) == "abc-123"

    def test_missing_header(self):
        assert session_id_from_cookie(None) is None
        assert session_id_from_cookie("") is None

    def test_other_cookies_only(self):
        assert session_id_from_cookie("theme=dark") is None

    def test_json_valued_neighbour(self):
        header = f'prefs={{"a":1}}; {SESSION_COOKIE_NAME}=abc'
        assert session_id_from_cookie(header) == "abc"

    def test_unquoted_space_neighbour(self):
        assert session_id_from_cookie(f"a=b c; {SESSION_COOKIE_NAME}=abc") == "abc"

    def test_quoted_value(self):
        assert session_id_from_cookie(f'{SESSION_COOKIE_NAME}="abc"') == "abc"

    def test_empty_value(self):
        assert session_id_from_cookie(f"{SESSION_COOKIE_NAME}=; theme=dark") is None

    def test_name_must_match_exactly(self):
        assert session_id_from_cookie(f"x{SESSION_COOKIE_NAME}=abc") is None

    def test_ensure_session_keeps_id_beside_bad_cookie(self):
        session_id, set_cookie = ensure_session(f'prefs={{"a":1}}; {SESSION_COOKIE_NAME}=abc')
        assert session_id == "abc"
        assert set_cookie is None

    def test_set_cookie_attributes(self):
        value = session_cookie("abc-123")
        assert value.startswith(f"{SESSION_COOKIE_NAME}=abc-123")
        assert "HttpOnly" in value
        assert "Path=/" in value
        assert "SameSite=Lax" in value
        assert f"Max-Age={60 * 60 * 24 * 365 * 10}" in value

    def test_ensure_session_keeps_existing(self):
        session_id, set_cookie = ensure_session(f"{SESSION_COOKIE_NAME}=abc-123")
        assert session_id == "abc-123"
        assert set_cookie is None

    def test_ensure_session_mints_new_id(self):
        session_id, set_cookie = ensure_session(None)
        assert len(session_id) == 36
        assert set_cookie.startswith(f"{SESSION_COOKIE_NAME}={session_id}")

    def test_new_ids_are_unique(self):
        assert ensure_session(None)[0] != ensure_session(None)[0]


class TestSessionRecords:
    def test_creates_missing_session(self):
        store = MemoryStore()
        session = get_or_create_session(store, "s1")
        assert session.id == "s1"
        assert session.name is None
        assert get_session(store, "s1") == session

    def test_returns_existing_session(self):
        store = MemoryStore()
        save_session(store, Session(id="s1", name="Ann", created_at=5))
        assert get_or_create_session(store, "s1").name == "Ann"

    def test_store_failure_returns_unsaved_session(self):
        store = MagicMock()
        store.get.side_effect = StorageError("down")
        session = get_or_create_session(store, "s1")
        assert session.id == "s1"
        store.set.assert_not_called()

    def test_set_name_once(self):
        store = MemoryStore()
        get_or_create_session(store, "s1")
        set_session_name(store, "s1", "Ann")
        set_session_name(store, "s1", "Bob")
        assert get_session(store, "s1").name == "Ann"

    def test_set_name_without_session_is_noop(self):
        store = MemoryStore()
        set_session_name(store, "s1", "Ann")
        assert get_session(store, "s1") is None

    def test_remember_voter_name(self):
        store = MemoryStore()
        remember_voter_name(store, "s1", "Ann")
        assert get_session(store, "s1").name == "Ann"

    def test_remember_voter_name_ignores_store_failure(self):
        store = MagicMock()
        store.get.return_value = None
        store.set.side_effect = StorageError("down")
        remember_voter_name(store, "s1", "Ann")

        store.get.side_effect = StorageError("down")
        remember_voter_name(store, "s1", "Ann")
