"""Browser sessions identified by a long-lived cookie."""

import uuid
from http.cookies import SimpleCookie

from bookpoll.logging import get_logger
from bookpoll.models import Session, now_ms
from bookpoll.storage import StorageError, Store, get_session, save_session

logger = get_logger(__name__)

SESSION_COOKIE_NAME = "bookpoll_session"
SESSION_MAX_AGE = 60 * 60 * 24 * 365 * 10  # 10 years


def session_id_from_cookie(cookie_header: str | None) -> str | None:
    """Extract the session id from a Cookie header, if present.

    Other cookies in the header may hold values SimpleCookie rejects
    (JSON, unquoted spaces); they are skipped without losing ours.
    """
    if not cookie_header:
        return None
    for pair in cookie_header.split(";"):
        name, sep, value = pair.strip().partition("=")
        if sep and name.strip() == SESSION_COOKIE_NAME:
            value = value.strip().strip('"')
            return value or None
    return None


def session_cookie(session_id: str) -> str:
    """Set-Cookie header value assigning the given session."""
    cookie = SimpleCookie()
    cookie[SESSION_COOKIE_NAME] = session_id
    morsel = cookie[SESSION_COOKIE_NAME]
    morsel["httponly"] = True
    morsel["samesite"] = "Lax"
    morsel["path"] = "/"
    morsel["max-age"] = SESSION_MAX_AGE
    return morsel.OutputString()


def ensure_session(cookie_header: str | None) -> tuple[str, str | None]:
    """Return (session_id, set_cookie), minting a new id if the request has none.

    set_cookie is None when the request already carried a session cookie.
    """
    session_id = session_id_from_cookie(cookie_header)
    if session_id is not None:
        return session_id, None
    session_id = str(uuid.uuid4())
    return session_id, session_cookie(session_id)


def get_or_create_session(store: Store, session_id: str) -> Session:
    """Load the session record, creating it on first use.

    If the store is unavailable, returns an unsaved session so the request
    can still go ahead.
    """
    try:
        session = get_session(store, session_id)
        if session is None:
            session = Session(id=session_id, name=None, created_at=now_ms())
            save_session(store, session)
        return session
    except StorageError:
        logger.exception("session_store_unavailable", session_id=session_id)
        return Session(id=session_id, name=None, created_at=now_ms())


def set_session_name(store: Store, session_id: str, name: str) -> None:
    """Remember the name used in this session, unless one is already set."""
    session = get_session(store, session_id)
    if session is not None and not session.name:
        session.name = name
        save_session(store, session)


def remember_voter_name(store: Store, session_id: str, name: str) -> None:
    """Record the name a vote was cast under against the voter's session.

    Called after the vote has been saved, so a store failure here is logged
    and dropped rather than failing the request.
    """
    try:
        get_or_create_session(store, session_id)
        set_session_name(store, session_id, name)
    except StorageError:
        logger.exception("session_name_not_saved", session_id=session_id)
