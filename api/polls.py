"""Vercel serverless function for the book poll API."""

import json
import re
import sys
from pathlib import Path
from urllib.parse import parse_qs, urlparse

# Add the project root to the path so we can import bookpoll modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from bookpoll import config
from bookpoll.logging import configure_logging, get_logger
from bookpoll.polls import (
    PollError,
    PollNotFoundError,
    add_book,
    create_poll,
    delete_book,
    load_poll,
    peek_results,
    poll_results,
    save_draft,
    submit_vote,
    toggle_exclusion,
)
from bookpoll.session import ensure_session, get_or_create_session, remember_voter_name
from bookpoll.storage import StorageError, get_store

configure_logging(cli_mode=config.LOG_FORMAT == "console", log_level=config.LOG_LEVEL)
logger = get_logger(__name__)

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, DELETE, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}

ROUTES = [
    (re.compile(r"^/api/polls/?$"), "polls"),
    (re.compile(r"^/api/session/?$"), "session"),
    (re.compile(r"^/api/polls/(?P<poll_id>[\w-]+)/?$"), "poll"),
    (re.compile(r"^/api/polls/(?P<poll_id>[\w-]+)/results/?$"), "results"),
    (re.compile(r"^/api/polls/(?P<poll_id>[\w-]+)/books/?$"), "books"),
    (re.compile(r"^/api/polls/(?P<poll_id>[\w-]+)/books/(?P<book_id>[\w-]+)/?$"), "book"),
    (re.compile(r"^/api/polls/(?P<poll_id>[\w-]+)/draft/?$"), "draft"),
    (re.compile(r"^/api/polls/(?P<poll_id>[\w-]+)/vote/?$"), "vote"),
    (re.compile(r"^/api/polls/(?P<poll_id>[\w-]+)/exclude/?$"), "exclude"),
    (re.compile(r"^/api/polls/(?P<poll_id>[\w-]+)/peek/?$"), "peek"),
]

ALLOWED_METHODS = {
    "polls": {"POST"},
    "session": {"GET"},
    "poll": {"GET"},
    "results": {"GET"},
    "books": {"POST"},
    "book": {"DELETE"},
    "draft": {"POST"},
    "vote": {"POST"},
    "exclude": {"POST"},
    "peek": {"POST"},
}


def handler(request):
    """Handle incoming requests to the poll API.

    Routes:
    - POST   /api/polls                      {"name"}
    - GET    /api/session
    - GET    /api/polls/{id}
    - GET    /api/polls/{id}/results         ?system=Minimax
    - POST   /api/polls/{id}/books           {"title", "author", "addedBy"}
    - DELETE /api/polls/{id}/books/{bookId}  ?actor=...
    - POST   /api/polls/{id}/draft           {"voterName", "rankings"}
    - POST   /api/polls/{id}/vote            {"voterName", "rankings"}
    - POST   /api/polls/{id}/exclude         {"voterSessionId", "actorName"}
    - POST   /api/polls/{id}/peek            {"actorName"}

    Returns JSON; every poll-changing route returns the updated poll.
    """
    # Handle CORS preflight
    if request.method == "OPTIONS":
        return create_response("", status=204, headers=CORS_HEADERS)

    parsed = urlparse(request.path)
    query = {k: v[0] for k, v in parse_qs(parsed.query).items()}

    route, params = match_route(parsed.path)
    if route is None:
        return create_response({"error": "Not found"}, status=404)

    if request.method not in ALLOWED_METHODS[route]:
        return create_response(
            {"error": f"Method not allowed. Use {', '.join(sorted(ALLOWED_METHODS[route]))}."},
            status=405,
        )

    session_id, set_cookie = ensure_session(request.headers.get("cookie"))
    headers = {"Set-Cookie": set_cookie} if set_cookie else None

    try:
        with get_store() as store:
            status, body = dispatch(route, params, query, request, store, session_id)
        return create_response(body, status=status, headers=headers)

    except PollNotFoundError as e:
        return create_response({"error": str(e)}, status=404, headers=headers)
    except PollError as e:
        return create_response({"error": str(e)}, status=400, headers=headers)
    except UnicodeDecodeError:
        return create_response({"error": "Request body must be UTF-8"}, status=400, headers=headers)
    except json.JSONDecodeError as e:
        return create_response({"error": f"Invalid JSON: {e}"}, status=400, headers=headers)
    except StorageError:
        logger.exception("storage_failure", route=route)
        return create_response({"error": "Storage unavailable"}, status=500, headers=headers)
    except Exception as e:
        logger.exception("request_failed", route=route, method=request.method)
        return create_response({"error": f"Internal error: {e}"}, status=500, headers=headers)


def match_route(path: str) -> tuple[str | None, dict[str, str]]:
    for pattern, name in ROUTES:
        m = pattern.match(path)
        if m:
            return name, m.groupdict()
    return None, {}


def read_json(request) -> dict:
    body = request.body.decode("utf-8") if request.body else ""
    data = json.loads(body or "{}")
    if not isinstance(data, dict):
        raise PollError("Request body must be a JSON object")
    return data


def dispatch(route, params, query, request, store, session_id) -> tuple[int, dict]:
    """Run the operation for a matched route and return (status, body)."""
    if route == "session":
        return 200, get_or_create_session(store, session_id).to_dict()

    if route == "polls":
        data = read_json(request)
        return 201, create_poll(store, data.get("name")).to_dict()

    poll_id = params["poll_id"]

    if route == "poll":
        return 200, load_poll(store, poll_id).to_dict()

    if route == "results":
        poll = load_poll(store, poll_id)
        if "system" in query:
            result = poll_results(poll, query["system"])
        else:
            result = poll_results(poll)
        return 200, result.to_dict()

    if route == "book":
        return 200, delete_book(store, poll_id, params["book_id"], query.get("actor")).to_dict()

    data = read_json(request)

    if route == "books":
        poll = add_book(store, poll_id, data.get("title"), data.get("author"), data.get("addedBy"))
        return 201, poll.to_dict()

    if route == "draft":
        poll = save_draft(store, poll_id, data.get("voterName"), data.get("rankings"), session_id)
        return 200, poll.to_dict()

    if route == "vote":
        poll = submit_vote(store, poll_id, data.get("voterName"), data.get("rankings"), session_id)
        remember_voter_name(store, session_id, poll.voters[-1].name)
        return 200, poll.to_dict()

    if route == "exclude":
        poll = toggle_exclusion(store, poll_id, data.get("voterSessionId"), data.get("actorName"))
        return 200, poll.to_dict()

    if route == "peek":
        return 200, peek_results(store, poll_id, data.get("actorName")).to_dict()

    raise ValueError(f"Unhandled route: {route}")


def create_response(body, status: int = 200, headers: dict = None):
    """Create a response object for Vercel."""
    response_headers = {
        "Content-Type": "application/json",
        "Access-Control-Allow-Origin": "*",
    }
    if headers:
        response_headers.update(headers)

    if isinstance(body, dict):
        body = json.dumps(body)

    # Return in format expected by Vercel Python runtime
    return {
        "statusCode": status,
        "headers": response_headers,
        "body": body,
    }
