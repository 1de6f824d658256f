"""Poll operations: create polls, propose books, collect and tally votes.

Each operation loads the poll, changes it and saves it back. There is no
locking, so two writes to the same poll at the same moment can lose one of
them.
"""

import secrets
import string
from typing import Any

from bookpoll import config
from bookpoll.logging import get_logger
from bookpoll.models import Book, Completed, Draft, Poll, Voter, VotingResult, now_ms
from bookpoll.storage import Store, get_poll, save_poll
from bookpoll.voting import get_all_voting_systems, get_voting_system
from bookpoll.voting import minimax  # noqa: F401

logger = get_logger(__name__)

_ID_ALPHABET = string.ascii_letters + string.digits + "_-"
DEFAULT_SYSTEM = "Minimax"


class PollError(ValueError):
    """A request that cannot be applied to the poll."""
    pass


class PollNotFoundError(PollError):
    """The poll, book or voter referred to does not exist."""
    pass


def generate_id(length: int) -> str:
    """Random URL-safe identifier."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def _require_text(value: Any, message: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise PollError(message)
    return value.strip()


def _validate_rankings(poll: Poll, rankings: Any) -> list[str]:
    if not isinstance(rankings, list):
        raise PollError("Rankings must be an array")

    book_ids = {b.id for b in poll.books}
    for book_id in rankings:
        if not isinstance(book_id, str) or book_id not in book_ids:
            raise PollError("Invalid book ID in rankings")

    if len(set(rankings)) != len(rankings):
        raise PollError("Each book can only be ranked once")

    return list(rankings)


def create_poll(store: Store, name: Any) -> Poll:
    name = _require_text(name, "Poll name is required")
    poll = Poll(id=generate_id(config.POLL_ID_LENGTH), name=name, created_at=now_ms())
    save_poll(store, poll)
    logger.info("poll_created", poll_id=poll.id)
    return poll


def load_poll(store: Store, poll_id: str) -> Poll:
    poll = get_poll(store, poll_id)
    if poll is None:
        raise PollNotFoundError("Poll not found")
    return poll


def add_book(store: Store, poll_id: str, title: Any, author: Any, added_by: Any) -> Poll:
    title = _require_text(title, "Book title is required")
    author = _require_text(author, "Author name is required")
    added_by = _require_text(added_by, "Your name is required")

    poll = load_poll(store, poll_id)
    book = Book(
        id=generate_id(config.BOOK_ID_LENGTH),
        title=title,
        author=author,
        added_by=added_by,
        added_at=now_ms(),
    )
    poll.books.append(book)
    poll.log("book_added", added_by, book.label)
    save_poll(store, poll)
    logger.info("book_added", poll_id=poll_id, book_id=book.id)
    return poll


def delete_book(store: Store, poll_id: str, book_id: str, actor: Any) -> Poll:
    """Remove a book nobody has ranked yet."""
    actor = _require_text(actor, "Your name is required to delete a book")

    poll = load_poll(store, poll_id)
    book = poll.get_book(book_id)
    if book is None:
        raise PollNotFoundError("Book not found")

    if any(book_id in voter.rankings for voter in poll.voters):
        raise PollError("Cannot delete a book that has been voted for")

    poll.books.remove(book)
    poll.log("book_deleted", actor, book.label)
    save_poll(store, poll)
    logger.info("book_deleted", poll_id=poll_id, book_id=book_id)
    return poll


def save_draft(
    store: Store,
    poll_id: str,
    voter_name: Any,
    rankings: Any,
    session_id: str | None = None,
) -> Poll:
    """Store a voter's ranking in progress without counting it."""
    voter_name = _require_text(voter_name, "Your name is required")
    poll = load_poll(store, poll_id)
    rankings = _validate_rankings(poll, rankings)

    if any(v.matches_name(voter_name) and v.is_completed for v in poll.voters):
        raise PollError("A voter with this name has already completed voting")

    poll.voters = [v for v in poll.voters if not v.matches_name(voter_name)]
    poll.voters.append(Voter(
        name=voter_name,
        rankings=rankings,
        status=Draft(),
        session_id=session_id,
    ))
    save_poll(store, poll)
    return poll


def submit_vote(
    store: Store,
    poll_id: str,
    voter_name: Any,
    rankings: Any,
    session_id: str | None = None,
) -> Poll:
    """Lock in a voter's ranking so that it is counted."""
    voter_name = _require_text(voter_name, "Your name is required")
    poll = load_poll(store, poll_id)
    rankings = _validate_rankings(poll, rankings)

    if not rankings:
        raise PollError("Please rank at least one book before submitting")

    if any(v.matches_name(voter_name) and v.is_completed for v in poll.voters):
        raise PollError("A voter with this name has already completed voting")

    # Replace the voter's draft, if any
    poll.voters = [v for v in poll.voters if not v.matches_name(voter_name)]
    poll.voters.append(Voter(
        name=voter_name,
        rankings=rankings,
        status=Completed(completed_at=now_ms()),
        session_id=session_id,
    ))
    poll.log("voting_complete", voter_name)
    save_poll(store, poll)
    logger.info("vote_submitted", poll_id=poll_id, num_ranked=len(rankings))
    return poll


def toggle_exclusion(store: Store, poll_id: str, voter_session_id: Any, actor_name: Any) -> Poll:
    """Exclude a completed vote from the tally, or include it again."""
    if not isinstance(voter_session_id, str) or not voter_session_id:
        raise PollError("Voter session ID is required")
    actor_name = _require_text(actor_name, "Actor name is required")

    poll = load_poll(store, poll_id)
    voter = next(
        (v for v in poll.voters if v.session_id == voter_session_id and v.is_completed),
        None,
    )
    if voter is None:
        raise PollNotFoundError("Voter not found")

    status = voter.status
    voter.status = Completed(completed_at=status.completed_at, excluded=not status.excluded)
    poll.log(
        "voter_excluded" if voter.status.excluded else "voter_included",
        actor_name,
        voter.name,
    )
    save_poll(store, poll)
    logger.info(
        "voter_exclusion_toggled",
        poll_id=poll_id,
        excluded=voter.status.excluded,
    )
    return poll


def peek_results(store: Store, poll_id: str, actor_name: Any) -> Poll:
    """Record that someone looked at the results before voting."""
    actor_name = _require_text(actor_name, "Actor name is required")
    poll = load_poll(store, poll_id)
    poll.log("results_peeked", actor_name)
    save_poll(store, poll)
    return poll


def poll_results(poll: Poll, system_name: str = DEFAULT_SYSTEM) -> VotingResult:
    """Tally the poll's completed, non-excluded votes with the named system."""
    system = get_voting_system(system_name)
    if system is None:
        available = ", ".join(s.name for s in get_all_voting_systems())
        raise PollError(f"Unknown voting system: {system_name}. Available: {available}")
    return system.calculate(poll)
