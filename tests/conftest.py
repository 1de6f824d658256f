"""Shared test helpers."""

from bookpoll.models import Book, Completed, Draft, Poll, Voter


def make_books(*titles: str) -> list[Book]:
    """Build books whose ids are their titles, for readable rankings."""
    return [
        Book(id=title, title=title, author=f"Author of {title}", added_by="Tester", added_at=i)
        for i, title in enumerate(titles)
    ]


def make_voter(
    name: str,
    rankings: list[str],
    completed: bool = True,
    excluded: bool = False,
    session_id: str | None = None,
) -> Voter:
    status = Completed(completed_at=1000, excluded=excluded) if completed else Draft()
    return Voter(name=name, rankings=rankings, status=status, session_id=session_id)


def make_voters(rankings_table: dict[str, list[str]]) -> list[Voter]:
    """Build completed voters from a compact {name: ranking} table."""
    return [make_voter(name, ranking) for name, ranking in rankings_table.items()]


def make_poll(titles: list[str], rankings_table: dict[str, list[str]]) -> Poll:
    return Poll(
        id="poll1",
        name="Test Poll",
        created_at=0,
        books=make_books(*titles),
        voters=make_voters(rankings_table),
    )


def ranking_ids(results) -> list[str]:
    return [r.book.id for r in results]


def ranks(results) -> list[int]:
    return [r.rank for r in results]
