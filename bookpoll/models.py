"""Core data models for polls, ballots and ranking results."""

import time
from dataclasses import dataclass, field
from typing import Any, Self


def now_ms() -> int:
    """Current time as milliseconds since the epoch."""
    return int(time.time() * 1000)


@dataclass(frozen=True)
class Book:
    """A candidate book proposed for the poll.

    Attributes:
        id: Short opaque identifier, referenced by voter rankings
        title: Display title
        author: Display author
        added_by: Name of the person who proposed it
        added_at: Millisecond timestamp of when it was added
    """
    id: str
    title: str
    author: str
    added_by: str
    added_at: int

    @property
    def label(self) -> str:
        return f"{self.title} by {self.author}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "addedBy": self.added_by,
            "addedAt": self.added_at,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=data["id"],
            title=data["title"],
            author=data["author"],
            added_by=data["addedBy"],
            added_at=data["addedAt"],
        )


@dataclass(frozen=True)
class Draft:
    """Vote status of a ranking that has not been locked in yet."""


@dataclass(frozen=True)
class Completed:
    """Vote status of a locked-in ranking.

    Attributes:
        completed_at: Millisecond timestamp of when voting was completed
        excluded: Whether the ranking is left out of the tally
    """
    completed_at: int
    excluded: bool = False


VoteStatus = Draft | Completed


@dataclass
class Voter:
    """One participant's ranking submission.

    Attributes:
        name: Display name chosen by the voter
        rankings: Book ids from most to least preferred
        status: Draft() until the voter locks in, then Completed(...)
        session_id: Session of the browser that submitted the ranking
    """
    name: str
    rankings: list[str]
    status: VoteStatus = field(default_factory=Draft)
    session_id: str | None = None

    @property
    def is_completed(self) -> bool:
        return isinstance(self.status, Completed)

    @property
    def is_tallyable(self) -> bool:
        """Whether this ranking counts towards the result."""
        return isinstance(self.status, Completed) and not self.status.excluded

    def matches_name(self, name: str) -> bool:
        return self.name.lower() == name.strip().lower()

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "rankings": list(self.rankings)}
        if self.session_id is not None:
            data["sessionId"] = self.session_id
        if isinstance(self.status, Completed):
            data["completedAt"] = self.status.completed_at
            data["excluded"] = self.status.excluded
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        completed_at = data.get("completedAt")
        if completed_at is None:
            status: VoteStatus = Draft()
        else:
            status = Completed(completed_at, bool(data.get("excluded", False)))
        return cls(
            name=data["name"],
            rankings=list(data.get("rankings", [])),
            status=status,
            session_id=data.get("sessionId"),
        )


ACTIVITY_TYPES = (
    "book_added",
    "book_deleted",
    "voting_complete",
    "voter_excluded",
    "voter_included",
    "results_peeked",
)


@dataclass(frozen=True)
class Activity:
    """An entry in the poll's activity feed."""
    timestamp: int
    type: str
    actor: str
    detail: str | None = None

    def describe(self) -> str:
        """Human-readable line for the activity feed."""
        texts = {
            "book_added": f'{self.actor} added "{self.detail}"',
            "book_deleted": f'{self.actor} removed "{self.detail}"',
            "voting_complete": f"{self.actor} completed voting",
            "voter_excluded": f"{self.actor} excluded {self.detail}'s vote",
            "voter_included": f"{self.actor} included {self.detail}'s vote",
            "results_peeked": f"{self.actor} peeked at results before voting",
        }
        return texts.get(self.type, f"{self.actor}: {self.type}")

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "timestamp": self.timestamp,
            "type": self.type,
            "actor": self.actor,
        }
        if self.detail is not None:
            data["detail"] = self.detail
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            timestamp=data["timestamp"],
            type=data["type"],
            actor=data["actor"],
            detail=data.get("detail"),
        )


@dataclass
class Poll:
    """A poll with its candidate books, voters and activity feed."""
    id: str
    name: str
    created_at: int
    books: list[Book] = field(default_factory=list)
    voters: list[Voter] = field(default_factory=list)
    activity_log: list[Activity] = field(default_factory=list)

    def get_book(self, book_id: str) -> Book | None:
        for book in self.books:
            if book.id == book_id:
                return book
        return None

    def tallyable_voters(self) -> list[Voter]:
        """Completed, non-excluded voters, in submission order."""
        return [v for v in self.voters if v.is_tallyable]

    def log(self, type: str, actor: str, detail: str | None = None) -> Activity:
        if type not in ACTIVITY_TYPES:
            raise ValueError(f"Unknown activity type: {type}")
        activity = Activity(timestamp=now_ms(), type=type, actor=actor, detail=detail)
        self.activity_log.append(activity)
        return activity

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "createdAt": self.created_at,
            "books": [b.to_dict() for b in self.books],
            "voters": [v.to_dict() for v in self.voters],
            "activityLog": [a.to_dict() for a in self.activity_log],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=data["id"],
            name=data["name"],
            created_at=data["createdAt"],
            books=[Book.from_dict(b) for b in data.get("books", [])],
            voters=[Voter.from_dict(v) for v in data.get("voters", [])],
            activity_log=[Activity.from_dict(a) for a in data.get("activityLog", [])],
        )


@dataclass(frozen=True)
class RankedResult:
    """A book's place in the group ranking.

    Attributes:
        book: The ranked book
        worst_defeat: Largest net margin by which the book loses to any
            single opponent (zero or negative if it never loses on net)
        rank: 1-indexed placement (tied books share the same rank)
    """
    book: Book
    worst_defeat: int
    rank: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "book": self.book.to_dict(),
            "worstDefeat": self.worst_defeat,
            "rank": self.rank,
        }


def describe_worst_defeat(result: RankedResult) -> str:
    """Explain a result's score the way the results panel shows it."""
    if result.worst_defeat <= 0:
        return "Beats or ties all opponents"
    plural = "" if result.worst_defeat == 1 else "s"
    return f"Worst loss: {result.worst_defeat} vote{plural}"


@dataclass
class VotingResult:
    """Result from a voting system.

    Attributes:
        system_name: Human-readable name of the voting system
        final_ranking: Ranked books from 1st to last place
        details: System-specific details for transparency/debugging
                 (e.g., pairwise matrix, worst defeats, tie groups)
    """
    system_name: str
    final_ranking: list[RankedResult]
    details: dict[str, Any] = field(default_factory=dict)

    def get_place(self, book_id: str) -> int | None:
        """Get the 1-indexed placement for a book, or None if not found."""
        for r in self.final_ranking:
            if r.book.id == book_id:
                return r.rank
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "system_name": self.system_name,
            "final_ranking": [r.to_dict() for r in self.final_ranking],
            "details": self.details,
        }


@dataclass
class Session:
    """A browser session identified by cookie."""
    id: str
    name: str | None
    created_at: int

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "name": self.name, "createdAt": self.created_at}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(id=data["id"], name=data.get("name"), created_at=data["createdAt"])
