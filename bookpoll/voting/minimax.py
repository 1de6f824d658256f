"""Minimax Condorcet voting system."""

from collections.abc import Iterable, Sequence

from bookpoll.models import Book, Poll, RankedResult, Voter, VotingResult
from bookpoll.voting import register_voting_system
from bookpoll.voting.base import VotingSystem


def pairwise_preferences(
    book_ids: Sequence[str], voters: Iterable[Voter]
) -> dict[str, dict[str, int]]:
    """Count, for every ordered pair of books, the voters preferring one over the other.

    d[A][B] is the number of voters who rank A somewhere above B. A book
    missing from a voter's ranking gives no information about that voter's
    preference for it. Ids that are not among book_ids are skipped, and a
    repeated id only counts at its first position.
    """
    known = set(book_ids)
    d = {a: {b: 0 for b in book_ids if b != a} for a in book_ids}

    for voter in voters:
        ranking = [b for b in dict.fromkeys(voter.rankings) if b in known]
        for i, preferred in enumerate(ranking):
            for less_preferred in ranking[i + 1:]:
                d[preferred][less_preferred] += 1

    return d


def worst_defeats(
    book_ids: Sequence[str], d: dict[str, dict[str, int]]
) -> dict[str, int]:
    """Largest net pairwise loss of each book against any single opponent.

    A book without opponents has a worst defeat of 0.
    """
    result = {}
    for book_id in book_ids:
        margins = [d[other][book_id] - d[book_id][other] for other in d[book_id]]
        result[book_id] = max(margins) if margins else 0
    return result


def compute_ranking(books: Sequence[Book], voters: Sequence[Voter]) -> list[RankedResult]:
    """Rank books by their worst pairwise defeat, smallest first.

    The caller passes only the voters that should be counted. Books with
    equal worst defeats keep their input order and share a rank; the next
    distinct value resumes at its position (1, 1, 3).

    With no books or no voters, every book gets a worst defeat of 0 and
    is ranked in input order.
    """
    if not books or not voters:
        return [
            RankedResult(book=book, worst_defeat=0, rank=i + 1)
            for i, book in enumerate(books)
        ]

    book_ids = [b.id for b in books]
    defeats = worst_defeats(book_ids, pairwise_preferences(book_ids, voters))

    # sorted() is stable, so ties stay in input order
    ordered = sorted(books, key=lambda b: defeats[b.id])

    results = []
    rank = 1
    for i, book in enumerate(ordered):
        if i > 0 and defeats[book.id] != defeats[ordered[i - 1].id]:
            rank = i + 1
        results.append(RankedResult(book=book, worst_defeat=defeats[book.id], rank=rank))

    return results


def _tie_groups(results: list[RankedResult]) -> list[list[str]]:
    """Book ids sharing a rank, for each rank held by more than one book."""
    groups: dict[int, list[str]] = {}
    for r in results:
        groups.setdefault(r.rank, []).append(r.book.id)
    return [g for g in groups.values() if len(g) > 1]


@register_voting_system
class MinimaxSystem(VotingSystem):
    """Minimax Condorcet voting system.

    A Condorcet method that ranks books by their worst pairwise defeat.
    A Condorcet winner never loses on net, so its worst defeat is zero
    or negative and it is ranked first.

    Algorithm:
    1. Build pairwise preference matrix: d[A][B] = voters preferring A over B
    2. Worst defeat of A = max over opponents B of d[B][A] - d[A][B]
    3. Sort by worst defeat ascending (smaller is better)
    4. Equal worst defeats share a rank (competition ranking)

    Complexity: O(n² × v) for n books and v voters.
    """

    @property
    def name(self) -> str:
        return "Minimax"

    @property
    def description(self) -> str:
        return "Condorcet method ranking each book by its largest pairwise defeat margin"

    def calculate(self, poll: Poll) -> VotingResult:
        voters = poll.tallyable_voters()
        book_ids = [b.id for b in poll.books]

        d = pairwise_preferences(book_ids, voters)
        final_ranking = compute_ranking(poll.books, voters)

        return VotingResult(
            system_name=self.name,
            final_ranking=final_ranking,
            details={
                "pairwise_preferences": d,
                "worst_defeats": {r.book.id: r.worst_defeat for r in final_ranking},
                "num_votes": len(voters),
                "ties": _tie_groups(final_ranking),
                "explanation": (
                    "Each cell d[A][B] shows voters preferring A over B. "
                    "A book's worst defeat is the largest margin by which any "
                    "single opponent beats it. Books are ranked by worst "
                    "defeat, smallest first; equal worst defeats share a rank."
                ),
            },
        )
