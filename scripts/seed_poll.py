"""Build a demo poll with fake books and voters, then show the tally.

Book titles, authors and voter names come from faker with a fixed seed,
so the same arguments always produce the same books and votes. Each voter ranks a
random subset of the books.

Usage:
    python scripts/seed_poll.py
    python scripts/seed_poll.py --books 6 --voters 9 --excluded 1
    python scripts/seed_poll.py --json -o demo-poll.json
"""

import argparse
import json
import random
import sys
from pathlib import Path

from faker import Faker

sys.path.insert(0, str(Path(__file__).parent.parent))

from bookpoll.logging import configure_logging, get_logger
from bookpoll.models import describe_worst_defeat
from bookpoll.polls import add_book, create_poll, load_poll, poll_results, submit_vote, toggle_exclusion
from bookpoll.storage import MemoryStore

SEED = 20260201

logger = get_logger(__name__)


def build_demo_poll(store, num_books: int, num_voters: int, num_excluded: int, seed: int):
    """Create a poll in the store and fill it with fake books and votes.

    Returns the poll id.
    """
    fake = Faker()
    fake.seed_instance(seed)
    rng = random.Random(seed)

    poll = create_poll(store, f"{fake.city()} Book Club")
    proposers = [fake.first_name() for _ in range(3)]
    for _ in range(num_books):
        title = fake.catch_phrase().title()
        add_book(store, poll.id, title, fake.name(), rng.choice(proposers))

    book_ids = [b.id for b in load_poll(store, poll.id).books]

    voter_name = fake.unique.first_name
    session_ids = []
    for i in range(num_voters):
        # Most voters rank everything, some only their favourites
        k = len(book_ids) if rng.random() < 0.7 else rng.randint(1, len(book_ids))
        rankings = rng.sample(book_ids, k)
        session_id = f"demo-session-{i}"
        submit_vote(store, poll.id, voter_name(), rankings, session_id=session_id)
        session_ids.append(session_id)

    for session_id in rng.sample(session_ids, min(num_excluded, len(session_ids))):
        toggle_exclusion(store, poll.id, session_id, rng.choice(proposers))

    return poll.id


def format_results(poll) -> str:
    result = poll_results(poll)
    counted = result.details["num_votes"]
    lines = [
        f"{poll.name}: {len(poll.books)} books, {counted} of {len(poll.voters)} votes counted",
        "",
    ]
    for r in result.final_ranking:
        lines.append(f"#{r.rank:<3} {r.book.label}")
        lines.append(f"     {describe_worst_defeat(r)}")
    return "\n".join(lines)


def main():
    parser = argparse.ArgumentParser(
        description="Seed a demo book poll and print its results")
    parser.add_argument("--books", type=int, default=5,
                        help="Number of books to propose (default: 5)")
    parser.add_argument("--voters", type=int, default=7,
                        help="Number of voters (default: 7)")
    parser.add_argument("--excluded", type=int, default=0,
                        help="Number of votes to exclude from the tally (default: 0)")
    parser.add_argument("--seed", type=int, default=SEED,
                        help=f"Random seed (default: {SEED})")
    parser.add_argument("--json", action="store_true",
                        help="Print the poll as JSON instead of the results table")
    parser.add_argument("-o", "--output",
                        help="Write output to this file instead of stdout")
    args = parser.parse_args()

    configure_logging(cli_mode=True, log_level="WARNING")

    if args.books < 1:
        parser.error("--books must be at least 1")

    store = MemoryStore()
    poll_id = build_demo_poll(store, args.books, args.voters, args.excluded, args.seed)
    poll = load_poll(store, poll_id)

    if args.json:
        output = json.dumps(poll.to_dict(), indent=2)
    else:
        output = format_results(poll)

    if args.output:
        output_path = Path(args.output)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(output + "\n", encoding="utf-8")
        print(f"Written to {output_path}")
    else:
        print(output)

    logger.info("demo_poll_seeded", poll_id=poll_id, books=args.books, voters=args.voters)


if __name__ == "__main__":
    main()
