"""Abstract base class for voting systems."""

from abc import ABC, abstractmethod

from bookpoll.models import Poll, VotingResult


class VotingSystem(ABC):
    """Abstract base class for voting systems.

    Each voting system implementation calculates a group ranking from
    the poll's tallyable voters using its own algorithm. Systems are
    registered via the @register_voting_system decorator in
    bookpoll/voting/__init__.py.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of this voting system."""
        pass

    @property
    def description(self) -> str:
        """Optional description of how this voting system works."""
        return ""

    @abstractmethod
    def calculate(self, poll: Poll) -> VotingResult:
        """Calculate the group ranking using this voting system.

        Only completed, non-excluded voters are counted.

        Args:
            poll: The poll with its books and voters

        Returns:
            VotingResult with the final ranking and calculation details
        """
        pass
