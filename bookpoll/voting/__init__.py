"""Voting systems for ranking candidate books."""

from .base import VotingSystem

# Voting system registry - import systems here to register them
_voting_systems: list[type[VotingSystem]] = []


def register_voting_system(system_class: type[VotingSystem]) -> type[VotingSystem]:
    """Decorator to register a voting system class."""
    _voting_systems.append(system_class)
    return system_class


def get_all_voting_systems() -> list[VotingSystem]:
    """Return instances of all registered voting systems."""
    return [system_class() for system_class in _voting_systems]


def get_voting_system(name: str) -> VotingSystem | None:
    """Return an instance of the registered system with the given name."""
    for system_class in _voting_systems:
        system = system_class()
        if system.name == name:
            return system
    return None
