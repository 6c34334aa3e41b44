"""Task repository protocol."""

from typing import Protocol

from domain.entities.task import Task


class ITaskRepository(Protocol):
    """Persistence port for the whole task collection."""

    def load(self) -> list[Task] | None:
        """Load every stored task, or None when nothing was stored yet.

        Raises PersistenceError when stored data cannot be read.
        """
        ...

    def save(self, tasks: list[Task]) -> None:
        """Overwrite the stored collection. Raises PersistenceError on failure."""
        ...

    def describe(self) -> str:
        """Human-readable location of the store (for logs)."""
        ...

    def check(self) -> str:
        """Return "healthy" or a short description of the storage problem."""
        ...
