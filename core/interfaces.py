"""Abstract base classes for dependency injection."""

from abc import ABC, abstractmethod

from .models import WordEntry


class Grader(ABC):
    """Decides whether the learner knew a word when moving past it."""

    @abstractmethod
    def grade(self, entry: WordEntry, answer: str | None = None) -> bool:
        """Return True if the word counts as correct. `answer` is the learner's typed
        definition, if the front end collected one."""
        pass


class Storage(ABC):
    """Abstract base class for learner state and config storage."""

    @abstractmethod
    def load_config(self) -> dict:
        """Load configuration. Returns config dict."""
        pass

    @abstractmethod
    def load_state(self, user_id: str = "default") -> dict | None:
        """Load learner state for a user. Returns state dict or None if not found."""
        pass

    @abstractmethod
    def save_state(self, state: dict, user_id: str = "default") -> None:
        """Save learner state for a user."""
        pass

    @abstractmethod
    def list_users(self) -> list[str]:
        """List all existing user IDs."""
        pass

    @abstractmethod
    def user_exists(self, user_id: str) -> bool:
        """Check if a user has saved state."""
        pass

    @abstractmethod
    def delete_user(self, user_id: str) -> bool:
        """Delete a user's state. Returns True if something was deleted."""
        pass
