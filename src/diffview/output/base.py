"""Base formatter interface for diffview."""

from abc import ABC, abstractmethod

from diffview.core.types import DiffView


class Formatter(ABC):
    """Abstract base class for output formatters."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique identifier for this formatter."""
        pass

    @abstractmethod
    def format(self, view: DiffView, color: bool = True) -> str:
        """Format a laid-out diff.

        Args:
            view: The diff view to format.
            color: Whether ANSI colors may be used.

        Returns:
            Formatted output as a string.
        """
        pass
