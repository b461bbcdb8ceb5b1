"""Base provider interfaces."""

from abc import ABC, abstractmethod


class BaseCompletionProvider(ABC):
    """Abstract base class for text-completion providers."""

    @abstractmethod
    async def complete(self, system_instructions: str, prompt: str) -> str:
        """Run one completion.

        Args:
            system_instructions: System-level instruction text.
            prompt: User prompt.

        Returns:
            Free-form response text, expected to embed one JSON object.
        """
        pass


class BaseSearchProvider(ABC):
    """Abstract base class for web-search answer providers."""

    @abstractmethod
    async def search(self, system_instructions: str, query: str) -> str:
        """Answer a natural-language query using live web results.

        Returns:
            Free-form answer text, expected to embed one JSON object.
        """
        pass
