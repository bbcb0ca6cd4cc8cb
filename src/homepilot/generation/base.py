"""Base interface for text generators."""

from __future__ import annotations

from abc import ABC, abstractmethod


class TextGenerator(ABC):
    """
    Abstract interface for external text-generation services.
    Implementations: OpenAI-compatible chat completions (Featherless, etc.).
    """

    @abstractmethod
    def generate(self, prompt: str, system_prompt: str | None = None) -> str:
        """
        Send one prompt and return the raw response text.
        The text is untrusted and may be truncated.
        """
        ...

    @property
    @abstractmethod
    def source_name(self) -> str:
        """Identifier for this generator."""
        ...
