"""
Shared engine interface for pluggable generation backends.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass
class Turn:
    """One prior chat turn sent as history."""
    role: str  # "user" | "model"
    text: str


@dataclass
class EngineResponse:
    """Raw reply from any engine, before fence extraction."""
    text: str
    model: str


class GenerationEngine(ABC):
    """Abstract base for vendor-specific sketch generators."""

    name: str = ""
    supports_models: list[str] = []

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        model: str,
        temperature: float,
        history: list[Turn] | None = None,
    ) -> EngineResponse:
        """
        Send one prompt in a fresh chat session constrained to code-only replies.

        Args:
            prompt: Natural-language description of the sketch.
            model: Vendor model id (e.g. "gemini-2.0-flash").
            temperature: Sampling temperature.
            history: Optional prior turns, oldest first.

        Returns:
            EngineResponse with the reply text as received.
        """
        ...
