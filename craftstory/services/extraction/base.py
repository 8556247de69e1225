"""
Abstract base class for structured extraction.

The onboarding flow, quick onboarding, craft listings and the assistant
only see this interface. Every method may raise ``ExtractionError``;
callers catch it at the call site and fall back to the heuristics module.
"""

from abc import ABC, abstractmethod
from typing import Any

from craftstory.core.models import (
    ArtisanBio,
    CaptionSuggestions,
    ConversationMessage,
    CraftDescription,
    OnboardingQuestion,
    ProcessedAnswer,
)


class BaseExtractor(ABC):
    """Interface for turning transcripts into questions and profile data."""

    @abstractmethod
    async def generate_questions(
        self, transcript: str, language: str
    ) -> list[OnboardingQuestion]:
        """Build the onboarding question list from an introductory transcript."""

    @abstractmethod
    async def process_answer(
        self,
        question: OnboardingQuestion,
        answer: str,
        language: str,
        profile: dict[str, Any],
    ) -> ProcessedAnswer:
        """Extract a profile update (and optional follow-up) from one answer."""

    @abstractmethod
    async def generate_bio(self, profile: dict[str, Any], language: str) -> str:
        """Write a short marketplace bio from the collected profile."""

    @abstractmethod
    async def extract_profile(self, transcript: str, language: str) -> ArtisanBio:
        """Extract name, craft, location and bio from a single introduction."""

    @abstractmethod
    async def describe_craft(self, craft: dict[str, Any], language: str) -> CraftDescription:
        """Write listing copy (description, myth, story, tags) for one craft piece."""

    @abstractmethod
    async def suggest_captions(
        self, description: str, language: str, tone: str = "storytelling"
    ) -> CaptionSuggestions:
        """Suggest social media captions and hashtags for a described piece."""

    @abstractmethod
    async def reply(
        self,
        user_input: str,
        context: str,
        history: list[ConversationMessage],
        language: str,
    ) -> str:
        """Produce the assistant's next conversational turn."""
