"""
Extraction module - transcripts to onboarding questions and profile data.

``ProfileExtractor`` talks to a generative model; ``heuristics`` holds the
deterministic fallbacks used whenever the model fails.
"""

from .base import BaseExtractor
from .profile_extractor import ProfileExtractor

__all__ = ["BaseExtractor", "ProfileExtractor"]
