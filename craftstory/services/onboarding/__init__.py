"""Onboarding module - guided voice onboarding flows and quick onboarding."""

from .flow import OnboardingFlow, TurnResult
from .quick import quick_onboard
from .registry import FlowRegistry

__all__ = ["FlowRegistry", "OnboardingFlow", "TurnResult", "quick_onboard"]
