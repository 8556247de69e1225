"""CraftStory backend - voice-guided artisan onboarding service."""

__version__ = "0.1.0"
