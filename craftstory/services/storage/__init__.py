"""Storage module - SQLAlchemy async persistence for artisan profiles."""

from .profile_store import BaseProfileStore, SQLProfileStore
from .repository import ProfileRepository

__all__ = ["BaseProfileStore", "ProfileRepository", "SQLProfileStore"]
