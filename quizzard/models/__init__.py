"""
Database models package
"""
from quizzard.models.user import User, Friendship
from quizzard.models.score import Score

__all__ = ["User", "Friendship", "Score"]
