"""
Pydantic schemas for leaderboard endpoints
"""
from pydantic import BaseModel, ConfigDict, Field
from typing import List


class LeaderboardEntry(BaseModel):
    """One ranked row: user stats joined with their quiz count"""
    model_config = ConfigDict(populate_by_name=True)

    username: str
    mana: int
    mage_meter: int = Field(..., alias="mageMeter")
    total_quizzes: int = Field(..., alias="totalQuizzes")


class LeaderboardResponse(BaseModel):
    leaderboard: List[LeaderboardEntry]
