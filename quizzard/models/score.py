"""
Score model - one record per submitted quiz attempt
"""
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, JSON, Uuid, func
from sqlalchemy.orm import relationship
from quizzard.database import Base
import uuid


class Score(Base):
    """
    Scores table - quiz attempts, counted for leaderboard totals
    """
    __tablename__ = "scores"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # NULL once the owning account is deleted; the attempt itself is kept
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    category = Column(String(255), nullable=False)
    difficulty = Column(String(10), nullable=False)
    question_count = Column(Integer, nullable=False, default=10)
    correct_answers = Column(Integer, nullable=False, default=0)
    questions = Column(JSON)  # [{questionText, correctAnswer, userAnswer, isCorrect}]
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="scores")

    def __repr__(self):
        return f"<Score(user_id={self.user_id}, correct={self.correct_answers}/{self.question_count})>"
