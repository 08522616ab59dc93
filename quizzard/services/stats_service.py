"""
Stats engine: turns a quiz result into mana and mage meter values

Mana accumulates correct answers across quizzes. The mage meter is the
accuracy of the most recent quiz only.
"""
import logging
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.orm import Session

from quizzard.models import Score, User

logger = logging.getLogger(__name__)


def quiz_percentage(question_count: int, correct_answers: int) -> int:
    """Accuracy rounded half up and clamped to 0-100"""
    if question_count < 1:
        raise ValueError("questionCount must be at least 1")
    if correct_answers < 0 or correct_answers > question_count:
        raise ValueError("correctAnswers must be between 0 and questionCount")

    percentage = (200 * correct_answers + question_count) // (2 * question_count)
    return max(0, min(percentage, 100))


def compute_stats(current_mana: int, question_count: int, correct_answers: int) -> Tuple[int, int]:
    """
    Apply a quiz result to a user's stats

    Args:
        current_mana: Mana before the quiz
        question_count: Number of questions answered (>= 1)
        correct_answers: Number answered correctly (0..question_count)

    Returns:
        Tuple of (new_mana, new_mage_meter)

    Raises:
        ValueError: counts out of range
    """
    mage_meter = quiz_percentage(question_count, correct_answers)
    return current_mana + correct_answers, mage_meter


class StatsService:
    """Persists quiz submissions and the stats derived from them"""

    def record_submission(
        self,
        db: Session,
        user: User,
        category: str,
        difficulty: str,
        question_count: int,
        correct_answers: int,
        questions: Optional[List[Dict[str, Any]]] = None
    ) -> Dict[str, Any]:
        """
        Update the user's stats and store a Score record

        The two writes are independent; no transaction spans them.

        Returns:
            Dictionary with updated user stats and the submitted score
        """
        mana, mage_meter = compute_stats(user.mana or 0, question_count, correct_answers)

        user.mana = mana
        user.mage_meter = mage_meter
        db.commit()

        score = Score(
            user_id=user.id,
            category=category,
            difficulty=difficulty,
            question_count=question_count,
            correct_answers=correct_answers,
            questions=questions,
        )
        db.add(score)
        db.commit()

        logger.info(
            f"Score recorded for {user.id}: {correct_answers}/{question_count} "
            f"(mana={mana}, mageMeter={mage_meter})"
        )

        return {
            "user": {"mana": mana, "mage_meter": mage_meter},
            "score": {
                "category": category,
                "difficulty": difficulty,
                "question_count": question_count,
                "correct_answers": correct_answers,
                "percentage": mage_meter,
            },
        }


# Global instance
stats_service = StatsService()
