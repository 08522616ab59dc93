"""
Leaderboard aggregation: users joined with their quiz counts, ranked and paged
"""
import logging
from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from quizzard.models import Score, User

logger = logging.getLogger(__name__)

# Public sort names mapped to columns
SORT_FIELDS = {
    "mana": User.mana,
    "mageMeter": User.mage_meter,
}
SORT_ORDERS = ("asc", "desc")


def validate_sorting(sort_by: str, sort_order: str) -> None:
    """
    Raises:
        ValueError: unknown sort field or direction, listing the valid options
    """
    if sort_by not in SORT_FIELDS:
        raise ValueError(f"Invalid sortBy field. Valid options: {', '.join(SORT_FIELDS)}")
    if sort_order not in SORT_ORDERS:
        raise ValueError(f"Invalid sortOrder. Valid options: {', '.join(SORT_ORDERS)}")


class LeaderboardService:
    """Builds ranked views over users"""

    def get_leaderboard(
        self,
        db: Session,
        sort_by: str = "mana",
        sort_order: str = "desc",
        page: int = 1,
        limit: int = 10,
        user_ids: Optional[Iterable[UUID]] = None
    ) -> List[Dict[str, Any]]:
        """
        Rank users by mana or mage meter

        Args:
            db: Database session
            sort_by: "mana" or "mageMeter"
            sort_order: "asc" or "desc"
            page: 1-based page number
            limit: Page size
            user_ids: Restrict the ranking to these users (friends leaderboard)

        Returns:
            List of {username, mana, mage_meter, total_quizzes}
        """
        validate_sorting(sort_by, sort_order)
        if page < 1 or limit < 1:
            raise ValueError("page and limit must be positive")

        total_quizzes = func.count(Score.id).label("total_quizzes")
        query = (
            db.query(User.username, User.mana, User.mage_meter, total_quizzes)
            .outerjoin(Score, Score.user_id == User.id)
            .group_by(User.id, User.username, User.mana, User.mage_meter)
        )

        if user_ids is not None:
            query = query.filter(User.id.in_(list(user_ids)))

        column = SORT_FIELDS[sort_by]
        ordering = column.desc() if sort_order == "desc" else column.asc()
        query = query.order_by(ordering, User.username.asc())

        rows = query.offset((page - 1) * limit).limit(limit).all()

        logger.debug(f"Leaderboard {sort_by} {sort_order} page={page} limit={limit}: {len(rows)} rows")

        return [
            {
                "username": row.username,
                "mana": row.mana,
                "mage_meter": row.mage_meter,
                "total_quizzes": row.total_quizzes,
            }
            for row in rows
        ]

    def get_friends_leaderboard(self, db: Session, user: User, **options) -> List[Dict[str, Any]]:
        """Leaderboard restricted to the user and their friends"""
        user_ids = [user.id, *user.friend_ids]
        return self.get_leaderboard(db, user_ids=user_ids, **options)


# Global instance
leaderboard_service = LeaderboardService()
