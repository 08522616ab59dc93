"""
User service: accounts, profile edits and friend links

Lookups return None for a missing record; callers decide how to respond.
"""
import logging
from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from quizzard.models import Friendship, Score, User
from quizzard.services.auth_service import auth_service

logger = logging.getLogger(__name__)


class UserConflictError(ValueError):
    """Username or email already belongs to another account"""


class FriendshipError(ValueError):
    """Friend add/remove request that breaks a friendship rule"""


class UserService:
    """Service for user accounts and friend management"""

    def get_by_id(self, db: Session, user_id: UUID) -> Optional[User]:
        return db.get(User, user_id)

    def get_by_username(self, db: Session, username: str) -> Optional[User]:
        return db.query(User).filter(User.username == username.strip()).first()

    def get_by_email(self, db: Session, email: str) -> Optional[User]:
        return db.query(User).filter(User.email == email.strip().lower()).first()

    def register(self, db: Session, username: str, email: str, password: str) -> User:
        """
        Create a new account

        Raises:
            UserConflictError: email or username already in use
        """
        self._ensure_available(db, username=username, email=email)

        user = User(
            username=username,
            email=email,
            password_hash=auth_service.hash_password(password),
            mana=0,
            mage_meter=0,
        )
        db.add(user)
        self._commit(db)
        db.refresh(user)

        logger.info(f"User registered: {user.id} ({user.username})")
        return user

    def authenticate(self, db: Session, email: str, password: str) -> Optional[User]:
        """Return the user when the email/password pair matches, else None"""
        user = self.get_by_email(db, email)
        if user is None:
            return None
        if not auth_service.verify_password(password, user.password_hash):
            return None
        return user

    def update_profile(self, db: Session, user: User, updates: Dict[str, str]) -> User:
        """Apply username/email edits, keeping both unique"""
        changes = {k: v for k, v in updates.items() if v is not None and getattr(user, k) != v}
        if not changes:
            return user

        self._ensure_available(db, exclude_id=user.id, **changes)
        for field, value in changes.items():
            setattr(user, field, value)

        self._commit(db)
        db.refresh(user)
        logger.info(f"Profile updated for {user.id}: {sorted(changes)}")
        return user

    def change_password(self, db: Session, user: User, current_password: str, new_password: str) -> bool:
        """Returns False when current_password does not match"""
        if not auth_service.verify_password(current_password, user.password_hash):
            return False

        user.password_hash = auth_service.hash_password(new_password)
        db.commit()
        logger.info(f"Password changed for {user.id}")
        return True

    def delete_account(self, db: Session, user: User) -> None:
        """
        Delete a user together with every friend reference pointing at them

        Score records are kept as quiz history with their owner cleared.
        """
        user_id = user.id
        removed = db.query(Friendship).filter(Friendship.friend_id == user_id).delete(
            synchronize_session=False
        )
        detached = db.query(Score).filter(Score.user_id == user_id).update(
            {Score.user_id: None}, synchronize_session=False
        )
        db.delete(user)
        db.commit()
        logger.info(
            f"Account deleted: {user_id} (cleared {removed} friend references, kept {detached} scores)"
        )

    def add_friend(self, db: Session, user: User, friend: User) -> User:
        """
        Append friend to the user's friend set

        Raises:
            FriendshipError: self-friending or already friends
        """
        if friend.id == user.id:
            raise FriendshipError("You cannot add yourself as a friend")
        if friend.id in user.friend_ids:
            raise FriendshipError("Already friends")

        user.friendships.append(Friendship(friend_id=friend.id))
        db.commit()
        db.refresh(user)

        logger.info(f"{user.username} added friend {friend.username}")
        return user

    def remove_friend(self, db: Session, user: User, friend: User) -> User:
        """
        Remove friend from the user's friend set

        Raises:
            FriendshipError: the two users are not friends
        """
        link = next((f for f in user.friendships if f.friend_id == friend.id), None)
        if link is None:
            raise FriendshipError("Not friends")

        user.friendships.remove(link)
        db.commit()
        db.refresh(user)

        logger.info(f"{user.username} removed friend {friend.username}")
        return user

    def list_friends(self, db: Session, user: User) -> List[User]:
        """Resolve friend references; references to missing users are skipped by the join"""
        return (
            db.query(User)
            .join(Friendship, Friendship.friend_id == User.id)
            .filter(Friendship.user_id == user.id)
            .order_by(Friendship.id)
            .all()
        )

    def _ensure_available(
        self,
        db: Session,
        username: Optional[str] = None,
        email: Optional[str] = None,
        exclude_id: Optional[UUID] = None
    ) -> None:
        """Raise UserConflictError when the email or username is taken"""
        if email is not None:
            query = db.query(User.id).filter(User.email == email)
            if exclude_id is not None:
                query = query.filter(User.id != exclude_id)
            if query.first():
                raise UserConflictError("Email already in use")

        if username is not None:
            query = db.query(User.id).filter(User.username == username)
            if exclude_id is not None:
                query = query.filter(User.id != exclude_id)
            if query.first():
                raise UserConflictError("Username already in use")

    def _commit(self, db: Session) -> None:
        # Unique constraints still guard against a concurrent registration
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(f"Uniqueness violation on commit: {str(e.orig)}")
            raise UserConflictError("Username or email already in use") from e


# Global instance
user_service = UserService()
