"""
User and Friendship models
"""
from sqlalchemy import Column, String, Integer, DateTime, ForeignKey, UniqueConstraint, Uuid, func
from sqlalchemy.orm import relationship
from quizzard.database import Base
import uuid


class User(Base):
    """
    Users table - credentials, quiz stats and friend links
    """
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String(12), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    mana = Column(Integer, nullable=False, default=0)
    mage_meter = Column(Integer, nullable=False, default=0)  # 0-100, latest quiz only
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    friendships = relationship(
        "Friendship",
        foreign_keys="Friendship.user_id",
        order_by="Friendship.id",
        cascade="all, delete-orphan",
        back_populates="user",
    )
    scores = relationship("Score", back_populates="user")

    @property
    def friend_ids(self):
        return [f.friend_id for f in self.friendships]

    def __repr__(self):
        return f"<User(id={self.id}, username={self.username})>"


class Friendship(Base):
    """
    One-directional friend reference: user_id lists friend_id as a friend
    """
    __tablename__ = "friendships"
    __table_args__ = (UniqueConstraint("user_id", "friend_id", name="uq_friendship_pair"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    friend_id = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", foreign_keys=[user_id], back_populates="friendships")

    def __repr__(self):
        return f"<Friendship(user_id={self.user_id}, friend_id={self.friend_id})>"
