"""
User profile, stats and friend management API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
from uuid import UUID
import logging

from quizzard.api.deps import AuthenticatedUser, get_current_user
from quizzard.database import get_db
from quizzard.models import User
from quizzard.schemas.auth import MessageResponse
from quizzard.schemas.user import (
    UserProfile, UserUpdate, ChangePasswordRequest, UserStats,
    FriendRequest, FriendResponse, FriendListResponse, PublicUser
)
from quizzard.services.user_service import user_service, UserConflictError, FriendshipError

router = APIRouter(prefix="/user", tags=["user"])
logger = logging.getLogger(__name__)


def _load_current(db: Session, current: AuthenticatedUser) -> User:
    user = user_service.get_by_id(db, current.id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


def _load_target(db: Session, username: str) -> User:
    friend = user_service.get_by_username(db, username)
    if friend is None:
        raise HTTPException(status_code=404, detail="User not found")
    return friend


@router.get("/me", response_model=UserProfile)
async def get_profile(
    current: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Current user's profile without the password"""
    return UserProfile.model_validate(_load_current(db, current))


@router.put("/me", response_model=UserProfile)
async def update_profile(
    updates: UserUpdate,
    current: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Edit username and/or email"""
    user = _load_current(db, current)

    try:
        user = user_service.update_profile(db, user, updates.model_dump(exclude_none=True))
    except UserConflictError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return UserProfile.model_validate(user)


@router.post("/change-password", response_model=MessageResponse)
async def change_password(
    request: ChangePasswordRequest,
    current: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user = _load_current(db, current)

    if not user_service.change_password(db, user, request.current_password, request.new_password):
        raise HTTPException(status_code=400, detail="Current password is incorrect")

    return MessageResponse(message="Password changed successfully")


@router.delete("/me", response_model=MessageResponse)
async def delete_account(
    current: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Delete the account and every friend reference to it"""
    user = _load_current(db, current)
    user_service.delete_account(db, user)
    return MessageResponse(message="Account deleted successfully")


@router.get("/stats/{user_id}", response_model=UserStats)
async def get_user_stats(user_id: str, db: Session = Depends(get_db)):
    """Public mana and mage meter of any user"""
    try:
        parsed_id = UUID(user_id)
    except ValueError:
        raise HTTPException(status_code=400, detail="Invalid user id")

    user = user_service.get_by_id(db, parsed_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")

    return UserStats(mana=user.mana, mage_meter=user.mage_meter)


@router.post("/friends", response_model=FriendResponse)
async def add_friend(
    request: FriendRequest,
    current: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user = _load_current(db, current)
    friend = _load_target(db, request.username)

    try:
        user = user_service.add_friend(db, user, friend)
    except FriendshipError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return FriendResponse(message="Friend added successfully", user=UserProfile.model_validate(user))


@router.delete("/friends", response_model=FriendResponse)
async def remove_friend(
    request: FriendRequest,
    current: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    user = _load_current(db, current)
    friend = _load_target(db, request.username)

    try:
        user = user_service.remove_friend(db, user, friend)
    except FriendshipError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return FriendResponse(message="Friend removed successfully", user=UserProfile.model_validate(user))


@router.get("/friends", response_model=FriendListResponse)
async def get_friends(
    current: AuthenticatedUser = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Friends of the current user, credentials stripped"""
    user = _load_current(db, current)
    friends = user_service.list_friends(db, user)
    return FriendListResponse(friends=[PublicUser.model_validate(f) for f in friends])
