"""
Registration and login API endpoints
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session
import logging

from quizzard.database import get_db
from quizzard.schemas.auth import RegisterRequest, LoginRequest, TokenResponse, MessageResponse
from quizzard.services.auth_service import auth_service
from quizzard.services.user_service import user_service, UserConflictError

router = APIRouter(prefix="/auth", tags=["auth"])
logger = logging.getLogger(__name__)


@router.post("/register", response_model=MessageResponse, status_code=201)
async def register(request: RegisterRequest, db: Session = Depends(get_db)):
    """
    Register a new user

    - Rejects duplicate email, then duplicate username
    - Stores a bcrypt hash of the password
    """
    try:
        user_service.register(db, request.username, request.email, request.password)
    except UserConflictError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return MessageResponse(message="User registered successfully")


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, db: Session = Depends(get_db)):
    """Exchange email and password for a bearer token"""

    user = user_service.authenticate(db, request.email, request.password)
    if user is None:
        logger.info(f"Failed login for {request.email}")
        raise HTTPException(status_code=401, detail="Invalid email or password")

    token = auth_service.create_access_token(str(user.id), user.username)
    return TokenResponse(token=token)
