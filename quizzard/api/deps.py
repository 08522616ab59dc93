"""
Shared request dependencies: bearer authentication and the trivia service
"""
from dataclasses import dataclass
from typing import Optional
from uuid import UUID

import jwt
from fastapi import Header, HTTPException, Request
import logging

from quizzard.services.auth_service import auth_service
from quizzard.services.trivia_service import TriviaService

logger = logging.getLogger(__name__)


@dataclass
class AuthenticatedUser:
    """Identity extracted from a verified bearer token"""
    id: UUID
    username: Optional[str] = None


async def get_current_user(authorization: Optional[str] = Header(None)) -> AuthenticatedUser:
    """
    Verify the Authorization header

    Raises:
        HTTPException: 401 for a missing/malformed header, an expired token
            or an invalid token
    """
    if not authorization or not authorization.startswith("Bearer "):
        raise HTTPException(status_code=401, detail="Invalid authorization header format")

    token = authorization[len("Bearer "):].strip()
    try:
        payload = auth_service.decode_access_token(token)
        user_id = UUID(str(payload["id"]))
    except jwt.ExpiredSignatureError:
        raise HTTPException(status_code=401, detail="Token expired")
    except (jwt.InvalidTokenError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid token")

    return AuthenticatedUser(id=user_id, username=payload.get("username"))


def get_trivia_service(request: Request) -> TriviaService:
    """Trivia service built at startup"""
    return request.app.state.trivia_service


def client_address(request: Request) -> str:
    """Network identity used to partition trivia session tokens"""
    return request.client.host if request.client else "unknown"
