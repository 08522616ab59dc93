"""
Credential service: password hashing and bearer token signing
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
import jwt

from quizzard.config import settings

logger = logging.getLogger(__name__)

# bcrypt only considers the first 72 bytes of a secret
BCRYPT_MAX_BYTES = 72


class AuthService:
    """Stateless helpers for passwords (bcrypt) and access tokens (JWT)"""

    def __init__(self, secret: str, algorithm: str = "HS256", expire_minutes: int = 60):
        self.secret = secret
        self.algorithm = algorithm
        self.expire_minutes = expire_minutes

    def hash_password(self, password: str) -> str:
        hashed = bcrypt.hashpw(password.encode("utf-8")[:BCRYPT_MAX_BYTES], bcrypt.gensalt(rounds=10))
        return hashed.decode("utf-8")

    def verify_password(self, password: str, password_hash: str) -> bool:
        try:
            return bcrypt.checkpw(
                password.encode("utf-8")[:BCRYPT_MAX_BYTES],
                password_hash.encode("utf-8")
            )
        except ValueError:
            logger.warning("Stored password hash is malformed")
            return False

    def create_access_token(self, user_id: str, username: str) -> str:
        """
        Sign a token identifying the user

        Args:
            user_id: User UUID as a string
            username: Username at login time

        Returns:
            Encoded JWT expiring after expire_minutes
        """
        now = datetime.now(timezone.utc)
        payload = {
            "id": str(user_id),
            "username": username,
            "iat": now,
            "exp": now + timedelta(minutes=self.expire_minutes),
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode_access_token(self, token: str) -> Dict[str, Any]:
        """
        Verify signature and expiry of a token

        Raises:
            jwt.ExpiredSignatureError: token is past its expiry
            jwt.InvalidTokenError: token is malformed or badly signed
        """
        payload = jwt.decode(token, self.secret, algorithms=[self.algorithm])
        if "id" not in payload:
            raise jwt.InvalidTokenError("Token carries no user id")
        return payload


# Global instance
auth_service = AuthService(
    secret=settings.JWT_SECRET,
    algorithm=settings.JWT_ALGORITHM,
    expire_minutes=settings.JWT_EXPIRE_MINUTES
)
