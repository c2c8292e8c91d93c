"""Security utilities for handling session JWT tokens and resolving the current actor."""

import logging
from typing import Optional
from datetime import datetime, timedelta
import jwt
from .config import settings
from fastapi import HTTPException, Request, status
from pydantic import ValidationError as PydanticValidationError

from app.schemas.actorSchema import Actor

logger = logging.getLogger(__name__)


def create_jwt_token(data: dict, expires_delta: timedelta = timedelta(hours=1)):
    """
    Creates a JWT (JSON Web Token) with the provided data and expiration time.

    Args:
        data (dict): The payload data to be encoded in the JWT.
        expires_delta (timedelta, optional): The time until the token expires.
            Defaults to 1 hour.

    Returns:
        str: The encoded JWT string.

    Example:
        >>> token = create_jwt_token({"sub": "a@x.com", "role": "user"})
    """
    to_encode = data.copy()
    expire = datetime.utcnow() + expires_delta
    to_encode.update({
        "exp": expire,
        "iat": datetime.utcnow()
    })
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def decode_jwt_token(token: str) -> dict:
    """Decodes and validates a JWT token.

    Args:
        token (str): The JWT token string to decode.

    Returns:
        dict: The decoded token payload containing the claims.

    Raises:
        jwt.InvalidTokenError: If the token is invalid, expired, or improperly formatted.
    """
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
    except jwt.InvalidTokenError as e:
        logger.warning(f"JWT Decode Error: {str(e)}")
        raise


def actor_from_claims(payload: dict) -> Actor:
    """
    Build an Actor from token claims.

    The role must be one of the closed ActorRole values; a missing role means
    a regular user. Anything else is rejected here so services never see it.
    """
    email = payload.get("email") or payload.get("sub")
    if not email:
        raise ValueError("Token carries no actor email")
    role = payload.get("role") or "user"
    return Actor(email=email, role=role)


def _extract_token(request: Request) -> Optional[str]:
    token = request.cookies.get("auth_token")
    if token:
        return token
    authorization = request.headers.get("Authorization", "")
    if authorization.lower().startswith("bearer "):
        return authorization[7:].strip()
    return None


async def get_current_actor(request: Request) -> Actor:
    """
    Dependency to get the current actor from the session JWT (cookie or bearer header)
    Raises 401 if not authenticated
    """
    token = _extract_token(request)

    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )

    try:
        payload = decode_jwt_token(token)
        return actor_from_claims(payload)
    except (jwt.InvalidTokenError, ValueError, PydanticValidationError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication token"
        )
