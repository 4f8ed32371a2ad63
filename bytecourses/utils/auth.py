"""
Actor context from bearer tokens.

Tokens are issued by the external auth service; this module only verifies
them and turns their claims into an ``Actor``.
"""

from datetime import datetime, timedelta, timezone
from typing import Dict, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from ..core.config import settings
from ..models.schemas import Actor, UserRole

# HTTP Bearer token security; missing credentials are handled per route
security = HTTPBearer(auto_error=False)


def create_access_token(data: Dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create a JWT access token.

    Args:
        data: Data to encode in token (e.g., {"sub": "42", "role": "admin"})
        expires_delta: Optional custom expiration time

    Returns:
        Encoded JWT token
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(hours=settings.JWT_EXPIRATION_HOURS)

    to_encode.update({"exp": expire})

    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str) -> Dict:
    """
    Verify and decode a JWT token.

    Raises:
        HTTPException: If token is invalid or expired
    """
    try:
        return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


def actor_from_claims(payload: Dict) -> Actor:
    """Build an Actor from decoded token claims."""
    try:
        return Actor(id=int(payload["sub"]), role=UserRole(payload.get("role", UserRole.STUDENT.value)))
    except (KeyError, TypeError, ValueError):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


def get_optional_actor(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> Optional[Actor]:
    """Dependency for routes that are public but personalize for signed-in callers."""
    if credentials is None:
        return None
    return actor_from_claims(verify_token(credentials.credentials))


def get_current_actor(actor: Optional[Actor] = Depends(get_optional_actor)) -> Actor:
    """
    Dependency to get the current actor from the bearer token.

    Raises:
        HTTPException: If no valid token was supplied
    """
    if actor is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return actor
