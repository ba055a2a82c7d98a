"""
Authentication Dependencies
JWT token handling and caller resolution
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional
from databases import Database
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError, jwt
from attendance_api.config import settings
from attendance_api.database import get_database
from attendance_api.errors import Forbidden
from attendance_api.roles import Role, normalize_role

logger = logging.getLogger(__name__)

# Security scheme
security = HTTPBearer()


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create JWT access token

    Args:
        data: Data to encode in token
        expires_delta: Token expiration time

    Returns:
        Encoded JWT token
    """
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(hours=settings.JWT_EXPIRATION_HOURS))
    to_encode.update({"exp": expire})

    return jwt.encode(
        to_encode,
        settings.JWT_SECRET_KEY,
        algorithm=settings.JWT_ALGORITHM
    )


def decode_access_token(token: str) -> dict:
    """
    Decode JWT access token

    Raises:
        HTTPException: If token is invalid
    """
    try:
        return jwt.decode(
            token,
            settings.JWT_SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM]
        )
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    db: Database = Depends(get_database)
) -> dict:
    """
    Resolve the caller from the bearer token

    The token only proves the email; role and region always come from
    the users table so that role changes take effect immediately.

    Returns:
        Caller with id, email, role (Role) and region_id
    """
    payload = decode_access_token(credentials.credentials)
    email = payload.get("email")

    if email is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials"
        )

    user = await db.fetch_one(
        "SELECT id, email, full_name, role, region_id FROM users WHERE email = :email",
        {"email": email}
    )
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    try:
        role = normalize_role(user["role"])
    except ValueError:
        logger.warning("User %s has unknown role %r", user["id"], user["role"])
        raise Forbidden("Access denied. Insufficient permissions.")

    return {
        "id": str(user["id"]),
        "email": user["email"],
        "full_name": user["full_name"],
        "role": role,
        "region_id": str(user["region_id"]) if user["region_id"] else None,
    }


def require_roles(*roles: Role):
    """Dependency factory limiting a route to the given roles"""

    async def dependency(current_user: dict = Depends(get_current_user)) -> dict:
        if current_user["role"] not in roles:
            raise Forbidden("Access denied. Insufficient permissions.")
        return current_user

    return dependency


get_super_admin = require_roles(Role.SUPER_ADMIN)
get_region_staff = require_roles(Role.SUPER_ADMIN, Role.REGION_MANAGER)
get_analytics_user = require_roles(Role.SUPER_ADMIN, Role.REGION_MANAGER, Role.ADMIN)
