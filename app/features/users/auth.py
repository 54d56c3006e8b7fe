"""
Session token verification.
"""
import jwt
from fastapi import HTTPException, status

from app.core import config
from app.utils import get_logger


log = get_logger(__name__)


def verify_jwt_token(token: str) -> dict:
    """
    Verify a session JWT and return its payload.

    The token's "role" claim is the only source of the caller's authority, so
    the signature is always checked with HS256 against JWT_SECRET. With no
    secret configured every token is rejected.

    Args:
        token: JWT token from Authorization header

    Returns:
        Decoded JWT payload containing "sub" and "role" claims

    Raises:
        HTTPException: If token is invalid, expired, or cannot be verified
    """
    if not config.JWT_SECRET:
        log.error("JWT_SECRET is not configured - rejecting session token")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token verification is not configured",
            headers={"WWW-Authenticate": "Bearer"},
        )

    try:
        return jwt.decode(token, config.JWT_SECRET, algorithms=["HS256"])

    except jwt.ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token has expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except jwt.InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=f"Invalid token: {str(e)}",
            headers={"WWW-Authenticate": "Bearer"},
        )
