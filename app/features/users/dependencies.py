"""
FastAPI dependencies for authentication.
"""
from typing import Annotated
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from app.features.users.auth import verify_jwt_token
from app.features.users.schemas import Session


security = HTTPBearer()


async def get_current_session(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
) -> Session:
    """
    Get the current session from the Bearer token.

    Usage:
        @router.get("/me")
        async def get_me(session: Session = Depends(get_current_session)):
            return session
    """
    payload = verify_jwt_token(credentials.credentials)
    user_id = payload.get("sub")
    role = payload.get("role")

    if not user_id or not role:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token payload",
        )

    return Session(user_id=str(user_id), role=str(role))


def get_authorization_header(request) -> str:
    """
    Extract authorization header for rate limiting.
    Used with slowapi Limiter.
    """
    auth = request.headers.get("Authorization", "")
    return auth or "anonymous"
