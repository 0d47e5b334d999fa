"""
Authentication Middleware
Validates bearer tokens against Supabase auth and extracts user context.

This middleware:
1. Rejects requests without a valid session (get_current_user)
2. Or lets them through as anonymous (get_optional_user)
3. Attaches user + profile to request context
"""

from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from uuid import UUID
from supabase import create_client, Client

from ..config import Settings, get_settings
from ..logging import get_logger
from ..models.schemas import UserContext
from ..services.profile import ProfileService


logger = get_logger(__name__)

# HTTP Bearer token scheme
security = HTTPBearer()
optional_security = HTTPBearer(auto_error=False)


def get_supabase_client(settings: Settings = Depends(get_settings)) -> Client:
    """Get Supabase client with service role key."""
    return create_client(
        settings.supabase_url,
        settings.supabase_service_role_key
    )


async def _resolve_user(token: str, supabase: Client) -> UserContext:
    """
    Validate token via Supabase API and load the profile.

    Raises HTTPException 401 if:
    - Token is invalid
    - Token is expired
    - Supabase knows no such user
    """
    try:
        user_response = supabase.auth.get_user(token)
    except Exception as e:
        logger.info("Token rejected by auth provider: %s", type(e).__name__)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token"
        )

    if not user_response or not user_response.user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: user not found"
        )

    user_data = user_response.user
    if not user_data.id or not user_data.email:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid token: missing user information"
        )

    # Get or create profile
    profile_service = ProfileService(supabase)
    return await profile_service.get_user_context(
        user_id=UUID(str(user_data.id)),
        email=user_data.email
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    supabase: Client = Depends(get_supabase_client)
) -> UserContext:
    """Dependency that requires a signed-in user."""
    return await _resolve_user(credentials.credentials, supabase)


async def get_optional_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(optional_security),
    supabase: Client = Depends(get_supabase_client)
) -> Optional[UserContext]:
    """
    Dependency for routes that also serve anonymous callers.

    No header → None. A header with a bad token is still a 401.
    """
    if credentials is None:
        return None
    return await _resolve_user(credentials.credentials, supabase)
