"""
Account Routes

Sign-up and sign-in happen against Supabase directly from the browser.
The API only needs to tell a signed-in caller who they are and where their
credits stand.
"""

from fastapi import APIRouter, Depends, HTTPException, status
from supabase import Client

from ..middleware.auth import get_current_user, get_supabase_client
from ..models.schemas import UserContext, Profile
from ..services.profile import ProfileService


router = APIRouter(prefix="/auth", tags=["Account"])


@router.get("/me", response_model=Profile)
async def get_current_profile(
    user: UserContext = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_client)
):
    """Current profile: plan and credit counters. A missing profile is created on first use."""
    profile = await ProfileService(supabase).get_profile(user.user_id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found"
        )
    return profile
