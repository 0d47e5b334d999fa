"""
Profile Service
Handles profile lookup and the credit counter.

CREDIT INCREMENT:
The counter is bumped with a compare-and-set update
(WHERE id = ? AND credits_used = <observed>) so two overlapping requests
cannot both write the same stale value. A lost race is retried a few times
against the freshly read value.
"""

from uuid import UUID
from typing import Optional
from supabase import Client

from ..logging import get_logger
from ..models.schemas import Profile, UserContext, CreditAccount


logger = get_logger(__name__)

DEFAULT_FREE_CREDITS = 10
MAX_INCREMENT_RETRIES = 3


class ProfileNotFoundError(Exception):
    def __init__(self, user_id: UUID):
        self.user_id = user_id
        super().__init__(f"Profile {user_id} not found")


class CreditUpdateConflict(Exception):
    """Gave up on the compare-and-set after repeated concurrent writes."""


class ProfileService:
    """Service for managing user profiles and credits."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    async def get_profile(self, user_id: UUID) -> Optional[Profile]:
        """
        Fetch a user's profile by ID.
        Returns None if profile doesn't exist.
        """
        result = self.supabase.table("profiles").select("*").eq("id", str(user_id)).execute()

        if result.data:
            return Profile(**result.data[0])
        return None

    async def ensure_profile_exists(self, user_id: UUID, email: str) -> Profile:
        """
        Ensure a profile exists for the user.
        Creates a free-plan profile if missing.
        """
        profile = await self.get_profile(user_id)

        if profile:
            return profile

        # Normally created by the signup trigger
        result = self.supabase.table("profiles").upsert({
            "id": str(user_id),
            "username": email.split("@")[0],
            "credits_total": DEFAULT_FREE_CREDITS,
            "credits_used": 0,
            "plan": "free"
        }).execute()

        return Profile(**result.data[0])

    async def get_user_context(self, user_id: UUID, email: str) -> UserContext:
        """
        Get full user context for request processing.
        Ensures profile exists and returns context.
        """
        profile = await self.ensure_profile_exists(user_id, email)

        return UserContext(
            user_id=profile.id,
            email=email,
            plan=profile.plan
        )

    async def get_credit_account(self, user_id: UUID) -> CreditAccount:
        profile = await self.get_profile(user_id)
        if profile is None:
            raise ProfileNotFoundError(user_id)
        return CreditAccount(
            credits_used=profile.credits_used,
            credits_total=profile.credits_total
        )

    async def increment_credits_used(self, user_id: UUID, observed: Optional[int] = None) -> int:
        """
        Add exactly one to credits_used. Returns the new value.

        Args:
            observed: credits_used as last read by the caller. Saves one
                read on the happy path.

        Raises:
            ProfileNotFoundError: no profile row
            CreditUpdateConflict: lost the race MAX_INCREMENT_RETRIES times
        """
        current = observed
        for _ in range(MAX_INCREMENT_RETRIES):
            if current is None:
                current = (await self.get_credit_account(user_id)).credits_used

            result = self.supabase.table("profiles").update({
                "credits_used": current + 1
            }).eq("id", str(user_id)).eq("credits_used", current).execute()

            if result.data:
                return current + 1

            logger.info("Credit update for %s raced, re-reading", user_id)
            current = None

        raise CreditUpdateConflict(
            f"Could not update credits for {user_id} after {MAX_INCREMENT_RETRIES} attempts"
        )

    async def apply_plan(self, user_id: UUID, plan: str, credits_total: int) -> Profile:
        """Switch plan and reset the counter."""
        result = self.supabase.table("profiles").update({
            "plan": plan,
            "credits_total": credits_total,
            "credits_used": 0
        }).eq("id", str(user_id)).execute()

        if not result.data:
            raise ProfileNotFoundError(user_id)

        return Profile(**result.data[0])
