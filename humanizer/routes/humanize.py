"""
Humanize Routes
Authenticated humanization, history and credits.

    POST /api/humanize
    - Input gate (text present, >= 50 chars)
    - Credit gate (credits_used < credits_total)
    - Rewrite service call
    - Save record, then charge one credit
"""

from fastapi import APIRouter, Depends, HTTPException, status
from supabase import Client

from ..middleware.auth import get_current_user, get_supabase_client
from ..models.schemas import (
    UserContext,
    HumanizeRequest,
    HumanizeResponse,
    HumanizationRecord,
    CreditsResponse,
)
from ..services.humanizations import HumanizationStore
from ..services.input_validator import InputValidationError
from ..services.orchestrator import (
    HumanizationOrchestrator,
    QuotaExceededError,
    RewriteFailedError,
)
from ..services.profile import ProfileService
from .deps import get_orchestrator


router = APIRouter(prefix="/api", tags=["Humanize"])


@router.post("/humanize", response_model=HumanizeResponse)
async def humanize(
    request: HumanizeRequest,
    user: UserContext = Depends(get_current_user),
    orchestrator: HumanizationOrchestrator = Depends(get_orchestrator)
):
    """Humanize text and charge one credit."""
    try:
        outcome = await orchestrator.humanize(
            user,
            request.text,
            readability=request.readability,
            purpose=request.purpose,
            strength=request.strength
        )
    except InputValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message
        )
    except QuotaExceededError as e:
        raise HTTPException(
            status_code=status.HTTP_402_PAYMENT_REQUIRED,
            detail=e.message
        )
    except RewriteFailedError as e:
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail=e.message
        )

    return HumanizeResponse(
        humanized_text=outcome.humanized_text,
        record_id=outcome.record.id if outcome.record else None,
        credits_used=outcome.credits_used,
        credits_total=outcome.credits_total
    )


@router.get("/humanizations", response_model=list[HumanizationRecord])
async def list_humanizations(
    user: UserContext = Depends(get_current_user),
    limit: int = 100,
    supabase: Client = Depends(get_supabase_client)
):
    """The current user's humanization history, newest first."""
    store = HumanizationStore(supabase)
    return await store.list_records(user.user_id, limit=limit)


@router.get("/credits", response_model=CreditsResponse)
async def get_credits(
    user: UserContext = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_client)
):
    profile = await ProfileService(supabase).get_profile(user.user_id)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found"
        )

    return CreditsResponse(
        credits_used=profile.credits_used,
        credits_total=profile.credits_total,
        credits_remaining=max(0, profile.credits_total - profile.credits_used),
        plan=profile.plan
    )
