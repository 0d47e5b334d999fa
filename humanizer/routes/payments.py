"""
Plan & Payment Routes (simulated checkout, no gateway).
"""

from fastapi import APIRouter, Depends, HTTPException, status
from supabase import Client

from ..middleware.auth import get_current_user, get_supabase_client
from ..models.schemas import CheckoutRequest, PaymentRecord, Plan, Profile, UserContext
from ..services.payments import PLANS, PaymentService, UnknownPlanError
from ..services.profile import ProfileNotFoundError


router = APIRouter(prefix="/api", tags=["Payments"])


@router.get("/plans", response_model=list[Plan])
async def list_plans():
    return list(PLANS.values())


@router.post("/payments/checkout", response_model=Profile)
async def checkout(
    request: CheckoutRequest,
    user: UserContext = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_client)
):
    """Switch to the chosen plan. Resets credits_used to 0."""
    try:
        profile, _ = await PaymentService(supabase).checkout(user.user_id, request.plan_id)
    except UnknownPlanError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message
        )
    except ProfileNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found"
        )
    return profile


@router.get("/payments", response_model=list[PaymentRecord])
async def payment_history(
    user: UserContext = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_client)
):
    return await PaymentService(supabase).history(user.user_id)
