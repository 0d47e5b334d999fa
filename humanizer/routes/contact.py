"""
Contact Routes
Anyone can send a message; signed-in users can list their own.
"""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, status
from supabase import Client

from ..middleware.auth import get_current_user, get_optional_user, get_supabase_client
from ..models.schemas import ContactMessage, ContactRequest, UserContext
from ..services.contact import ContactService
from ..services.input_validator import InputValidationError


router = APIRouter(prefix="/contact", tags=["Contact"])


@router.post("", response_model=ContactMessage)
async def send_message(
    request: ContactRequest,
    user: Optional[UserContext] = Depends(get_optional_user),
    supabase: Client = Depends(get_supabase_client)
):
    try:
        return await ContactService(supabase).create_message(
            name=request.name,
            email=request.email,
            message=request.message,
            user_id=user.user_id if user else None
        )
    except InputValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=e.message
        )


@router.get("", response_model=list[ContactMessage])
async def list_messages(
    user: UserContext = Depends(get_current_user),
    supabase: Client = Depends(get_supabase_client)
):
    return await ContactService(supabase).list_messages(user.user_id)
