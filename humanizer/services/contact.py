"""Contact messages. Anonymous submissions allowed."""

from typing import Optional
from uuid import UUID
from supabase import Client

from ..models.schemas import ContactMessage
from .input_validator import InputValidationError


class ContactService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    async def create_message(
        self,
        name: str,
        email: str,
        message: str,
        user_id: Optional[UUID] = None
    ) -> ContactMessage:
        if not name.strip() or not email.strip() or not message.strip():
            raise InputValidationError("Name, email, and message are required fields")

        payload = {"name": name, "email": email, "message": message}
        # user_id only for signed-in senders, anonymous rows keep it null
        if user_id is not None:
            payload["user_id"] = str(user_id)

        result = self.supabase.table("contact_messages").insert(payload).execute()
        return ContactMessage(**result.data[0])

    async def list_messages(self, user_id: UUID) -> list[ContactMessage]:
        result = self.supabase.table("contact_messages").select("*").eq(
            "user_id", str(user_id)
        ).order("created_at", desc=True).execute()

        return [ContactMessage(**row) for row in result.data]
