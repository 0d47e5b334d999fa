"""
Humanization history.

One row per successful humanization: who, what went in, what came out.
Users only ever see their own rows (enforced by RLS and by the user_id
filter here).
"""

from uuid import UUID
from supabase import Client

from ..models.schemas import HumanizationRecord


class HumanizationStore:
    """Reads and writes the humanizations table."""

    def __init__(self, supabase: Client):
        self.supabase = supabase

    async def create_record(
        self,
        user_id: UUID,
        original_text: str,
        humanized_text: str
    ) -> HumanizationRecord:
        result = self.supabase.table("humanizations").insert({
            "user_id": str(user_id),
            "original_text": original_text,
            "humanized_text": humanized_text
        }).execute()

        return HumanizationRecord(**result.data[0])

    async def list_records(self, user_id: UUID, limit: int = 100) -> list[HumanizationRecord]:
        """Newest first."""
        result = self.supabase.table("humanizations").select("*").eq(
            "user_id", str(user_id)
        ).order("created_at", desc=True).limit(limit).execute()

        return [HumanizationRecord(**row) for row in result.data]
