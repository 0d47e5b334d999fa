"""
Plans & simulated checkout.

There is no payment gateway. Checkout switches the profile to the chosen
plan (resetting the credit counter) and records a payment row.
"""

from uuid import UUID
from supabase import Client

from ..models.schemas import Plan, PaymentRecord, Profile
from .profile import ProfileService


PLANS: dict[str, Plan] = {
    "free": Plan(id="free", name="Free", credits=10, price="$0"),
    "pro": Plan(id="pro", name="Pro", credits=100, price="$19/month"),
    "enterprise": Plan(id="enterprise", name="Enterprise", credits=500, price="$49/month"),
}


class UnknownPlanError(Exception):
    def __init__(self, plan_id: str):
        self.plan_id = plan_id
        self.message = f"Unknown plan '{plan_id}'. Please choose: free, pro, or enterprise."
        super().__init__(self.message)


def get_plan(plan_id: str) -> Plan:
    plan = PLANS.get(plan_id)
    if plan is None:
        raise UnknownPlanError(plan_id)
    return plan


class PaymentService:
    def __init__(self, supabase: Client):
        self.supabase = supabase
        self.profiles = ProfileService(supabase)

    async def checkout(self, user_id: UUID, plan_id: str) -> tuple[Profile, PaymentRecord]:
        plan = get_plan(plan_id)

        profile = await self.profiles.apply_plan(user_id, plan.id, plan.credits)

        result = self.supabase.table("payment_history").insert({
            "user_id": str(user_id),
            "plan_id": plan.id,
            "plan_name": plan.name,
            "amount": plan.price
        }).execute()

        return profile, PaymentRecord(**result.data[0])

    async def history(self, user_id: UUID) -> list[PaymentRecord]:
        result = self.supabase.table("payment_history").select("*").eq(
            "user_id", str(user_id)
        ).order("created_at", desc=True).execute()

        return [PaymentRecord(**row) for row in result.data]
