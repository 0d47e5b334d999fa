"""
Pydantic models for request/response validation.
Used across the adapter, the orchestrator and the routes.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Any, Optional, Literal
from datetime import datetime
from uuid import UUID


PlanId = Literal["free", "pro", "enterprise"]


# ============================================================================
# Identity & Profile Models
# ============================================================================

class Profile(BaseModel):
    """User profile from database."""
    id: UUID
    username: Optional[str] = None
    credits_total: int = 10
    credits_used: int = 0
    plan: PlanId = "free"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class UserContext(BaseModel):
    """User context attached to requests after auth."""
    user_id: UUID
    email: str
    plan: PlanId = "free"


class CreditAccount(BaseModel):
    """
    The slice of a profile the orchestrator cares about.

    A new request is authorized only while credits_used < credits_total.
    """
    credits_used: int
    credits_total: int

    @property
    def exhausted(self) -> bool:
        return self.credits_used >= self.credits_total

    @property
    def remaining(self) -> int:
        return max(0, self.credits_total - self.credits_used)


class CreditsResponse(BaseModel):
    credits_used: int
    credits_total: int
    credits_remaining: int
    plan: PlanId


# ============================================================================
# Humanization Models
# ============================================================================

class HumanizationOptions(BaseModel):
    """Style options after clamping. See services/options.py."""
    readability: str = "University"
    purpose: str = "General Writing"
    strength: float = 0.9


class HumanizationResult(BaseModel):
    """
    Outcome of one adapter invocation.

    success=True implies humanized_text is non-empty and differs from the
    input. success=False carries a user-facing error instead.
    """
    model_config = ConfigDict(populate_by_name=True)

    humanized_text: Optional[str] = Field(default=None, alias="humanizedText")
    success: bool
    error: Optional[str] = None
    strategy: Optional[str] = Field(default=None, exclude=True)

    @classmethod
    def ok(cls, text: str, strategy: Optional[str] = None) -> "HumanizationResult":
        return cls(humanized_text=text, success=True, strategy=strategy)

    @classmethod
    def failed(cls, error: str) -> "HumanizationResult":
        return cls(success=False, error=error)

    def to_wire(self) -> dict:
        """camelCase body used by the rewrite service endpoint."""
        if self.success:
            return {"humanizedText": self.humanized_text, "success": True}
        return {"error": self.error, "success": False}


class HumanizeRequest(BaseModel):
    """
    Authenticated humanize request handled by the orchestrator.

    Fields are left loose: InputValidator words the text errors and
    normalize_options replaces bad option values with defaults.
    """
    text: Optional[Any] = None
    readability: Optional[Any] = None
    purpose: Optional[Any] = None
    strength: Optional[Any] = None


class HumanizeResponse(BaseModel):
    humanized_text: str
    record_id: Optional[UUID] = None
    credits_used: int
    credits_total: int


class HumanizationRecord(BaseModel):
    """Persisted (original, humanized) pair."""
    id: UUID
    user_id: UUID
    original_text: str
    humanized_text: str
    created_at: Optional[datetime] = None


# ============================================================================
# Documents
# ============================================================================

class DocumentInfo(BaseModel):
    file_name: str
    file_url: str
    file_type: str
    extracted_text: Optional[str] = None


# ============================================================================
# Plans & Payments
# ============================================================================

class Plan(BaseModel):
    id: PlanId
    name: str
    credits: int
    price: str


class CheckoutRequest(BaseModel):
    plan_id: str


class PaymentRecord(BaseModel):
    id: UUID
    user_id: UUID
    plan_id: str
    plan_name: str
    amount: str
    created_at: Optional[datetime] = None


# ============================================================================
# Contact
# ============================================================================

class ContactRequest(BaseModel):
    name: str
    email: str
    message: str


class ContactMessage(BaseModel):
    id: UUID
    user_id: Optional[UUID] = None
    name: str
    email: str
    message: str
    created_at: Optional[datetime] = None


# ============================================================================
# Error Models
# ============================================================================

class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
