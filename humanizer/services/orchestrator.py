"""
Humanization Orchestrator

Gates and sequences one humanize action:

    validate → authorize → check credits → rewrite → save record → charge credit

GUARANTEES:
- Invalid text or a missing user fails before ANY network call
- Exhausted credits fail before the rewrite service is called
- On success: exactly one record and exactly one credit
- On failure: no record and no credit
- The record is saved BEFORE the credit is charged. If saving fails, the
  credit is not charged (under-charge rather than bill for unsaved work)
- Bookkeeping failures after a successful rewrite are logged only; the
  user still gets the text
"""

from dataclasses import dataclass
from typing import Any, Optional

from ..logging import get_logger
from ..models.schemas import HumanizationRecord, UserContext
from .humanizations import HumanizationStore
from .input_validator import InputValidator
from .options import normalize_options
from .profile import ProfileService
from .rewrite_client import RewriteService


logger = get_logger(__name__)


# =============================================================================
# EXCEPTIONS
# =============================================================================

class HumanizationError(Exception):
    """
    Orchestrator-level failure surfaced to the user.

    Contains a user-safe message (no internal details exposed).
    """
    def __init__(self, message: str, internal_reason: str = ""):
        self.message = message
        self.internal_reason = internal_reason
        super().__init__(message)


class AuthorizationError(HumanizationError):
    """No signed-in user."""


class QuotaExceededError(HumanizationError):
    """credits_used >= credits_total."""


class RewriteFailedError(HumanizationError):
    """The rewrite service reported success=false."""


AUTH_REQUIRED_MESSAGE = "Please sign in to use the humanizer tool."
NO_CREDITS_MESSAGE = (
    "You've used all your available credits. Please upgrade your plan."
)


# =============================================================================
# RESULT
# =============================================================================

@dataclass
class HumanizationOutcome:
    humanized_text: str
    credits_used: int
    credits_total: int
    record: Optional[HumanizationRecord] = None


# =============================================================================
# ORCHESTRATOR
# =============================================================================

class HumanizationOrchestrator:
    """
    Runs the humanize pipeline for one request.

    Collaborators are injected so each can be swapped in tests.
    """

    def __init__(
        self,
        profiles: ProfileService,
        humanizations: HumanizationStore,
        rewrite_service: RewriteService,
        validator: Optional[InputValidator] = None
    ):
        self.profiles = profiles
        self.humanizations = humanizations
        self.rewrite_service = rewrite_service
        self.validator = validator or InputValidator()

    async def humanize(
        self,
        user: Optional[UserContext],
        text: Any,
        readability: Any = None,
        purpose: Any = None,
        strength: Any = None
    ) -> HumanizationOutcome:
        """
        Raises:
            InputValidationError: text missing, too short or too long
            AuthorizationError: no user
            QuotaExceededError: no credits left
            RewriteFailedError: rewrite service failed (message verbatim)
        """
        # Local gates, no I/O
        self.validator.validate(text)
        if user is None:
            raise AuthorizationError(AUTH_REQUIRED_MESSAGE)
        options = normalize_options(readability, purpose, strength)

        # Credit gate
        account = await self.profiles.get_credit_account(user.user_id)
        if account.exhausted:
            raise QuotaExceededError(
                NO_CREDITS_MESSAGE,
                internal_reason=f"{account.credits_used}/{account.credits_total} used"
            )

        # Rewrite
        result = await self.rewrite_service.humanize(text, options)
        if not result.success:
            raise RewriteFailedError(result.error or "Failed to humanize text.")

        humanized_text = result.humanized_text
        outcome = HumanizationOutcome(
            humanized_text=humanized_text,
            credits_used=account.credits_used,
            credits_total=account.credits_total
        )

        # Bookkeeping: record first, then charge
        try:
            outcome.record = await self.humanizations.create_record(
                user.user_id, text, humanized_text
            )
        except Exception:
            logger.exception(
                "Failed to save humanization for %s; not charging a credit",
                user.user_id
            )
            return outcome

        try:
            outcome.credits_used = await self.profiles.increment_credits_used(
                user.user_id, observed=account.credits_used
            )
        except Exception:
            logger.exception(
                "Saved humanization %s but failed to charge credit for %s",
                outcome.record.id, user.user_id
            )

        return outcome
