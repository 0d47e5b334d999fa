"""
Rewrite Strategies

Every way of producing humanized text sits behind one interface:

    await strategy.attempt(text, options) -> str

A strategy either returns rewritten text, raises RecoverableRewriteError
(the adapter moves on to the next strategy), or raises FatalRewriteError
(the adapter stops and reports failure). Nothing else may escape.
"""

import random
from abc import ABC, abstractmethod
from typing import Optional

from ..models.schemas import HumanizationOptions
from .fallback import RuleBasedRewriter


# =============================================================================
# EXCEPTIONS
# =============================================================================

class RewriteError(Exception):
    """
    Base class for strategy failures.

    Contains a user-safe message (no internal details exposed).
    """
    def __init__(self, message: str, internal_reason: str = ""):
        self.message = message
        self.internal_reason = internal_reason  # For logging only
        super().__init__(message)


class RecoverableRewriteError(RewriteError):
    """The strategy could not produce text, but the next one may."""


class FatalRewriteError(RewriteError):
    """Stop the chain. Reported to the caller as success=false."""


# =============================================================================
# ABSTRACT STRATEGY
# =============================================================================

class RewriteStrategy(ABC):
    """Abstract base class for rewrite strategies."""

    name: str = "strategy"

    @abstractmethod
    async def attempt(self, text: str, options: HumanizationOptions) -> str:
        """
        Rewrite text.

        Raises:
            RecoverableRewriteError: try the next strategy
            FatalRewriteError: give up
        """
        pass


# =============================================================================
# LOCAL FALLBACK
# =============================================================================

class LocalFallbackStrategy(RewriteStrategy):
    """Rule-based rewrite. Never raises."""

    name = "local"

    def __init__(self, rng: Optional[random.Random] = None):
        self.rewriter = RuleBasedRewriter(rng=rng)

    async def attempt(self, text: str, options: HumanizationOptions) -> str:
        return self.rewriter.rewrite(text, options)
