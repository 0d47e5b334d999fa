"""
Rewrite Service Adapter

Turns (text, readability, purpose, strength) into humanized text by
walking an ordered chain of strategies and short-circuiting on the first
usable result.

DEFAULT CHAIN (built from Settings, credentials decide membership):
1. Async submit/poll provider    - if UNDETECTABLE_API_KEY is set
2. Chat-completion provider      - if OPENAI_API_KEY is set
3. Local rule-based rewriter     - always

OUTPUT CONTRACT:
- success=True  → humanized_text is non-empty and differs from the input
- success=False → only for invalid input, or a FatalRewriteError

Strategy failures are logged and drive fallthrough. They never reach
the caller.
"""

import asyncio
import random
from typing import Any, Awaitable, Callable, Optional, Sequence

import httpx

from ..config import Settings, get_settings
from ..logging import get_logger
from ..models.schemas import HumanizationOptions, HumanizationResult
from .async_job_provider import AsyncJobClient, AsyncJobStrategy, ProviderCreditsError
from .chat_provider import ChatCompletionStrategy
from .input_validator import InputValidationError, InputValidator
from .options import normalize_options
from .strategies import (
    FatalRewriteError,
    LocalFallbackStrategy,
    RecoverableRewriteError,
    RewriteStrategy,
)


logger = get_logger(__name__)

ALL_STRATEGIES_FAILED = "Failed to humanize text"


class RewriteAdapter:
    """
    Chain-of-responsibility over RewriteStrategy implementations.

    Holds no per-request state; one instance can serve concurrent calls.
    """

    def __init__(
        self,
        strategies: Sequence[RewriteStrategy],
        validator: Optional[InputValidator] = None
    ):
        self.strategies = list(strategies)
        self.validator = validator or InputValidator()

    @property
    def strategy_names(self) -> list[str]:
        return [s.name for s in self.strategies]

    async def humanize(
        self,
        text: Any,
        readability: Any = None,
        purpose: Any = None,
        strength: Any = None
    ) -> HumanizationResult:
        """
        Validate, clamp options, then try each strategy in order.

        Raw (untrusted) values are accepted so that the HTTP endpoint can
        pass the request body straight through.
        """
        try:
            self.validator.validate(text)
        except InputValidationError as e:
            return HumanizationResult.failed(e.message)

        options = normalize_options(readability, purpose, strength)
        return await self.run(text, options)

    async def run(self, text: str, options: HumanizationOptions) -> HumanizationResult:
        """Walk the chain for already-validated input."""
        for strategy in self.strategies:
            try:
                rewritten = await strategy.attempt(text, options)
            except ProviderCreditsError as e:
                logger.warning(
                    "Strategy %s out of provider credits: %s",
                    strategy.name, e.internal_reason
                )
                continue
            except RecoverableRewriteError as e:
                logger.warning(
                    "Strategy %s failed, falling through: %s",
                    strategy.name, e.internal_reason or e.message
                )
                continue
            except FatalRewriteError as e:
                logger.error(
                    "Strategy %s failed fatally: %s",
                    strategy.name, e.internal_reason or e.message
                )
                return HumanizationResult.failed(e.message)

            if not rewritten or not rewritten.strip() or rewritten.strip() == text.strip():
                logger.warning(
                    "Strategy %s returned empty or unchanged text, falling through",
                    strategy.name
                )
                continue

            return HumanizationResult.ok(rewritten, strategy=strategy.name)

        return HumanizationResult.failed(ALL_STRATEGIES_FAILED)


# =============================================================================
# FACTORY FUNCTION
# =============================================================================

def build_strategies(
    settings: Settings,
    http_client: Optional[httpx.AsyncClient] = None,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    rng: Optional[random.Random] = None
) -> list[RewriteStrategy]:
    """Build the strategy chain for the configured credentials."""
    strategies: list[RewriteStrategy] = []

    if settings.undetectable_api_key:
        client = AsyncJobClient(
            api_key=settings.undetectable_api_key,
            base_url=settings.undetectable_base_url,
            model=settings.undetectable_model,
            timeout=settings.provider_timeout_seconds,
            http_client=http_client
        )
        strategies.append(AsyncJobStrategy(
            client,
            poll_interval=settings.poll_interval_seconds,
            max_attempts=settings.poll_max_attempts,
            sleep=sleep
        ))

    if settings.openai_api_key:
        strategies.append(ChatCompletionStrategy(
            api_key=settings.openai_api_key,
            model=settings.openai_model,
            base_url=settings.openai_base_url,
            temperature=settings.openai_temperature
        ))

    if rng is None and settings.fallback_randomness:
        rng = random.Random(settings.fallback_seed)
    strategies.append(LocalFallbackStrategy(rng=rng))

    return strategies


def get_rewrite_adapter(settings: Optional[Settings] = None) -> RewriteAdapter:
    """
    Get a rewrite adapter for the given (or cached) settings.

    Missing provider credentials are not an error; those strategies are
    simply left out of the chain.
    """
    settings = settings or get_settings()
    return RewriteAdapter(
        build_strategies(settings),
        validator=InputValidator(
            min_length=settings.min_text_length,
            max_length=settings.max_text_length
        )
    )
