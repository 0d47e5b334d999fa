"""
Rewrite Service clients used by the orchestrator.

The orchestrator does not care where the adapter runs:
- HttpRewriteService      → POST to the rewrite endpoint (separate deployment)
- InProcessRewriteService → call a RewriteAdapter directly
"""

from abc import ABC, abstractmethod
from typing import Optional

import httpx

from ..config import Settings, get_settings
from ..logging import get_logger
from ..models.schemas import HumanizationOptions, HumanizationResult
from .rewrite_adapter import RewriteAdapter, get_rewrite_adapter


logger = get_logger(__name__)

UNREACHABLE_MESSAGE = "Failed to humanize text. Please try again."


class RewriteService(ABC):
    """Anything that can turn text + options into a HumanizationResult."""

    @abstractmethod
    async def humanize(self, text: str, options: HumanizationOptions) -> HumanizationResult:
        pass


class InProcessRewriteService(RewriteService):
    def __init__(self, adapter: RewriteAdapter):
        self.adapter = adapter

    async def humanize(self, text: str, options: HumanizationOptions) -> HumanizationResult:
        return await self.adapter.humanize(
            text,
            readability=options.readability,
            purpose=options.purpose,
            strength=options.strength
        )


class HttpRewriteService(RewriteService):
    """
    Calls the rewrite endpoint over HTTP.

    Transport failures become success=False results so the orchestrator
    sees a single failure shape.
    """

    def __init__(
        self,
        url: str,
        timeout: float = 120.0,
        api_key: str = "",
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.url = url
        self.timeout = timeout
        self.api_key = api_key
        self._http = http_client

    async def humanize(self, text: str, options: HumanizationOptions) -> HumanizationResult:
        payload = {
            "text": text,
            "readability": options.readability,
            "purpose": options.purpose,
            "strength": str(options.strength),
        }
        headers = {"Content-Type": "application/json"}
        if self.api_key:
            headers["apikey"] = self.api_key
            headers["Authorization"] = f"Bearer {self.api_key}"

        try:
            if self._http is not None:
                response = await self._http.post(self.url, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=self.timeout) as client:
                    response = await client.post(self.url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            logger.error("Rewrite service unreachable: %s: %s", type(e).__name__, e)
            return HumanizationResult.failed(UNREACHABLE_MESSAGE)

        try:
            data = response.json()
        except ValueError:
            data = None
        if not isinstance(data, dict):
            logger.error("Rewrite service returned non-JSON (status %d)", response.status_code)
            return HumanizationResult.failed(UNREACHABLE_MESSAGE)

        if response.is_success and data.get("success") and data.get("humanizedText"):
            return HumanizationResult.ok(data["humanizedText"])

        return HumanizationResult.failed(data.get("error") or UNREACHABLE_MESSAGE)


def get_rewrite_service(settings: Optional[Settings] = None) -> RewriteService:
    """HTTP client when REWRITE_SERVICE_URL is set, in-process adapter otherwise."""
    settings = settings or get_settings()
    if settings.rewrite_service_url:
        return HttpRewriteService(
            url=settings.rewrite_service_url,
            timeout=settings.rewrite_service_timeout_seconds,
            api_key=settings.supabase_anon_key
        )
    return InProcessRewriteService(get_rewrite_adapter(settings))
