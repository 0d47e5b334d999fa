"""
Async Job Provider (submit / poll)

Third-party humanization API that works in two stages:

1. POST /submit   {content, readability, purpose, strength, model} -> {id}
2. POST /document {id} -> {id, status?, output?}   (repeated)

JOB STATE MACHINE:
    pending --(poll reports status done/complete AND non-empty output)--> complete

Any other status ("queued", "processing", missing) keeps the job pending,
even if a partial output is already present.

The job lives only for one strategy attempt. Polling is strictly
sequential, spaced by a fixed delay, and bounded by a fixed number of
attempts (default 20 x 5s). A 429 while polling uses up an attempt but is
not terminal. Any other non-2xx while polling is terminal.
"""

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Callable, Optional

import httpx

from ..logging import get_logger
from ..models.schemas import HumanizationOptions
from .options import strength_band
from .strategies import RecoverableRewriteError, RewriteStrategy


logger = get_logger(__name__)


# =============================================================================
# PROVIDER VOCABULARY
# =============================================================================

# The provider names its strength settings by intent, not by number.
PROVIDER_STRENGTH = {
    "low": "Quality",
    "medium": "Balanced",
    "high": "More Human",
}

# Readability levels are shared one-to-one; purposes need mapping.
PROVIDER_PURPOSE = {
    "General Writing": "General Writing",
    "Academic": "Essay",
    "Business": "Business Material",
    "Creative": "Story",
    "Technical": "Report",
}

# Provider spellings of a finished job
COMPLETE_STATUSES = frozenset({"done", "complete", "completed"})

INSUFFICIENT_CREDITS_MARKERS = ("insufficient credit", "not enough credit", "out of credits")


# =============================================================================
# EXCEPTIONS
# =============================================================================

class ProviderError(RecoverableRewriteError):
    """Generic provider failure (non-2xx, network, malformed body)."""


class ProviderCreditsError(ProviderError):
    """The provider account has run out of credits."""


class ProviderRateLimited(ProviderError):
    """429 from the provider. Not terminal while polling."""


class PollTimeoutError(RecoverableRewriteError):
    """Attempt budget exhausted without output."""


# =============================================================================
# JOB STATE
# =============================================================================

class JobStatus(str, Enum):
    PENDING = "pending"
    COMPLETE = "complete"


@dataclass
class AsyncJob:
    """In-memory handle for one submitted document."""
    id: str
    status: JobStatus = JobStatus.PENDING
    output: Optional[str] = None
    polls: int = 0

    def apply_poll(self, payload: dict) -> None:
        """Single transition: pending -> complete once finished with output."""
        self.polls += 1
        if self.status is JobStatus.COMPLETE:
            return
        status = str(payload.get("status") or "").strip().lower()
        if status not in COMPLETE_STATUSES:
            return
        output = payload.get("output")
        if isinstance(output, str) and output.strip():
            self.output = output
            self.status = JobStatus.COMPLETE


# =============================================================================
# HTTP CLIENT
# =============================================================================

class AsyncJobClient:
    """
    Thin httpx client for the submit/poll API.

    API ACCESS:
    - Key sent in the "apikey" header
    - Stored in: UNDETECTABLE_API_KEY environment variable
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://humanize.undetectable.ai",
        model: str = "v11",
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self._http = http_client

    async def submit(self, content: str, options: HumanizationOptions) -> AsyncJob:
        """Submit a document. Returns a pending job."""
        payload = {
            "content": content,
            "readability": options.readability,
            "purpose": PROVIDER_PURPOSE.get(options.purpose, "General Writing"),
            "strength": PROVIDER_STRENGTH[strength_band(options.strength)],
            "model": self.model,
        }
        response = await self._post("/submit", payload)

        if not response.is_success:
            body = response.text
            if response.status_code == 402 or _mentions_insufficient_credits(body):
                raise ProviderCreditsError(
                    "Humanization provider is out of credits.",
                    internal_reason=f"submit {response.status_code}: {body[:200]}"
                )
            raise ProviderError(
                "Humanization provider rejected the request.",
                internal_reason=f"submit {response.status_code}: {body[:200]}"
            )

        data = _json_body(response, "submit")
        job_id = data.get("id")
        if not job_id:
            raise ProviderError(
                "Humanization provider returned no job id.",
                internal_reason=f"submit body without id: {str(data)[:200]}"
            )
        return AsyncJob(id=str(job_id))

    async def poll(self, job: AsyncJob) -> AsyncJob:
        """Fetch the job once and advance its state."""
        response = await self._post("/document", {"id": job.id})

        if response.status_code == 429:
            job.polls += 1
            raise ProviderRateLimited(
                "Humanization provider is rate limiting us.",
                internal_reason=f"poll 429 for job {job.id}"
            )
        if not response.is_success:
            raise ProviderError(
                "Humanization provider failed while processing.",
                internal_reason=f"poll {response.status_code} for job {job.id}"
            )

        job.apply_poll(_json_body(response, "poll"))
        return job

    async def _post(self, path: str, payload: dict) -> httpx.Response:
        url = f"{self.base_url}{path}"
        headers = {
            "apikey": self.api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }
        try:
            if self._http is not None:
                return await self._http.post(url, json=payload, headers=headers)
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                return await client.post(url, json=payload, headers=headers)
        except httpx.HTTPError as e:
            raise ProviderError(
                "Could not reach the humanization provider.",
                internal_reason=f"{path}: {type(e).__name__}: {e}"
            )


def _mentions_insufficient_credits(body: str) -> bool:
    lowered = body.lower()
    return any(marker in lowered for marker in INSUFFICIENT_CREDITS_MARKERS)


def _json_body(response: httpx.Response, stage: str) -> dict:
    try:
        data = response.json()
    except ValueError as e:
        raise ProviderError(
            "Humanization provider returned an invalid response.",
            internal_reason=f"{stage}: JSON parse error: {e}"
        )
    if not isinstance(data, dict):
        raise ProviderError(
            "Humanization provider returned an invalid response.",
            internal_reason=f"{stage}: expected object, got {type(data).__name__}"
        )
    return data


# =============================================================================
# STRATEGY
# =============================================================================

class AsyncJobStrategy(RewriteStrategy):
    """Submit once, then poll until complete or out of attempts."""

    name = "async_job"

    def __init__(
        self,
        client: AsyncJobClient,
        poll_interval: float = 5.0,
        max_attempts: int = 20,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep
    ):
        self.client = client
        self.poll_interval = poll_interval
        self.max_attempts = max_attempts
        self.sleep = sleep

    async def attempt(self, text: str, options: HumanizationOptions) -> str:
        job = await self.client.submit(text, options)
        logger.info("Submitted job %s", job.id)

        for attempt in range(1, self.max_attempts + 1):
            await self.sleep(self.poll_interval)
            try:
                await self.client.poll(job)
            except ProviderRateLimited:
                logger.info("Job %s: rate limited on poll %d, retrying", job.id, attempt)
                continue

            if job.status is JobStatus.COMPLETE:
                logger.info("Job %s complete after %d polls", job.id, attempt)
                return job.output

        raise PollTimeoutError(
            "Humanization provider took too long.",
            internal_reason=f"job {job.id} still pending after {self.max_attempts} polls"
        )
