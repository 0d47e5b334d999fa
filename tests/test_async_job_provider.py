"""
Submit/poll provider tests.

The provider API is faked with httpx.MockTransport and the poll delay is
replaced by a recording sleep, so the full 20-attempt budget runs instantly.
"""

import json

import httpx
import pytest

from humanizer.models.schemas import HumanizationOptions
from humanizer.services.async_job_provider import (
    AsyncJob,
    AsyncJobClient,
    AsyncJobStrategy,
    JobStatus,
    PollTimeoutError,
    ProviderCreditsError,
    ProviderError,
)

from conftest import AI_TEXT


class RecordingSleep:
    def __init__(self):
        self.calls = []

    async def __call__(self, seconds):
        self.calls.append(seconds)


class FakeProvider:
    """
    Scripted provider. Responses are factories so each request gets a fresh
    httpx.Response. poll_responses is consumed one per poll; the last entry
    repeats once the script runs out.
    """

    def __init__(self, submit_response=None, poll_responses=None):
        self.submit_response = submit_response or submitted
        self.poll_responses = poll_responses or [pending]
        self.submitted = []
        self.polls = 0
        self.headers = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.headers.append(request.headers)
        if request.url.path == "/submit":
            self.submitted.append(json.loads(request.content))
            return self.submit_response()
        if request.url.path == "/document":
            index = min(self.polls, len(self.poll_responses) - 1)
            self.polls += 1
            return self.poll_responses[index]()
        return httpx.Response(404)


def make_strategy(provider: FakeProvider, sleep=None, max_attempts=20):
    http = httpx.AsyncClient(transport=httpx.MockTransport(provider.handler))
    client = AsyncJobClient(
        api_key="test-key",
        base_url="https://provider.test",
        http_client=http
    )
    return AsyncJobStrategy(
        client,
        poll_interval=5.0,
        max_attempts=max_attempts,
        sleep=sleep or RecordingSleep()
    )


def submitted():
    return httpx.Response(200, json={"status": "Document submitted successfully", "id": "job-1"})


def pending():
    return httpx.Response(200, json={"id": "job-1", "status": "processing", "output": None})


def done(text="A rewritten, human-sounding paragraph."):
    return httpx.Response(200, json={"id": "job-1", "status": "done", "output": text})


def rate_limited():
    return httpx.Response(429)


# =============================================================================
# JOB STATE MACHINE
# =============================================================================

class TestAsyncJob:

    def test_starts_pending(self):
        job = AsyncJob(id="job-1")
        assert job.status is JobStatus.PENDING
        assert job.output is None

    def test_blank_output_keeps_job_pending(self):
        job = AsyncJob(id="job-1")
        job.apply_poll({"status": "done", "output": "   "})
        job.apply_poll({})
        assert job.status is JobStatus.PENDING
        assert job.polls == 2

    @pytest.mark.parametrize("status", ["done", "complete", "Completed"])
    def test_finished_status_with_output_completes_job(self, status):
        job = AsyncJob(id="job-1")
        job.apply_poll({"status": status, "output": "done text"})
        assert job.status is JobStatus.COMPLETE
        assert job.output == "done text"

    @pytest.mark.parametrize("payload", [
        {"status": "processing", "output": "partial draft"},
        {"status": "queued", "output": "partial draft"},
        {"output": "partial draft"},
    ])
    def test_partial_output_keeps_job_pending(self, payload):
        job = AsyncJob(id="job-1")
        job.apply_poll(payload)
        assert job.status is JobStatus.PENDING
        assert job.output is None

    def test_complete_is_terminal(self):
        job = AsyncJob(id="job-1")
        job.apply_poll({"status": "done", "output": "first"})
        job.apply_poll({"status": "done", "output": "second"})
        assert job.output == "first"


# =============================================================================
# STRATEGY
# =============================================================================

@pytest.mark.asyncio
async def test_submit_then_poll_until_complete():
    provider = FakeProvider(poll_responses=[pending, pending, lambda: done("Human text here.")])
    sleep = RecordingSleep()
    strategy = make_strategy(provider, sleep=sleep)

    result = await strategy.attempt(AI_TEXT, HumanizationOptions(purpose="Academic", strength=0.5))

    assert result == "Human text here."
    assert provider.polls == 3
    assert sleep.calls == [5.0, 5.0, 5.0]

    submitted = provider.submitted[0]
    assert submitted["content"] == AI_TEXT
    assert submitted["readability"] == "University"
    assert submitted["purpose"] == "Essay"
    assert submitted["strength"] == "Balanced"
    assert provider.headers[0]["apikey"] == "test-key"


@pytest.mark.asyncio
async def test_in_progress_output_is_not_returned():
    provider = FakeProvider(poll_responses=[
        lambda: httpx.Response(200, json={"id": "job-1", "status": "processing", "output": "Half a dra"}),
        lambda: done("The finished rewrite."),
    ])
    strategy = make_strategy(provider)

    result = await strategy.attempt(AI_TEXT, HumanizationOptions())

    assert result == "The finished rewrite."
    assert provider.polls == 2


@pytest.mark.asyncio
async def test_poll_budget_is_bounded():
    """A job that never completes stops after exactly max_attempts polls."""
    provider = FakeProvider(poll_responses=[pending])
    sleep = RecordingSleep()
    strategy = make_strategy(provider, sleep=sleep, max_attempts=20)

    with pytest.raises(PollTimeoutError):
        await strategy.attempt(AI_TEXT, HumanizationOptions())

    assert provider.polls == 20
    assert len(sleep.calls) == 20
    assert sum(sleep.calls) == 100.0


@pytest.mark.asyncio
async def test_rate_limit_during_polling_is_not_terminal():
    provider = FakeProvider(poll_responses=[rate_limited, rate_limited, done])
    strategy = make_strategy(provider)

    result = await strategy.attempt(AI_TEXT, HumanizationOptions())

    assert result == "A rewritten, human-sounding paragraph."
    assert provider.polls == 3


@pytest.mark.asyncio
async def test_persistent_rate_limit_still_times_out():
    provider = FakeProvider(poll_responses=[rate_limited])
    strategy = make_strategy(provider, max_attempts=5)

    with pytest.raises(PollTimeoutError):
        await strategy.attempt(AI_TEXT, HumanizationOptions())

    assert provider.polls == 5


@pytest.mark.asyncio
async def test_other_poll_errors_are_terminal():
    provider = FakeProvider(poll_responses=[lambda: httpx.Response(500, text="boom"), done])
    strategy = make_strategy(provider)

    with pytest.raises(ProviderError) as exc_info:
        await strategy.attempt(AI_TEXT, HumanizationOptions())

    assert not isinstance(exc_info.value, PollTimeoutError)
    assert provider.polls == 1


@pytest.mark.asyncio
@pytest.mark.parametrize("response", [
    lambda: httpx.Response(402, json={"error": "Payment required"}),
    lambda: httpx.Response(400, json={"error": "Insufficient credits for this request"}),
])
async def test_insufficient_credits_on_submit(response):
    provider = FakeProvider(submit_response=response)
    strategy = make_strategy(provider)

    with pytest.raises(ProviderCreditsError):
        await strategy.attempt(AI_TEXT, HumanizationOptions())

    assert provider.polls == 0


@pytest.mark.asyncio
async def test_generic_submit_failure():
    provider = FakeProvider(submit_response=lambda: httpx.Response(500, text="server error"))
    strategy = make_strategy(provider)

    with pytest.raises(ProviderError) as exc_info:
        await strategy.attempt(AI_TEXT, HumanizationOptions())

    assert not isinstance(exc_info.value, ProviderCreditsError)


@pytest.mark.asyncio
async def test_submit_without_job_id():
    provider = FakeProvider(submit_response=lambda: httpx.Response(200, json={"status": "ok"}))
    strategy = make_strategy(provider)

    with pytest.raises(ProviderError):
        await strategy.attempt(AI_TEXT, HumanizationOptions())


@pytest.mark.asyncio
async def test_network_error_becomes_provider_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    client = AsyncJobClient(api_key="k", base_url="https://provider.test", http_client=http)
    strategy = AsyncJobStrategy(client, sleep=RecordingSleep())

    with pytest.raises(ProviderError):
        await strategy.attempt(AI_TEXT, HumanizationOptions())
