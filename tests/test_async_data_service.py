"""Tests for running provider calls off the event loop."""

from __future__ import annotations

import asyncio
import threading
from typing import Any

import pytest

from services.service_factory import ServiceFactory
from tests.factories import make_dispute
from tests.fakes.fake_stripe_service import FakeStripeService
from utils.config import Settings
from utils.dispute_context import DisputeContext, current_scope


class BlockingLLMService:
    """Draft generator that holds its thread until released."""

    def __init__(self) -> None:
        self.release = threading.Event()
        self.started = 0
        self._lock = threading.Lock()

    def generate_dispute_draft(self, dispute: dict[str, Any]) -> str:
        with self._lock:
            self.started += 1
        self.release.wait(timeout=10)
        return f"draft for {dispute['id']}"


async def _wait_for_started(llm: BlockingLLMService, count: int) -> None:
    async def started() -> None:
        while llm.started < count:
            await asyncio.sleep(0.01)

    await asyncio.wait_for(started(), timeout=2)


class ScopeRecordingStripeService(FakeStripeService):
    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.seen_scopes: list[Any] = []

    def retrieve_dispute(self, dispute_id: str, account_id: str | None = None) -> dict[str, Any]:
        self.seen_scopes.append(current_scope())
        return super().retrieve_dispute(dispute_id, account_id)


@pytest.mark.asyncio
async def test_submission_is_not_held_up_by_a_burst_of_drafts(settings: Settings) -> None:
    llm = BlockingLLMService()
    fake_stripe = FakeStripeService(disputes={"dp_1": make_dispute("dp_1")})
    services = ServiceFactory.create_services(settings, stripe_service=fake_stripe, llm_service=llm)
    async_data = services.async_data

    drafts = [
        asyncio.create_task(async_data.generate_draft(make_dispute(f"dp_burst_{i}")))
        for i in range(8)
    ]
    try:
        await _wait_for_started(llm, len(drafts))

        updated = await asyncio.wait_for(async_data.submit_evidence("dp_1", "Hello world"), timeout=2)

        assert updated["evidence"]["uncategorized_text"] == "Hello world"
        assert not any(task.done() for task in drafts)
    finally:
        llm.release.set()
        results = await asyncio.gather(*drafts)
        async_data.shutdown()

    assert results == [f"draft for dp_burst_{i}" for i in range(8)]


@pytest.mark.asyncio
async def test_pool_size_follows_settings(settings: Settings) -> None:
    llm = BlockingLLMService()
    services = ServiceFactory.create_services(
        Settings(stripe_secret_key=settings.stripe_secret_key, worker_threads=2),
        stripe_service=FakeStripeService(disputes={"dp_1": make_dispute("dp_1")}),
        llm_service=llm,
    )

    drafts = [asyncio.create_task(services.async_data.generate_draft(make_dispute(f"dp_{i}"))) for i in range(3)]
    try:
        await _wait_for_started(llm, 2)
        await asyncio.sleep(0.1)

        assert llm.started == 2
    finally:
        llm.release.set()
        await asyncio.gather(*drafts)
        services.async_data.shutdown()


@pytest.mark.asyncio
async def test_dispute_scope_reaches_the_worker_thread(settings: Settings) -> None:
    fake_stripe = ScopeRecordingStripeService(disputes={"dp_1": make_dispute("dp_1")})
    services = ServiceFactory.create_services(settings, stripe_service=fake_stripe)

    with DisputeContext("dp_1", "acct_1", "retrieve") as scope:
        await services.async_data.fetch_dispute("dp_1", "acct_1")
    services.async_data.shutdown()

    assert fake_stripe.seen_scopes == [scope]
