"""Tests for dispute draft generation."""

from __future__ import annotations

from types import SimpleNamespace
from typing import Any

import openai
import pytest

from services.llm_service import DRAFT_UNAVAILABLE, LLMService, format_amount, format_timestamp
from tests.factories import make_dispute


class _FakeCompletions:
    def __init__(self, content: Any = "Structured response", error: Exception | None = None) -> None:
        self.content = content
        self.error = error
        self.requests: list[dict[str, Any]] = []

    def create(self, **kwargs: Any) -> Any:
        self.requests.append(kwargs)
        if self.error:
            raise self.error
        message = SimpleNamespace(content=self.content)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def _service_with(completions: Any) -> LLMService:
    service = LLMService(api_key="sk-test")
    service.client = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return service


def test_fallback_without_api_key_never_builds_a_client(monkeypatch: pytest.MonkeyPatch) -> None:
    def _explode(*args: Any, **kwargs: Any) -> None:
        raise AssertionError("OpenAI client must not be created without a key")

    monkeypatch.setattr(openai, "OpenAI", _explode)
    service = LLMService(api_key=None)

    draft = service.generate_dispute_draft(make_dispute("dp_fallback"))

    assert service.client is None
    assert "dp_fallback" in draft
    assert "proof of service/delivery" in draft
    assert service.metrics["fallback_used"] == 1
    assert service.metrics["calls_made"] == 0


def test_fallback_tolerates_non_dict_dispute() -> None:
    draft = LLMService(api_key=None).generate_dispute_draft(None)  # type: ignore[arg-type]

    assert draft.startswith("Dispute unknown:")


def test_request_carries_prompt_and_low_temperature() -> None:
    completions = _FakeCompletions()
    service = _service_with(completions)

    draft = service.generate_dispute_draft(make_dispute("dp_1"))

    assert draft == "Structured response"
    (request,) = completions.requests
    assert request["temperature"] == 0.2
    assert request["model"] == "gpt-4o-mini"
    system, user = request["messages"]
    assert system["role"] == "system"
    assert "professional chargeback analyst" in system["content"]
    assert "Do not invent facts" in system["content"]
    assert user["role"] == "user"
    content = user["content"]
    assert "Dispute ID: dp_1" in content
    assert "Reason: fraudulent" in content
    assert "Amount: 25.00 USD" in content
    assert "Created: 2023-11-14T22:13:20Z" in content
    assert "Charge: ch_1" in content
    assert "Evidence due by: 2023-11-24T22:13:20Z" in content
    assert "- Order details: <attach order receipt / invoice>" in content
    assert "- Policies: <attach refund/terms/exclusions>" in content


def test_missing_fields_render_as_unknown() -> None:
    completions = _FakeCompletions()
    service = _service_with(completions)

    service.generate_dispute_draft({"id": "dp_sparse", "evidence_details": None, "created": "garbage"})

    content = completions.requests[0]["messages"][1]["content"]
    assert "Evidence due by: unknown" in content
    assert "Created: unknown" in content
    assert "Amount: unknown unknown" in content


def test_expanded_charge_uses_its_id() -> None:
    completions = _FakeCompletions()
    service = _service_with(completions)

    service.generate_dispute_draft(make_dispute("dp_1", charge={"id": "ch_expanded", "object": "charge"}))

    assert "Charge: ch_expanded" in completions.requests[0]["messages"][1]["content"]


def test_provider_error_degrades_to_unavailable() -> None:
    service = _service_with(_FakeCompletions(error=RuntimeError("connection reset")))

    assert service.generate_dispute_draft(make_dispute()) == DRAFT_UNAVAILABLE
    assert service.metrics["failures"] == 1


@pytest.mark.parametrize("content", [None, "", "   "])
def test_empty_completion_degrades_to_unavailable(content: Any) -> None:
    service = _service_with(_FakeCompletions(content=content))

    assert service.generate_dispute_draft(make_dispute()) == DRAFT_UNAVAILABLE


def test_malformed_response_degrades_to_unavailable() -> None:
    class _NoChoices:
        def create(self, **kwargs: Any) -> Any:
            return SimpleNamespace(choices=[])

    service = _service_with(_NoChoices())

    assert service.generate_dispute_draft(make_dispute()) == DRAFT_UNAVAILABLE


def test_health_check_reports_degraded_without_key() -> None:
    health = LLMService(api_key=None).health_check()

    assert health["status"] == "degraded"
    assert health["openai_configured"] is False


def test_format_helpers() -> None:
    assert format_amount(2500, "usd") == "25.00 USD"
    assert format_amount(1, "eur") == "0.01 EUR"
    assert format_amount(None, None) == "unknown unknown"
    assert format_timestamp(0) == "1970-01-01T00:00:00Z"
    assert format_timestamp(None) == "unknown"
    assert format_timestamp("soon") == "unknown"
