from __future__ import annotations

from typing import List

import pytest
from conftest import SequencedGateway, make_backend

from framesmith.llm.backend import GenerationBackend, RateLimiter, format_error
from framesmith.llm.gateway import FakeGateway, FakeImageGateway
from framesmith.llm.types import GenerationError, Provider, RateLimitError


class FakeClock:
    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now


class StatusError(Exception):
    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


def test_generate_text_returns_gateway_output() -> None:
    gateway = FakeGateway(output_text="A pitch.")
    backend = make_backend(gateway)

    assert backend.generate_text("Write a pitch", "k", "openai") == "A pitch."
    assert gateway.prompts == ["Write a pitch"]


@pytest.mark.parametrize(
    "prompt,api_key,provider,message",
    [
        ("Write", None, "anthropic", "API key is required"),
        ("Write", "", "anthropic", "API key is required"),
        ("   ", "k", "anthropic", "Prompt cannot be empty"),
        ("Write", "k", "mistral", "Unknown provider: mistral"),
    ],
)
def test_invalid_arguments_are_rejected(prompt, api_key, provider, message) -> None:
    gateway = FakeGateway()
    backend = make_backend(gateway)

    with pytest.raises(GenerationError, match=message):
        backend.generate_text(prompt, api_key, provider)

    assert gateway.prompts == []


def test_rate_limiter_rejects_calls_inside_interval() -> None:
    clock = FakeClock()
    limiter = RateLimiter(min_interval=1.0, clock=clock)

    limiter.check()
    clock.now += 0.4
    assert limiter.seconds_until_ready() == pytest.approx(0.6)
    with pytest.raises(RateLimitError):
        limiter.check()

    clock.now += 0.6
    limiter.check()
    assert limiter.seconds_until_ready() == pytest.approx(1.0)


def test_backend_applies_rate_limit_before_dispatch() -> None:
    clock = FakeClock()
    gateway = FakeGateway()
    backend = GenerationBackend(
        gateways={Provider.ANTHROPIC: gateway},
        image_gateway=FakeImageGateway(),
        rate_limiter=RateLimiter(min_interval=1.0, clock=clock),
    )

    backend.generate_text("one", "k")
    with pytest.raises(RateLimitError):
        backend.generate_text("two", "k")

    assert gateway.prompts == ["one"]


@pytest.mark.parametrize(
    "exc,expected,retryable",
    [
        (StatusError("Unauthorized", 401), "Authentication failed", False),
        (ValueError("Incorrect API key provided"), "Invalid API key", False),
        (StatusError("Too many requests", 429), "Rate limit exceeded", True),
        (TimeoutError("Request timed out"), "Request timed out", True),
        (ConnectionError("connection reset"), "Network error", True),
        (StatusError("Overloaded", 529), "Provider error (529)", True),
        (ValueError("something odd"), "something odd", False),
    ],
)
def test_format_error_maps_provider_failures(exc, expected, retryable) -> None:
    error = format_error(exc)

    assert expected in str(error)
    assert error.retryable is retryable


def test_retryable_failures_back_off_and_retry() -> None:
    waits: List[float] = []
    gateway = SequencedGateway(
        outputs=[StatusError("busy", 429), TimeoutError("timed out"), "Finally."]
    )
    backend = make_backend(gateway, max_retries=2, backoff_seconds=0.5, sleep=waits.append)

    assert backend.generate_text("Write", "k") == "Finally."
    assert waits == [0.5, 1.0]


def test_non_retryable_failure_is_not_retried() -> None:
    waits: List[float] = []
    gateway = SequencedGateway(outputs=[StatusError("Unauthorized", 401)])
    backend = make_backend(gateway, max_retries=3, sleep=waits.append)

    with pytest.raises(GenerationError, match="Authentication failed"):
        backend.generate_text("Write", "k")

    assert waits == []
    assert len(gateway.prompts) == 1


def test_retries_are_off_by_default() -> None:
    gateway = SequencedGateway(outputs=[StatusError("busy", 429), "never reached"])
    backend = make_backend(gateway)

    with pytest.raises(GenerationError, match="Rate limit exceeded"):
        backend.generate_text("Write", "k")

    assert len(gateway.prompts) == 1


def test_empty_response_is_an_error() -> None:
    backend = make_backend(SequencedGateway(outputs=["   "]))

    with pytest.raises(GenerationError, match="Empty response from anthropic"):
        backend.generate_text("Write", "k")


def test_generate_image_requires_key_and_returns_bytes() -> None:
    backend = make_backend(FakeGateway(), image_gateway=FakeImageGateway(output_image=b"PNG"))

    with pytest.raises(GenerationError):
        backend.generate_image("A map", None)

    assert backend.generate_image("A map", "k") == b"PNG"
