from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Optional, Union

from framesmith import config
from framesmith.llm.gateway import (
    AnthropicGateway,
    ImageGateway,
    LLMGateway,
    OpenAIGateway,
    OpenAIImageGateway,
)
from framesmith.llm.types import GenerationError, Provider, RateLimitError

logger = logging.getLogger(__name__)


@dataclass
class RateLimiter:
    """Rejects a call made less than ``min_interval`` seconds after the previous one."""

    min_interval: float = config.RATE_LIMIT_SECONDS
    clock: Callable[[], float] = time.monotonic
    _last_call: Optional[float] = None

    def check(self) -> None:
        now = self.clock()
        if self._last_call is not None and now - self._last_call < self.min_interval:
            raise RateLimitError("Please wait a moment before making another request.")
        self._last_call = now

    def seconds_until_ready(self) -> float:
        if self._last_call is None:
            return 0.0
        return max(0.0, self.min_interval - (self.clock() - self._last_call))


def format_error(exc: Exception) -> GenerationError:
    message = str(exc) or exc.__class__.__name__
    lower = message.lower()
    status = getattr(exc, "status_code", None)

    if status in (401, 403) or "401" in lower or "403" in lower:
        return GenerationError("Authentication failed. Please check your API key.")
    if "api key" in lower or "api_key" in lower:
        return GenerationError("Invalid API key. Please check your API key in settings.")
    if status == 429 or "rate limit" in lower or "429" in lower:
        return GenerationError(
            "Rate limit exceeded. Please wait a moment and try again.", retryable=True
        )
    if "timeout" in lower or "timed out" in lower:
        return GenerationError("Request timed out. Please try again.", retryable=True)
    if "network" in lower or "connection" in lower:
        return GenerationError(
            "Network error. Please check your connection and try again.", retryable=True
        )
    if isinstance(status, int) and status >= 500:
        return GenerationError(f"Provider error ({status}): {message}", retryable=True)
    return GenerationError(message)


def _default_gateways() -> Dict[Provider, LLMGateway]:
    return {Provider.ANTHROPIC: AnthropicGateway(), Provider.OPENAI: OpenAIGateway()}


@dataclass
class GenerationBackend:
    """Provider-agnostic text and image generation.

    Validates arguments, applies the client-side rate limit, dispatches to the
    gateway registered for the provider and turns every failure into a
    :class:`GenerationError`.
    """

    gateways: Dict[Provider, LLMGateway] = field(default_factory=_default_gateways)
    image_gateway: ImageGateway = field(default_factory=OpenAIImageGateway)
    rate_limiter: RateLimiter = field(default_factory=RateLimiter)
    max_retries: int = 0
    backoff_seconds: float = 1.0
    sleep: Callable[[float], None] = time.sleep

    def generate_text(
        self,
        prompt: str,
        api_key: Optional[str],
        provider: Union[Provider, str] = config.DEFAULT_PROVIDER,
        model: Optional[str] = None,
    ) -> str:
        if not api_key:
            raise GenerationError("API key is required")
        if not prompt or not prompt.strip():
            raise GenerationError("Prompt cannot be empty")
        try:
            selected = Provider(provider)
        except ValueError as exc:
            raise GenerationError(
                f"Unknown provider: {provider}. Use 'anthropic' or 'openai'."
            ) from exc
        gateway = self.gateways.get(selected)
        if gateway is None:
            raise GenerationError(f"No gateway configured for provider '{selected.value}'")

        self.rate_limiter.check()

        for attempt in range(self.max_retries + 1):
            try:
                result = gateway.generate(prompt=prompt, api_key=api_key, model=model)
            except GenerationError:
                raise
            except Exception as exc:
                error = format_error(exc)
                if error.retryable and attempt < self.max_retries:
                    wait = self.backoff_seconds * (2 ** attempt)
                    logger.warning(
                        "%s generation failed (%s), retry %d/%d in %.1fs",
                        selected.value,
                        error,
                        attempt + 1,
                        self.max_retries,
                        wait,
                    )
                    self.sleep(wait)
                    continue
                raise error from exc
            if not result.output_text.strip():
                raise GenerationError(f"Empty response from {selected.value}")
            return result.output_text
        raise GenerationError("Generation failed")  # pragma: no cover - loop always returns or raises

    def generate_image(self, prompt: str, api_key: Optional[str]) -> bytes:
        if not api_key:
            raise GenerationError("An image-capable API key is required")
        if not prompt or not prompt.strip():
            raise GenerationError("Prompt cannot be empty")
        try:
            return self.image_gateway.generate_image(prompt=prompt, api_key=api_key)
        except GenerationError:
            raise
        except Exception as exc:
            raise format_error(exc) from exc
