from framesmith.llm.backend import GenerationBackend, RateLimiter
from framesmith.llm.gateway import (
    AnthropicGateway,
    FakeGateway,
    FakeImageGateway,
    LLMGateway,
    OpenAIGateway,
    OpenAIImageGateway,
)
from framesmith.llm.types import GenerationError, LLMResult, Provider, RateLimitError

__all__ = [
    "GenerationBackend",
    "RateLimiter",
    "LLMGateway",
    "AnthropicGateway",
    "OpenAIGateway",
    "OpenAIImageGateway",
    "FakeGateway",
    "FakeImageGateway",
    "GenerationError",
    "LLMResult",
    "Provider",
    "RateLimitError",
]
