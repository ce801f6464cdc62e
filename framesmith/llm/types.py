from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class Provider(str, Enum):
    ANTHROPIC = "anthropic"
    OPENAI = "openai"


@dataclass(frozen=True)
class LLMResult:
    output_text: str
    response_id: Optional[str]


class GenerationError(RuntimeError):
    def __init__(self, message: str, *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class RateLimitError(GenerationError):
    pass
