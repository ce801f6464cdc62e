from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Protocol

from framesmith import config
from framesmith.llm.types import LLMResult


class LLMGateway(Protocol):
    def generate(
        self,
        *,
        prompt: str,
        api_key: str,
        model: Optional[str] = None,
    ) -> LLMResult:
        ...


class ImageGateway(Protocol):
    def generate_image(self, *, prompt: str, api_key: str) -> bytes:
        ...


@dataclass
class AnthropicGateway:
    clients: Dict[str, object] = field(default_factory=dict)
    default_model: str = config.DEFAULT_ANTHROPIC_MODEL
    max_tokens: int = config.MAX_TOKENS

    def _client(self, api_key: str) -> object:
        if api_key not in self.clients:
            import anthropic

            self.clients[api_key] = anthropic.Anthropic(api_key=api_key)
        return self.clients[api_key]

    def generate(
        self,
        *,
        prompt: str,
        api_key: str,
        model: Optional[str] = None,
    ) -> LLMResult:
        response = self._client(api_key).messages.create(
            model=model or self.default_model,
            max_tokens=self.max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        parts = [
            getattr(block, "text", "")
            for block in getattr(response, "content", []) or []
            if getattr(block, "type", "text") == "text"
        ]
        return LLMResult(output_text="".join(parts).strip(), response_id=getattr(response, "id", None))


@dataclass
class OpenAIGateway:
    clients: Dict[str, object] = field(default_factory=dict)
    default_model: str = config.DEFAULT_OPENAI_MODEL

    def _client(self, api_key: str) -> object:
        if api_key not in self.clients:
            from openai import OpenAI

            self.clients[api_key] = OpenAI(api_key=api_key)
        return self.clients[api_key]

    def generate(
        self,
        *,
        prompt: str,
        api_key: str,
        model: Optional[str] = None,
    ) -> LLMResult:
        response = self._client(api_key).responses.create(
            model=model or self.default_model,
            input=prompt,
        )
        output_text = (response.output_text or "").strip()
        response_id = getattr(response, "id", None)
        return LLMResult(output_text=output_text, response_id=response_id)


@dataclass
class OpenAIImageGateway:
    clients: Dict[str, object] = field(default_factory=dict)
    model: str = config.DEFAULT_IMAGE_MODEL
    size: str = config.DEFAULT_IMAGE_SIZE

    def _client(self, api_key: str) -> object:
        if api_key not in self.clients:
            from openai import OpenAI

            self.clients[api_key] = OpenAI(api_key=api_key)
        return self.clients[api_key]

    def generate_image(self, *, prompt: str, api_key: str) -> bytes:
        response = self._client(api_key).images.generate(
            model=self.model,
            prompt=prompt,
            n=1,
            size=self.size,
            response_format="b64_json",
        )
        encoded = response.data[0].b64_json
        if not encoded:
            raise ValueError("Image response did not include image data")
        return base64.b64decode(encoded)


@dataclass
class FakeGateway:
    output_text: str = "FAKE_GENERATION"
    response_id: str = "fake-response-id"
    prompts: List[str] = field(default_factory=list)

    def generate(
        self,
        *,
        prompt: str,
        api_key: str,
        model: Optional[str] = None,
    ) -> LLMResult:
        self.prompts.append(prompt)
        return LLMResult(output_text=self.output_text, response_id=self.response_id)


@dataclass
class FakeImageGateway:
    output_image: bytes = b"FAKE_IMAGE"

    def generate_image(self, *, prompt: str, api_key: str) -> bytes:
        return self.output_image
