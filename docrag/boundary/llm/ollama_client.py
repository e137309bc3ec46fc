"""
Ollama chat client.

Calls a local Ollama server's /api/chat endpoint, either as a single
response or as a newline-delimited JSON stream, and /api/tags for health
and model listing.

Dependencies: httpx, langchain_core.messages
System role: Default generation backend
"""

import json
import logging
from collections.abc import AsyncIterator
from typing import Any

import httpx
from langchain_core.messages import BaseMessage

from docrag.boundary.llm.base import GenerationBackend
from docrag.core.exceptions import GenerationError

logger = logging.getLogger(__name__)

_ROLE_BY_TYPE = {
    "system": "system",
    "human": "user",
    "ai": "assistant",
}


def to_ollama_messages(messages: list[BaseMessage]) -> list[dict[str, str]]:
    """Convert LangChain messages to Ollama's role/content dicts."""
    return [
        {"role": _ROLE_BY_TYPE.get(message.type, "user"), "content": str(message.content)}
        for message in messages
    ]


class OllamaClient(GenerationBackend):
    """Async Ollama HTTP client."""

    def __init__(
        self,
        endpoint: str = "http://localhost:11434",
        model: str = "qwen3:1.7b",
        enable_thinking: bool = False,
        default_temperature: float = 0.7,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize client.

        Args:
            endpoint: Ollama server URL
            model: Chat model name
            enable_thinking: Forwarded as the `think` option
            default_temperature: Temperature when the caller passes none
            timeout: Per-request HTTP timeout in seconds
            transport: Optional httpx transport (tests use MockTransport)
        """
        self._endpoint = endpoint.rstrip("/")
        self.model = model
        self._enable_thinking = enable_thinking
        self._default_temperature = default_temperature
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self._endpoint,
            timeout=self._timeout,
            transport=self._transport,
        )

    def _build_request(
        self,
        messages: list[BaseMessage],
        stream: bool,
        temperature: float | None,
    ) -> dict[str, Any]:
        return {
            "model": self.model,
            "messages": to_ollama_messages(messages),
            "stream": stream,
            "think": self._enable_thinking,
            "options": {
                "temperature": self._default_temperature if temperature is None else temperature,
            },
        }

    async def health_check(self) -> bool:
        try:
            async with self._client() as client:
                response = await client.get("/api/tags")
            return response.is_success
        except httpx.HTTPError:
            return False

    async def list_models(self) -> list[str]:
        """Return model names known to the server (empty on failure)."""
        try:
            async with self._client() as client:
                response = await client.get("/api/tags")
                response.raise_for_status()
            return [model["name"] for model in response.json().get("models", [])]
        except (httpx.HTTPError, ValueError, KeyError) as e:
            logger.warning(f"{__name__}:list_models - Failed to list Ollama models: {e}")
            return []

    async def generate(
        self,
        messages: list[BaseMessage],
        temperature: float | None = None,
    ) -> str:
        payload = self._build_request(messages, stream=False, temperature=temperature)
        try:
            async with self._client() as client:
                response = await client.post("/api/chat", json=payload)
        except httpx.HTTPError as e:
            raise GenerationError(f"Failed to chat with Ollama: {e}") from e

        if not response.is_success:
            raise GenerationError(
                f"Ollama API error: {response.status_code} {response.reason_phrase}",
                status_code=response.status_code,
            )
        try:
            return response.json()["message"]["content"]
        except (ValueError, KeyError, TypeError) as e:
            raise GenerationError(f"Malformed Ollama response: {e}") from e

    async def generate_stream(
        self,
        messages: list[BaseMessage],
        temperature: float | None = None,
    ) -> AsyncIterator[str]:
        payload = self._build_request(messages, stream=True, temperature=temperature)
        try:
            async with self._client() as client:
                async with client.stream("POST", "/api/chat", json=payload) as response:
                    if not response.is_success:
                        raise GenerationError(
                            f"Ollama API error: {response.status_code} {response.reason_phrase}",
                            status_code=response.status_code,
                        )
                    async for line in response.aiter_lines():
                        if not line.strip():
                            continue
                        try:
                            chunk = json.loads(line)
                        except json.JSONDecodeError as e:
                            logger.warning(f"{__name__}:generate_stream - Failed to parse stream chunk: {e}")
                            continue

                        content = (chunk.get("message") or {}).get("content")
                        if content:
                            yield content
                        if chunk.get("done"):
                            return
        except httpx.HTTPError as e:
            raise GenerationError(f"Failed to stream chat with Ollama: {e}") from e
