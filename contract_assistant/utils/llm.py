"""Ollama chat client, the single place inference calls go through."""

import logging
from typing import Optional

import httpx

from contract_assistant.exceptions import UpstreamUnavailable
from contract_assistant.utils.config import Settings, get_settings

logger = logging.getLogger(__name__)


class OllamaClient:
    """Non-streaming client for Ollama's /api/chat endpoint"""

    def __init__(
        self,
        base_url: str = "http://localhost:11434",
        model: str = "llama2:7b",
        timeout: float = 120.0,
        temperature: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self.temperature = temperature
        self._transport = transport

    @classmethod
    def from_settings(cls, settings: Optional[Settings] = None) -> "OllamaClient":
        settings = settings or get_settings()
        return cls(
            base_url=settings.ollama_url,
            model=settings.ollama_model,
            timeout=settings.ollama_timeout,
            temperature=settings.llm_temperature,
        )

    def _client(self, timeout: Optional[float] = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout or self.timeout,
            transport=self._transport,
        )

    def _payload(self, system: str, message: str) -> dict:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": message},
            ],
            "stream": False,
        }
        if self.temperature is not None:
            payload["options"] = {"temperature": self.temperature}
        return payload

    async def ask(self, briefing: str, message: str) -> str:
        """Send the briefing as system prompt plus the user's message, return the reply.

        Raises:
            UpstreamUnavailable: Ollama is unreachable, timed out, answered
                with an error status or with a body that has no reply text.
        """
        logger.info(f"Calling Ollama model {self.model}...")
        try:
            async with self._client() as client:
                response = await client.post("/api/chat", json=self._payload(briefing, message))
                response.raise_for_status()
                data = response.json()
        except httpx.TimeoutException as e:
            logger.warning(f"Ollama timed out after {self.timeout}s: {e}")
            raise UpstreamUnavailable(f"Ollama did not answer within {self.timeout} seconds") from e
        except httpx.HTTPStatusError as e:
            logger.warning(f"Ollama returned HTTP {e.response.status_code}")
            raise UpstreamUnavailable(f"Ollama API error (HTTP {e.response.status_code})") from e
        except httpx.HTTPError as e:
            logger.warning(f"Ollama unreachable at {self.base_url}: {e}")
            raise UpstreamUnavailable(f"Could not reach Ollama at {self.base_url}") from e
        except ValueError as e:
            raise UpstreamUnavailable("Ollama returned a non-JSON response") from e

        content = (data.get("message") or {}).get("content") if isinstance(data, dict) else None
        if not isinstance(content, str):
            raise UpstreamUnavailable("Ollama response did not contain a message")

        logger.info("Ollama response received")
        return content

    async def ping(self) -> bool:
        """True if the Ollama server answers /api/tags"""
        try:
            async with self._client(timeout=5.0) as client:
                response = await client.get("/api/tags")
                response.raise_for_status()
                return True
        except httpx.HTTPError:
            return False


# Module-level singleton
_client: Optional[OllamaClient] = None


def get_llm_client() -> OllamaClient:
    """Get or create the Ollama client singleton."""
    global _client
    if _client is None:
        _client = OllamaClient.from_settings()
    return _client
