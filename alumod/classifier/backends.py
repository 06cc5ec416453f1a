"""Text-generation backends for the secondary classifier.

Each backend turns a prompt into the model's raw text reply.  Anything that
stops a reply from arriving (no configuration, network failure, non-OK
status, an unreadable response envelope) is raised as
:class:`ClassifierUnavailable`; interpreting the reply is the classifier's job.
"""

from __future__ import annotations

import logging
import os
import time
from typing import Optional

import anthropic
import httpx

from alumod.classifier.prompts import MODERATION_SYSTEM_PROMPT
from alumod.config import (
    DEFAULT_ANTHROPIC_MODEL,
    DEFAULT_OLLAMA_MODEL,
    DEFAULT_OLLAMA_URL,
    DEFAULT_TIMEOUT,
)

logger = logging.getLogger(__name__)

_NOT_CONFIGURED_MSG = "Classifier not configured. Set ANTHROPIC_API_KEY."


class ClassifierUnavailable(Exception):
    """The classification service could not produce a reply."""


class ClassifierBackend:
    """Interface for classifier backends."""

    name = "base"

    @property
    def configured(self) -> bool:
        return True

    async def generate(self, prompt: str) -> str:
        raise NotImplementedError


# ---------------------------------------------------------------------------
# Ollama
# ---------------------------------------------------------------------------


class OllamaBackend(ClassifierBackend):
    """Local Ollama server via its ``/api/generate`` endpoint.

    Parameters
    ----------
    base_url : str
        Root URL of the Ollama server.
    model : str
        Model tag to run.
    timeout : float
        Seconds before the request is abandoned.
    transport : httpx.AsyncBaseTransport | None
        Custom transport, e.g. ``httpx.MockTransport`` in tests.
    """

    name = "ollama"

    def __init__(
        self,
        base_url: str = DEFAULT_OLLAMA_URL,
        model: str = DEFAULT_OLLAMA_MODEL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout
        self._transport = transport

    async def generate(self, prompt: str) -> str:
        payload = {
            "model": self.model,
            "prompt": prompt,
            "stream": False,
            "options": {
                "temperature": 0.1,
                "top_p": 0.9,
                "num_predict": 300,
            },
        }

        start = time.monotonic()
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                transport=self._transport,
            ) as client:
                resp = await client.post("/api/generate", json=payload)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPStatusError as exc:
            raise ClassifierUnavailable(
                f"Ollama returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.RequestError as exc:
            raise ClassifierUnavailable(f"Failed to reach Ollama: {exc}") from exc
        except ValueError as exc:
            raise ClassifierUnavailable(f"Ollama sent a non-JSON body: {exc}") from exc

        if not isinstance(data, dict) or not isinstance(data.get("response"), str):
            raise ClassifierUnavailable("Ollama response has no 'response' text")

        logger.debug(
            "Ollama %s replied in %d ms", self.model, int((time.monotonic() - start) * 1000)
        )
        return data["response"].strip()


# ---------------------------------------------------------------------------
# Anthropic
# ---------------------------------------------------------------------------


class AnthropicBackend(ClassifierBackend):
    """Anthropic Messages API.

    Falls back to the ``ANTHROPIC_API_KEY`` environment variable when
    *api_key* is *None*; without a key every call is unavailable.
    """

    name = "anthropic"

    def __init__(
        self,
        model: str = DEFAULT_ANTHROPIC_MODEL,
        api_key: Optional[str] = None,
        timeout: float = DEFAULT_TIMEOUT,
        max_tokens: int = 300,
    ) -> None:
        self.model = model
        self.api_key = api_key or os.environ.get("ANTHROPIC_API_KEY", "")
        self.max_tokens = max_tokens
        self._configured = bool(self.api_key)

        if self._configured:
            self._client = anthropic.AsyncAnthropic(
                api_key=self.api_key, timeout=timeout, max_retries=0
            )
        else:
            self._client = None  # type: ignore[assignment]

    @property
    def configured(self) -> bool:
        """Return *True* if an API key is available."""
        return self._configured

    async def generate(self, prompt: str) -> str:
        if not self._configured:
            raise ClassifierUnavailable(_NOT_CONFIGURED_MSG)

        start = time.monotonic()
        try:
            response = await self._client.messages.create(
                model=self.model,
                max_tokens=self.max_tokens,
                temperature=0.1,
                system=MODERATION_SYSTEM_PROMPT,
                messages=[{"role": "user", "content": prompt}],
            )
        except anthropic.APIError as exc:
            raise ClassifierUnavailable(f"Anthropic API error: {exc}") from exc

        logger.debug(
            "Anthropic %s replied in %d ms (%d in / %d out tokens)",
            self.model,
            int((time.monotonic() - start) * 1000),
            response.usage.input_tokens,
            response.usage.output_tokens,
        )
        texts = [block.text for block in response.content or [] if getattr(block, "type", None) == "text"]
        if not texts:
            raise ClassifierUnavailable("Anthropic response has no text content")
        return "".join(texts).strip()
