"""OpenAI-compatible chat completions generator.

Default endpoint is Featherless (https://api.featherless.ai/v1).
"""

from __future__ import annotations

import os
from typing import Any

import httpx

from ..errors import GenerationFailed
from ..logging_utils import get_logger
from ..models import GenerationParams
from .base import TextGenerator

logger = get_logger(__name__)


class ChatCompletionsGenerator(TextGenerator):
    """
    POSTs to ``{base_url}/chat/completions`` and returns the first choice's content.

    Pass ``client`` to reuse a connection pool (or inject a mock transport);
    otherwise a short-lived client is opened per call.
    """

    def __init__(
        self,
        params: GenerationParams | None = None,
        api_key: str | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.params = params or GenerationParams()
        self.api_key = api_key or os.environ.get(self.params.api_key_env, "")
        self.base_url = self.params.base_url.rstrip("/")
        self._client = client

    @property
    def source_name(self) -> str:
        return "chat_completions"

    def _payload(self, prompt: str, system_prompt: str | None) -> dict[str, Any]:
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": prompt})
        return {
            "model": self.params.model,
            "messages": messages,
            "temperature": self.params.temperature,
            "max_tokens": self.params.max_tokens,
        }

    def _post(self, payload: dict[str, Any]) -> httpx.Response:
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }
        if self._client is not None:
            return self._client.post(url, json=payload, headers=headers, timeout=self.params.timeout_seconds)
        with httpx.Client(timeout=self.params.timeout_seconds) as client:
            return client.post(url, json=payload, headers=headers)

    def generate(self, prompt: str, system_prompt: str | None = None) -> str:
        if not self.api_key:
            raise GenerationFailed(f"{self.params.api_key_env} not set. Set env var or pass api_key.")

        payload = self._payload(prompt, system_prompt)
        logger.info(
            "generation request",
            extra={"context": {"model": self.params.model, "prompt_len": len(prompt)}},
        )
        try:
            resp = self._post(payload)
        except httpx.HTTPError as e:
            raise GenerationFailed(f"request to {self.base_url} failed: {e!s}") from e

        if resp.status_code != 200:
            logger.error(
                "generation failed",
                extra={"context": {"status": resp.status_code, "body": resp.text[:500]}},
            )
            raise GenerationFailed(f"HTTP {resp.status_code}", status_code=resp.status_code)

        try:
            data = resp.json()
            choice = data["choices"][0]
            content = choice["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise GenerationFailed(f"unexpected response shape: {e!s}", status_code=resp.status_code) from e
        if not isinstance(content, str):
            raise GenerationFailed("response content is not text", status_code=resp.status_code)

        logger.info(
            "generation response",
            extra={
                "context": {
                    "response_len": len(content),
                    "finish_reason": choice.get("finish_reason"),
                }
            },
        )
        return content
