import logging
from typing import Dict, List, Optional

import httpx

from .config import Settings
from .errors import ConfigurationError, UpstreamError
from .utils import truncate_for_log

logger = logging.getLogger(__name__)


class CompletionClient:
    """Thin client for an OpenAI-compatible chat-completions endpoint.

    Makes exactly one request per `complete()` call; there is no retry.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str,
        model: str,
        temperature: float = 0.7,
        max_tokens: int = 800,
        timeout: float = 60.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        if not api_key:
            raise ConfigurationError("OPENAI_API_KEY not set")
        self.model = model
        self.temperature = temperature
        self.max_tokens = max_tokens
        self.url = f"{base_url.rstrip('/')}/chat/completions"
        self._http = httpx.Client(
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {api_key}",
                "Content-Type": "application/json",
            },
        )

    @classmethod
    def from_settings(cls, settings: Settings, transport: Optional[httpx.BaseTransport] = None) -> "CompletionClient":
        if not settings.api_key:
            logger.error("[LLM] OPENAI_API_KEY not set (.env not loaded or variable missing)")
            raise ConfigurationError("OPENAI_API_KEY not set")
        return cls(
            api_key=settings.api_key,
            base_url=settings.base_url,
            model=settings.model,
            temperature=settings.temperature,
            max_tokens=settings.max_tokens,
            timeout=settings.timeout_s,
            transport=transport,
        )

    def build_body(self, messages: List[Dict[str, str]]) -> dict:
        return {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
        }

    def complete(self, messages: List[Dict[str, str]]) -> str:
        """Send the messages and return the first choice's text content."""
        body = self.build_body(messages)
        logger.debug("[LLM] POST %s model=%s", self.url, self.model)
        try:
            r = self._http.post(self.url, json=body)
        except httpx.HTTPError as e:
            logger.error("[LLM] Request to completion API failed: %s", e)
            raise UpstreamError("completion API unreachable") from e

        if r.is_error:
            logger.error(
                "[LLM] Completion API returned %s: %s",
                r.status_code,
                truncate_for_log(r.text),
            )
            raise UpstreamError(f"completion API returned {r.status_code}")

        try:
            data = r.json()
            content = data["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            logger.error("[LLM] Unexpected completion payload: %s", truncate_for_log(r.text))
            raise UpstreamError("completion API returned no content") from e
        if not isinstance(content, str):
            logger.error("[LLM] Completion content is not text: %r", content)
            raise UpstreamError("completion API returned no content")
        return content.strip()

    def close(self) -> None:
        self._http.close()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
