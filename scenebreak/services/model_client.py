"""Chat completion adapter used to request scene breakdowns.

The adapter talks to any OpenAI-compatible chat completions endpoint through
the ``openai`` SDK (Groq's endpoint by default). It performs exactly one
blocking round trip per call: the SDK client is built with ``max_retries=0``
so a failed request surfaces immediately as :class:`ModelInvocationError`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence

import openai
from flask import current_app

from .errors import ModelConfigurationError, ModelInvocationError

MODEL_CLIENT_CACHE_KEY = "_MODEL_CLIENT_INSTANCE"


class ChatCompletionClient:
    def __init__(
        self,
        model_name: str,
        api_key: str,
        *,
        base_url: Optional[str] = None,
        temperature: float = 0.2,
        max_tokens: int = 2000,
        timeout: Optional[float] = None,
    ) -> None:
        self.model_name = (model_name or "").strip()
        self.api_key = (api_key or "").strip()
        if not self.model_name:
            raise ModelConfigurationError("A model name is required.")
        if not self.api_key:
            raise ModelConfigurationError("Model API key not set. Add GROQ_API_KEY to your .env file.")
        self.temperature = float(temperature)
        self.max_tokens = int(max_tokens)

        client_kwargs: Dict[str, Any] = {"api_key": self.api_key, "max_retries": 0}
        if base_url:
            client_kwargs["base_url"] = base_url
        if timeout is not None:
            client_kwargs["timeout"] = float(timeout)
        self._client = openai.OpenAI(**client_kwargs)

    def complete(self, messages: Sequence[Dict[str, str]]) -> str:
        """Send ``messages`` and return the text of the top choice."""

        kwargs = {
            "model": self.model_name,
            "messages": list(messages),
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "n": 1,
        }
        try:
            resp = self._client.chat.completions.create(**kwargs)
        except openai.AuthenticationError as exc:
            raise ModelInvocationError(f"Model provider rejected the credentials: {exc}") from exc
        except openai.APIConnectionError as exc:
            raise ModelInvocationError(f"Model provider is unreachable: {exc}") from exc
        except openai.OpenAIError as exc:
            raise ModelInvocationError(f"Model request failed: {exc}") from exc

        text = self._extract_text_from_chat(resp).strip()
        if text:
            return text
        snippet = self._shorten_debug(str(resp))
        raise ModelInvocationError(f"Chat completion returned no text. Raw response (truncated): {snippet}")

    def signature(self) -> tuple[str, str]:
        # Never return raw secrets
        redacted = (self.api_key[:4] + "…" + self.api_key[-4:]) if self.api_key else ""
        return (self.model_name, redacted)

    def _extract_text_from_chat(self, resp: Any) -> str:
        choices = getattr(resp, "choices", []) or []
        if not choices:
            return ""
        first = choices[0]
        msg = getattr(first, "message", None)
        if isinstance(msg, dict):
            content = msg.get("content")
        else:
            content = getattr(msg, "content", None)
        if isinstance(content, list):
            parts: List[str] = []
            for p in content:
                if isinstance(p, dict) and p.get("type") == "text":
                    parts.append(str(p.get("text") or ""))
            return "\n".join([p for p in parts if p])
        return str(content or "")

    @staticmethod
    def _shorten_debug(s: str, limit: int = 1200) -> str:
        s = s.replace("\n", " ")
        return (s[:limit] + "…") if len(s) > limit else s


def build_model_client(config: Dict[str, Any]) -> ChatCompletionClient:
    api_key = config.get("LLM_API_KEY")
    if not api_key:
        raise ModelConfigurationError("Model API key not set. Add GROQ_API_KEY to your .env file.")
    return ChatCompletionClient(
        model_name=config.get("LLM_MODEL", ""),
        api_key=api_key,
        base_url=config.get("LLM_BASE_URL"),
        temperature=config.get("LLM_TEMPERATURE", 0.2),
        max_tokens=config.get("LLM_MAX_TOKENS", 2000),
        timeout=config.get("LLM_TIMEOUT"),
    )


def get_model_client() -> Any:
    """Return the application's model client, creating it on first use.

    Anything exposing ``complete(messages) -> str`` may be installed under
    ``MODEL_CLIENT_CACHE_KEY`` in the app config to stand in for the provider.
    """

    app = current_app
    cached = app.config.get(MODEL_CLIENT_CACHE_KEY)
    if cached is not None:
        return cached

    client = build_model_client(app.config)
    model_name, redacted_key = client.signature()
    app.logger.info("Initialised chat completion client for model %s (key %s)", model_name, redacted_key)
    app.config[MODEL_CLIENT_CACHE_KEY] = client
    return client
