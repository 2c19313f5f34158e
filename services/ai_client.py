from __future__ import annotations

import http.client
import json
import logging
import os
from typing import Any
from urllib import error as urlerror
from urllib import request as urlrequest


logger = logging.getLogger(__name__)


class AIUnavailableError(RuntimeError):
    """No credential is configured or the provider did not answer."""


class AIClient:
    """
    Thin client for an OpenAI-compatible chat-completions endpoint.

    Configured through AI_PROVIDER / AI_API_KEY / AI_MODEL / AI_API_BASE.
    Without a key the client reports itself unavailable and every call raises
    AIUnavailableError; callers decide what placeholder to show.
    """

    SYSTEM_PROMPT = (
        "You are an expert School Administrator Assistant for a prestigious secondary school. "
        "Your tone should be professional, encouraging, and clear."
    )

    def __init__(self, *, provider_override: str | None = None, model_override: str | None = None):
        self.api_key = os.getenv("AI_API_KEY") or os.getenv("OPENAI_API_KEY")

        provider_override_norm = (provider_override or "").strip().lower() or None
        if provider_override_norm and provider_override_norm not in {"openai", "none"}:
            logger.warning("AI provider '%s' is not supported. Using global configuration.", provider_override)
            provider_override_norm = None

        provider = os.getenv("AI_PROVIDER")
        if provider_override_norm:
            self.provider = provider_override_norm
        elif provider:
            self.provider = provider.lower()
        elif self.api_key:
            # A key without an explicit provider means OpenAI.
            self.provider = "openai"
        else:
            self.provider = "none"

        default_model = os.getenv("AI_MODEL") or "gpt-4o-mini"
        override_model = (model_override or "").strip()
        self.model = override_model or default_model
        self.temperature = self._float_env("AI_TEMPERATURE", default=0.4)
        self.max_tokens = int(os.getenv("AI_MAX_TOKENS", "700") or 700)
        self.timeout = self._float_env("AI_TIMEOUT", default=20.0)
        self.api_base = os.getenv("AI_API_BASE", "https://api.openai.com/v1").rstrip("/")

    @staticmethod
    def _float_env(var_name: str, default: float) -> float:
        raw = os.getenv(var_name)
        if not raw:
            return default
        try:
            return float(raw)
        except ValueError:
            logger.warning("Invalid value for %s=%s. Using default %s.", var_name, raw, default)
            return default

    @property
    def is_available(self) -> bool:
        return self.provider == "openai" and bool(self.api_key)

    def generate(self, prompt: str, *, json_mode: bool = False) -> dict:
        """
        Single attempt, no retry. Returns {"text", "model", "provider"}.
        """
        if not self.is_available:
            raise AIUnavailableError("AI assistant is not configured (missing AI_API_KEY).")
        return self._openai_response(prompt, json_mode=json_mode)

    def _openai_response(self, prompt: str, *, json_mode: bool) -> dict:
        payload: dict[str, Any] = {
            "model": self.model,
            "temperature": self.temperature,
            "max_tokens": self.max_tokens,
            "messages": [
                {"role": "system", "content": self.SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
        }
        if json_mode:
            payload["response_format"] = {"type": "json_object"}

        request = urlrequest.Request(
            f"{self.api_base}/chat/completions",
            data=json.dumps(payload).encode("utf-8"),
            headers={
                "Content-Type": "application/json",
                "Authorization": f"Bearer {self.api_key}",
            },
            method="POST",
        )

        try:
            with urlrequest.urlopen(request, timeout=self.timeout) as response:
                data = response.read().decode("utf-8")
        except urlerror.HTTPError as exc:
            detail = exc.read().decode("utf-8", errors="ignore")
            raise AIUnavailableError(f"AI HTTP {exc.code}: {detail}") from exc
        except urlerror.URLError as exc:
            raise AIUnavailableError(f"AI request error: {exc.reason}") from exc
        except TimeoutError as exc:
            raise AIUnavailableError("AI request timed out.") from exc
        except (OSError, http.client.HTTPException, ValueError) as exc:
            raise AIUnavailableError(f"AI connection error: {exc}") from exc

        try:
            payload = json.loads(data)
        except ValueError as exc:
            raise AIUnavailableError("AI reply was not valid JSON.") from exc
        if not isinstance(payload, dict):
            raise AIUnavailableError("AI reply had an unexpected shape.")

        choices = payload.get("choices") or [{}]
        choice = choices[0] if isinstance(choices, list) and isinstance(choices[0], dict) else {}
        message = choice.get("message") if isinstance(choice.get("message"), dict) else {}
        content = message.get("content")
        text = content.strip() if isinstance(content, str) else ""

        return {
            "text": text,
            "model": payload.get("model") or self.model,
            "provider": "openai",
        }
