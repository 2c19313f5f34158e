from __future__ import annotations

import json
import logging
from typing import Any

from services.ai_client import AIClient, AIUnavailableError


logger = logging.getLogger(__name__)


class AssistantService:
    """
    Drafting help for administrators: announcements and general questions,
    plus short reasons for awarding house points.
    Failures become placeholder text instead of propagating to the view.
    """

    MODES = {
        "announcement": (
            "The user wants to draft a formal school announcement to be broadcast "
            "via the app or PA system."
        ),
        "general": (
            "The user is asking a general administrative question or needs help "
            "with conflict resolution."
        ),
    }

    EMPTY_REPLY = "I couldn't generate a response at this time."
    ERROR_REPLY = "An error occurred while communicating with the AI assistant."
    UNAVAILABLE_REPLY = "The AI assistant is not configured for this school yet."

    FALLBACK_REASONS = [
        "Community Cleanup Participation",
        "Winning Inter-house Debate",
        "Example of Honesty",
    ]

    PREDEFINED_PROMPTS = [
        "Draft a message congratulating Blue House for winning Sports Day.",
        "Write a stern but fair reminder about uniform policy.",
        "Create an invitation for the Alumni fundraising dinner.",
        "Announce the delay of the Election results by 1 hour.",
    ]

    @classmethod
    def build_prompt(cls, prompt: str, mode: str = "announcement") -> str:
        context = cls.MODES.get(mode, cls.MODES["general"])
        return (
            f"Context: {context}\n\n"
            f"Task: {prompt.strip()}\n\n"
            "Keep the response concise and formatted for a web UI."
        )

    @classmethod
    def draft(cls, prompt: str, mode: str = "announcement", client: AIClient | None = None) -> dict[str, Any]:
        client = client or AIClient()
        full_prompt = cls.build_prompt(prompt, mode)

        if not client.is_available:
            return {"text": cls.UNAVAILABLE_REPLY, "provider": client.provider, "ok": False}

        try:
            result = client.generate(full_prompt)
        except (AIUnavailableError, ValueError) as exc:
            logger.error("AI assistant error: %s", exc)
            return {"text": cls.ERROR_REPLY, "provider": client.provider, "ok": False}

        text = result.get("text")
        return {
            "text": text or cls.EMPTY_REPLY,
            "provider": result.get("provider"),
            "model": result.get("model"),
            "ok": bool(text),
        }

    @classmethod
    def suggest_point_reasons(cls, house_name: str, client: AIClient | None = None) -> list[str]:
        client = client or AIClient()
        if not client.is_available:
            return list(cls.FALLBACK_REASONS)

        prompt = (
            f'Generate 3 creative and specific reasons for awarding points to the student house "{house_name}". '
            "Focus on areas like: Community Service, Academic Excellence, Sportsmanship, or Environmental Care. "
            'Return ONLY a JSON object of the form {"reasons": ["...", "...", "..."]}.'
        )
        try:
            result = client.generate(prompt, json_mode=True)
        except (AIUnavailableError, ValueError) as exc:
            logger.error("AI suggestion error: %s", exc)
            return list(cls.FALLBACK_REASONS)

        text = result.get("text") or ""
        if not text:
            return []
        reasons = cls._parse_reasons(text)
        return reasons if reasons is not None else list(cls.FALLBACK_REASONS)

    @staticmethod
    def _parse_reasons(text: str) -> list[str] | None:
        try:
            parsed = json.loads(text)
        except json.JSONDecodeError:
            logger.warning("AI suggestions were not valid JSON: %s", text[:200])
            return None

        if isinstance(parsed, dict):
            parsed = parsed.get("reasons")
        if not isinstance(parsed, list):
            return None
        return [str(item).strip() for item in parsed if str(item).strip()]
