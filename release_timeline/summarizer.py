"""Optional AI helpers for reading and drafting releases.

Every public method returns text. When no client is configured, or the model
call fails after retries, a fixed user-facing message comes back instead of
an exception.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Optional, Sequence

from anthropic import Anthropic, APIError, RateLimitError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from release_timeline.config import AI_MODEL, TimelineSettings
from release_timeline.models import ChangeItem, ReleaseRecord

logger = logging.getLogger(__name__)

AI_DISABLED_MESSAGE = "AI features are not enabled."
SUMMARY_EMPTY_MESSAGE = "Unable to generate summary at this time."
SUMMARY_FAILED_MESSAGE = "Sorry, I couldn't generate a summary for this release. Please try again later."
CHAT_EMPTY_MESSAGE = "No response generated."
CHAT_FAILED_MESSAGE = "I encountered an error trying to answer your question."


class Audience(str, Enum):
    TECHNICAL = "technical"
    GENERAL = "general"


AUDIENCE_TASKS = {
    Audience.TECHNICAL: (
        "Provide a concise technical breakdown. Highlight breaking changes, architectural shifts, "
        "and security implications. Use bullet points."
    ),
    Audience.GENERAL: (
        "Explain this update to a non-technical stakeholder (CEO/Marketing). Focus on business value, "
        "new capabilities, and user experience improvements. Keep it friendly and exciting."
    ),
}


def build_client(settings: TimelineSettings) -> Optional[Anthropic]:
    if not settings.ai_enabled:
        return None
    return Anthropic(api_key=settings.anthropic_api_key)


def format_changes(changes: Sequence[ChangeItem], include_details: bool = True) -> str:
    lines = []
    for change in changes:
        line = f"- [{change.category.value}] {change.description}"
        if include_details and change.details:
            line = f"{line} ({change.details})"
        lines.append(line)
    return "\n".join(lines)


def _response_text(response: Any) -> str:
    parts = [getattr(block, "text", "") for block in getattr(response, "content", None) or []]
    return "".join(parts).strip()


class ReleaseSummarizer:
    def __init__(self, client: Optional[Anthropic] = None, model: str = AI_MODEL) -> None:
        self.client = client
        self.model = model

    @classmethod
    def from_settings(cls, settings: TimelineSettings) -> "ReleaseSummarizer":
        return cls(client=build_client(settings), model=settings.model)

    @property
    def is_enabled(self) -> bool:
        return self.client is not None

    @retry(
        reraise=True,
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=2, min=2, max=30),
        retry=retry_if_exception_type((APIError, RateLimitError)),
    )
    def _complete(self, prompt: str, max_tokens: int, temperature: Optional[float] = None) -> str:
        if self.client is None:
            raise RuntimeError("Anthropic client not initialized")
        options = {} if temperature is None else {"temperature": temperature}
        response = self.client.messages.create(
            model=self.model,
            max_tokens=max_tokens,
            messages=[{"role": "user", "content": prompt}],
            **options,
        )
        return _response_text(response)

    def summarize_release(self, release: ReleaseRecord, audience: Audience = Audience.TECHNICAL) -> str:
        if not self.is_enabled:
            return AI_DISABLED_MESSAGE
        prompt = (
            f"Analyze the following software release notes for version {release.version}:\n\n"
            f"Title: {release.title}\n"
            f"Description: {release.description}\n"
            "Changes:\n"
            f"{format_changes(release.changes)}\n\n"
            "Task:\n"
            f"{AUDIENCE_TASKS[Audience(audience)]}\n\n"
            "Format: Plain text with simple markdown formatting (bold/italic/lists). Keep it under 200 words."
        )
        try:
            text = self._complete(prompt, max_tokens=600, temperature=0.3)
        except Exception:
            logger.exception("Error summarizing release %s", release.version)
            return SUMMARY_FAILED_MESSAGE
        return text or SUMMARY_EMPTY_MESSAGE

    def chat_with_release(self, release: ReleaseRecord, question: str) -> str:
        if not self.is_enabled:
            return AI_DISABLED_MESSAGE
        prompt = (
            "Context: You are an expert developer assistant answering questions about a specific "
            f"software release (Version {release.version}).\n\n"
            "Release Data:\n"
            f"Title: {release.title}\n"
            f"Overview: {release.description}\n"
            "Detailed Changes:\n"
            f"{format_changes(release.changes)}\n\n"
            f'User Question: "{question}"\n\n'
            "Answer concisely and accurately based ONLY on the provided release data. "
            "If the answer isn't in the release notes, say so politely."
        )
        try:
            text = self._complete(prompt, max_tokens=800)
        except Exception:
            logger.exception("Error chatting with release %s", release.version)
            return CHAT_FAILED_MESSAGE
        return text or CHAT_EMPTY_MESSAGE

    def generate_draft_description(self, version: str, changes: Sequence[ChangeItem]) -> str:
        """Suggest a short release description; empty string when unavailable."""
        if not self.is_enabled or not changes:
            return ""
        prompt = (
            "Act as a Product Manager. Write a compelling, concise release description (max 3 sentences) "
            f"for version {version} of our software.\n\n"
            "Based on these changes:\n"
            f"{format_changes(changes, include_details=False)}\n\n"
            "Focus on the value provided to the user. Do not use bullet points, just a summary paragraph."
        )
        try:
            return self._complete(prompt, max_tokens=300)
        except Exception:
            logger.exception("Error generating draft description for %s", version)
            return ""
