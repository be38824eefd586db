"""
Assistant Service

Draft assistant gateway: summaries of mailbox messages and announcement drafts.

The gateway never raises to its callers. Disabled assistant, timeouts,
provider errors and unusable model output all collapse into deterministic
fallback values. No store lock is held while waiting on the model.
"""
import asyncio
import json
import logging
from typing import Optional, Union

from ..llm.providers.base import BaseLLMProvider, LLMMessage
from ..models.draft import Draft, Tone
from .prompt_cache import PromptCache

logger = logging.getLogger("nexusmail.services.assistant")

SUMMARY_PROMPT = "Summarize the following message in one or two sentences."
DRAFT_PROMPT = (
    "Draft an internal announcement in a {tone} tone. Reply with a JSON object "
    "with string fields \"subject\" and \"content\"."
)

TONE_OPENERS = {
    Tone.FORMAL: "Please be informed that",
    Tone.FRIENDLY: "We are excited to share that",
    Tone.URGENT: "URGENT ATTENTION REQUIRED:",
}


def fallback_summary(text: str) -> str:
    """Canned summary used when the model is unavailable"""
    return (
        f"[System Summary] This message is about: {(text or '')[:50]}... "
        f"(AI summarization is currently disabled)."
    )


def fallback_draft(topic: str, tone: Tone) -> Draft:
    """Templated announcement used when the model is unavailable"""
    return Draft(
        subject=f"[Draft] Announcement: {topic}",
        content=(
            f"**{tone.value.upper()} UPDATE**\n\n"
            f"{TONE_OPENERS[tone]} {topic}.\n\n"
            "This is a template draft generated without AI connectivity. "
            "Please edit this text to add specific details, dates, and requirements before sending.\n\n"
            "Best regards,\nManagement Team"
        ),
        generated=False,
    )


class AssistantService:
    """Service for AI summaries and drafts"""

    def __init__(
        self,
        llm_provider: Optional[BaseLLMProvider] = None,
        prompt_cache: Optional[PromptCache] = None,
        timeout: float = 15.0,
        enabled: bool = True,
        summary_max_chars: int = 280,
    ):
        self.llm = llm_provider
        self.prompt_cache = prompt_cache
        self.timeout = timeout
        self.enabled = enabled and llm_provider is not None
        self.summary_max_chars = summary_max_chars

    async def summarize(self, text: str) -> str:
        """Short summary of a message; fallback text on any failure"""
        if not text or not text.strip():
            return fallback_summary(text)

        content = await self._complete(
            system_prompt=self._prompt("summarize.md", SUMMARY_PROMPT),
            user_prompt=text,
            temperature=0.3,
            max_tokens=200,
        )
        if not content or not content.strip():
            return fallback_summary(text)

        summary = " ".join(content.split())
        if len(summary) > self.summary_max_chars:
            summary = summary[:self.summary_max_chars - 3].rstrip() + "..."
        return summary

    async def draft(self, topic: str, tone: Union[Tone, str] = Tone.FORMAL) -> Draft:
        """Announcement draft {subject, content}; templated fallback on any failure"""
        try:
            tone = Tone(tone)
        except ValueError:
            logger.warning(f"Unknown draft tone '{tone}', using formal")
            tone = Tone.FORMAL

        topic = (topic or "").strip()
        if not topic:
            return fallback_draft(topic, tone)

        system_prompt = self._prompt("draft.md", DRAFT_PROMPT).replace("{tone}", tone.value)
        content = await self._complete(
            system_prompt=system_prompt,
            user_prompt=topic,
            temperature=0.7,
            max_tokens=800,
            json_format=True,
        )
        parsed = self._parse_draft(content) if content else None
        if not parsed:
            return fallback_draft(topic, tone)
        return parsed

    async def health_check(self) -> bool:
        """Check if the model backend is reachable"""
        if not self.enabled:
            return False
        try:
            return await asyncio.wait_for(self.llm.health_check(), timeout=self.timeout)
        except asyncio.TimeoutError:
            return False

    async def close(self):
        if self.llm:
            await self.llm.close()

    def _prompt(self, prompt_file: str, default: str) -> str:
        if not self.prompt_cache:
            return default
        return self.prompt_cache.get_prompt(prompt_file, default) or default

    async def _complete(
        self,
        system_prompt: str,
        user_prompt: str,
        temperature: float,
        max_tokens: int,
        json_format: bool = False,
    ) -> Optional[str]:
        """Run one model call, None on any failure"""
        if not self.enabled:
            return None

        messages = [
            LLMMessage(role="system", content=system_prompt),
            LLMMessage(role="user", content=user_prompt),
        ]
        try:
            response = await asyncio.wait_for(
                self.llm.generate(
                    messages,
                    temperature=temperature,
                    max_tokens=max_tokens,
                    json_format=json_format,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Assistant call timed out after {self.timeout}s, using fallback")
            return None
        except Exception as e:
            logger.error(f"Assistant call failed: {e}")
            return None

        if not response.ok:
            logger.warning(f"Assistant returned {response.finish_reason}, using fallback")
            return None
        return response.content

    def _parse_draft(self, content: str) -> Optional[Draft]:
        text = content.strip()
        if text.startswith("```"):
            text = text.strip("`")
            if text.lower().startswith("json"):
                text = text[4:]
        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            logger.warning("Assistant draft is not valid JSON, using fallback")
            return None

        if not isinstance(data, dict):
            return None
        subject = data.get("subject")
        body = data.get("content")
        if not isinstance(subject, str) or not isinstance(body, str) or not subject.strip() or not body.strip():
            logger.warning("Assistant draft is missing subject or content, using fallback")
            return None
        return Draft(subject=subject.strip(), content=body.strip(), generated=True)
