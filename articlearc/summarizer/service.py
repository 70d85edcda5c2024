"""Summary generation: AI provider call with a deterministic extractive fallback."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Literal, Optional

import anyio

from articlearc.config import Settings
from articlearc.summarizer.extractive import extract
from articlearc.summarizer.providers import (
    LLMProvider,
    ProviderCredentialError,
    build_llm_provider,
)

logger = logging.getLogger(__name__)

MAX_STORED_SUMMARY_LENGTH = 500

SummarySource = Literal["ai", "extractive"]


class SummaryError(Exception):
    """Base class for AI summary failures; never surfaced to API clients."""


class SummaryUnavailable(SummaryError):
    """The AI call failed, timed out, or its credential was rejected."""


class EmptySummary(SummaryError):
    """The AI call succeeded but produced no text."""


def build_prompt(content: str, title: Optional[str] = None) -> str:
    title_line = f"Article Title: {title}\n" if title else ""
    return (
        "Please create a concise and informative summary of the following "
        "article content.\n"
        "The summary should:\n"
        "- Be 2-3 sentences long\n"
        "- Capture the main points and key information\n"
        "- Be engaging and clear\n"
        "- Stay under 300 characters\n\n"
        f"{title_line}"
        f"Article Content: {content}\n\n"
        "Summary:"
    )


class SummaryProvider:
    """
    Produces article summaries through an optional LLM provider.

    Availability is fixed at construction. When unavailable, ``summarize``
    returns the extractive summary and never fails. When available, failures
    are raised as ``SummaryUnavailable`` / ``EmptySummary`` so that callers can
    tell an AI summary apart from a fallback.
    """

    def __init__(
        self,
        provider: Optional[LLMProvider] = None,
        timeout_seconds: float = 15.0,
        max_tokens: int = 300,
    ) -> None:
        self._provider = provider
        self.timeout_seconds = timeout_seconds
        self.max_tokens = max_tokens

    @property
    def available(self) -> bool:
        return self._provider is not None

    @property
    def engine(self) -> str:
        return "ai" if self.available else "extractive"

    async def summarize(self, content: str, title: Optional[str] = None) -> str:
        if self._provider is None:
            return extract(content)

        prompt = build_prompt(content, title)
        try:
            with anyio.fail_after(self.timeout_seconds):
                text = await self._provider.generate(prompt, max_tokens=self.max_tokens)
        except TimeoutError as exc:
            raise SummaryUnavailable(
                f"{self._provider.name} summary timed out after {self.timeout_seconds}s"
            ) from exc
        except ProviderCredentialError as exc:
            raise SummaryUnavailable(str(exc)) from exc
        except Exception as exc:
            raise SummaryUnavailable(
                f"Failed to generate summary using {self._provider.name}: {exc}"
            ) from exc

        if not text or not text.strip():
            raise EmptySummary("Generated summary is empty")
        return text.strip()


def build_summary_provider(settings: Settings) -> SummaryProvider:
    return SummaryProvider(
        provider=build_llm_provider(settings),
        timeout_seconds=settings.summary_timeout_seconds,
        max_tokens=settings.llm_max_tokens,
    )


@dataclass(slots=True)
class ResolvedSummary:
    text: str
    source: SummarySource


def _clip(text: str) -> str:
    if len(text) <= MAX_STORED_SUMMARY_LENGTH:
        return text
    return text[: MAX_STORED_SUMMARY_LENGTH - 3] + "..."


async def resolve_summary(
    summary_provider: SummaryProvider, content: str, title: Optional[str] = None
) -> ResolvedSummary:
    """Summary for a new or changed article body. Always returns non-empty text."""
    if not summary_provider.available:
        return ResolvedSummary(text=extract(content), source="extractive")

    try:
        text = await summary_provider.summarize(content, title)
    except SummaryError as exc:
        logger.warning(f"Summary generation failed, using extractive fallback: {exc}")
        return ResolvedSummary(text=extract(content), source="extractive")

    logger.debug("Summary generated by AI provider")
    return ResolvedSummary(text=_clip(text), source="ai")
