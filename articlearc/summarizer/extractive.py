"""Deterministic extractive summarization used when no AI summary is available."""

from __future__ import annotations

import re
from typing import List

MIN_SENTENCE_LENGTH = 20
MAX_SENTENCES = 3
MAX_SUMMARY_LENGTH = 300
HEAD_FALLBACK_LENGTH = 150
ELLIPSIS = "..."

_TERMINATOR_RUN = re.compile(r"[.!?]+")


def split_sentences(text: str) -> List[str]:
    """Split text on runs of terminal punctuation, normalising each run to a period."""
    marked = _TERMINATOR_RUN.sub(".|", text)
    return [piece.strip() for piece in marked.split("|")]


def _truncate(text: str, limit: int) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - len(ELLIPSIS)] + ELLIPSIS


def extract(text: str) -> str:
    """
    Build a summary from the leading qualifying sentences of ``text``.

    Sentences shorter than MIN_SENTENCE_LENGTH are treated as noise (headings,
    fragments). When nothing qualifies the head of the text is returned instead.
    """
    candidates = [
        sentence
        for sentence in split_sentences(text)
        if len(sentence) >= MIN_SENTENCE_LENGTH
    ]
    if not candidates:
        head = text[:HEAD_FALLBACK_LENGTH]
        return head + ELLIPSIS if len(text) > HEAD_FALLBACK_LENGTH else head

    joined = " ".join(candidates[:MAX_SENTENCES])
    return _truncate(joined, MAX_SUMMARY_LENGTH)
