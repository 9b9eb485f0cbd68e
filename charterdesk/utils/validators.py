"""Deterministic validators and sanitizers used across the desk."""

from __future__ import annotations

import re

FORBIDDEN_TOKENS = (
    "[your name]",
    "[your company]",
    "[vessel]",
    "[owners]",
    "[time]",
    "[specific date]",
    "{vessel}",
    "{owners}",
)

_WHITESPACE_RUN = re.compile(r"\s+")


def sanitize_text(value: object, max_len: int | None = None) -> str:
    """Sanitize free-form content before persistence/display.

    Content is only cut when ``max_len`` is given.
    """
    if value is None:
        return ""
    cleaned = str(value).replace("\x00", "").strip()
    if max_len is not None:
        cleaned = cleaned[:max_len]
    return cleaned


def collapse_whitespace(value: str | None) -> str:
    return _WHITESPACE_RUN.sub(" ", sanitize_text(value))


def normalize_for_compare(value: str | None) -> str:
    """Trim, collapse internal whitespace runs and casefold."""
    return collapse_whitespace(value).casefold()


def contains_forbidden_tokens(text: str) -> bool:
    lowered = text.lower()
    return any(token in lowered for token in FORBIDDEN_TOKENS)
