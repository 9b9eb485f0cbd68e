"""Normalized result for desk operations that can degrade to an advisory."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class Outcome:
    ok: bool
    message: str | None = None
    payload: Any = None

    @classmethod
    def success(cls, payload: Any = None, message: str | None = None) -> "Outcome":
        return cls(ok=True, message=message, payload=payload)

    @classmethod
    def advisory(cls, message: str, payload: Any = None) -> "Outcome":
        return cls(ok=False, message=message, payload=payload)
