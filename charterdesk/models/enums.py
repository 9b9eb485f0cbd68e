"""Canonical enum values for deals, rounds and reconciliation."""

from __future__ import annotations

import enum


class RoundStatus(str, enum.Enum):
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"
    DROPPED = "Dropped"


class DealState(str, enum.Enum):
    OPEN = "Open"
    FIXED = "Fixed"


class Classification(str, enum.Enum):
    AGREED = "Agreed"
    DISAGREEMENT = "Disagreement"
    MISSING = "Missing"


class Provenance(str, enum.Enum):
    """Where an incoming ledger value came from."""

    EXTRACTED = "Extracted"
    MANAGER_OVERRIDE = "ManagerOverride"
    DIRECT_EDIT = "DirectEdit"
