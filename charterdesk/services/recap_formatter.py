"""Recap formatter: fixed-layout, copy-ready text for a fixed deal."""

from __future__ import annotations

import logging

from charterdesk.models.deal import Deal
from charterdesk.models.ledger import ConsolidatedLedger
from charterdesk.models.terms import HEADER_FIELDS, HEADER_LABELS, TERM_FIELDS, TERM_LABELS
from charterdesk.utils.validators import collapse_whitespace

logger = logging.getLogger(__name__)

PLACEHOLDER = "—"
TERMINATOR = "*** End of Recap ***"
NOT_FIXED_ADVISORY = "Recap is available only after the deal is marked Fixed."

RECAP_TERM_FIELDS: tuple[str, ...] = tuple(name for name in TERM_FIELDS if name != "other_terms")


def _value(value: str | None) -> str:
    return collapse_whitespace(value) or PLACEHOLDER


def line(label: str, value: str | None) -> str:
    return f"{label}\t{_value(value)}"


def title_lines(deal: Deal) -> list[str]:
    tags = deal.tags
    return [
        f"RECAP – {_value(tags.route)} / {_value(tags.cargo)} / {_value(tags.size)} ({_value(tags.basis)})",
        f"Deal: {_value(deal.deal_id)}   Round: {deal.fixed_round or 0}",
    ]


def render_recap(deal: Deal, ledger: ConsolidatedLedger) -> str:
    """Render the recap without the fixed-state gate."""
    lines = title_lines(deal)
    lines.append("")
    lines.extend(line(f"{HEADER_LABELS[name]}:", ledger.get(name)) for name in HEADER_FIELDS)
    lines.append("")
    lines.extend(line(TERM_LABELS[name], ledger.get(name)) for name in RECAP_TERM_FIELDS)
    lines.append("")
    others = collapse_whitespace(ledger.terms.other_terms) or collapse_whitespace(ledger.header.riders)
    lines.append(line("Others:", others))
    lines.append("")
    lines.append(TERMINATOR)
    return "\n".join(lines)


def format_recap(deal: Deal, ledger: ConsolidatedLedger) -> str | None:
    """Recap text for a fixed deal; None (refused) while the deal is open."""
    if not deal.fixed:
        logger.info(
            "recap.refused",
            extra={"event": "recap.refused", "deal_id": deal.deal_id, "reason": "deal_not_fixed"},
        )
        return None
    return render_recap(deal, ledger)
