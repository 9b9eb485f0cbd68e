"""Deal negotiation ledger services."""
