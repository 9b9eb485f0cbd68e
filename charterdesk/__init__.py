"""Deal negotiation ledger for a commodity-chartering desk."""

__version__ = "1.0.0"
