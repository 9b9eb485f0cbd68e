"""DataFrame conversion helpers for tabular desk views."""

from __future__ import annotations

from dataclasses import asdict, is_dataclass

import pandas as pd


def records_to_df(records, index_column: str | None = None) -> pd.DataFrame:
    """Convert dataclass rows (or plain objects) to a DataFrame."""
    if not records:
        return pd.DataFrame()

    rows = []
    for item in records:
        if is_dataclass(item):
            rows.append(asdict(item))
        else:
            rows.append({k: v for k, v in vars(item).items() if not k.startswith("_")})
    df = pd.DataFrame(rows)
    if index_column and index_column in df.columns:
        df = df.set_index(index_column)
    return df
