"""Display bins for station counts."""

import pandas as pd

BIN_LABELS = ["1", "2", "3", "4", "5+"]


def bin_count(n: int) -> str:
    """Return the display label for a positive station count."""
    if isinstance(n, bool) or int(n) != n or n < 1:
        raise ValueError(f"Station count must be a positive integer, got {n!r}")
    n = int(n)
    return BIN_LABELS[n - 1] if n < 5 else "5+"


def bin_counts(counts: pd.Series) -> pd.Categorical:
    return pd.Categorical(
        [bin_count(n) for n in counts],
        categories=BIN_LABELS,
        ordered=True,
    )
