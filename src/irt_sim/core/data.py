"""
Conversion between the wide response matrix and the long response table.
"""

import numpy as np
import pandas as pd

from irt_sim.core.data_models import ResponseMatrix

LONG_COLUMNS = ("subj", "item", "endorse")


def to_long_format(data: ResponseMatrix) -> pd.DataFrame:
    """Convert a ResponseMatrix to one row per (subject, item) pair.

    Subjects vary slowest. The subj and item columns are categoricals with
    0-based integer levels in index order, so model design matrices built
    from them keep the matrix ordering.

    Args:
        data: Response matrix.

    Returns:
        DataFrame with columns: subj, item, endorse.
    """
    n_subjects, n_items = data.responses.shape
    subj = np.repeat(np.arange(n_subjects), n_items)
    item = np.tile(np.arange(n_items), n_subjects)

    return pd.DataFrame(
        {
            "subj": pd.Categorical(subj, categories=range(n_subjects)),
            "item": pd.Categorical(item, categories=range(n_items)),
            "endorse": data.responses.reshape(-1).astype(np.int64),
        }
    )


def from_long_format(table: pd.DataFrame) -> ResponseMatrix:
    """Pivot a long response table back into a ResponseMatrix.

    Raises:
        ValueError: If columns are missing or the table is not a complete
            cross of subjects and items with each pair exactly once.
    """
    missing = [c for c in LONG_COLUMNS if c not in table.columns]
    if missing:
        raise ValueError(f"Long table is missing columns: {missing}")

    if table.duplicated(subset=["subj", "item"]).any():
        raise ValueError("Long table has duplicate (subj, item) pairs")

    wide = table.pivot(index="subj", columns="item", values="endorse")
    if wide.isna().to_numpy().any():
        raise ValueError("Long table is not a complete subject x item cross")

    wide = wide.sort_index(axis=0).sort_index(axis=1)
    return ResponseMatrix(responses=wide.to_numpy().astype(np.int8))
