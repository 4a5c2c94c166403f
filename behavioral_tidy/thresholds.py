"""Flatten the design x location x flanker x observer threshold array."""

from __future__ import annotations

from typing import Sequence, Tuple

import numpy as np
import pandas as pd

from .errors import DimensionMismatch

FACTOR_COLUMNS = ("design", "location", "flanker")
THRESHOLD_COLUMNS = FACTOR_COLUMNS + ("observer", "threshold")


def flatten_thresholds(
    array,
    design_levels: Sequence,
    location_levels: Sequence,
    flanker_levels: Sequence,
) -> Tuple[pd.DataFrame, int]:
    """
    Turn a 4-D threshold array into a tidy table, one row per
    (design, location, flanker, observer) cell.

    Rows follow the C order of the array: design outermost, observer
    innermost. Observers are numbered from 1. Cells holding NaN or +/-inf
    are dropped; their count is returned alongside the table.

    Returns:
        df: columns design, location, flanker, observer, threshold
        n_dropped: number of non-finite cells removed
    """
    values = np.asarray(array, dtype=np.float64)
    if values.ndim != 4:
        raise DimensionMismatch(
            f"Threshold array must be 4-D (design, location, flanker, observer); "
            f"got shape {values.shape}"
        )

    levels = [list(design_levels), list(location_levels), list(flanker_levels)]
    for axis, (name, labels) in enumerate(zip(FACTOR_COLUMNS, levels)):
        if len(labels) != values.shape[axis]:
            raise DimensionMismatch(
                f"{name} axis has extent {values.shape[axis]} but "
                f"{len(labels)} labels were given"
            )
        if len(set(labels)) != len(labels):
            raise DimensionMismatch(f"Duplicate {name} labels: {labels}")

    observers = np.arange(1, values.shape[3] + 1)
    index = pd.MultiIndex.from_product(
        levels + [observers], names=list(FACTOR_COLUMNS) + ["observer"]
    )
    df = pd.DataFrame({"threshold": values.reshape(-1)}, index=index).reset_index()
    for name, labels in zip(FACTOR_COLUMNS, levels):
        df[name] = pd.Categorical(df[name], categories=labels, ordered=True)

    finite = np.isfinite(df["threshold"].to_numpy())
    n_dropped = int((~finite).sum())
    df = df.loc[finite].reset_index(drop=True)
    return df[list(THRESHOLD_COLUMNS)], n_dropped
