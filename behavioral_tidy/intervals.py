"""Inter-target intervals from cumulative reaction times."""

from __future__ import annotations

from typing import Sequence, Union

import numpy as np
import pandas as pd

from .attempts import require_columns
from .errors import MissingKeyField, UnorderedTrials

PARTITION_COLUMNS = ("person", "condition")
MEAN_COLUMNS = PARTITION_COLUMNS + ("mean_interval", "n_intervals")


def compute_intervals(
    trials: pd.DataFrame,
    order_by: Union[str, Sequence[str]] = ("trial",),
    value_col: str = "rt",
) -> pd.DataFrame:
    """
    Difference consecutive cumulative times within each (person, condition).

    Rows are stable-sorted by `order_by` inside their partition and
    interval[i] = value[i] - value[i-1]. The first row of a partition has
    no predecessor and is not returned, so a partition of k rows gives
    k - 1 intervals.

    Raises UnorderedTrials when two rows of a partition share an order key
    but disagree on `value_col`, since either ordering changes the result.
    """
    order = [order_by] if isinstance(order_by, str) else list(order_by)
    group = list(PARTITION_COLUMNS)
    require_columns(trials, group + order, "compute_intervals")
    if value_col not in trials.columns:
        raise MissingKeyField(f"compute_intervals: missing column {value_col}")

    _check_unambiguous(trials, group + order, value_col)

    ordered = trials.sort_values(group + order, kind="mergesort").reset_index(drop=True)
    by_partition = ordered.groupby(group, sort=False, observed=True)
    has_predecessor = by_partition.cumcount().to_numpy() > 0
    ordered["interval"] = by_partition[value_col].diff()
    return ordered.loc[has_predecessor].reset_index(drop=True)


def aggregate_means(intervals: pd.DataFrame) -> pd.DataFrame:
    """
    Mean interval per (person, condition).

    Non-finite intervals count towards neither the sum nor the denominator.
    Pairs left with no finite interval are omitted rather than reported
    as NaN.
    """
    require_columns(intervals, list(PARTITION_COLUMNS), "aggregate_means")
    if "interval" not in intervals.columns:
        raise MissingKeyField("aggregate_means: missing column interval")
    values = pd.to_numeric(intervals["interval"], errors="coerce").to_numpy(dtype=np.float64)
    valid = intervals.loc[np.isfinite(values)]
    if valid.empty:
        return pd.DataFrame(columns=list(MEAN_COLUMNS))

    means = (
        valid.groupby(list(PARTITION_COLUMNS), sort=True, observed=True)["interval"]
        .agg(mean_interval="mean", n_intervals="size")
        .reset_index()
    )
    means["mean_interval"] = means["mean_interval"].astype(np.float64)
    return means[list(MEAN_COLUMNS)]


def _check_unambiguous(trials: pd.DataFrame, keys, value_col: str) -> None:
    dup = trials.duplicated(subset=keys, keep=False)
    if not dup.any():
        return
    n_values = trials.loc[dup].groupby(keys, observed=True)[value_col].nunique(dropna=False)
    conflicting = n_values[n_values > 1]
    if len(conflicting):
        first = dict(zip(keys, conflicting.index[0]))
        raise UnorderedTrials(
            f"{len(conflicting)} order key(s) appear more than once with different "
            f"{value_col} values, e.g. {first}"
        )
