"""Load raw files and run them through the tidying steps."""

from __future__ import annotations

from typing import Dict, Optional, Sequence, Tuple, Union

import pandas as pd

from .attempts import DEFAULT_PRACTICE_BLOCK, deduplicate_attempts
from .intervals import aggregate_means, compute_intervals
from .loaders import load_attempt_logs, load_threshold_array
from .thresholds import flatten_thresholds


def prepare_thresholds(
    path: str,
    design_levels: Sequence,
    location_levels: Sequence,
    flanker_levels: Sequence,
    variable: Optional[str] = None,
) -> Tuple[pd.DataFrame, Dict[str, int]]:
    """Tidy threshold table from a raw array file, plus row counts."""
    array = load_threshold_array(path, variable=variable)
    df, n_dropped = flatten_thresholds(array, design_levels, location_levels, flanker_levels)
    diagnostics = {
        "n_cells": int(array.size),
        "n_dropped": n_dropped,
        "n_rows": len(df),
    }
    return df, diagnostics


def prepare_foraging(
    logs_dir: str,
    pattern: str = "*.csv",
    sep: str = ",",
    practice_block=DEFAULT_PRACTICE_BLOCK,
    order_by: Union[str, Sequence[str]] = ("trial",),
    value_col: str = "rt",
) -> Tuple[pd.DataFrame, pd.DataFrame, pd.DataFrame, Dict[str, int]]:
    """
    Per-participant logs -> canonical trials -> intervals -> per-pair means.

    Returns (trials, intervals, means, diagnostics). Pairs whose trials
    yield no finite interval are missing from `means`; their number is
    reported as `n_pairs_omitted`.
    """
    records = load_attempt_logs(logs_dir, pattern=pattern, sep=sep)
    trials = deduplicate_attempts(records, practice_block=practice_block)
    intervals = compute_intervals(trials, order_by=order_by, value_col=value_col)
    means = aggregate_means(intervals)

    n_pairs = len(trials.groupby(["person", "condition"], observed=True)) if len(trials) else 0
    diagnostics = {
        "n_records": len(records),
        "n_trials": len(trials),
        "n_intervals": len(intervals),
        "n_pairs": n_pairs,
        "n_pairs_omitted": n_pairs - len(means),
    }
    return trials, intervals, means, diagnostics
