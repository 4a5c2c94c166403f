"""Keep the final attempt of each trial and drop practice blocks."""

from __future__ import annotations

import warnings
from typing import Sequence

import numpy as np
import pandas as pd

from .errors import MissingKeyField

KEY_COLUMNS = ("person", "condition", "trial")
DEFAULT_PRACTICE_BLOCK = "practice"


def require_columns(df: pd.DataFrame, columns: Sequence[str], context: str) -> None:
    """Raise MissingKeyField if any column is absent or holds nulls."""
    missing = [col for col in columns if col not in df.columns]
    if missing:
        raise MissingKeyField(f"{context}: missing column(s) {', '.join(missing)}")
    null_rows = df.index[df[list(columns)].isna().any(axis=1)]
    if len(null_rows):
        shown = ", ".join(str(idx) for idx in null_rows[:10])
        more = "" if len(null_rows) <= 10 else f" (+{len(null_rows) - 10} more)"
        raise MissingKeyField(
            f"{context}: {len(null_rows)} record(s) with empty "
            f"{'/'.join(columns)} at rows {shown}{more}"
        )


def deduplicate_attempts(
    records: pd.DataFrame,
    practice_block=DEFAULT_PRACTICE_BLOCK,
) -> pd.DataFrame:
    """
    One row per (person, condition, trial): the one with the highest attempt.

    A trial is restarted after an error, so only its last attempt is valid.
    If several rows share the maximal attempt, the earliest row wins.
    Rows whose block equals `practice_block` are removed after selection.
    The whole batch is rejected if any key field or attempt is missing.
    """
    require_columns(records, KEY_COLUMNS + ("attempt", "block"), "deduplicate_attempts")

    df = records.reset_index(drop=True)
    if df.empty:
        return df
    grouped = df.groupby(list(KEY_COLUMNS), sort=False)["attempt"]
    _warn_on_attempt_gaps(grouped)

    winners = np.sort(grouped.idxmax().to_numpy())
    df = df.loc[winners]
    df = df[~is_practice(df["block"], practice_block)]
    return df.reset_index(drop=True)


def is_practice(blocks: pd.Series, practice_block) -> pd.Series:
    """
    Mask of rows in the practice block.

    A marker given as text (from the command line) is matched against a
    numeric block column by value, so "0" selects block 0.
    """
    if isinstance(practice_block, str) and pd.api.types.is_numeric_dtype(blocks):
        marker = pd.to_numeric(practice_block, errors="coerce")
        if pd.isna(marker):
            return pd.Series(False, index=blocks.index)
        return blocks == marker
    return blocks == practice_block


def _warn_on_attempt_gaps(grouped) -> None:
    # Attempts within a key should be distinct consecutive integers.
    stats = grouped.agg(["min", "max", "nunique", "size"])
    contiguous = (stats["max"] - stats["min"] + 1 == stats["nunique"]) & (
        stats["nunique"] == stats["size"]
    )
    n_irregular = int((~contiguous).sum())
    if n_irregular:
        warnings.warn(
            f"{n_irregular} trial key(s) have repeated or non-consecutive "
            "attempts; keeping the highest attempt for each.",
            UserWarning,
        )
