"""Simulated responses from a cumulative-Normal psychometric function."""

from __future__ import annotations

from typing import Optional, Sequence

import numpy as np
import pandas as pd
from scipy.stats import norm

DEFAULT_STIM = tuple(range(-50, 51, 10))


def psychometric_probability(stim, mu: float, sd: float, lapse: float) -> np.ndarray:
    """
    P(respond "longer") at each stimulus difference.

    (1 - lapse) * Phi((stim - mu) / sd) + lapse / 2, where mu is the point of
    subjective equality and lapse the rate of stimulus-independent guesses.
    """
    _check_params(sd, lapse)
    stim = np.asarray(stim, dtype=np.float64)
    return (1.0 - lapse) * norm.cdf(stim, loc=mu, scale=sd) + 0.5 * lapse


def simulate_observer(
    stim: Sequence[float],
    mu: float,
    sd: float,
    lapse: float,
    n_trials: int = 100,
    jitter_sd: float = 0.04,
    rng: Optional[np.random.Generator] = None,
) -> pd.DataFrame:
    """
    Binary responses of one observer, `n_trials` per stimulus level.

    The generative probability is jittered, clipped to [0, 1] and turned into
    an exact count of positive responses, which are then shuffled across the
    trials of that level. Rows are grouped by level in the order of `stim`.
    """
    if n_trials < 1:
        raise ValueError(f"n_trials must be positive, got {n_trials}")
    if rng is None:
        rng = np.random.default_rng()

    stim = np.asarray(stim, dtype=np.float64)
    prob = psychometric_probability(stim, mu, sd, lapse)
    if jitter_sd > 0:
        prob = prob + rng.normal(0.0, jitter_sd, size=prob.shape)
    prob = np.clip(prob, 0.0, 1.0)

    counts = np.round(n_trials * prob).astype(int)
    responses = np.zeros((stim.size, n_trials), dtype=np.int64)
    for j, count in enumerate(counts):
        column = np.zeros(n_trials, dtype=np.int64)
        column[:count] = 1
        responses[j] = rng.permutation(column)

    return pd.DataFrame(
        {
            "diff": np.repeat(stim, n_trials),
            "response": responses.reshape(-1),
        }
    )


def simulate_study(
    n_participants: int = 10,
    stim: Sequence[float] = DEFAULT_STIM,
    mu: float = 12.0,
    sd: float = 8.0,
    lapse: float = 0.12,
    n_trials: int = 100,
    jitter_sd: float = 0.04,
    seed: int = 0,
) -> pd.DataFrame:
    """Stack `n_participants` simulated observers; `ppt` is numbered from 1."""
    if n_participants < 1:
        raise ValueError(f"n_participants must be positive, got {n_participants}")
    rng = np.random.default_rng(seed)
    frames = []
    for ppt in range(1, n_participants + 1):
        df = simulate_observer(
            stim, mu, sd, lapse, n_trials=n_trials, jitter_sd=jitter_sd, rng=rng
        )
        df["ppt"] = ppt
        frames.append(df)
    return pd.concat(frames, ignore_index=True)


def response_proportions(responses: pd.DataFrame) -> pd.DataFrame:
    """Per participant and stimulus level: trial count and share of "longer" responses."""
    out = (
        responses.groupby(["ppt", "diff"], sort=True)["response"]
        .agg(n_trials="size", n_longer="sum")
        .reset_index()
    )
    out["p_longer"] = out["n_longer"] / out["n_trials"]
    return out


def _check_params(sd: float, lapse: float) -> None:
    if sd <= 0:
        raise ValueError(f"sd must be positive, got {sd}")
    if not 0.0 <= lapse <= 1.0:
        raise ValueError(f"lapse must lie in [0, 1], got {lapse}")
