#!/usr/bin/env python
"""
Tidy raw behavioural data for multi-level modelling.

Depending on the configuration this script:
- flattens a 4-D threshold array (design x location x flanker x observer)
  into one row per cell, dropping non-finite thresholds;
- reads per-participant foraging logs, keeps the final attempt of each
  trial, drops practice blocks, and computes inter-target intervals and
  their per-person per-condition means;
- simulates psychometric-function responses for the PSE examples.

Each table is written as CSV under the configured output directory.
"""

from __future__ import annotations

import argparse
from pathlib import Path

import pandas as pd

from behavioral_tidy.config import RunnerConfig, load_runner_config, validate_config
from behavioral_tidy.pipeline import prepare_foraging, prepare_thresholds
from behavioral_tidy.psychometric import response_proportions, simulate_study

OVERRIDE_FIELDS = [
    "threshold_file",
    "threshold_variable",
    "design_levels",
    "location_levels",
    "flanker_levels",
    "logs_dir",
    "logs_pattern",
    "logs_sep",
    "practice_block",
    "order_by",
    "value_col",
    "output_dir",
    "psychometric_csv",
    "psychometric_participants",
    "psychometric_trials",
    "seed",
]


def parse_args(argv=None):
    p = argparse.ArgumentParser(
        description="Tidy threshold arrays and foraging logs for modelling."
    )
    p.add_argument(
        "--config",
        type=str,
        required=True,
        help="Path to YAML configuration file.",
    )
    p.add_argument(
        "--threshold_file",
        type=str,
        default=None,
        help="Override: .mat/.npy/.npz file holding the threshold array.",
    )
    p.add_argument(
        "--threshold_variable",
        type=str,
        default=None,
        help="Override: array name inside a .mat/.npz threshold file.",
    )
    p.add_argument(
        "--design_levels",
        nargs="+",
        default=None,
        help="Override: labels for the design axis, in array order.",
    )
    p.add_argument(
        "--location_levels",
        nargs="+",
        default=None,
        help="Override: labels for the location axis, in array order.",
    )
    p.add_argument(
        "--flanker_levels",
        nargs="+",
        default=None,
        help="Override: labels for the flanker axis, in array order.",
    )
    p.add_argument(
        "--logs_dir",
        type=str,
        default=None,
        help="Override: directory with one foraging log per participant.",
    )
    p.add_argument(
        "--logs_pattern",
        type=str,
        default=None,
        help="Override: glob pattern selecting log files.",
    )
    p.add_argument(
        "--logs_sep",
        type=str,
        default=None,
        help="Override: column delimiter of the log files.",
    )
    p.add_argument(
        "--practice_block",
        type=str,
        default=None,
        help="Override: block value marking practice trials.",
    )
    p.add_argument(
        "--order_by",
        nargs="+",
        default=None,
        help="Override: columns giving the trial order within a person/condition.",
    )
    p.add_argument(
        "--value_col",
        type=str,
        default=None,
        help="Override: cumulative time column to difference.",
    )
    p.add_argument(
        "--output_dir",
        type=str,
        default=None,
        help="Override: directory for the output CSVs.",
    )
    p.add_argument(
        "--psychometric_csv",
        type=str,
        default=None,
        help="Override: write simulated psychometric responses to this file name.",
    )
    p.add_argument(
        "--psychometric_participants",
        type=int,
        default=None,
        help="Override: number of simulated observers.",
    )
    p.add_argument(
        "--psychometric_trials",
        type=int,
        default=None,
        help="Override: trials per stimulus level for each simulated observer.",
    )
    p.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Override: random seed for the simulated responses.",
    )
    return p.parse_args(argv)


def _save(df: pd.DataFrame, config: RunnerConfig, name: str, label: str) -> Path:
    path = config.output_path(name)
    path.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(path, index=False)
    print(f"Saved {label} to {path}", flush=True)
    return path


def run_thresholds(config: RunnerConfig) -> pd.DataFrame:
    print(f"Flattening thresholds from {config.threshold_file}", flush=True)
    df, diag = prepare_thresholds(
        config.threshold_file,
        config.design_levels,
        config.location_levels,
        config.flanker_levels,
        variable=config.threshold_variable,
    )
    print(
        f"{diag['n_rows']} rows from {diag['n_cells']} cells "
        f"({diag['n_dropped']} non-finite cells dropped)",
        flush=True,
    )
    _save(df, config, config.threshold_csv, "tidy thresholds")
    print("\nThreshold summary by design:")
    print(df.groupby("design", observed=True)["threshold"].describe())
    return df


def run_foraging(config: RunnerConfig) -> pd.DataFrame:
    print(f"Reading foraging logs from {config.logs_dir}", flush=True)
    trials, intervals, means, diag = prepare_foraging(
        config.logs_dir,
        pattern=config.logs_pattern,
        sep=config.logs_sep,
        practice_block=config.practice_block,
        order_by=config.order_by,
        value_col=config.value_col,
    )
    print(
        f"{diag['n_records']} records -> {diag['n_trials']} trials -> "
        f"{diag['n_intervals']} intervals",
        flush=True,
    )
    if diag["n_pairs_omitted"]:
        print(
            f"{diag['n_pairs_omitted']} of {diag['n_pairs']} person/condition pairs "
            "had no valid interval and are left out of the means",
            flush=True,
        )
    _save(trials, config, config.trials_csv, "canonical trials")
    _save(intervals, config, config.intervals_csv, "intervals")
    _save(means, config, config.means_csv, "per-person interval means")
    if not means.empty:
        print("\nMean interval by condition:")
        print(means.groupby("condition", observed=True)["mean_interval"].describe())
    return means


def run_psychometric(config: RunnerConfig) -> pd.DataFrame:
    print(
        f"Simulating {config.psychometric_participants} observers "
        f"(seed {config.seed})",
        flush=True,
    )
    responses = simulate_study(
        n_participants=config.psychometric_participants,
        n_trials=config.psychometric_trials,
        seed=config.seed,
    )
    _save(responses, config, config.psychometric_csv, "psychometric responses")
    print("\nProportion of 'longer' responses by stimulus difference:")
    print(response_proportions(responses).groupby("diff")["p_longer"].mean())
    return responses


def main(argv=None):
    args = parse_args(argv)
    base_config = load_runner_config(args.config)
    overrides = {
        field: getattr(args, field)
        for field in OVERRIDE_FIELDS
        if getattr(args, field) is not None
    }
    config = validate_config(base_config.with_overrides(**overrides))

    if config.threshold_file:
        run_thresholds(config)
    if config.logs_dir:
        run_foraging(config)
    if config.psychometric_csv:
        run_psychometric(config)


if __name__ == "__main__":
    main()
