#!/usr/bin/env python
"""
Quick-look plots of the tables written by prepare.py.

Thresholds: mean threshold per location, one line per flanker condition,
one panel per design, with individual observers as faint markers.

Intervals: per-person mean interval across conditions as faint lines
(one model per person) and the across-person mean in bold (one model for
everyone), the two extremes that partial pooling sits between.
"""

from __future__ import annotations

import argparse
from pathlib import Path

import matplotlib.pyplot as plt
import numpy as np
import pandas as pd
import yaml


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--config",
        type=Path,
        default=None,
        help="Optional YAML config file with plotting options.",
    )
    parser.add_argument(
        "--kind",
        choices=("thresholds", "intervals"),
        default=None,
        help="Which table to plot.",
    )
    parser.add_argument(
        "--csv",
        type=Path,
        default=None,
        help="thresholds.csv or interval_means.csv produced by prepare.py.",
    )
    parser.add_argument(
        "--output",
        type=Path,
        default=None,
        help="Optional path to save the plot (e.g., plot.png). If omitted, shows the plot interactively.",
    )
    parser.add_argument(
        "--alpha",
        type=float,
        default=None,
        help="Alpha (opacity) for individual observers/persons.",
    )
    parser.add_argument(
        "--line_width",
        type=float,
        default=None,
        help="Line width for individual person lines.",
    )
    parser.add_argument(
        "--title",
        type=str,
        default=None,
        help="Optional figure title.",
    )
    return parser.parse_args(argv)


def load_config(path: Path | None) -> dict:
    if path is None:
        return {}
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError("Plot config must be a mapping.")
    return data


def resolve_options(args: argparse.Namespace) -> dict:
    defaults = {
        "kind": "thresholds",
        "csv": None,
        "output": None,
        "alpha": 0.3,
        "line_width": 0.8,
        "title": None,
    }
    config = load_config(args.config)
    options: dict = {}
    for key, default in defaults.items():
        arg_value = getattr(args, key, None)
        if arg_value is None:
            value = config.get(key, default)
        else:
            value = arg_value
        options[key] = value
    if options["csv"] is None:
        raise ValueError("csv must be provided via CLI or config.")
    if options["kind"] not in ("thresholds", "intervals"):
        raise ValueError("kind must be 'thresholds' or 'intervals'.")
    options["csv"] = Path(options["csv"])
    if options["output"] is not None:
        options["output"] = Path(options["output"])
    return options


def plot_thresholds(df: pd.DataFrame, opts: dict):
    required = {"design", "location", "flanker", "observer", "threshold"}
    if not required.issubset(df.columns):
        raise ValueError(f"Threshold CSV must contain columns {sorted(required)}.")

    designs = list(pd.unique(df["design"]))
    locations = list(pd.unique(df["location"]))
    x_pos = {loc: idx for idx, loc in enumerate(locations)}
    fig, axes = plt.subplots(
        1, len(designs), figsize=(4 * len(designs), 4), sharey=True, squeeze=False
    )
    for ax, design in zip(axes[0], designs):
        sub = df[df["design"] == design]
        for idx, (flanker, fsub) in enumerate(sub.groupby("flanker", sort=False)):
            color = f"C{idx}"
            offset = (idx - 1) * 0.08
            x_obs = fsub["location"].map(x_pos).to_numpy(dtype=float) + offset
            ax.scatter(x_obs, fsub["threshold"], color=color, alpha=opts["alpha"], s=10)
            mean = fsub.groupby("location", sort=False)["threshold"].mean()
            x_mean = np.array([x_pos[loc] for loc in mean.index], dtype=float) + offset
            ax.plot(x_mean, mean.to_numpy(), color=color, marker="o", label=str(flanker))
        ax.set_title(str(design))
        ax.set_xticks(range(len(locations)))
        ax.set_xticklabels([str(loc) for loc in locations])
        ax.set_xlabel("Location")
        ax.grid(alpha=0.2)
    axes[0][0].set_ylabel("Threshold")
    axes[0][-1].legend(title="Flanker", loc="best")
    return fig


def plot_interval_means(df: pd.DataFrame, opts: dict):
    required = {"person", "condition", "mean_interval"}
    if not required.issubset(df.columns):
        raise ValueError(f"Means CSV must contain columns {sorted(required)}.")
    df = df.dropna(subset=["mean_interval"])
    if df.empty:
        raise ValueError("No interval means found in CSV.")

    conditions = list(pd.unique(df["condition"]))
    x_pos = {cond: idx for idx, cond in enumerate(conditions)}
    fig, ax = plt.subplots(figsize=(6, 5))
    for _, sub in df.groupby("person"):
        x_vals = sub["condition"].map(x_pos).to_numpy(dtype=float)
        order = np.argsort(x_vals)
        ax.plot(
            x_vals[order],
            sub["mean_interval"].to_numpy()[order],
            color="C0",
            alpha=opts["alpha"],
            linewidth=opts["line_width"],
        )
    grand = df.groupby("condition", sort=False)["mean_interval"].mean()
    ax.plot(
        [x_pos[cond] for cond in grand.index],
        grand.to_numpy(),
        color="red",
        linewidth=2.5,
        marker="o",
        label="Mean across persons",
    )
    ax.set_xticks(range(len(conditions)))
    ax.set_xticklabels([str(cond) for cond in conditions])
    ax.set_xlabel("Condition")
    ax.set_ylabel("Mean inter-target interval")
    ax.grid(alpha=0.2)
    ax.legend(loc="best")
    return fig


def main(argv=None):
    args = parse_args(argv)
    opts = resolve_options(args)
    csv_path: Path = opts["csv"]
    if not csv_path.exists():
        raise FileNotFoundError(f"CSV not found: {csv_path}")

    df = pd.read_csv(csv_path)
    if opts["kind"] == "thresholds":
        fig = plot_thresholds(df, opts)
    else:
        fig = plot_interval_means(df, opts)

    if opts["title"]:
        fig.suptitle(opts["title"])
    fig.tight_layout()

    if opts["output"]:
        fig.savefig(opts["output"], dpi=200)
        print(f"Saved plot to {opts['output']}")
    else:
        plt.show()


if __name__ == "__main__":
    main()
