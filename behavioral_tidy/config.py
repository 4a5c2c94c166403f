"""Configuration loader for the tidying runner."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from .attempts import DEFAULT_PRACTICE_BLOCK

LEVEL_FIELDS = ("design_levels", "location_levels", "flanker_levels")


@dataclass(frozen=True)
class RunnerConfig:
    threshold_file: Optional[str] = None
    threshold_variable: Optional[str] = None
    design_levels: Optional[Tuple[Any, ...]] = None
    location_levels: Optional[Tuple[Any, ...]] = None
    flanker_levels: Optional[Tuple[Any, ...]] = None
    logs_dir: Optional[str] = None
    logs_pattern: str = "*.csv"
    logs_sep: str = ","
    practice_block: Any = DEFAULT_PRACTICE_BLOCK
    order_by: Tuple[str, ...] = ("trial",)
    value_col: str = "rt"
    output_dir: str = "tidy_output"
    threshold_csv: str = "thresholds.csv"
    trials_csv: str = "trials.csv"
    intervals_csv: str = "intervals.csv"
    means_csv: str = "interval_means.csv"
    psychometric_csv: Optional[str] = None
    psychometric_participants: int = 10
    psychometric_trials: int = 100
    seed: int = 0

    def with_overrides(self, **overrides: Any) -> "RunnerConfig":
        data = asdict(self)
        for key, value in overrides.items():
            if value is None:
                continue
            if key not in data:
                raise ValueError(f"Unknown config override '{key}'")
            data[key] = value
        return RunnerConfig(**_normalize(data))

    def output_path(self, name: str) -> Path:
        return Path(self.output_dir) / name


def _normalize(data: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(data)
    for key in LEVEL_FIELDS:
        if out.get(key) is not None:
            out[key] = tuple(out[key])
    order_by = out.get("order_by")
    if isinstance(order_by, str):
        out["order_by"] = (order_by,)
    elif order_by is not None:
        out["order_by"] = tuple(order_by)
    return out


def validate_config(config: RunnerConfig) -> RunnerConfig:
    if not (config.threshold_file or config.logs_dir or config.psychometric_csv):
        raise ValueError(
            "Nothing to do: set at least one of threshold_file, logs_dir, psychometric_csv."
        )
    if config.threshold_file:
        missing = [key for key in LEVEL_FIELDS if not getattr(config, key)]
        if missing:
            raise ValueError(
                f"threshold_file needs label lists for: {', '.join(missing)}"
            )
    return config


def load_runner_config(path: str) -> RunnerConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file '{path}' not found.")
    with config_path.open("r", encoding="utf-8") as handle:
        data = yaml.safe_load(handle) or {}
    if not isinstance(data, dict):
        raise ValueError("Top-level YAML structure must be a mapping.")

    known = {f.name for f in fields(RunnerConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ValueError(f"Unknown config fields: {', '.join(unknown)}")

    return RunnerConfig(**_normalize(data))
