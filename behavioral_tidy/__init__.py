"""
Reshaping helpers that turn raw behavioural data into tidy tables for
multi-level modelling.
"""

from .attempts import deduplicate_attempts
from .errors import DimensionMismatch, MissingKeyField, TidyDataError, UnorderedTrials
from .intervals import aggregate_means, compute_intervals
from .loaders import load_attempt_logs, load_threshold_array
from .pipeline import prepare_foraging, prepare_thresholds
from .psychometric import (
    DEFAULT_STIM,
    psychometric_probability,
    response_proportions,
    simulate_observer,
    simulate_study,
)
from .thresholds import flatten_thresholds

__all__ = [
    "aggregate_means",
    "compute_intervals",
    "deduplicate_attempts",
    "DEFAULT_STIM",
    "DimensionMismatch",
    "flatten_thresholds",
    "load_attempt_logs",
    "load_threshold_array",
    "MissingKeyField",
    "prepare_foraging",
    "prepare_thresholds",
    "psychometric_probability",
    "response_proportions",
    "simulate_observer",
    "simulate_study",
    "TidyDataError",
    "UnorderedTrials",
]
