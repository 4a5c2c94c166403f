"""Readers for raw threshold arrays and per-participant trial logs."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import numpy as np
import pandas as pd
import scipy.io


def load_threshold_array(path: str, variable: Optional[str] = None) -> np.ndarray:
    """
    Read the raw threshold array from a .mat, .npy or .npz file.

    For containers holding several arrays, `variable` selects one; without
    it the file must hold exactly one array.
    """
    file_path = Path(path).expanduser()
    if not file_path.exists():
        raise FileNotFoundError(f"Threshold file '{path}' not found.")

    suffix = file_path.suffix.lower()
    if suffix == ".npy":
        return np.asarray(np.load(file_path), dtype=np.float64)
    if suffix == ".mat":
        contents = {
            key: value
            for key, value in scipy.io.loadmat(file_path).items()
            if not key.startswith("__")
        }
    elif suffix == ".npz":
        with np.load(file_path) as archive:
            contents = {key: archive[key] for key in archive.files}
    else:
        raise ValueError(f"Unsupported threshold file type '{suffix}' ({path})")

    if variable is not None:
        if variable not in contents:
            raise ValueError(
                f"Variable '{variable}' not in {path}; available: {', '.join(sorted(contents))}"
            )
        return np.asarray(contents[variable], dtype=np.float64)
    if len(contents) != 1:
        raise ValueError(
            f"{path} holds {len(contents)} arrays ({', '.join(sorted(contents))}); "
            "set threshold_variable to pick one."
        )
    return np.asarray(next(iter(contents.values())), dtype=np.float64)


def load_attempt_logs(directory: str, pattern: str = "*.csv", sep: str = ",") -> pd.DataFrame:
    """
    Concatenate every per-participant log in `directory` matching `pattern`.

    Files are read in sorted order; the originating file name is kept in
    a `source_file` column.
    """
    log_dir = Path(directory).expanduser()
    if not log_dir.is_dir():
        raise FileNotFoundError(f"Log directory '{directory}' not found.")
    files = sorted(log_dir.glob(pattern))
    if not files:
        raise FileNotFoundError(f"No files matching '{pattern}' in {directory}")

    frames = []
    for file_path in files:
        df = pd.read_csv(file_path, sep=sep)
        df["source_file"] = file_path.name
        frames.append(df)
    return pd.concat(frames, ignore_index=True)
