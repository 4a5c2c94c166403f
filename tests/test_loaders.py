import numpy as np
import pandas as pd
import pytest
import scipy.io

from behavioral_tidy import load_attempt_logs, load_threshold_array
from behavioral_tidy.pipeline import prepare_foraging, prepare_thresholds


def write_logs(directory, per_person):
    directory.mkdir(parents=True, exist_ok=True)
    for name, rows in per_person.items():
        df = pd.DataFrame(
            rows, columns=["person", "condition", "block", "trial", "attempt", "rt"]
        )
        df.to_csv(directory / name, index=False)


def test_load_threshold_array_from_npy(tmp_path):
    array = np.arange(24, dtype=np.float64).reshape(2, 3, 2, 2)
    path = tmp_path / "thr.npy"
    np.save(path, array)

    loaded = load_threshold_array(str(path))

    np.testing.assert_array_equal(loaded, array)


def test_load_threshold_array_from_mat_picks_named_variable(tmp_path):
    array = np.arange(3 * 4 * 3 * 2, dtype=np.float64).reshape(3, 4, 3, 2)
    path = tmp_path / "thr.mat"
    scipy.io.savemat(path, {"thresholds": array, "other": np.ones((2, 2))})

    loaded = load_threshold_array(str(path), variable="thresholds")

    assert loaded.shape == (3, 4, 3, 2)
    np.testing.assert_array_equal(loaded, array)
    with pytest.raises(ValueError):
        load_threshold_array(str(path))
    with pytest.raises(ValueError, match="missing"):
        load_threshold_array(str(path), variable="missing")


def test_load_threshold_array_from_npz_single_array(tmp_path):
    array = np.full((1, 2, 1, 3), 2.5)
    path = tmp_path / "thr.npz"
    np.savez(path, thr=array)

    loaded = load_threshold_array(str(path))

    np.testing.assert_array_equal(loaded, array)


def test_load_threshold_array_rejects_unknown_suffix_and_missing_file(tmp_path):
    path = tmp_path / "thr.txt"
    path.write_text("1 2 3")
    with pytest.raises(ValueError):
        load_threshold_array(str(path))
    with pytest.raises(FileNotFoundError):
        load_threshold_array(str(tmp_path / "absent.npy"))


def test_load_attempt_logs_concatenates_sorted_files(tmp_path):
    log_dir = tmp_path / "logs"
    write_logs(
        log_dir,
        {
            "p02.csv": [(2, "A", "test", 1, 1, 0.5)],
            "p01.csv": [(1, "A", "test", 1, 1, 0.3), (1, "A", "test", 2, 1, 0.9)],
        },
    )
    (log_dir / "notes.txt").write_text("ignored")

    df = load_attempt_logs(str(log_dir))

    assert df["person"].tolist() == [1, 1, 2]
    assert df["source_file"].tolist() == ["p01.csv", "p01.csv", "p02.csv"]
    assert list(df.index) == [0, 1, 2]


def test_load_attempt_logs_without_matches(tmp_path):
    (tmp_path / "empty").mkdir()
    with pytest.raises(FileNotFoundError):
        load_attempt_logs(str(tmp_path / "empty"))
    with pytest.raises(FileNotFoundError):
        load_attempt_logs(str(tmp_path / "absent"))


def test_prepare_thresholds_reports_dropped_cells(tmp_path):
    array = np.ones((3, 4, 3, 2))
    array[2, 3, 2, 1] = np.nan
    path = tmp_path / "thr.npy"
    np.save(path, array)

    df, diag = prepare_thresholds(
        str(path),
        ["d1", "d2", "d3"],
        ["l1", "l2", "l3", "l4"],
        ["f1", "f2", "f3"],
    )

    assert diag == {"n_cells": 72, "n_dropped": 1, "n_rows": 71}
    assert len(df) == 71


def test_prepare_foraging_end_to_end(tmp_path):
    log_dir = tmp_path / "logs"
    write_logs(
        log_dir,
        {
            "p01.csv": [
                (1, "A", "practice", 0, 1, 0.0),
                (1, "A", "test", 1, 1, 0.0),
                (1, "A", "test", 2, 1, 3.0),
                (1, "A", "test", 2, 2, 4.0),
                (1, "A", "test", 3, 1, 10.0),
            ],
            "p02.csv": [
                (2, "A", "test", 1, 1, 1.0),
            ],
        },
    )

    trials, intervals, means, diag = prepare_foraging(str(log_dir))

    assert len(trials) == 4
    assert intervals["interval"].tolist() == [4.0, 6.0]
    assert means["person"].tolist() == [1]
    assert means.loc[0, "mean_interval"] == pytest.approx(5.0)
    assert diag == {
        "n_records": 6,
        "n_trials": 4,
        "n_intervals": 2,
        "n_pairs": 2,
        "n_pairs_omitted": 1,
    }
