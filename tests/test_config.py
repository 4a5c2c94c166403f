import textwrap

import pytest

from behavioral_tidy.config import RunnerConfig, load_runner_config, validate_config


def write_config(tmp_path, content: str):
    path = tmp_path / "config.yaml"
    path.write_text(textwrap.dedent(content), encoding="utf-8")
    return path


def test_load_runner_config_with_overrides(tmp_path):
    path = write_config(
        tmp_path,
        """
        threshold_file: /data/thresholds.mat
        design_levels: [uncrowded, crowded, grouped]
        location_levels: [upper, right, lower, left]
        flanker_levels: [none, similar, dissimilar]
        logs_dir: /data/logs
        order_by: trial
        seed: 123
        """,
    )

    cfg = load_runner_config(str(path))
    assert cfg.threshold_file == "/data/thresholds.mat"
    assert cfg.design_levels == ("uncrowded", "crowded", "grouped")
    assert cfg.location_levels == ("upper", "right", "lower", "left")
    assert cfg.order_by == ("trial",)
    assert cfg.seed == 123
    assert cfg.practice_block == "practice"
    assert cfg.psychometric_csv is None

    updated = cfg.with_overrides(output_dir="out", flanker_levels=["a", "b", "c"], logs_dir=None)
    assert updated.output_dir == "out"
    assert updated.flanker_levels == ("a", "b", "c")
    assert updated.logs_dir == "/data/logs"
    assert updated.output_path("x.csv").as_posix() == "out/x.csv"


def test_with_overrides_rejects_unknown_key():
    cfg = RunnerConfig(logs_dir="/data/logs")
    with pytest.raises(ValueError):
        cfg.with_overrides(num_layers=3)


def test_validate_config_requires_an_input(tmp_path):
    path = write_config(
        tmp_path,
        """
        output_dir: out
        seed: 1
        """,
    )

    with pytest.raises(ValueError):
        validate_config(load_runner_config(str(path)))


def test_validate_config_requires_levels_for_thresholds(tmp_path):
    path = write_config(
        tmp_path,
        """
        threshold_file: /data/thresholds.npy
        design_levels: [a, b, c]
        """,
    )

    with pytest.raises(ValueError, match="location_levels"):
        validate_config(load_runner_config(str(path)))


def test_load_runner_config_rejects_unknown_fields(tmp_path):
    path = write_config(
        tmp_path,
        """
        logs_dir: /data/logs
        model_dir: /model
        """,
    )

    with pytest.raises(ValueError, match="model_dir"):
        load_runner_config(str(path))


def test_load_runner_config_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_runner_config(str(tmp_path / "absent.yaml"))


def test_validate_config_accepts_simulation_only():
    cfg = RunnerConfig(psychometric_csv="sim.csv")
    assert validate_config(cfg) is cfg


def test_load_runner_config_defers_validation(tmp_path):
    path = write_config(
        tmp_path,
        """
        output_dir: out
        """,
    )

    cfg = load_runner_config(str(path))
    assert cfg.logs_dir is None

    updated = validate_config(cfg.with_overrides(logs_dir="/data/logs"))
    assert updated.logs_dir == "/data/logs"
    assert updated.output_dir == "out"
