from __future__ import annotations

from pathlib import Path

import pytest

from boreblock.config.defaults import default_config
from boreblock.utils.config import as_plain_dict, deep_get, load_run_config, run_config_from_dict


def test_defaults_without_a_config_file() -> None:
    cfg = load_run_config(None)
    assert cfg == default_config()
    assert cfg.transform.first_width == 8
    assert cfg.transform.width_step == 4
    assert cfg.selection.mode == "max_width"


def test_partial_dict_overrides_only_named_keys() -> None:
    cfg = run_config_from_dict(
        {
            "io": {"out_dir": "results", "value_col": "GR"},
            "transform": {"workers": 4, "unknown_key": 1},
            "selection": {"mode": "top_n", "value": 3},
            "plots": True,
        }
    )
    assert cfg.io.out_dir == Path("results")
    assert cfg.io.value_col == "GR"
    assert cfg.io.depth_col == "depth"
    assert cfg.transform.workers == 4
    assert cfg.transform.chunk_scales == 64
    assert cfg.selection.mode == "top_n"
    assert cfg.selection.value == 3.0
    assert cfg.plots is True


def test_unknown_selection_mode_is_rejected() -> None:
    with pytest.raises(ValueError):
        run_config_from_dict({"selection": {"mode": "thickest"}})


def test_yaml_file_is_loaded(tmp_path: Path) -> None:
    p = tmp_path / "run.yaml"
    p.write_text(
        "transform:\n"
        "  sign_eps: 1.0e-9\n"
        "selection:\n"
        "  mode: top_percent\n"
        "  value: 25\n",
        encoding="utf-8",
    )
    cfg = load_run_config(p)
    assert cfg.transform.sign_eps == pytest.approx(1e-9)
    assert cfg.selection.mode == "top_percent"
    assert cfg.selection.value == 25.0

    plain = as_plain_dict(cfg)
    assert deep_get(plain, "selection.mode") == "top_percent"
    assert isinstance(deep_get(plain, "io.out_dir"), str)
    assert deep_get(plain, "io.missing", "x") == "x"
