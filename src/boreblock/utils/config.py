# src/boreblock/utils/config.py
from __future__ import annotations

from dataclasses import fields, is_dataclass, replace
from pathlib import Path
from typing import Any, Dict, Optional

from boreblock.config.defaults import default_config
from boreblock.config.schema import SELECTION_MODES, IOConfig, RunConfig, SelectionConfig, TransformConfig

try:
    import yaml  # type: ignore
except Exception:  # pragma: no cover
    yaml = None  # type: ignore


def require_yaml() -> None:
    if yaml is None:
        raise RuntimeError("PyYAML is required for --config. Install with: pip install pyyaml")


def load_yaml(path: Path) -> Dict[str, Any]:
    require_yaml()
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p}")
    obj = yaml.safe_load(p.read_text(encoding="utf-8"))
    return obj if isinstance(obj, dict) else {}


def deep_get(d: Dict[str, Any], key: str, default: Any = None) -> Any:
    cur: Any = d
    for part in key.split("."):
        if not isinstance(cur, dict) or part not in cur:
            return default
        cur = cur[part]
    return cur


def deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = deep_merge(out[k], v)  # type: ignore[arg-type]
        else:
            out[k] = v
    return out


def as_plain_dict(x: Any) -> Any:
    if is_dataclass(x):
        return {f.name: as_plain_dict(getattr(x, f.name)) for f in fields(x)}
    if isinstance(x, dict):
        return {k: as_plain_dict(v) for k, v in x.items()}
    if isinstance(x, (list, tuple)):
        return [as_plain_dict(v) for v in x]
    if isinstance(x, Path):
        return str(x)
    return x


def _known(cls: Any, d: Any) -> Dict[str, Any]:
    """Keep only keys that are fields of dataclass cls."""
    d = d if isinstance(d, dict) else {}
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in d.items() if k in names}


def run_config_from_dict(d: Dict[str, Any], *, base: Optional[RunConfig] = None) -> RunConfig:
    """
    Build a RunConfig from a nested dict (e.g. parsed YAML):

      io:        {trace_path, depth_col, value_col, las_curve, out_dir}
      transform: {first_width, width_step, sign_eps, chunk_scales, workers, ...}
      selection: {mode, value}
      plots:     bool

    Unknown keys are ignored; missing keys keep the base (default) values.
    """
    base = base or default_config()
    merged = deep_merge(as_plain_dict(base), d or {})

    io_d = _known(IOConfig, merged.get("io"))
    for key in ("trace_path", "out_dir"):
        if io_d.get(key) is not None:
            io_d[key] = Path(io_d[key])

    sel_d = _known(SelectionConfig, merged.get("selection"))
    mode = sel_d.get("mode", base.selection.mode)
    if mode not in SELECTION_MODES:
        raise ValueError(f"selection.mode must be one of {SELECTION_MODES} (got {mode!r})")
    if "value" in sel_d:
        sel_d["value"] = float(sel_d["value"])

    return replace(
        base,
        io=IOConfig(**io_d),
        transform=TransformConfig(**_known(TransformConfig, merged.get("transform"))),
        selection=SelectionConfig(**sel_d),
        plots=bool(merged.get("plots", base.plots)),
    )


def load_run_config(path: Optional[Path]) -> RunConfig:
    if path is None or not str(path).strip():
        return default_config()
    return run_config_from_dict(load_yaml(Path(path)))
