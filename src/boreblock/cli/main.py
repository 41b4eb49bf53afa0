# src/boreblock/cli/main.py
from __future__ import annotations

import json
from dataclasses import replace
from pathlib import Path
from typing import Optional

import typer
from rich import print

from boreblock.blocker import block_trace
from boreblock.config.schema import SELECTION_MODES
from boreblock.io.csv import write_csv
from boreblock.io.result_npz import load_blocker_npz, save_blocker_npz
from boreblock.io.trace import read_trace
from boreblock.layers.selection import (
    LAYER_FIELDS,
    SELECTION_FIELDS,
    layer_rows,
    select_layers,
    selection_rows,
)
from boreblock.utils.config import as_plain_dict, load_run_config

app = typer.Typer(add_completion=False, help="Wavelet blocking of borehole traces.")


def _check_mode(mode: str) -> str:
    if mode not in SELECTION_MODES:
        raise typer.BadParameter(f"mode must be one of {', '.join(SELECTION_MODES)} (got {mode!r})")
    return mode


@app.command()
def block(
    trace: Path = typer.Argument(..., exists=True, help="CSV (depth,value) or LAS trace"),
    config: Optional[Path] = typer.Option(None, "--config", exists=True, help="YAML run config"),
    out_dir: Optional[Path] = typer.Option(None, help="Output directory (overrides config)"),
    depth_col: Optional[str] = typer.Option(None, help="CSV depth column"),
    value_col: Optional[str] = typer.Option(None, help="CSV value column"),
    las_curve: Optional[str] = typer.Option(None, help="LAS curve mnemonic"),
    mode: Optional[str] = typer.Option(None, help=f"Selection mode: {', '.join(SELECTION_MODES)}"),
    value: Optional[float] = typer.Option(None, help="Selection value"),
    workers: Optional[int] = typer.Option(None, help="FFT worker threads"),
    plots: bool = typer.Option(False, "--plots", help="Write PNG figures"),
    quiet: bool = typer.Option(False, "--quiet", help="No progress lines"),
):
    """Block a trace into ranked layers and re-block it for one selection."""
    cfg = load_run_config(config)

    io_cfg = replace(
        cfg.io,
        trace_path=trace,
        out_dir=out_dir if out_dir is not None else cfg.io.out_dir,
        depth_col=depth_col or cfg.io.depth_col,
        value_col=value_col or cfg.io.value_col,
        las_curve=las_curve or cfg.io.las_curve,
    )
    tr_cfg = replace(
        cfg.transform,
        workers=int(workers) if workers is not None else cfg.transform.workers,
        progress=not quiet,
        keep_importance_matrix=bool(cfg.transform.keep_importance_matrix or plots),
    )
    sel_cfg = replace(
        cfg.selection,
        mode=_check_mode(mode) if mode is not None else cfg.selection.mode,
        value=float(value) if value is not None else cfg.selection.value,
    )
    cfg = replace(cfg, io=io_cfg, transform=tr_cfg, selection=sel_cfg, plots=bool(cfg.plots or plots))

    out = Path(cfg.io.out_dir)
    out.mkdir(parents=True, exist_ok=True)

    print("[bold]Reading trace...[/bold]")
    depth, data = read_trace(
        trace,
        depth_col=cfg.io.depth_col,
        value_col=cfg.io.value_col,
        las_curve=cfg.io.las_curve,
    )
    print(f"Samples: {depth.size}")

    print("[bold]Blocking...[/bold]")
    result = block_trace(depth, data, cfg=cfg.transform)
    print(f"Scales: {result.n_wavelet} | Regions: {result.n_regions} | Layers: {result.n_layer}")

    save_blocker_npz(result, out / "blocker.npz")
    write_csv(out / "layers.csv", LAYER_FIELDS, layer_rows(result.layers()))

    sel = select_layers(result, cfg.selection.value, mode=cfg.selection.mode)
    write_csv(out / "blocks.csv", SELECTION_FIELDS, selection_rows(sel))
    print(f"Selection {sel.mode}={sel.value:g}: {sel.n_layer} blocks")

    written = []
    if cfg.plots and result.n_wavelet > 0:
        from boreblock.viz.plots import plot_diagnostics, plot_selection, plot_transform, save_figures

        figs = {
            "transform": plot_transform(result, kind="transform"),
            "labels": plot_transform(result, kind="labels", with_trace=False),
            "importance": plot_transform(result, kind="importance", with_trace=False),
            "diagnostics": plot_diagnostics(result),
            "blocks": plot_selection(result, {sel.mode: sel}),
        }
        written = [str(p) for p in save_figures(figs, out)]

    manifest = {
        "trace": str(trace),
        "n_data": result.n_data,
        "n_wavelet": result.n_wavelet,
        "n_regions": result.n_regions,
        "n_layer": result.n_layer,
        "depth_step": result.depth_step,
        "n_blocks": sel.n_layer,
        "config": as_plain_dict(cfg),
        "figures": written,
    }
    (out / "manifest.json").write_text(json.dumps(manifest, indent=2))
    print("[green]Wrote[/green]", out / "manifest.json")


@app.command()
def select(
    npz: Path = typer.Argument(..., exists=True, help="blocker.npz written by `block`"),
    mode: str = typer.Option("max_width", help=f"Selection mode: {', '.join(SELECTION_MODES)}"),
    value: float = typer.Option(5.0, help="Selection value"),
    out: Path = typer.Option(Path("blocks.csv"), help="Output CSV"),
):
    """Re-block a saved result for another selection criterion."""
    _check_mode(mode)
    result = load_blocker_npz(npz)
    sel = select_layers(result, value, mode=mode)
    write_csv(out, SELECTION_FIELDS, selection_rows(sel))
    print(f"Selection {mode}={value:g}: {sel.n_layer} blocks")
    print("[green]Wrote[/green]", out)


if __name__ == "__main__":
    app()
