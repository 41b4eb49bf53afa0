# src/boreblock/io/csv.py
from __future__ import annotations

import csv
from pathlib import Path
from typing import Any, Dict, Iterable, List, Sequence


def write_csv(
    path: Path,
    fieldnames: Sequence[str],
    rows: Iterable[Dict[str, Any]],
    *,
    delimiter: str = ",",
) -> None:
    """
    Write rows (dict-like) to a delimited file using explicit fieldnames.
    Missing keys are written as empty strings.
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    with path.open("w", encoding="utf-8", newline="") as f:
        w = csv.DictWriter(f, fieldnames=fieldnames, delimiter=delimiter, extrasaction="ignore")
        w.writeheader()
        for r in rows:
            w.writerow({k: r.get(k, "") for k in fieldnames})


def read_csv_rows(path: Path) -> List[Dict[str, str]]:
    """Read a comma-delimited file written by write_csv() back as list[dict[str, str]]."""
    with path.open("r", encoding="utf-8", newline="") as f:
        rdr = csv.DictReader(f)
        if rdr.fieldnames is None:
            raise ValueError(f"No header row found in {path}")
        return [{k: (v if v is not None else "") for k, v in r.items()} for r in rdr]
