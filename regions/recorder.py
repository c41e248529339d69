# regions/recorder.py
from __future__ import annotations
import csv
import os
import sys
from pathlib import Path
from typing import Sequence, Union

import pandas as pd

from regions.region_features import Region

"""
Append-only labeled feature log.

One line per region per labeling event, no header:

    label,area,aspect_ratio,percent_filled,axis

Floats are written with repr() so that reading the file back gives the exact
values that were written. Labels are free text without commas or newlines.
Quote characters are plain text: nothing is quoted on write or unquoted on read.
The file is opened and closed on every append, so records are on disk before
the next interactive prompt.
"""

FIELDS = ("label", "area", "aspect_ratio", "percent_filled", "axis")


def validate_label(label: str) -> str:
    if label is None or not str(label).strip():
        raise ValueError("label must be a non-empty string")
    label = str(label).strip()
    if "," in label or "\n" in label or "\r" in label:
        raise ValueError(f"label may not contain commas or newlines: {label!r}")
    return label


def format_record(region: Region, label: str) -> str:
    return (f"{label},{int(region.area)},{float(region.aspect_ratio)!r},"
            f"{float(region.percent_filled)!r},{float(region.axis)!r}\n")


def append_records(path: Union[str, os.PathLike], regions: Sequence[Region], label: str) -> int:
    """
    Append one record per region under `label`.

    Returns the number of records written; 0 (with a message on stderr) when
    the file cannot be opened or written. A bad label raises ValueError before
    anything is written.
    """
    label = validate_label(label)
    lines = [format_record(r, label) for r in regions]
    try:
        with open(path, "a", encoding="utf-8", newline="") as fh:
            fh.writelines(lines)
    except OSError as e:
        print(f"Error: Could not open file {path}: {e}", file=sys.stderr)
        return 0
    return len(lines)


def read_records(path: Union[str, os.PathLike]) -> pd.DataFrame:
    p = Path(path)
    if not p.exists() or p.stat().st_size == 0:
        return pd.DataFrame({c: pd.Series(dtype=t) for c, t in
                             zip(FIELDS, (str, "int64", "float64", "float64", "float64"))})
    return pd.read_csv(p, header=None, names=list(FIELDS),
                       dtype={"label": str, "area": "int64"},
                       float_precision="round_trip", keep_default_na=False,
                       quoting=csv.QUOTE_NONE)
