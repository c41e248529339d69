# tools/summarize_dataset.py
import argparse
import sys
from pathlib import Path

import pandas as pd

from regions.recorder import FIELDS, read_records

"""
Per-label summary of a labeled feature file: record count and the mean /
std of each feature. Handy to check a labeling session before training on it.

python -m tools.summarize_dataset --dataset features.csv
python -m tools.summarize_dataset --dataset features.csv --out summary.csv
"""

NUMERIC = [f for f in FIELDS if f != "label"]


def summarize(df: pd.DataFrame) -> pd.DataFrame:
    if df.empty:
        return pd.DataFrame(columns=["label", "count"] + [f"{c}_mean" for c in NUMERIC]
                            + [f"{c}_std" for c in NUMERIC])
    g = df.groupby("label", sort=True)
    out = g.size().rename("count").to_frame()
    means = g[NUMERIC].mean().add_suffix("_mean")
    stds = g[NUMERIC].std(ddof=0).add_suffix("_std")
    return out.join(means).join(stds).reset_index()


def main(argv=None) -> int:
    ap = argparse.ArgumentParser()
    ap.add_argument("--dataset", required=True)
    ap.add_argument("--out", default=None)
    args = ap.parse_args(argv)

    if not Path(args.dataset).exists():
        print(f"Error: dataset not found: {args.dataset}", file=sys.stderr)
        return 1
    summary = summarize(read_records(args.dataset))
    print(summary.to_string(index=False))
    if args.out:
        Path(args.out).parent.mkdir(parents=True, exist_ok=True)
        summary.to_csv(args.out, index=False)
        print(f"[summarize_dataset] wrote {args.out} ({len(summary)} labels)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
