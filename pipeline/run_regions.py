# pipeline/run_regions.py
import argparse
import sys
from pathlib import Path

import yaml

from pipeline.decisions import InteractiveDecisions, ScriptedDecisions, skip_all
from pipeline.driver import process_frames, run_frames
from utils.config import DEFAULT_CONFIG_PATH, load_config, validate_config
from utils.paths import ensure_dir

"""
Detect, track and annotate regions over a numbered image sequence, and
optionally record labeled feature vectors.

Interactive (windows + key press; 'n' then type a label, ESC to stop):
python -m pipeline.run_regions --input_dir imgs --output_dir out --min_region_size 500 --max_regions 5 --dataset features.csv

Headless, labels scripted from a file (one of skip / label <text> / exit per line):
python -m pipeline.run_regions --input_dir imgs --output_dir out --min_region_size 500 --max_regions 5 --dataset features.csv --script decisions.txt

Headless, no labeling at all:
python -m pipeline.run_regions --input_dir imgs --output_dir out --min_region_size 500 --max_regions 5 --headless

Exit status: 0 on completion or user exit, 1 on a bad input folder or an
output folder that can't be created, 2 on bad arguments (argparse).
"""


def build_parser():
    ap = argparse.ArgumentParser(description="Region extraction, tracking and labeling over a frame sequence.")
    ap.add_argument("--input_dir", required=True)
    ap.add_argument("--output_dir", required=True)
    ap.add_argument("--min_region_size", type=int, required=True)
    ap.add_argument("--max_regions", type=int, required=True)
    ap.add_argument("--dataset", default=None, help="labeled feature file (appended to)")
    ap.add_argument("--config", default=None,
                    help=f"YAML config (default: {DEFAULT_CONFIG_PATH.name} if present)")
    ap.add_argument("--script", default=None, help="decision script for headless labeling")
    ap.add_argument("--headless", action="store_true", help="no windows, no key presses")
    return ap


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    print(f"[run_regions] args: {args}")

    cfg_path = args.config or (DEFAULT_CONFIG_PATH if DEFAULT_CONFIG_PATH.exists() else None)
    try:
        cfg = load_config(cfg_path)
    except (OSError, yaml.YAMLError) as e:
        print(f"Error: Could not load config {cfg_path}: {e}", file=sys.stderr)
        return 1

    cfg["regions"]["min_region_size"] = args.min_region_size
    cfg["regions"]["max_regions"] = args.max_regions
    try:
        validate_config(cfg)
    except (TypeError, ValueError) as e:
        print(f"Error: Invalid configuration: {e}", file=sys.stderr)
        return 1
    dataset = args.dataset or cfg["labeling"].get("dataset")

    if not Path(args.input_dir).is_dir():
        print("Error: Provided input path is not a directory.", file=sys.stderr)
        return 1
    try:
        ensure_dir(args.output_dir)
    except OSError as e:
        print(f"Error: Could not create output directory {args.output_dir}: {e}", file=sys.stderr)
        return 1

    interactive = None
    if not cfg["labeling"]["enabled"]:
        if args.script:
            print(f"[run_regions] labeling.enabled is false, ignoring --script {args.script}")
        decide = skip_all
    elif args.script:
        try:
            decide = ScriptedDecisions.from_file(args.script)
        except (OSError, ValueError) as e:
            print(f"Error: Could not read decision script {args.script}: {e}", file=sys.stderr)
            return 1
    elif args.headless or not cfg["display"]["enabled"]:
        decide = skip_all
    else:
        interactive = InteractiveDecisions()
        decide = interactive

    frames = process_frames(args.input_dir, args.output_dir, cfg, dataset_path=dataset)
    try:
        summary = run_frames(frames, decide)
    finally:
        if interactive is not None:
            interactive.close()

    print(f"[run_regions] frames={summary.frames_seen} saved={summary.frames_saved} "
          f"skipped={summary.frames_skipped} records={summary.records_written} "
          f"interrupted={summary.interrupted}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
