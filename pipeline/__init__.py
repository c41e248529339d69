"""
pipeline: Frame Sequence Driver
===============================

Runs the per-frame chain (preprocess -> regions -> tracking -> annotation) over
a numbered image folder and pauses after each frame for a labeling decision.

Modules:
---------
- driver.py      : `process_frames` generator + `run_frames` loop.
- decisions.py   : Decision type and its sources (interactive, scripted, skip-all).
- run_regions.py : Command-line entry point.

Usage:
------
    $ python -m pipeline.run_regions --input_dir imgs --output_dir out \
          --min_region_size 500 --max_regions 5 --dataset features.csv
"""
