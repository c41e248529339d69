"""
tools: Standalone Helpers Around the Region Pipeline
====================================================

- threshold_frames.py  : Fixed-threshold + clean preview, saves the masks.
- summarize_dataset.py : Per-label counts and feature means of a labeled feature file.
"""
