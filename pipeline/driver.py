# pipeline/driver.py
from __future__ import annotations
import sys
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Dict, Generator, List, Optional, Tuple, Union

import numpy as np

from pipeline.decisions import EXIT, LABEL, Decision
from regions.recorder import append_records, validate_label
from regions.region_features import Region, find_regions, select_accepted
from regions.tracker import RegionTracker
from utils.paths import iter_frame_paths
from utils.preproc import binarize, clean, load_image, save_image
from utils.vis_regions import draw_regions

"""
Frame driver: walks the numbered frames of a folder and runs, per frame,

    load -> binarize -> clean -> regions -> accepted subset -> colors -> annotate

then hands the result to the caller and waits for a Decision (generator
`send`). After the decision:

    exit   stop right here; this frame is neither committed nor saved
    label  append every extracted region (boundary ones included) to the dataset
    (all)  commit the accepted regions to the tracker, save the annotated frame

Unreadable frames and failed saves are logged and the loop moves on. The
first missing frame number ends the run.

Usage:
    frames = process_frames("imgs", "out", cfg, dataset_path="features.csv")
    summary = run_frames(frames, ScriptedDecisions([Decision.label_as("disc")]))
"""


@dataclass
class FrameResult:
    index: int
    input_path: Path
    output_path: Path
    frame: np.ndarray
    thresholded: np.ndarray
    cleaned: np.ndarray
    regions: List[Region]
    accepted: List[Region]
    colors: List[Tuple[int, int, int]]
    annotated: np.ndarray


@dataclass
class RunSummary:
    frames_seen: int = 0
    frames_saved: int = 0
    frames_skipped: int = 0
    records_written: int = 0
    interrupted: bool = False
    labeled_frames: List[int] = field(default_factory=list)


def build_tracker(cfg: Dict) -> RegionTracker:
    tc = cfg.get("tracker", {})
    return RegionTracker(seed=int(tc.get("seed", 12345)),
                         max_centroid_distance=float(tc.get("max_centroid_distance", 50.0)))


def _record(dataset_path, regions: List[Region], label: Optional[str], index: int) -> int:
    if dataset_path is None:
        print(f"[driver] frame {index}: no dataset file configured, label ignored", file=sys.stderr)
        return 0
    try:
        label = validate_label(label)
    except ValueError as e:
        print(f"[driver] frame {index}: {e}", file=sys.stderr)
        return 0
    n = append_records(dataset_path, regions, label)
    print(f"[driver] frame {index}: wrote {n} record(s) labeled '{label}' to {dataset_path}")
    return n


def process_frames(input_dir: Union[str, Path], output_dir: Union[str, Path], cfg: Dict,
                   dataset_path: Union[str, Path, None] = None,
                   tracker: Optional[RegionTracker] = None,
                   ) -> Generator[FrameResult, Optional[Decision], RunSummary]:
    rc = cfg["regions"]
    pc = cfg["preproc"]
    min_size = int(rc["min_region_size"])
    max_regions = int(rc["max_regions"])
    connectivity = int(rc.get("connectivity", 8))
    tracker = tracker if tracker is not None else build_tracker(cfg)
    out_dir = Path(output_dir)

    summary = RunSummary()
    for index, input_path in iter_frame_paths(input_dir, cfg["frames"]["pattern"]):
        print(f"[driver] Processing: {input_path}")
        summary.frames_seen += 1

        frame = load_image(input_path)
        if frame is None:
            print(f"Error: Could not read image file {input_path}", file=sys.stderr)
            summary.frames_skipped += 1
            continue

        thresholded = binarize(frame, pc)
        cleaned = clean(thresholded, int(pc.get("morph_kernel", 3)))

        regions = find_regions(cleaned, min_size, connectivity)
        accepted = select_accepted(regions, max_regions)
        colors = tracker.assign_colors(accepted)
        annotated = draw_regions(frame, accepted, colors)
        output_path = out_dir / input_path.name

        decision = yield FrameResult(
            index=index,
            input_path=input_path,
            output_path=output_path,
            frame=frame,
            thresholded=thresholded,
            cleaned=cleaned,
            regions=regions,
            accepted=accepted,
            colors=colors,
            annotated=annotated,
        )
        decision = decision or Decision.skip()

        if decision.action == EXIT:
            print("[driver] Processing interrupted by user.")
            summary.interrupted = True
            return summary
        if decision.action == LABEL:
            n = _record(dataset_path, regions, decision.label, index)
            summary.records_written += n
            if n:
                summary.labeled_frames.append(index)

        tracker.commit(accepted, colors)

        if save_image(output_path, annotated):
            summary.frames_saved += 1
            print(f"[driver] Saved: {output_path}")

    print("[driver] Finished processing all images.")
    return summary


def run_frames(frames: Generator[FrameResult, Optional[Decision], RunSummary],
               decide: Callable[[FrameResult], Decision]) -> RunSummary:
    """Drive a `process_frames` generator, asking `decide` after every frame."""
    try:
        result = next(frames)
        while True:
            result = frames.send(decide(result))
    except StopIteration as stop:
        return stop.value if stop.value is not None else RunSummary()
