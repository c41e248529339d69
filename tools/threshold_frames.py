# tools/threshold_frames.py
import argparse
import sys
from pathlib import Path

import cv2
from tqdm import tqdm

from utils.config import load_config
from utils.paths import count_frames, ensure_dir, iter_frame_paths
from utils.preproc import clean, fixed_threshold, load_image, save_image, to_gray

"""
Preview the fixed-threshold binarization over a numbered frame sequence and
save the cleaned masks, to pick a threshold before running the tracker.

    gray > threshold -> 255, then close + open with a 3x3 kernel

python -m tools.threshold_frames --input_dir imgs --output_dir masks --threshold 120
python -m tools.threshold_frames --input_dir imgs --output_dir masks --threshold 120 --show
"""


def threshold_frames(input_dir, output_dir, threshold: int, pattern: str,
                     invert: bool = False, morph_kernel: int = 3, show: bool = False) -> int:
    """Returns the number of masks written."""
    out = Path(output_dir)
    written = 0
    total = count_frames(input_dir, pattern)
    for _, ip in tqdm(iter_frame_paths(input_dir, pattern), total=total, desc="threshold"):
        frame = load_image(ip)
        if frame is None:
            print(f"Error: Could not read image file {ip}", file=sys.stderr)
            continue
        thresholded = fixed_threshold(to_gray(frame), threshold, invert)
        cleaned = clean(thresholded, morph_kernel)
        if show:
            cv2.imshow("Thresholded Image", thresholded)
            cv2.imshow("Cleaned Image", cleaned)
            cv2.waitKey(0)
        if save_image(out / ip.name, cleaned):
            written += 1
    if show:
        cv2.destroyAllWindows()
    return written


def main(argv=None) -> int:
    ap = argparse.ArgumentParser(description="Fixed-threshold + clean preview for a frame sequence.")
    ap.add_argument("--input_dir", required=True)
    ap.add_argument("--output_dir", required=True)
    ap.add_argument("--threshold", type=int, required=True)
    ap.add_argument("--config", default=None)
    ap.add_argument("--invert", action="store_true")
    ap.add_argument("--show", action="store_true")
    args = ap.parse_args(argv)

    cfg = load_config(args.config)
    if not Path(args.input_dir).is_dir():
        print("Error: Provided input path is not a directory.", file=sys.stderr)
        return 1
    try:
        ensure_dir(args.output_dir)
    except OSError as e:
        print(f"Error: Could not create output directory {args.output_dir}: {e}", file=sys.stderr)
        return 1

    n = threshold_frames(args.input_dir, args.output_dir, args.threshold,
                         cfg["frames"]["pattern"], invert=args.invert,
                         morph_kernel=int(cfg["preproc"]["morph_kernel"]), show=args.show)
    print(f"[threshold_frames] wrote {n} mask(s) to {args.output_dir}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
