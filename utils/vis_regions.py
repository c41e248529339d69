# utils/vis_regions.py
import math
from typing import Dict, Optional, Sequence, Tuple

import cv2
import numpy as np

from regions.region_features import Region

Color = Tuple[int, int, int]

FONT = cv2.FONT_HERSHEY_SIMPLEX
FONT_SCALE = 0.5

WINDOW_ORIGINAL = "Original"
WINDOW_PROCESSED = "Processed"
WINDOW_THRESHOLDED = "Thresholded"
WINDOW_CLEANED = "Cleaned"


def _as_bgr(image: np.ndarray) -> np.ndarray:
    if image.ndim == 2:
        return cv2.cvtColor(image, cv2.COLOR_GRAY2BGR)
    return image.copy()


def axis_endpoints(region: Region) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    """Segment through the centroid along `axis`, half-length min(w, h) / 2 each way."""
    cx, cy = region.centroid
    _, _, w, h = region.bbox
    length = min(w, h) / 2.0
    dx = length * math.cos(region.axis)
    dy = length * math.sin(region.axis)
    start = (int(round(cx - dx)), int(round(cy - dy)))
    end = (int(round(cx + dx)), int(round(cy + dy)))
    return start, end


def region_text_lines(region: Region):
    """(text, y-offset above the bbox top) for the three info lines."""
    return [
        (f"Area: {region.area}", 5),
        (f"AR: {region.aspect_ratio:.2f}", 20),
        (f"Filled: {int(region.percent_filled * 100)}%", 35),
    ]


def draw_region_info(out: np.ndarray, region: Region, color: Color) -> None:
    """Draw bbox, centroid, info text and orientation axis of one region onto `out`."""
    col = tuple(int(c) for c in color)
    x, y, w, h = region.bbox
    cv2.rectangle(out, (x, y), (x + w, y + h), col, 2)

    cx, cy = region.centroid
    cv2.circle(out, (int(cx), int(cy)), 4, col, -1)

    for text, dy in region_text_lines(region):
        cv2.putText(out, text, (x, y - dy), FONT, FONT_SCALE, col, 1)

    start, end = axis_endpoints(region)
    cv2.line(out, start, end, col, 2)


def draw_regions(image: np.ndarray, regions: Sequence[Region], colors: Sequence[Color]) -> np.ndarray:
    """
    Annotated copy of `image` (grayscale input is promoted to BGR).
    `regions` should already be the accepted list; colors pair up by index.
    """
    if len(regions) != len(colors):
        raise ValueError(f"{len(regions)} regions but {len(colors)} colors")
    out = _as_bgr(image)
    for region, color in zip(regions, colors):
        draw_region_info(out, region, color)
    return out


def show_frame_windows(original: np.ndarray, processed: np.ndarray,
                       thresholded: Optional[np.ndarray] = None,
                       cleaned: Optional[np.ndarray] = None) -> None:
    panels: Dict[str, np.ndarray] = {WINDOW_ORIGINAL: original, WINDOW_PROCESSED: processed}
    if thresholded is not None:
        panels[WINDOW_THRESHOLDED] = thresholded
    if cleaned is not None:
        panels[WINDOW_CLEANED] = cleaned
    for name, img in panels.items():
        cv2.imshow(name, img)
