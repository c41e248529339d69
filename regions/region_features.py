# regions/region_features.py
from __future__ import annotations
import math
from dataclasses import dataclass
from typing import List, Sequence, Tuple

import cv2
import numpy as np

"""
Region-level shape descriptors computed from a binary foreground mask.

Given a cleaned binary mask (foreground = any nonzero pixel), this module
labels the connected components and describes each one with a small set of
geometry-based features. The features are simple and cheap, and the same
values are what the labeling step writes to the training dataset.

Per region:
    - centroid        : first-moment center (x, y), sub-pixel
    - area            : pixel count of the component
    - bbox            : tight bounding box (x, y, w, h)
    - aspect_ratio    : w / h
    - touches_boundary: bbox abuts any image edge
    - percent_filled  : area / (w * h)
    - axis            : orientation of the axis of least second central
                        moment, in radians

Connectivity is 8 by default (cv2.connectedComponentsWithStats), 4 if asked.
"""

BBox = Tuple[int, int, int, int]


@dataclass(frozen=True)
class Region:
    centroid: Tuple[float, float]
    area: int
    bbox: BBox
    aspect_ratio: float
    touches_boundary: bool
    percent_filled: float
    axis: float

    def feature_vector(self) -> Tuple[int, float, float, float]:
        return (self.area, self.aspect_ratio, self.percent_filled, self.axis)


def _binary_u8(mask: np.ndarray) -> np.ndarray:
    if mask is None or mask.ndim != 2:
        raise ValueError(f"Expected a 2-D mask, got {None if mask is None else mask.shape}")
    return (mask != 0).astype(np.uint8)


def least_moment_axis(sub_mask: np.ndarray) -> float:
    """
    Angle (radians) of the axis of least second central moment of a binary
    sub-image: 0.5 * atan2(2*mu11, mu20 - mu02), moments normalised by m00.

    Returns 0.0 for an empty sub-image (the angle is undefined there).
    """
    if sub_mask.size == 0:
        return 0.0
    m = cv2.moments(sub_mask, binaryImage=True)
    m00 = m["m00"]
    if m00 <= 0:
        return 0.0
    mu20 = m["mu20"] / m00
    mu02 = m["mu02"] / m00
    mu11 = m["mu11"] / m00
    return 0.5 * math.atan2(2.0 * mu11, mu20 - mu02)


def extract_regions(mask: np.ndarray, min_region_size: int = 0,
                    connectivity: int = 8) -> List[Region]:
    """
    Label connected foreground components and describe each one.

    Args:
        mask (np.ndarray): 2D array (HxW); nonzero pixels are foreground.
        min_region_size (int): components with area below this are dropped.
        connectivity (int): 8 or 4.

    Returns:
        list[Region] in label order (raster order of each component's first
        pixel). Use `sort_regions` for the area ordering.

    Notes:
        - Moments are taken over the mask restricted to the bounding box, so
          pixels of a neighbouring component that fall inside the box count too.
        - The input mask is not modified.
    """
    if connectivity not in (4, 8):
        raise ValueError(f"connectivity must be 4 or 8, got {connectivity}")
    m = _binary_u8(mask)
    H, W = m.shape
    num_labels, _, stats, centroids = cv2.connectedComponentsWithStats(m, connectivity=connectivity)

    regions: List[Region] = []
    for i in range(1, num_labels):          # 0 is background
        area = int(stats[i, cv2.CC_STAT_AREA])
        if area < min_region_size:
            continue

        x = int(stats[i, cv2.CC_STAT_LEFT])
        y = int(stats[i, cv2.CC_STAT_TOP])
        w = int(stats[i, cv2.CC_STAT_WIDTH])
        h = int(stats[i, cv2.CC_STAT_HEIGHT])

        aspect = float(w) / float(h) if h > 0 else math.inf
        box_area = w * h
        filled = float(area) / float(box_area) if box_area > 0 else 0.0
        touches = x <= 0 or y <= 0 or x + w >= W or y + h >= H

        regions.append(Region(
            centroid=(float(centroids[i][0]), float(centroids[i][1])),
            area=area,
            bbox=(x, y, w, h),
            aspect_ratio=aspect,
            touches_boundary=touches,
            percent_filled=filled,
            axis=least_moment_axis(m[y:y + h, x:x + w]),
        ))
    return regions


def sort_regions(regions: Sequence[Region]) -> List[Region]:
    # stable: equal areas keep label order
    return sorted(regions, key=lambda r: r.area, reverse=True)


def find_regions(mask: np.ndarray, min_region_size: int = 0,
                 connectivity: int = 8) -> List[Region]:
    """Extract, filter by size and order by descending area."""
    return sort_regions(extract_regions(mask, min_region_size, connectivity))


def select_accepted(regions: Sequence[Region], max_regions: int) -> List[Region]:
    """
    Regions that get drawn and tracked: not touching the image boundary, in the
    given order, at most `max_regions` of them. Boundary regions do not use up
    the cap.
    """
    accepted: List[Region] = []
    for r in regions:
        if len(accepted) >= max_regions:
            break
        if r.touches_boundary:
            continue
        accepted.append(r)
    return accepted
