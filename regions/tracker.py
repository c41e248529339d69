# regions/tracker.py
from __future__ import annotations
import math
from typing import List, Sequence, Tuple

import numpy as np

from regions.region_features import Region

"""
Frame-to-frame color identity for regions.

Each accepted region of the current frame is matched to the nearest centroid
among the previous frame's accepted regions. A match closer than
`max_centroid_distance` pixels reuses that region's color; otherwise a fresh
color is drawn from the tracker's own seeded generator, so two trackers built
with the same seed hand out the same color sequence.

Matching is greedy and not one-to-one: two current regions may both take the
color of the same previous region. The history only ever holds the last
committed frame, and `commit` swaps it in one step.
"""

Color = Tuple[int, int, int]

DEFAULT_SEED = 12345
MAX_CENTROID_DISTANCE = 50.0


def centroid_distance(p1: Tuple[float, float], p2: Tuple[float, float]) -> float:
    return math.hypot(p1[0] - p2[0], p1[1] - p2[1])


class RegionTracker:
    def __init__(self, seed: int = DEFAULT_SEED,
                 max_centroid_distance: float = MAX_CENTROID_DISTANCE):
        self.seed = int(seed)
        self.max_centroid_distance = float(max_centroid_distance)
        self._rng = np.random.default_rng(self.seed)
        self._previous: Tuple[Tuple[Region, Color], ...] = ()

    @property
    def previous_regions(self) -> List[Region]:
        return [r for r, _ in self._previous]

    @property
    def previous_colors(self) -> List[Color]:
        return [c for _, c in self._previous]

    def generate_color(self) -> Color:
        b, g, r = self._rng.integers(0, 256, size=3)
        return (int(b), int(g), int(r))

    def match(self, region: Region):
        """Return the color of the closest previous region under the threshold, or None."""
        best_dist = math.inf
        best_color = None
        for prev, color in self._previous:
            d = centroid_distance(region.centroid, prev.centroid)
            # strict: first-seen wins exact ties
            if d < best_dist and d < self.max_centroid_distance:
                best_dist = d
                best_color = color
        return best_color

    def assign_color(self, region: Region) -> Color:
        color = self.match(region)
        return color if color is not None else self.generate_color()

    def assign_colors(self, regions: Sequence[Region]) -> List[Color]:
        return [self.assign_color(r) for r in regions]

    def commit(self, regions: Sequence[Region], colors: Sequence[Color]) -> None:
        """Replace the history with this frame's accepted regions and their colors."""
        if len(regions) != len(colors):
            raise ValueError(f"commit got {len(regions)} regions but {len(colors)} colors")
        self._previous = tuple((r, tuple(int(v) for v in c)) for r, c in zip(regions, colors))

    def reset(self) -> None:
        self._previous = ()
