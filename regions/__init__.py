"""
regions: Connected-Region Description, Tracking and Labeling
============================================================

Turns a cleaned binary mask into a list of described regions, keeps their
display colors stable from one frame to the next, and writes labeled feature
vectors for later classifier training.

Modules:
---------
- region_features.py : Connected components + shape descriptors, size filter, area sort.
- tracker.py         : Nearest-centroid color reuse against the previous frame.
- recorder.py        : Append-only labeled feature log (label,area,aspect,filled,axis).

Extracted Features:
-------------------
- area            : Pixel count of the component.
- aspect_ratio    : Bounding-box width / height.
- percent_filled  : Area / bounding-box area.
- axis            : Orientation of the least second central moment axis (radians).
"""
