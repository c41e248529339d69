"""
utils: Image I/O, Preprocessing, Visualization and Config Helpers
=================================================================

Modules:
---------
- paths.py       : Numbered frame filename convention and output folders.
- config.py      : YAML config with built-in defaults.
- preproc.py     : Load / binarize / clean / save for a single frame.
- vis_regions.py : Region annotation overlay and the preview windows.
"""
