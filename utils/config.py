# utils/config.py
import copy
from pathlib import Path
from typing import Dict, Optional, Union

import yaml

"""
Config loading. A YAML file is merged over DEFAULTS so a partial file (or no
file at all) still yields every key the pipeline reads:

    cfg["frames"]["pattern"]               img{index}p3.png
    cfg["preproc"]["mode"]                 adaptive | fixed
    cfg["regions"]["min_region_size"]      ...
    cfg["tracker"]["max_centroid_distance"]
    cfg["labeling"]["enabled"], cfg["labeling"]["dataset"]
    cfg["display"]["enabled"]
"""

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[1] / "configs" / "config_regions.yaml"

DEFAULTS: Dict = {
    "frames": {
        "pattern": "img{index}p3.png",
    },
    "preproc": {
        "mode": "adaptive",
        "threshold": 128,
        "invert": False,
        "blur_ksize": 5,
        "adaptive_block_size": 11,
        "adaptive_c": 2,
        "morph_kernel": 3,
    },
    "regions": {
        "min_region_size": 500,
        "max_regions": 5,
        "connectivity": 8,
    },
    "tracker": {
        "seed": 12345,
        "max_centroid_distance": 50.0,
    },
    "labeling": {
        "enabled": True,
        "dataset": None,
    },
    "display": {
        "enabled": True,
    },
}


def deep_merge(base: Dict, override: Optional[Dict]) -> Dict:
    out = copy.deepcopy(base)
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = deep_merge(out[k], v)
        else:
            out[k] = v
    return out


def load_yaml(p: Union[str, Path]) -> Dict:
    with open(p, "r") as f:
        return yaml.safe_load(f) or {}


def load_config(p: Union[str, Path, None] = None) -> Dict:
    """Defaults, overlaid with the YAML at `p` when given."""
    if p is None:
        return copy.deepcopy(DEFAULTS)
    return deep_merge(DEFAULTS, load_yaml(p))


def validate_config(cfg: Dict) -> None:
    """Raise ValueError on settings the frame loop would otherwise trip over mid-run."""
    pc, rc = cfg["preproc"], cfg["regions"]
    mode = str(pc.get("mode") or "adaptive").lower()
    if mode not in ("fixed", "adaptive"):
        raise ValueError(f"preproc.mode must be 'fixed' or 'adaptive', got {pc.get('mode')!r}")
    ksize = int(pc.get("blur_ksize") or 0)
    if ksize > 1 and ksize % 2 == 0:
        raise ValueError(f"preproc.blur_ksize must be odd (or 0/1 for none), got {ksize}")
    if mode == "adaptive":
        block = int(pc.get("adaptive_block_size", 11))
        if block < 3 or block % 2 == 0:
            raise ValueError(f"preproc.adaptive_block_size must be odd and >= 3, got {block}")
    if int(pc.get("morph_kernel", 3)) < 1:
        raise ValueError(f"preproc.morph_kernel must be >= 1, got {pc.get('morph_kernel')}")
    if int(rc.get("connectivity", 8)) not in (4, 8):
        raise ValueError(f"regions.connectivity must be 4 or 8, got {rc.get('connectivity')}")
    if int(rc["min_region_size"]) < 0 or int(rc["max_regions"]) < 0:
        raise ValueError("regions.min_region_size and regions.max_regions must be >= 0")
