# tests/conftest.py
# Ensure project root is importable as a module during pytest runs
import pathlib
import sys

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import cv2
import numpy as np
import pytest
import yaml

CFG_PATH = ROOT / 'configs' / 'config_regions.yaml'


def draw_frame(squares, H=120, W=160):
    """Black BGR frame with white filled squares given as (x, y, size)."""
    img = np.zeros((H, W, 3), np.uint8)
    for x, y, s in squares:
        cv2.rectangle(img, (x, y), (x + s - 1, y + s - 1), (255, 255, 255), -1)
    return img


@pytest.fixture
def fixed_cfg():
    # deterministic binarization for synthetic frames: no blur, plain threshold
    cfg = yaml.safe_load(open(CFG_PATH, 'r'))
    cfg['preproc'].update({'mode': 'fixed', 'threshold': 127, 'invert': False, 'blur_ksize': 0})
    cfg['regions'].update({'min_region_size': 50, 'max_regions': 5})
    return cfg


@pytest.fixture
def write_frames(tmp_path):
    """write_frames([[squares of frame 1], [squares of frame 2], ...]) -> input dir"""
    def _write(frames, name='imgs'):
        d = tmp_path / name
        d.mkdir(exist_ok=True)
        for i, squares in enumerate(frames, start=1):
            cv2.imwrite(str(d / f'img{i}p3.png'), draw_frame(squares))
        return d
    return _write
