# utils/preproc.py
import sys
from pathlib import Path
from typing import Dict, Optional, Union

import cv2
import numpy as np

"""
Per-frame pixel preprocessing: decode, grayscale, optional blur, binarize,
morphological clean, encode. Masks come out as uint8 with foreground 255 and
background 0.

Binarization modes (cfg["preproc"]["mode"]):
    fixed    : gray > threshold -> 255 (inverted if preproc.invert)
    adaptive : Gaussian adaptive threshold, inverted (dark objects on a light
               background become foreground), block size / C from config
"""


def load_image(path: Union[str, Path]) -> Optional[np.ndarray]:
    """BGR image, or None if the file can't be decoded."""
    img = cv2.imread(str(path), cv2.IMREAD_COLOR)
    if img is None or img.size == 0:
        return None
    return img


def save_image(path: Union[str, Path], image: np.ndarray) -> bool:
    try:
        ok = cv2.imwrite(str(path), image)
    except cv2.error as e:
        print(f"Error: Could not save image to {path}: {e}", file=sys.stderr)
        return False
    if not ok:
        print(f"Error: Could not save image to {path}", file=sys.stderr)
    return bool(ok)


def to_gray(image: np.ndarray) -> np.ndarray:
    if image.ndim == 3:
        return cv2.cvtColor(image, cv2.COLOR_BGR2GRAY)
    return image


def blur(gray: np.ndarray, ksize: int) -> np.ndarray:
    if not ksize or ksize <= 1:
        return gray
    if ksize % 2 == 0:
        raise ValueError(f"blur_ksize must be odd, got {ksize}")
    return cv2.GaussianBlur(gray, (ksize, ksize), 0)


def fixed_threshold(gray: np.ndarray, threshold: int, invert: bool = False) -> np.ndarray:
    fg = gray <= threshold if invert else gray > threshold
    return fg.astype(np.uint8) * 255


def adaptive_threshold(gray: np.ndarray, block_size: int = 11, c: float = 2) -> np.ndarray:
    return cv2.adaptiveThreshold(gray, 255, cv2.ADAPTIVE_THRESH_GAUSSIAN_C,
                                 cv2.THRESH_BINARY_INV, int(block_size), c)


def binarize(image: np.ndarray, pcfg: Dict) -> np.ndarray:
    """Grayscale -> blur -> threshold according to the `preproc` config block."""
    gray = blur(to_gray(image), int(pcfg.get("blur_ksize", 0) or 0))
    mode = (pcfg.get("mode", "adaptive") or "adaptive").lower()
    if mode == "fixed":
        return fixed_threshold(gray, int(pcfg.get("threshold", 128)), bool(pcfg.get("invert", False)))
    elif mode == "adaptive":
        return adaptive_threshold(gray, pcfg.get("adaptive_block_size", 11), pcfg.get("adaptive_c", 2))
    else:
        raise ValueError(f"Unknown preproc mode: {mode}")


def clean(mask: np.ndarray, ksize: int = 3) -> np.ndarray:
    """Close (fill pinholes) then open (drop specks) with a square kernel."""
    kernel = cv2.getStructuringElement(cv2.MORPH_RECT, (ksize, ksize))
    cleaned = cv2.morphologyEx(mask, cv2.MORPH_CLOSE, kernel)
    return cv2.morphologyEx(cleaned, cv2.MORPH_OPEN, kernel)
