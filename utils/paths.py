# utils/paths.py
import os
from pathlib import Path
from typing import Iterator, Tuple, Union

DEFAULT_FRAME_PATTERN = "img{index}p3.png"


def frame_name(index: int, pattern: str = DEFAULT_FRAME_PATTERN) -> str:
    return pattern.format(index=index)


def iter_frame_paths(input_dir: Union[str, Path], pattern: str = DEFAULT_FRAME_PATTERN,
                     start: int = 1) -> Iterator[Tuple[int, Path]]:
    """
    Yield (index, path) for start, start+1, ... and stop at the first index
    whose file does not exist. The gap is the end of the sequence, not an error.
    """
    root = Path(input_dir)
    i = start
    while True:
        p = root / frame_name(i, pattern)
        if not p.exists():
            return
        yield i, p
        i += 1


def count_frames(input_dir: Union[str, Path], pattern: str = DEFAULT_FRAME_PATTERN) -> int:
    return sum(1 for _ in iter_frame_paths(input_dir, pattern))


def ensure_dir(out_dir: Union[str, Path]) -> Path:
    """Create out_dir (with parents) if missing. Raises OSError if it can't."""
    out = Path(out_dir)
    if not out.is_dir():
        print(f"INFO: Output directory not found at '{out}'. Creating it now.")
        os.makedirs(out, exist_ok=True)
    return out
