# pipeline/decisions.py
from __future__ import annotations
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Union

import cv2

from utils.vis_regions import show_frame_windows

"""
Where the per-frame labeling decision comes from.

The driver pauses after each annotated frame and asks a decision source what
to do: skip, label every region of the frame with some text, or exit. Sources
are plain callables `decide(FrameResult) -> Decision`:

    skip_all              never label (headless runs)
    ScriptedDecisions     fixed sequence, e.g. read from a text file
    InteractiveDecisions  OpenCV windows + key press + typed label

Script files hold one decision per line:

    skip
    label circle
    exit
"""

SKIP = "skip"
LABEL = "label"
EXIT = "exit"


@dataclass(frozen=True)
class Decision:
    action: str = SKIP
    label: Optional[str] = None

    @classmethod
    def skip(cls) -> "Decision":
        return cls(SKIP)

    @classmethod
    def exit(cls) -> "Decision":
        return cls(EXIT)

    @classmethod
    def label_as(cls, text: str) -> "Decision":
        return cls(LABEL, text)


def skip_all(result) -> Decision:
    return Decision.skip()


def parse_decision(line: str) -> Optional[Decision]:
    """One script line -> Decision; None for blank lines and comments."""
    s = line.strip()
    if not s or s.startswith("#"):
        return None
    verb, _, rest = s.partition(" ")
    verb = verb.lower()
    if verb == SKIP:
        return Decision.skip()
    if verb == EXIT:
        return Decision.exit()
    if verb == LABEL:
        if not rest.strip():
            raise ValueError(f"'label' needs a label text: {line!r}")
        return Decision.label_as(rest.strip())
    raise ValueError(f"Unknown decision {verb!r} in line {line!r}")


class ScriptedDecisions:
    """Hand out decisions in order; skip once the script runs out."""

    def __init__(self, decisions: Iterable[Decision]):
        self._queue: List[Decision] = list(decisions)
        self._pos = 0

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> "ScriptedDecisions":
        parsed = (parse_decision(l) for l in lines)
        return cls(d for d in parsed if d is not None)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "ScriptedDecisions":
        with open(path, "r", encoding="utf-8") as f:
            return cls.from_lines(f.readlines())

    @property
    def remaining(self) -> int:
        return len(self._queue) - self._pos

    def __call__(self, result) -> Decision:
        if self._pos >= len(self._queue):
            return Decision.skip()
        d = self._queue[self._pos]
        self._pos += 1
        return d


class InteractiveDecisions:
    """
    Show the frame's windows and block on a key press:
    'n'/'N' -> prompt for a label on stdin, ESC -> exit, anything else -> skip.
    """

    def __init__(self, key_label: str = "n", key_exit: int = 27, prompt=input):
        self.key_label = key_label.lower()
        self.key_exit = key_exit
        self.prompt = prompt

    def __call__(self, result) -> Decision:
        show_frame_windows(result.frame, result.annotated, result.thresholded, result.cleaned)
        print("Press 'n' to label the current object, or ESC to exit.")
        key = cv2.waitKey(0) & 0xFF
        if key == self.key_exit:
            return Decision.exit()
        if chr(key).lower() == self.key_label:
            try:
                text = self.prompt("Enter label for the current object: ").strip()
            except EOFError:
                print("[decisions] stdin closed, stopping.")
                return Decision.exit()
            return Decision.label_as(text) if text else Decision.skip()
        return Decision.skip()

    def close(self) -> None:
        cv2.destroyAllWindows()
