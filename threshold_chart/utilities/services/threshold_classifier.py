"""
Threshold classification for chart point colors.

A point exceeds the threshold only when it is strictly greater; a value equal
to the threshold is within it.
"""

from typing import List, Sequence

import numpy as np


def classify(values: Sequence[float], threshold: float) -> List[bool]:
    if len(values) == 0:
        return []
    exceeds = np.asarray(values, dtype=np.float64) > threshold
    return [bool(flag) for flag in exceeds]


def point_colors(values: Sequence[float], threshold: float,
                 exceeded_color: str = 'red', within_color: str = 'green') -> List[str]:
    return [exceeded_color if flag else within_color for flag in classify(values, threshold)]
