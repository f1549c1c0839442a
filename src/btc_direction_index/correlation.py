from __future__ import annotations

import math
from collections.abc import Sequence


def pearson_correlation(xs: Sequence[float], ys: Sequence[float]) -> float:
    n = len(xs)
    if n != len(ys) or n < 2:
        return 0.0

    mean_x = sum(xs) / n
    mean_y = sum(ys) / n

    numerator = 0.0
    var_x = 0.0
    var_y = 0.0
    for x, y in zip(xs, ys):
        dx = x - mean_x
        dy = y - mean_y
        numerator += dx * dy
        var_x += dx * dx
        var_y += dy * dy

    denominator = math.sqrt(var_x * var_y)
    if denominator == 0:
        return 0.0
    return numerator / denominator
