from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from .types import SampleStats


def compute_stats(samples: Sequence[float]) -> SampleStats:
    if len(samples) == 0:
        # Sentinel for "no history": keeps every downstream z-score finite.
        return SampleStats(mean=0.0, std_dev=1.0)

    arr = np.asarray(samples, dtype=float)
    if np.ptp(arr) == 0:
        # Constant sample, whatever the float error in np.mean/np.std.
        return SampleStats(mean=float(arr[0]), std_dev=1.0)

    mean = float(np.mean(arr))
    std_dev = float(np.std(arr))  # population (ddof=0)
    if std_dev == 0.0:
        std_dev = 1.0
    return SampleStats(mean=mean, std_dev=std_dev)


def z_score(value: float, mean: float, std_dev: float) -> float:
    if std_dev == 0:
        return 0.0
    return (value - mean) / std_dev
