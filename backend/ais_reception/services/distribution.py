"""
Distance distribution engine.

10-bin equal-width histogram over the filtered distances.
"""

from typing import Optional

import numpy as np

from ais_reception.models.reception import DistanceDistribution


N_BINS = 10


def calculate_distribution(distances) -> Optional[DistanceDistribution]:
    """
    Histogram distances into 10 equal-width bins between min and max.

    Bin index is floor((d - min) / bin_size) clamped to [0, 9], so the
    maximum lands in the last bin. When every distance is equal the bin size
    is zero and all of them are counted in bin 9.

    Args:
        distances: Filtered distances in nm

    Returns:
        DistanceDistribution, or None for an empty input
    """
    values = np.sort(np.asarray(distances, dtype=np.float64))
    if len(values) == 0:
        return None

    d_min = float(values[0])
    d_max = float(values[-1])
    bin_size = (d_max - d_min) / N_BINS

    if bin_size > 0:
        indices = np.floor((values - d_min) / bin_size).astype(np.int64)
        indices = np.clip(indices, 0, N_BINS - 1)
    else:
        indices = np.full(len(values), N_BINS - 1, dtype=np.int64)

    bins = np.bincount(indices, minlength=N_BINS)
    bin_ranges = tuple(
        (d_min + i * bin_size, d_min + (i + 1) * bin_size)
        for i in range(N_BINS)
    )

    return DistanceDistribution(
        bins=tuple(int(c) for c in bins),
        bin_ranges=bin_ranges,
        min=d_min,
        max=d_max,
        count=len(values),
    )
