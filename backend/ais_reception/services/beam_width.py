"""
Circular statistics / beam-width engine.

Describes how directional the station's reception is:
- circular mean bearing and concentration (mean resultant length)
- bearing windows holding 68/95/99% of receptions, corrected for windows
  that wrap through north
- bearing spread of the top 5% farthest receptions
"""

import math
from typing import Optional, Sequence

import numpy as np
from numpy.typing import NDArray

from ais_reception.models.reception import BeamWidthStats, MaxDistanceAnalysis, PercentileWindow


PERCENTILES = (0.68, 0.95, 0.99)   # ~1, 2 and 3 sigma
ROTATION_STEP_DEG = 10
WRAP_THRESHOLD_DEG = 180.0
TOP_DISTANCE_FRACTION = 0.05


def circular_mean(bearings: Sequence[float]) -> tuple[float, float]:
    """
    Circular mean bearing and concentration.

    Each bearing is a unit vector (cos, sin); the mean vector's angle is the
    mean bearing and its length the concentration.

    Returns:
        Tuple of (mean_bearing in [0, 360), concentration in [0, 1])
    """
    radians = np.radians(np.asarray(bearings, dtype=np.float64))
    mean_x = float(np.mean(np.cos(radians)))
    mean_y = float(np.mean(np.sin(radians)))

    mean_bearing = (math.degrees(math.atan2(mean_y, mean_x)) + 360.0) % 360.0
    concentration = math.sqrt(mean_x * mean_x + mean_y * mean_y)
    return mean_bearing, min(concentration, 1.0)


def window_indices(percentile: float, total_count: int) -> tuple[int, int]:
    """Inclusive [start, end] indices of the central window over a linear sort."""
    start = math.floor(((1 - percentile) / 2) * total_count)
    end = math.ceil(((1 + percentile) / 2) * total_count) - 1
    return start, end


def arc_width(min_bearing: float, max_bearing: float) -> tuple[float, float]:
    """
    Width and center of the arc running clockwise from min to max.

    Returns:
        Tuple of (beam_width, center_bearing)
    """
    if max_bearing > min_bearing:
        return max_bearing - min_bearing, (min_bearing + max_bearing) / 2
    return (
        360.0 - min_bearing + max_bearing,
        ((min_bearing + max_bearing + 360.0) / 2) % 360.0,
    )


def _rotated_window(
    sorted_bearings: NDArray[np.float64],
    start: int,
    end: int,
) -> tuple[float, float]:
    """
    Search 10 degree rotations for the narrowest fixed-position window.

    A fixed-resolution approximation of the minimal covering arc. The winning
    bounds are rotated back into the original bearing space.
    """
    best_range = float(sorted_bearings[end] - sorted_bearings[start])
    best_min = float(sorted_bearings[start])
    best_max = float(sorted_bearings[end])

    for offset in range(0, 360, ROTATION_STEP_DEG):
        adjusted = np.sort((sorted_bearings + offset) % 360.0)
        adj_min = float(adjusted[start])
        adj_max = float(adjusted[end])
        span = adj_max - adj_min
        if span < best_range:
            best_range = span
            best_min = (adj_min - offset + 360.0) % 360.0
            best_max = (adj_max - offset + 360.0) % 360.0

    return best_min, best_max


def percentile_window(sorted_bearings: NDArray[np.float64], percentile: float) -> PercentileWindow:
    """
    Bearing window holding `percentile` of the receptions.

    Args:
        sorted_bearings: Bearings sorted ascending (non-empty)
        percentile: Target fraction, e.g. 0.68
    """
    start, end = window_indices(percentile, len(sorted_bearings))
    min_bearing = float(sorted_bearings[start])
    max_bearing = float(sorted_bearings[end])

    # Wider than a half circle: the linear sort may be cutting through north
    if max_bearing - min_bearing > WRAP_THRESHOLD_DEG:
        min_bearing, max_bearing = _rotated_window(sorted_bearings, start, end)

    beam_width, center_bearing = arc_width(min_bearing, max_bearing)
    return PercentileWindow(
        percentile=percentile,
        min_bearing=min_bearing,
        max_bearing=max_bearing,
        beam_width=beam_width,
        center_bearing=center_bearing,
    )


def max_distance_analysis(bearings: Sequence[float], distances: Sequence[float]) -> MaxDistanceAnalysis:
    """
    Bearing spread of the top 5% receptions by distance.

    The spread is max - min over the subset, without wraparound correction.
    """
    total_count = len(bearings)
    pairs = sorted(zip(bearings, distances), key=lambda pair: pair[1], reverse=True)
    top_count = max(1, math.ceil(total_count * TOP_DISTANCE_FRACTION))
    top = pairs[:top_count]

    top_bearings = sorted(float(b) for b, _ in top)
    avg_distance = sum(float(d) for _, d in top) / top_count

    return MaxDistanceAnalysis(
        count=top_count,
        min_bearing=top_bearings[0],
        max_bearing=top_bearings[-1],
        spread=top_bearings[-1] - top_bearings[0],
        bearings=tuple(top_bearings),
        avg_distance=avg_distance,
    )


def calculate_beam_width(bearings: Sequence[float], distances: Sequence[float]) -> Optional[BeamWidthStats]:
    """
    Beam-width statistics for a filtered set of receptions.

    Args:
        bearings: Filtered bearings in degrees
        distances: Filtered distances in nm, index-aligned with bearings

    Returns:
        BeamWidthStats, or None for an empty input
    """
    bearings = np.asarray(bearings, dtype=np.float64)
    distances = np.asarray(distances, dtype=np.float64)
    if len(bearings) == 0:
        return None
    if len(distances) != len(bearings):
        raise ValueError(
            f"bearings and distances must be index-aligned ({len(bearings)} != {len(distances)})"
        )

    mean_bearing, concentration = circular_mean(bearings)

    sorted_bearings = np.sort(bearings)
    percentiles = {p: percentile_window(sorted_bearings, p) for p in PERCENTILES}

    return BeamWidthStats(
        total_count=len(bearings),
        mean_bearing=mean_bearing,
        concentration=concentration,
        percentiles=percentiles,
        max_distance_analysis=max_distance_analysis(bearings.tolist(), distances.tolist()),
    )
