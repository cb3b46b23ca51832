"""
Post-filter stage.

Selects the receptions within optional distance bounds from a completed
accumulator. Distances and bearings are never recomputed here.
"""

import logging
import math

import numpy as np

from ais_reception.models.reception import FilteredView, ReceptionAccumulator
from ais_reception.services.aggregator import count_sectors


logger = logging.getLogger(__name__)


def _check_bound(name: str, value: float) -> float:
    if value is None:
        return 0.0
    value = float(value)
    if math.isnan(value):
        raise ValueError(f"{name} must be a number, got NaN")
    return value


def distance_mask(distances, min_distance: float = 0.0, max_distance: float = 0.0) -> np.ndarray:
    """
    Boolean selection of distances within inclusive bounds.

    A bound <= 0 is disabled.
    """
    distances = np.asarray(distances, dtype=np.float64)
    mask = np.ones(len(distances), dtype=np.bool_)
    if min_distance > 0:
        mask &= distances >= min_distance
    if max_distance > 0:
        mask &= distances <= max_distance
    return mask


def apply_distance_filter(
    acc: ReceptionAccumulator,
    min_distance: float = 0.0,
    max_distance: float = 0.0,
) -> FilteredView:
    """
    Build the filtered view used by every downstream statistic.

    Args:
        acc: Completed accumulator
        min_distance: Inclusive lower bound in nm (disabled when <= 0)
        max_distance: Inclusive upper bound in nm (disabled when <= 0)

    Returns:
        FilteredView with distances, bearings and positions selected at the
        same indices, in original order
    """
    min_distance = _check_bound("min_distance", min_distance)
    max_distance = _check_bound("max_distance", max_distance)

    distances = np.asarray(acc.distances, dtype=np.float64)
    bearings = np.asarray(acc.bearings, dtype=np.float64)

    mask = distance_mask(distances, min_distance, max_distance)
    indices = np.flatnonzero(mask)

    if min_distance > 0:
        logger.info(f"Applying minimum distance filter: {min_distance} nm")
    if max_distance > 0:
        logger.info(f"Applying maximum distance filter: {max_distance} nm")

    filtered_bearings = bearings[indices]

    # Sector counts follow the filter only when a lower bound is set
    if min_distance > 0:
        sector_counts = count_sectors(filtered_bearings)
    else:
        sector_counts = dict(acc.sector_counts)

    view = FilteredView(
        distances=distances[indices],
        bearings=filtered_bearings,
        positions=[acc.positions[i] for i in indices],
        sector_counts=sector_counts,
        min_distance=min_distance,
        max_distance=max_distance,
        source_count=len(distances),
    )
    logger.info(f"Filtered from {view.source_count} to {view.count} positions")
    return view
