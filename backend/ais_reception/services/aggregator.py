"""
Aggregation engine.

Folds ObservationSamples into per-date counters and the global
distance/bearing/position sequences, and merges per-file accumulators.
"""

import math

from ais_reception.models.reception import (
    SECTOR_SIZE_DEG,
    DailyAggregate,
    ObservationSample,
    PositionRecord,
    ReceptionAccumulator,
)


def sector_of(bearing: float) -> int:
    """Origin of the 15 degree sector containing a bearing."""
    return int(math.floor(bearing / SECTOR_SIZE_DEG) * SECTOR_SIZE_DEG)


def count_sectors(bearings) -> dict[int, int]:
    """Sector origin -> count for a bearing sequence."""
    counts: dict[int, int] = {}
    for bearing in bearings:
        sector = sector_of(bearing)
        counts[sector] = counts.get(sector, 0) + 1
    return counts


def add_sample(acc: ReceptionAccumulator, sample: ObservationSample) -> ReceptionAccumulator:
    """Fold one sample into the accumulator."""
    daily = acc.daily.get(sample.date)
    if daily is None:
        daily = acc.daily[sample.date] = DailyAggregate(date=sample.date)

    daily.total_count += 1
    if sample.is_day:
        daily.day_count += 1
    else:
        daily.night_count += 1

    # Strictly greater: the first reception at a given distance keeps the record
    if sample.distance_nm > daily.max_distance:
        daily.max_distance = sample.distance_nm
        daily.max_distance_mmsi = sample.mmsi

    acc.distances.append(sample.distance_nm)
    acc.bearings.append(sample.bearing_deg)
    acc.positions.append(PositionRecord(
        lat=sample.lat,
        lon=sample.lon,
        bearing=sample.bearing_deg,
        distance=sample.distance_nm,
        mmsi=sample.mmsi,
    ))

    sector = sector_of(sample.bearing_deg)
    acc.sector_counts[sector] = acc.sector_counts.get(sector, 0) + 1

    return acc


def merge_daily(into: DailyAggregate, other: DailyAggregate) -> DailyAggregate:
    """
    Combine two aggregates for the same date.

    Counts add. The max distance only moves on a strictly greater value, so
    under exact ties the aggregate merged first keeps its MMSI.
    """
    into.day_count += other.day_count
    into.night_count += other.night_count
    into.total_count += other.total_count
    if other.max_distance > into.max_distance:
        into.max_distance = other.max_distance
        into.max_distance_mmsi = other.max_distance_mmsi
    return into


def merge(into: ReceptionAccumulator, other: ReceptionAccumulator) -> ReceptionAccumulator:
    """Merge another accumulator into `into`, appending its sequences after ours."""
    for date, daily in other.daily.items():
        existing = into.daily.get(date)
        if existing is None:
            into.daily[date] = DailyAggregate(
                date=daily.date,
                day_count=daily.day_count,
                night_count=daily.night_count,
                total_count=daily.total_count,
                max_distance=daily.max_distance,
                max_distance_mmsi=daily.max_distance_mmsi,
            )
        else:
            merge_daily(existing, daily)

    into.distances.extend(other.distances)
    into.bearings.extend(other.bearings)
    into.positions.extend(other.positions)

    for sector, count in other.sector_counts.items():
        into.sector_counts[sector] = into.sector_counts.get(sector, 0) + count

    into.excluded_count += other.excluded_count
    into.malformed_count += other.malformed_count
    into.rejected.extend(other.rejected)
    into.files.extend(other.files)

    return into
