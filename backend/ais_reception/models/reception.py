"""
Reception statistics data model.

Ingestion produces ObservationSamples, aggregation folds them into a
ReceptionAccumulator, and the statistics engines produce immutable
result structures for the report and map sinks:
- distances in nautical miles
- bearings in degrees clockwise from true north, [0, 360)
- dates as "YYYYMMDD" strings, hours 0..23
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import numpy as np
from numpy.typing import NDArray

from ais_reception.models.record import Station


DAY_START_HOUR = 8
DAY_END_HOUR = 20    # exclusive
SECTOR_SIZE_DEG = 15
DISPLAY_BEARINGS_LIMIT = 20


@dataclass(frozen=True)
class ObservationSample:
    """A reception that passed every ingestion filter."""

    distance_nm: float
    bearing_deg: float
    mmsi: Optional[int]
    date: str
    hour: int
    lat: float
    lon: float

    @property
    def is_day(self) -> bool:
        return DAY_START_HOUR <= self.hour < DAY_END_HOUR


@dataclass(frozen=True)
class PositionRecord:
    """Position entry handed to the map sink."""

    lat: float
    lon: float
    bearing: float
    distance: float
    mmsi: Optional[int]


@dataclass(frozen=True)
class RejectedSample:
    """Record dropped for exceeding the distance ceiling (kept in debug mode)."""

    distance: float
    bearing: float
    mmsi: Optional[int]
    lat: float
    lon: float
    timestamp: str
    raw_line: str


@dataclass
class DailyAggregate:
    """Per-date reception counters."""

    date: str
    day_count: int = 0       # 08:00-20:00
    night_count: int = 0     # 20:00-08:00
    total_count: int = 0
    max_distance: float = 0.0
    max_distance_mmsi: Optional[int] = None

    @property
    def formatted_date(self) -> str:
        return f"{self.date[0:4]}-{self.date[4:6]}-{self.date[6:8]}"


@dataclass
class ReceptionAccumulator:
    """
    Mutable accumulator for one ingestion pass.

    Global sequences are index-aligned and kept in processing order.
    """

    daily: dict[str, DailyAggregate] = field(default_factory=dict)

    distances: list[float] = field(default_factory=list)
    bearings: list[float] = field(default_factory=list)
    positions: list[PositionRecord] = field(default_factory=list)

    # Sector origin (0, 15, ..., 345) -> count
    sector_counts: dict[int, int] = field(default_factory=dict)

    excluded_count: int = 0
    malformed_count: int = 0
    rejected: list[RejectedSample] = field(default_factory=list)
    files: list[Path] = field(default_factory=list)

    @property
    def sample_count(self) -> int:
        return len(self.distances)

    def sorted_dates(self) -> list[str]:
        return sorted(self.daily)

    def totals(self) -> tuple[int, int, int]:
        """(total, day, night) over all dates."""
        total = sum(d.total_count for d in self.daily.values())
        day = sum(d.day_count for d in self.daily.values())
        night = sum(d.night_count for d in self.daily.values())
        return total, day, night

    def overall_max(self) -> tuple[float, Optional[int]]:
        """Farthest reception over all dates; earliest date wins ties."""
        best_distance = 0.0
        best_mmsi: Optional[int] = None
        for date in self.sorted_dates():
            agg = self.daily[date]
            if agg.max_distance > best_distance:
                best_distance = agg.max_distance
                best_mmsi = agg.max_distance_mmsi
        return best_distance, best_mmsi


@dataclass
class FilteredView:
    """Index-aligned subsequence of the global sequences within distance bounds."""

    distances: NDArray[np.float64]
    bearings: NDArray[np.float64]
    positions: list[PositionRecord]
    sector_counts: dict[int, int]

    min_distance: float = 0.0
    max_distance: float = 0.0
    source_count: int = 0

    @property
    def count(self) -> int:
        return len(self.distances)


@dataclass(frozen=True)
class DistanceDistribution:
    """10-bin equal-width histogram of distances."""

    bins: tuple[int, ...]
    bin_ranges: tuple[tuple[float, float], ...]
    min: float
    max: float
    count: int

    def percentages(self) -> list[float]:
        if self.count == 0:
            return [0.0 for _ in self.bins]
        return [count / self.count * 100 for count in self.bins]


@dataclass(frozen=True)
class PercentileWindow:
    """Bearing window holding a target fraction of receptions."""

    percentile: float
    min_bearing: float
    max_bearing: float
    beam_width: float
    center_bearing: float


@dataclass(frozen=True)
class MaxDistanceAnalysis:
    """Bearing spread of the farthest receptions."""

    count: int
    min_bearing: float
    max_bearing: float
    spread: float
    bearings: tuple[float, ...]     # ascending, full subset
    avg_distance: float

    @property
    def display_bearings(self) -> Optional[tuple[float, ...]]:
        """Bearing list for display, only when short enough to print."""
        if len(self.bearings) <= DISPLAY_BEARINGS_LIMIT:
            return self.bearings
        return None


@dataclass(frozen=True)
class BeamWidthStats:
    """
    Directional concentration of reception.

    concentration is the mean resultant length: 1 = all bearings identical,
    0 = uniform spread.
    """

    total_count: int
    mean_bearing: float
    concentration: float
    percentiles: dict[float, PercentileWindow]
    max_distance_analysis: MaxDistanceAnalysis

    def window(self, percentile: float) -> PercentileWindow:
        return self.percentiles[percentile]


@dataclass
class AnalysisResult:
    """Everything one run hands to the report and map sinks."""

    station: Station
    accumulator: ReceptionAccumulator
    filtered: FilteredView
    distribution: Optional[DistanceDistribution]
    beam_stats: Optional[BeamWidthStats]


@dataclass
class AnalysisSummary:
    """Lightweight summary of a run for listing."""

    station_lat: float
    station_lon: float
    file_count: int
    sample_count: int
    filtered_count: int
    excluded_count: int
    date_count: int

    @classmethod
    def from_result(cls, result: AnalysisResult) -> "AnalysisSummary":
        return cls(
            station_lat=result.station.lat,
            station_lon=result.station.lon,
            file_count=len(result.accumulator.files),
            sample_count=result.accumulator.sample_count,
            filtered_count=result.filtered.count,
            excluded_count=result.accumulator.excluded_count,
            date_count=len(result.accumulator.daily),
        )
