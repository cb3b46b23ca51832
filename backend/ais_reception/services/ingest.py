"""
Ingestion pipeline.

Turns decoded TelemetryRecords into ObservationSamples relative to the
station, applying the exclusion, coordinate and distance-ceiling filters,
and folds each file into its own accumulator.
"""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

from ais_reception.models.reception import ObservationSample, ReceptionAccumulator, RejectedSample
from ais_reception.models.record import AIS_TOPIC, ParseStats, Station, TelemetryRecord
from ais_reception.services.aggregator import add_sample
from ais_reception.services.record_parser import iter_records
from ais_reception.utils.geodesy import bearing_deg, distance_nm, is_valid_position


logger = logging.getLogger(__name__)


STATION_LAT = float(os.getenv("AIS_STATION_LAT", "51.50092998192453"))
STATION_LON = float(os.getenv("AIS_STATION_LON", "-0.20671121337722095"))
MAX_REASONABLE_DISTANCE_NM = float(os.getenv("AIS_MAX_DISTANCE_NM", "100"))  # sanity ceiling
RECORD_TOPIC = os.getenv("AIS_TOPIC", AIS_TOPIC)

TIMESTAMP_LENGTH = 14


def default_station() -> Station:
    return Station(lat=STATION_LAT, lon=STATION_LON)


@dataclass
class IngestOptions:
    """Per-run ingestion settings."""

    station: Station = field(default_factory=default_station)
    exclude: frozenset[int] = frozenset()
    debug: bool = False
    max_reasonable_distance: float = MAX_REASONABLE_DISTANCE_NM
    topic: str = RECORD_TOPIC


def _coordinate(value) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        return float(value)
    except OverflowError:
        # Integer literal beyond float range
        return None


def _valid_timestamp(timestamp: str) -> bool:
    return len(timestamp) >= TIMESTAMP_LENGTH and timestamp[:TIMESTAMP_LENGTH].isdigit()


def sample_from_record(
    record: TelemetryRecord,
    options: IngestOptions,
    acc: ReceptionAccumulator,
) -> Optional[ObservationSample]:
    """
    Apply the ingestion filters to one record.

    Filter side effects (excluded count, rejected samples) land in acc.
    A record without a usable timestamp is dropped before the position
    filters, so it never shows up among the rejected samples.

    Returns:
        ObservationSample if the record survives every filter, None otherwise
    """
    mmsi = record.mmsi

    if mmsi in options.exclude:
        acc.excluded_count += 1
        return None

    if not _valid_timestamp(record.timestamp):
        logger.debug(f"Unparseable timestamp {record.timestamp!r}, MMSI={mmsi}")
        return None

    lat = _coordinate(record.lat)
    lon = _coordinate(record.lon)
    if lat is None or lon is None:
        return None

    if not (math.isfinite(lat) and math.isfinite(lon)) or not is_valid_position(lat, lon):
        if options.debug:
            logger.warning(f"Invalid coordinates: lat={lat}, lon={lon}, MMSI={mmsi}")
        return None

    station = options.station
    distance = distance_nm(station.lat, station.lon, lat, lon)
    if distance > options.max_reasonable_distance:
        if options.debug:
            acc.rejected.append(RejectedSample(
                distance=distance,
                bearing=bearing_deg(station.lat, station.lon, lat, lon),
                mmsi=mmsi,
                lat=lat,
                lon=lon,
                timestamp=record.timestamp,
                raw_line=record.raw_line,
            ))
        return None

    return ObservationSample(
        distance_nm=distance,
        bearing_deg=bearing_deg(station.lat, station.lon, lat, lon),
        mmsi=mmsi,
        date=record.date,
        hour=record.hour,
        lat=lat,
        lon=lon,
    )


def ingest_records(
    records: Iterable[TelemetryRecord],
    options: IngestOptions,
    acc: Optional[ReceptionAccumulator] = None,
) -> ReceptionAccumulator:
    """Fold records into an accumulator (a new one unless given)."""
    if acc is None:
        acc = ReceptionAccumulator()

    for record in records:
        sample = sample_from_record(record, options, acc)
        if sample is not None:
            add_sample(acc, sample)

    return acc


def ingest_file(filepath: Path, options: IngestOptions) -> ReceptionAccumulator:
    """
    Ingest one log file into a fresh accumulator.

    The accumulator is only returned once the whole file has been read, so a
    failing file never contributes partial results.

    Raises:
        IngestError: if the file cannot be read or decompressed
    """
    stats = ParseStats()
    acc = ingest_records(iter_records(filepath, stats, topic=options.topic), options)
    acc.malformed_count += stats.malformed
    acc.files.append(filepath)

    if acc.excluded_count > 0:
        logger.info(f"Excluded {acc.excluded_count} messages from specified MMSIs in {filepath.name}")
    logger.debug(
        f"Ingested {filepath.name}: {stats.lines} lines, {acc.sample_count} samples, "
        f"{stats.malformed} malformed"
    )
    return acc
