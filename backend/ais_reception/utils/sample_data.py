"""
Sample data generator for testing.

Generates realistic-looking AIS receiver logs (JSON lines, optionally
xz-compressed) around a station, with reception concentrated in a beam.
"""

import json
import lzma
from datetime import datetime, timedelta
from pathlib import Path
from typing import Optional

import numpy as np

from ais_reception.models.record import AIS_TOPIC, Station
from ais_reception.utils.geodesy import KM_PER_NM, destination_point


def make_record(
    mmsi: int,
    lat: float,
    lon: float,
    timestamp: str,
    topic: str = AIS_TOPIC,
    **payload_extra,
) -> dict:
    """One log object as the receiver writes it."""
    payload = {"mmsi": mmsi, "lat": lat, "lon": lon}
    payload.update(payload_extra)
    return {"topic": topic, "timestamp": timestamp, "payload": payload}


def position_at(station: Station, distance_nm: float, bearing: float) -> tuple[float, float]:
    """Position at a distance and bearing from the station."""
    return destination_point(station.lat, station.lon, distance_nm * KM_PER_NM * 1000.0, bearing)


def write_log(output_path: Path, records: list, compress: Optional[bool] = None) -> Path:
    """
    Write records as JSON lines.

    Entries may be dicts (serialized) or strings (written verbatim, for
    malformed-line fixtures). Compressed with xz when the name ends in .xz
    unless `compress` says otherwise.
    """
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if compress is None:
        compress = output_path.suffix == ".xz"

    lines = [r if isinstance(r, str) else json.dumps(r) for r in records]
    data = ("\n".join(lines) + "\n").encode("utf-8")

    if compress:
        with lzma.open(output_path, "wb") as f:
            f.write(data)
    else:
        output_path.write_bytes(data)
    return output_path


def generate_beam_log(
    output_path: Path,
    station: Station,
    n_records: int = 500,
    center_bearing: float = 200.0,
    beam_sigma_deg: float = 15.0,
    max_distance_nm: float = 40.0,
    start: datetime = datetime(2025, 6, 1, 0, 0, 0),
    duration_hours: float = 48.0,
    n_vessels: int = 25,
    far_outliers: int = 0,
    seed: Optional[int] = 0,
) -> Path:
    """
    Generate a receiver log with bearings clustered around a beam.

    Bearings are normal around `center_bearing`, distances uniform up to
    `max_distance_nm`, timestamps uniform over the duration. `far_outliers`
    adds positions beyond the 100 nm sanity ceiling.
    """
    rng = np.random.default_rng(seed)

    bearings = (rng.normal(center_bearing, beam_sigma_deg, n_records)) % 360
    distances = rng.uniform(0.5, max_distance_nm, n_records)
    offsets = np.sort(rng.uniform(0, duration_hours * 3600, n_records))
    mmsis = rng.integers(0, n_vessels, n_records) + 235000000

    records = []
    for bearing, distance, offset, mmsi in zip(bearings, distances, offsets, mmsis):
        lat, lon = position_at(station, float(distance), float(bearing))
        ts = (start + timedelta(seconds=float(offset))).strftime("%Y%m%d%H%M%S")
        records.append(make_record(int(mmsi), round(lat, 6), round(lon, 6), ts))

    for i in range(far_outliers):
        lat, lon = position_at(station, 150.0 + 10 * i, float(rng.uniform(0, 360)))
        ts = start.strftime("%Y%m%d%H%M%S")
        records.append(make_record(999000000 + i, round(lat, 6), round(lon, 6), ts))

    return write_log(output_path, records)
