"""
Raw telemetry record model (source-format, unfiltered).

Adapters decode log lines into this structure before ingestion filters run.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional


AIS_TOPIC = "ais/data"


@dataclass
class TelemetryRecord:
    """A decoded log line."""

    topic: str
    timestamp: str                     # "YYYYMMDDHHMMSS"
    payload: dict[str, Any]

    raw_line: str = ""
    source_file: Optional[Path] = None
    line_number: int = 0

    @property
    def mmsi(self) -> Optional[int]:
        """Integer MMSI, None when absent or of any other type."""
        value = self.payload.get("mmsi")
        if isinstance(value, bool) or not isinstance(value, int):
            return None
        return value

    @property
    def lat(self) -> Optional[float]:
        return self.payload.get("lat")

    @property
    def lon(self) -> Optional[float]:
        return self.payload.get("lon")

    @property
    def date(self) -> str:
        return self.timestamp[0:8]

    @property
    def hour(self) -> int:
        return int(self.timestamp[8:10])

    @classmethod
    def from_json(
        cls,
        data: Any,
        raw_line: str = "",
        source_file: Optional[Path] = None,
        line_number: int = 0,
        topic: str = AIS_TOPIC,
    ) -> Optional["TelemetryRecord"]:
        """
        Build a record from a decoded JSON value.

        Returns None unless the value is an object with the expected topic
        and a payload object.
        """
        if not isinstance(data, dict):
            return None
        if data.get("topic") != topic:
            return None
        payload = data.get("payload")
        if not isinstance(payload, dict):
            return None
        return cls(
            topic=data["topic"],
            timestamp=str(data.get("timestamp", "")),
            payload=payload,
            raw_line=raw_line,
            source_file=source_file,
            line_number=line_number,
        )


@dataclass
class Station:
    """Fixed receiving station all distances and bearings are measured from."""

    lat: float
    lon: float
    name: str = "Station"


@dataclass
class ParseStats:
    """Per-file decode counters."""

    lines: int = 0
    malformed: int = 0
    skipped: int = 0
