"""
Line-delimited JSON log adapters.

Reads AIS receiver logs (one JSON object per line, plain or xz-compressed)
into TelemetryRecords. Filtering happens in ais_reception.services.ingest.
"""

import json
import logging
import lzma
from pathlib import Path
from typing import BinaryIO, Iterator, Optional, Protocol

from ais_reception.models.record import AIS_TOPIC, ParseStats, TelemetryRecord


logger = logging.getLogger(__name__)


class IngestError(Exception):
    """A log file could not be read to the end."""

    def __init__(self, filepath: Path, reason: str):
        self.filepath = filepath
        self.reason = reason
        super().__init__(f"Failed to read {filepath}: {reason}")


class RecordAdapter(Protocol):
    """Adapter interface for log file formats."""

    name: str

    def can_parse(self, filepath: Path) -> bool:
        ...

    def open(self, filepath: Path) -> BinaryIO:
        ...


class JsonLinesAdapter:
    """Plain UTF-8 JSON lines (*.json)."""

    name = "json"

    def can_parse(self, filepath: Path) -> bool:
        return filepath.name.endswith(".json")

    def open(self, filepath: Path) -> BinaryIO:
        return open(filepath, "rb")


class XzJsonLinesAdapter:
    """xz-compressed JSON lines (*.json.xz), decompressed while streaming."""

    name = "json.xz"

    def can_parse(self, filepath: Path) -> bool:
        return filepath.name.endswith(".json.xz")

    def open(self, filepath: Path) -> BinaryIO:
        return lzma.open(filepath, "rb")


ADAPTERS: list[RecordAdapter] = [
    XzJsonLinesAdapter(),
    JsonLinesAdapter(),
]


def is_log_file(filepath: Path) -> bool:
    """Whether any adapter accepts this file name."""
    return any(adapter.can_parse(filepath) for adapter in ADAPTERS)


def _select_adapter(filepath: Path) -> RecordAdapter:
    for adapter in ADAPTERS:
        if adapter.can_parse(filepath):
            return adapter
    # Explicitly named files with another suffix are read as plain JSON lines
    return ADAPTERS[-1]


def _read_lines(filepath: Path, adapter: RecordAdapter) -> Iterator[bytes]:
    """Yield raw lines, turning read and decompression failures into IngestError."""
    try:
        with adapter.open(filepath) as stream:
            for line in stream:
                yield line
    except (OSError, lzma.LZMAError, EOFError) as e:
        raise IngestError(filepath, str(e) or type(e).__name__) from e


def iter_records(
    filepath: Path,
    stats: Optional[ParseStats] = None,
    topic: str = AIS_TOPIC,
) -> Iterator[TelemetryRecord]:
    """
    Decode a log file into TelemetryRecords.

    Lines that are not valid JSON are logged and skipped. Objects without the
    expected topic or a payload are skipped silently.

    Args:
        filepath: Log file (*.json or *.json.xz)
        stats: Optional counters updated while reading
        topic: Topic a record must carry to be considered

    Raises:
        IngestError: if the file cannot be opened or decompressed
    """
    if stats is None:
        stats = ParseStats()

    adapter = _select_adapter(filepath)

    for line_number, raw in enumerate(_read_lines(filepath, adapter), start=1):
        stats.lines += 1
        try:
            line = raw.decode("utf-8").strip()
        except UnicodeDecodeError as e:
            logger.warning(f"Error parsing line {line_number} of {filepath.name}: {e}")
            stats.malformed += 1
            continue

        if not line:
            continue

        try:
            data = json.loads(line)
        except json.JSONDecodeError as e:
            logger.warning(f"Error parsing line {line_number} of {filepath.name}: {e}")
            stats.malformed += 1
            continue

        record = TelemetryRecord.from_json(
            data,
            raw_line=line,
            source_file=filepath,
            line_number=line_number,
            topic=topic,
        )
        if record is None:
            stats.skipped += 1
            continue

        yield record
