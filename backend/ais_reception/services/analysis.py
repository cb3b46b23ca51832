"""
Run orchestration: ingest every log under a path, then compute statistics.
"""

import logging
from pathlib import Path
from typing import Optional

from ais_reception.models.reception import AnalysisResult, ReceptionAccumulator
from ais_reception.models.record import Station
from ais_reception.services.aggregator import merge
from ais_reception.services.beam_width import calculate_beam_width
from ais_reception.services.distribution import calculate_distribution
from ais_reception.services.ingest import IngestOptions, ingest_file
from ais_reception.services.post_filter import apply_distance_filter
from ais_reception.services.repository import LogRepository


logger = logging.getLogger(__name__)


def ingest_path(path: Path, options: Optional[IngestOptions] = None) -> ReceptionAccumulator:
    """
    Ingest a log file or every log file under a directory.

    Files are folded one at a time; each is merged only after it has been
    read completely.

    Raises:
        FileNotFoundError: if the path does not exist
        IngestError: if any file cannot be read or decompressed
    """
    if options is None:
        options = IngestOptions()

    repo = LogRepository(Path(path))
    acc = ReceptionAccumulator()

    for filepath in repo.files:
        logger.info(f"Processing {repo.relative_name(filepath)}...")
        merge(acc, ingest_file(filepath, options))

    return acc


def analyze(
    acc: ReceptionAccumulator,
    station: Station,
    min_distance: float = 0.0,
    max_distance: float = 0.0,
) -> AnalysisResult:
    """Compute the filtered view and statistics for a completed accumulator."""
    filtered = apply_distance_filter(acc, min_distance, max_distance)
    return AnalysisResult(
        station=station,
        accumulator=acc,
        filtered=filtered,
        distribution=calculate_distribution(filtered.distances),
        beam_stats=calculate_beam_width(filtered.bearings, filtered.distances),
    )


def run_analysis(
    path: Path,
    options: Optional[IngestOptions] = None,
    min_distance: float = 0.0,
    max_distance: float = 0.0,
) -> AnalysisResult:
    """Ingest and analyze in one pass."""
    if options is None:
        options = IngestOptions()
    acc = ingest_path(path, options)
    return analyze(acc, options.station, min_distance, max_distance)
