"""
Plain-text report renderer.

Formats an AnalysisResult as the tables printed by the command line tool.
"""

import pandas as pd

from ais_reception.models.reception import AnalysisResult, BeamWidthStats, DistanceDistribution
from ais_reception.utils.geodesy import compass_direction


DEBUG_TOP_N = 10
RAW_LINE_PREVIEW = 200


def _heading(title: str) -> list[str]:
    return ["", title, "=" * len(title)]


def daily_table(result: AnalysisResult) -> pd.DataFrame:
    """One row per date, oldest first."""
    acc = result.accumulator
    rows = []
    for date in acc.sorted_dates():
        agg = acc.daily[date]
        rows.append({
            "Date": agg.formatted_date,
            "Day (8am-8pm)": agg.day_count,
            "Night (8pm-8am)": agg.night_count,
            "Total": agg.total_count,
            "Max Distance (nm)": f"{agg.max_distance:.2f}",
            "MMSI": agg.max_distance_mmsi if agg.max_distance_mmsi is not None else "N/A",
        })
    return pd.DataFrame(rows)


def distribution_table(distribution: DistanceDistribution) -> pd.DataFrame:
    rows = []
    for (low, high), count, pct in zip(
        distribution.bin_ranges, distribution.bins, distribution.percentages()
    ):
        rows.append({
            "Range (nm)": f"{low:.2f} - {high:.2f}",
            "Count": count,
            "Percentage": f"{pct:.1f}%",
        })
    return pd.DataFrame(rows)


def sector_table(sector_counts: dict[int, int]) -> pd.DataFrame:
    """Non-empty 15 degree sectors in compass order."""
    sectors = sorted(s for s, c in sector_counts.items() if c > 0)
    total = sum(sector_counts[s] for s in sectors)
    rows = []
    for sector in sectors:
        count = sector_counts[sector]
        rows.append({
            "Bearing Range": f"{sector:3d}° - {sector + 15:3d}°",
            "Direction": compass_direction(sector + 7.5),
            "Count": count,
            "Percentage": f"{count / total * 100:.1f}%",
        })
    return pd.DataFrame(rows)


def _beam_lines(beam: BeamWidthStats, min_distance: float) -> list[str]:
    lines = _heading("Beam Width Analysis:")
    if min_distance > 0:
        lines.append(f"*** Analyzing only signals > {min_distance:g} nm ***")
    lines.append(f"Mean bearing: {beam.mean_bearing:.1f}° ({compass_direction(beam.mean_bearing)})")
    lines.append(
        f"Concentration factor: {beam.concentration:.3f} (0=omnidirectional, 1=unidirectional)"
    )
    lines.append("")
    lines.append("Statistical Beam Width:")
    for sigma, (percentile, window) in enumerate(sorted(beam.percentiles.items()), start=1):
        lines.append(
            f"{percentile * 100:.0f}% of signals (±{sigma}σ): {window.beam_width:.1f}° beam width"
        )
        lines.append(f"  Range: {window.min_bearing:.1f}° - {window.max_bearing:.1f}°")
        lines.append(f"  Center: {window.center_bearing:.1f}°")

    top = beam.max_distance_analysis
    lines.append("")
    lines.append("Max Distance Analysis:")
    lines.append(f"Top 5% furthest signals ({top.count} messages):")
    lines.append(f"  Average distance: {top.avg_distance:.2f} nm")
    lines.append(f"  Bearing spread: {top.spread:.1f}°")
    lines.append(f"  Bearing range: {top.min_bearing:.1f}° - {top.max_bearing:.1f}°")
    if top.display_bearings is not None:
        listed = ", ".join(f"{b:.1f}°" for b in top.display_bearings)
        lines.append(f"  Individual bearings: {listed}")
    return lines


def _debug_lines(result: AnalysisResult, max_reasonable_distance: float) -> list[str]:
    rejected = sorted(result.accumulator.rejected, key=lambda r: r.distance, reverse=True)
    lines = ["", "=== DEBUG: Filtered Messages ==="]
    lines.append(
        f"Filtered {len(rejected)} messages with distance > {max_reasonable_distance:g} nm"
    )
    for i, sample in enumerate(rejected[:DEBUG_TOP_N], start=1):
        lines.append("")
        lines.append(f"--- Message {i} ---")
        lines.append(f"Distance: {sample.distance:.2f} nm")
        lines.append(f"Bearing: {sample.bearing:.1f}°")
        lines.append(f"MMSI: {sample.mmsi}")
        lines.append(f"Position: {sample.lat}, {sample.lon}")
        lines.append(f"Timestamp: {sample.timestamp}")
        lines.append(f"Raw message: {sample.raw_line[:RAW_LINE_PREVIEW]}...")
    lines.append("")
    lines.append("=== END DEBUG ===")
    return lines


def render_report(
    result: AnalysisResult,
    debug: bool = False,
    max_reasonable_distance: float = 100.0,
) -> str:
    """
    Render the full text report.

    Args:
        result: Completed analysis
        debug: Include the farthest records dropped by the distance ceiling
        max_reasonable_distance: Ceiling used during ingestion, for the debug header

    Returns:
        Report text (no trailing newline)
    """
    acc = result.accumulator
    filtered = result.filtered
    lines: list[str] = []

    if debug and acc.rejected:
        lines.extend(_debug_lines(result, max_reasonable_distance))

    lines.extend(_heading("AIS Message Statistics:"))
    lines.append(f"Your location: {result.station.lat}, {result.station.lon}")
    lines.append("")

    if acc.daily:
        lines.append(daily_table(result).to_string(index=False))
    else:
        lines.append("No messages with valid positions.")

    total, day, night = acc.totals()
    max_distance, max_mmsi = acc.overall_max()
    lines.extend(["", "Summary:"])
    lines.append(f"Total messages: {total}")
    lines.append(f"Day messages (8am-8pm): {day}")
    lines.append(f"Night messages (8pm-8am): {night}")
    lines.append(f"Overall max distance: {max_distance:.2f} nm (MMSI: {max_mmsi})")
    if acc.excluded_count > 0:
        lines.append(f"Excluded messages: {acc.excluded_count}")
    if acc.malformed_count > 0:
        lines.append(f"Malformed lines skipped: {acc.malformed_count}")
    if filtered.min_distance > 0 or filtered.max_distance > 0:
        lines.append(f"Filtered from {filtered.source_count} to {filtered.count} positions")

    distribution = result.distribution
    if distribution is not None:
        lines.extend(_heading("Distance Distribution (in 10ths):"))
        lines.append(f"Min distance: {distribution.min:.2f} nm")
        lines.append(f"Max distance: {distribution.max:.2f} nm")
        lines.append(f"Total AIS messages with valid positions: {distribution.count}")
        lines.append("")
        lines.append(distribution_table(distribution).to_string(index=False))

    if filtered.sector_counts and any(c > 0 for c in filtered.sector_counts.values()):
        lines.extend(_heading("Bearing Distribution (15° sectors):"))
        table = sector_table(filtered.sector_counts)
        lines.append(table.to_string(index=False))
        lines.append("")
        lines.append(f"Total messages: {int(table['Count'].sum())}")

    if result.beam_stats is not None:
        lines.extend(_beam_lines(result.beam_stats, filtered.min_distance))

    return "\n".join(lines).strip("\n")
