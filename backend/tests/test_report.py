"""
Tests for the text report.
"""

import pytest

from ais_reception.models.record import Station
from ais_reception.services.analysis import run_analysis
from ais_reception.services.ingest import IngestOptions
from ais_reception.services.report import daily_table, render_report, sector_table
from ais_reception.utils.sample_data import generate_beam_log, make_record, write_log


STATION = Station(lat=51.5, lon=-0.2)


@pytest.fixture
def result(tmp_path):
    generate_beam_log(tmp_path / "beam.json", STATION, n_records=200, seed=4, far_outliers=2)
    return run_analysis(tmp_path, IngestOptions(station=STATION, debug=True, exclude=frozenset({235000003})))


class TestRenderReport:
    """Tests for the report sections."""

    def test_sections_present(self, result):
        text = render_report(result)

        assert text.startswith("AIS Message Statistics:")
        assert "Your location: 51.5, -0.2" in text
        assert "2025-06-01" in text
        assert "Distance Distribution (in 10ths):" in text
        assert "Bearing Distribution (15° sectors):" in text
        assert "Beam Width Analysis:" in text
        assert "68% of signals (±1σ)" in text
        assert "95% of signals (±2σ)" in text
        assert "99% of signals (±3σ)" in text
        assert "Top 5% furthest signals (10 messages)" in text
        assert "Individual bearings:" in text

    def test_totals(self, result):
        total, day, night = result.accumulator.totals()
        text = render_report(result)

        assert f"Total messages: {total}" in text
        assert f"Day messages (8am-8pm): {day}" in text
        assert f"Night messages (8pm-8am): {night}" in text

    def test_excluded_count_shown(self, result):
        assert result.accumulator.excluded_count > 0
        assert f"Excluded messages: {result.accumulator.excluded_count}" in render_report(result)

    def test_debug_section(self, result):
        assert "=== DEBUG: Filtered Messages ===" not in render_report(result)

        text = render_report(result, debug=True, max_reasonable_distance=100.0)
        assert "Filtered 2 messages with distance > 100 nm" in text
        assert "--- Message 2 ---" in text
        assert text.index("DEBUG") < text.index("AIS Message Statistics:")

    def test_min_distance_banner(self, tmp_path):
        generate_beam_log(tmp_path / "beam.json", STATION, n_records=100, seed=5)
        result = run_analysis(tmp_path, IngestOptions(station=STATION), min_distance=5)

        text = render_report(result)
        assert "*** Analyzing only signals > 5 nm ***" in text
        assert f"Filtered from 100 to {result.filtered.count} positions" in text

    def test_no_positions(self, tmp_path):
        write_log(tmp_path / "empty.json", [make_record(1, 95.0, 0.0, "20250601120000")])
        result = run_analysis(tmp_path, IngestOptions(station=STATION))

        text = render_report(result)
        assert "No messages with valid positions." in text
        assert "Total messages: 0" in text
        assert "Beam Width Analysis:" not in text


class TestTables:
    """Tests for the tabular sections."""

    def test_daily_table(self, result):
        table = daily_table(result)
        assert list(table["Date"]) == sorted(table["Date"])
        assert int(table["Total"].sum()) == result.accumulator.sample_count

    def test_sector_table(self):
        table = sector_table({195: 3, 0: 1, 90: 0})

        assert list(table["Bearing Range"]) == ["  0° -  15°", "195° - 210°"]
        assert list(table["Direction"]) == ["N", "SSW"]
        assert list(table["Percentage"]) == ["25.0%", "75.0%"]
