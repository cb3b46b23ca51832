"""
API routes for the map view.
"""

from typing import Optional

from fastapi import APIRouter, Request
from fastapi.responses import HTMLResponse

from ais_reception.api.map_page import render_map_page
from ais_reception.api.schemas import (
    BeamStatsResponse,
    ErrorResponse,
    HealthResponse,
    MapDataResponse,
    MaxDistanceResponse,
    PercentileWindowResponse,
    PositionResponse,
    StationResponse,
)
from ais_reception.models.reception import (
    AnalysisResult,
    AnalysisSummary,
    BeamWidthStats,
    PercentileWindow,
)


router = APIRouter(tags=["map"], responses={404: {"model": ErrorResponse}})


def _build_window_response(window: PercentileWindow) -> PercentileWindowResponse:
    return PercentileWindowResponse(
        percentile=window.percentile,
        min_bearing=window.min_bearing,
        max_bearing=window.max_bearing,
        beam_width=window.beam_width,
        center_bearing=window.center_bearing,
    )


def build_beam_response(stats: Optional[BeamWidthStats]) -> Optional[BeamStatsResponse]:
    """Build beam statistics response from BeamWidthStats."""
    if stats is None:
        return None
    top = stats.max_distance_analysis
    return BeamStatsResponse(
        total_count=stats.total_count,
        mean_bearing=stats.mean_bearing,
        concentration=stats.concentration,
        percentile68=_build_window_response(stats.window(0.68)),
        percentile95=_build_window_response(stats.window(0.95)),
        percentile99=_build_window_response(stats.window(0.99)),
        max_distance=MaxDistanceResponse(
            count=top.count,
            min_bearing=top.min_bearing,
            max_bearing=top.max_bearing,
            spread=top.spread,
            bearings=list(top.bearings),
            avg_distance=top.avg_distance,
        ),
    )


def build_map_data(result: AnalysisResult) -> MapDataResponse:
    """Map payload: exactly the filtered positions and their beam statistics."""
    return MapDataResponse(
        station=StationResponse(
            lat=result.station.lat,
            lon=result.station.lon,
            name=result.station.name,
        ),
        positions=[
            PositionResponse(
                lat=p.lat,
                lon=p.lon,
                bearing=p.bearing,
                distance=p.distance,
                mmsi=p.mmsi,
            )
            for p in result.filtered.positions
        ],
        beam_stats=build_beam_response(result.beam_stats),
        min_distance=result.filtered.min_distance,
        max_distance=result.filtered.max_distance,
    )


def build_health(result: AnalysisResult) -> HealthResponse:
    summary = AnalysisSummary.from_result(result)
    return HealthResponse(
        status="healthy",
        file_count=summary.file_count,
        sample_count=summary.sample_count,
        filtered_count=summary.filtered_count,
        excluded_count=summary.excluded_count,
        date_count=summary.date_count,
    )


@router.get("/", response_class=HTMLResponse)
async def map_page(request: Request):
    """Map page with filtered positions and beam edges."""
    state = request.app.state
    return HTMLResponse(render_map_page(build_map_data(state.result), state.api_key))


@router.get("/data", response_model=MapDataResponse)
async def map_data(request: Request):
    """
    Filtered positions and beam statistics as JSON.
    """
    return build_map_data(request.app.state.result)


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request):
    """Health check endpoint."""
    return build_health(request.app.state.result)
