"""
API schemas (Pydantic models) for the map server responses.
"""

from typing import Optional

from pydantic import BaseModel


# ============================================================================
# Position Schemas
# ============================================================================

class StationResponse(BaseModel):
    """Receiving station location."""
    lat: float
    lon: float
    name: str


class PositionResponse(BaseModel):
    """Single filtered reception plotted on the map."""
    lat: float
    lon: float
    bearing: float
    distance: float
    mmsi: Optional[int] = None


# ============================================================================
# Beam Width Schemas
# ============================================================================

class PercentileWindowResponse(BaseModel):
    """Bearing window holding a fraction of receptions."""
    percentile: float
    min_bearing: float
    max_bearing: float
    beam_width: float
    center_bearing: float


class MaxDistanceResponse(BaseModel):
    """Bearing spread of the farthest receptions."""
    count: int
    min_bearing: float
    max_bearing: float
    spread: float
    bearings: list[float]
    avg_distance: float


class BeamStatsResponse(BaseModel):
    """Beam-width statistics."""
    total_count: int
    mean_bearing: float
    concentration: float
    percentile68: PercentileWindowResponse
    percentile95: PercentileWindowResponse
    percentile99: PercentileWindowResponse
    max_distance: MaxDistanceResponse


# ============================================================================
# Map Data Schemas
# ============================================================================

class MapDataResponse(BaseModel):
    """Everything the map page draws."""
    station: StationResponse
    positions: list[PositionResponse]
    beam_stats: Optional[BeamStatsResponse] = None
    min_distance: float = 0.0
    max_distance: float = 0.0


class HealthResponse(BaseModel):
    """Map server health and run summary."""
    status: str
    file_count: int
    sample_count: int
    filtered_count: int
    excluded_count: int
    date_count: int


class ErrorResponse(BaseModel):
    """Standard error response."""
    detail: str
