"""
AIS Reception map server - FastAPI app

Serves the analysis of one run as a Google Maps page plus JSON endpoints.
"""

import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ais_reception.api.map import router as map_router
from ais_reception.api.map_page import DEFAULT_PORT
from ais_reception.models.reception import AnalysisResult


logger = logging.getLogger(__name__)


def create_app(result: AnalysisResult, api_key: str) -> FastAPI:
    """
    Create the map server for a completed analysis.

    Args:
        result: Analysis to display
        api_key: Google Maps JavaScript API key

    Raises:
        ValueError: if no API key is given
    """
    if not api_key:
        raise ValueError("A Google Maps API key is required for the map view")

    app = FastAPI(
        title="AIS Reception Map",
        description="""
        Map view of AIS reception relative to the receiving station.

        ## Endpoints
        - GET / : map page (filtered positions, 68% and 95% beam edges)
        - GET /data : filtered positions and beam statistics as JSON
        - GET /health : run summary
        """,
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET"],
        allow_headers=["*"],
    )

    app.state.result = result
    app.state.api_key = api_key
    app.include_router(map_router)

    return app


def serve_map(result: AnalysisResult, api_key: str, port: int = DEFAULT_PORT, host: str = "127.0.0.1") -> None:
    """Run the map server until interrupted."""
    import uvicorn

    app = create_app(result, api_key)
    logger.info(f"Map server running at http://localhost:{port}/ -- open this URL to view the AIS data")
    uvicorn.run(app, host=host, port=port, log_level="info")
