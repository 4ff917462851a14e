"""FastAPI application routes, middleware, and metrics."""

import time
import uuid
from typing import Annotated, Any

from fastapi import Body, FastAPI, HTTPException, Query, Request, Response
from fastapi.responses import JSONResponse
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from structlog.contextvars import bind_contextvars, clear_contextvars

from app.cities.catalog import AVAILABLE_CITIES, CityNotFoundError, get_city
from app.health.health_check import is_redis_available
from app.logging_config import logger
from app.models.city import CityLocation
from app.models.health import Dependencies, HealthResponse
from app.models.match import MatchResponse
from app.models.pairing import CreatePairingResponse, DeletePairingResponse
from app.pairing_service.errors import (
    InvalidPairingError,
    PairingNotFoundError,
    PairingServiceError,
    StorageError,
)
from app.pairing_service.pairings import (
    MATCH_MAX_DISTANCE,
    create_pairing,
    delete_pairing,
    get_matches,
    get_pairing,
    list_pairings,
)

app = FastAPI(title="City Pairings API")

REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "path", "status_code"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "HTTP request duration in seconds", ["path"]
)
PAIRINGS_CREATED = Counter("pairings_created_total", "Pairings stored")
MATCHES_RETURNED = Histogram(
    "matches_returned",
    "Matched points returned per match request",
    buckets=(0, 1, 2, 5, 10, 25, 50, 100),
)


@app.middleware("http")
async def request_logging(request: Request, call_next):
    """Log request details, attach a request ID, and record metrics.

    Args:
        request: Incoming HTTP request.
        call_next: FastAPI handler for the next middleware/app.

    Returns:
        The response produced by the downstream handler.
    """
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    bind_contextvars(request_id=request_id)
    start = time.perf_counter()
    response = None
    try:
        response = await call_next(request)
        response.headers["x-request-id"] = request_id
        return response
    finally:
        duration_s = time.perf_counter() - start
        duration_ms = round(duration_s * 1000, 2)
        status_code = getattr(response, "status_code", 500)
        logger.info(
            "HTTP_REQUEST",
            method=request.method,
            path=request.url.path,
            status_code=status_code,
            duration_ms=duration_ms,
        )
        REQUEST_COUNT.labels(
            method=request.method, path=request.url.path, status_code=status_code
        ).inc()
        REQUEST_LATENCY.labels(path=request.url.path).observe(duration_s)
        clear_contextvars()


@app.exception_handler(CityNotFoundError)
async def city_not_found_handler(request: Request, exc: CityNotFoundError):
    """Convert catalog lookup errors into 404 responses."""
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(InvalidPairingError)
async def invalid_pairing_handler(request: Request, exc: InvalidPairingError):
    """Convert rejected pairing payloads into 400 responses.

    Args:
        request: Incoming HTTP request.
        exc: Raised validation error.

    Returns:
        A JSON response with the error detail.
    """
    return JSONResponse(status_code=400, content={"detail": str(exc)})


@app.exception_handler(PairingNotFoundError)
async def pairing_not_found_handler(request: Request, exc: PairingNotFoundError):
    """Convert missing pairing lookups into 404 responses."""
    return JSONResponse(status_code=404, content={"detail": str(exc)})


@app.exception_handler(StorageError)
async def storage_error_handler(request: Request, exc: StorageError):
    """Convert storage failures into 500 responses.

    Args:
        request: Incoming HTTP request.
        exc: Raised storage error.

    Returns:
        A JSON response naming the failed operation.
    """
    return JSONResponse(status_code=500, content={"detail": str(exc)})


@app.exception_handler(PairingServiceError)
async def pairing_service_error_handler(request: Request, exc: PairingServiceError):
    """Convert unexpected pairing service errors into 500 responses."""
    return JSONResponse(status_code=500, content={"detail": "Unexpected error"})


@app.get("/")
async def root():
    """Return a basic liveness response."""
    return {"message": "City pairings"}


@app.get("/cities", response_model=list[CityLocation])
async def cities() -> list[CityLocation]:
    """List the cities that can be shown on the paired maps."""
    return AVAILABLE_CITIES


@app.get("/cities/{city_key}", response_model=CityLocation)
async def city(city_key: str) -> CityLocation:
    """Return one city from the catalog.

    Args:
        city_key: Catalog key, e.g. ``seattle``.

    Returns:
        The matching CityLocation.
    """
    return get_city(city_key)


@app.get("/pairings")
def pairings() -> list[dict]:
    """List every stored pairing record."""
    return list_pairings()


@app.get("/pairings/{pairing_id}")
def pairing(pairing_id: str) -> dict:
    """Return one stored pairing record.

    Args:
        pairing_id: Pairing identifier from the path.

    Returns:
        The ``{"id", "pairing"}`` record.
    """
    return get_pairing(pairing_id)


@app.post("/pairings", response_model=CreatePairingResponse)
def new_pairing(body: Annotated[Any, Body()]) -> CreatePairingResponse:
    """Store a pairing of two or more city locations.

    Args:
        body: Flat pairing payload keyed by city.

    Returns:
        The id and stored form of the new pairing.
    """
    created = CreatePairingResponse(**create_pairing(body))
    PAIRINGS_CREATED.inc()
    return created


@app.delete("/pairings", response_model=DeletePairingResponse)
def remove_pairing(id: str | None = None) -> DeletePairingResponse:
    """Delete a pairing by id.

    Args:
        id: Pairing identifier from the query string.

    Returns:
        Confirmation with the deleted id.
    """
    if not id:
        raise HTTPException(status_code=400, detail="Missing pairing ID")
    return DeletePairingResponse(**delete_pairing(id))


@app.get("/matches", response_model=MatchResponse)
def matches(
    source: str,
    target: str,
    lat: Annotated[float | None, Query(ge=-90, le=90, allow_inf_nan=False)] = None,
    lng: Annotated[float | None, Query(ge=-180, le=180, allow_inf_nan=False)] = None,
    max_distance: Annotated[float, Query(ge=0, allow_inf_nan=False)] = MATCH_MAX_DISTANCE,
    include_self: bool = False,
) -> MatchResponse:
    """Return the points to highlight while hovering the source city's map.

    Args:
        source: City key of the hovered map.
        target: City key of the paired map.
        lat: Hover latitude; omit together with lng when nothing is hovered.
        lng: Hover longitude.
        max_distance: Match radius in degrees.
        include_self: Also return nearby paired points on the source map.

    Returns:
        A MatchResponse with cross-map and self matches.
    """
    if (lat is None) != (lng is None):
        raise HTTPException(
            status_code=400, detail="lat and lng must be provided together"
        )
    hover = (lat, lng) if lat is not None else None
    response = get_matches(source, target, hover, max_distance, include_self)
    MATCHES_RETURNED.observe(len(response.matches) + len(response.self_matches))
    return response


@app.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    """Report API health and dependency availability.

    Returns:
        A HealthResponse containing dependency status.
    """
    return HealthResponse(
        status="ok",
        dependencies=Dependencies(redis=is_redis_available()),
    )


@app.get("/metrics")
async def metrics():
    """Expose Prometheus metrics for scraping."""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)
