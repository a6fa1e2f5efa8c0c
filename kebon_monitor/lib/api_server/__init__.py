"""FastAPI server for the Ruang Kebon telemetry monitor."""

from typing import Dict, List, Any, Optional, Literal
from datetime import datetime
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, Field
from starlette.concurrency import run_in_threadpool
import structlog

from ...models import MonitorConfiguration, PumpMode, SensorClass
from ...services import (
    IngestionCoordinator,
    InvalidPayloadError,
    MonitorState,
    QuerySurface,
    parse_payload,
)

logger = structlog.get_logger(__name__)

INVALID_FORMAT = "Invalid data format"


class PumpControlRequest(BaseModel):
    """Request model for pump control."""

    action: Literal["on", "off"]
    mode: Optional[PumpMode] = None


class SubmitResponse(BaseModel):
    """Response model for accepted readings."""

    message: str
    status: str
    device_status: str
    server_ip: str


class PumpControlResponse(BaseModel):
    """Response model for /api/pompa/control."""

    status: str
    message: str
    data: Dict[str, Any]


class LatestResponse(BaseModel):
    """Response model for /api/latest/{sensor_type}; snapshot fields are extra keys."""

    model_config = {
        "extra": "allow"
    }

    device_status: Dict[str, Any]
    server_ip: str
    sensor_type: str


class HistoryResponse(BaseModel):
    """Response model for /api/all/{sensor_type}."""

    data: List[Dict[str, Any]]
    count: int
    sensor_type: str
    server_ip: str


class HealthResponse(BaseModel):
    """Response model for /api/health."""

    status: str
    device_status: str
    server_ip: str
    port: int
    timestamp: str


class DetailedHealthResponse(BaseModel):
    """Response model for /api/health/detailed."""

    status: str
    server_ip: str
    port: int
    timestamp: str
    uptime: float
    connected_sensors: int
    total_sensors: int
    sensor_status: Dict[str, str]
    liveness: Dict[str, Any]


class SensorStatusEntry(BaseModel):
    """Per-class entry of /api/status/all."""

    online: bool
    lastUpdate: Optional[int] = None
    data: Dict[str, Any] = Field(default_factory=dict)


class StatusAllResponse(BaseModel):
    """Response model for /api/status/all."""

    server: str
    timestamp: str
    sensors: Dict[str, SensorStatusEntry]


class ResetResponse(BaseModel):
    """Response model for /api/reset/{sensor_type}."""

    message: str
    server_ip: str


def _invalid_format_response(message: str, server_ip: str) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": INVALID_FORMAT, "message": message, "server_ip": server_ip}
    )


def create_app(config: Optional[MonitorConfiguration] = None,
               state: Optional[MonitorState] = None) -> FastAPI:
    """Create FastAPI application around an explicitly owned MonitorState."""
    config = config or MonitorConfiguration()
    state = state or MonitorState.from_configuration(config)

    server_ip = config.server.advertised_ip
    coordinator = IngestionCoordinator(state)
    queries = QuerySurface(state, advertised_ip=server_ip, port=config.server.port)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Run the liveness reassessment loop for the app's lifetime."""
        logger.info("API server starting up")
        await state.tracker.start()

        yield

        await state.tracker.stop()
        logger.info("API server shutting down")

    app = FastAPI(
        title="Ruang Kebon Telemetry Monitor",
        description="Telemetry ingestion and liveness API for the smart farming dashboard",
        version="1.0.0",
        lifespan=lifespan
    )

    app.state.monitor = state
    app.state.coordinator = coordinator
    app.state.queries = queries

    # Dashboards are served from other origins during development
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(InvalidPayloadError)
    async def invalid_payload_handler(request: Request, exc: InvalidPayloadError):
        logger.warning("Rejected malformed body", path=request.url.path, error=exc.message)
        return _invalid_format_response(exc.message, server_ip)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        message = "; ".join(
            f"{'.'.join(str(x) for x in error['loc'])}: {error['msg']}" for error in exc.errors()
        )
        logger.warning("Rejected invalid request", path=request.url.path, error=message)
        return _invalid_format_response(message, server_ip)

    @app.post("/api/data/{sensor_type}", response_model=SubmitResponse)
    async def submit_reading(sensor_type: str, request: Request):
        """Accept a telemetry reading for any sensor class."""
        payload = parse_payload(await request.body())
        logger.info("Telemetry received", sensor_type=sensor_type, payload=payload)

        try:
            result = await run_in_threadpool(coordinator.ingest, sensor_type, payload)
        except Exception as e:
            logger.error("Error ingesting reading", sensor_type=sensor_type, error=str(e))
            raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")

        return SubmitResponse(
            message=f"Data {sensor_type} received OK!",
            status="success",
            device_status=result.device_status.label,
            server_ip=server_ip,
        )

    @app.post("/api/pompa/control", response_model=PumpControlResponse)
    def control_pump(control: PumpControlRequest):
        """Record the desired pump state."""
        try:
            actuator_state = coordinator.control_actuator(
                control.action,
                control.mode.value if control.mode else None
            )
        except Exception as e:
            logger.error("Error controlling pump", error=str(e))
            raise HTTPException(status_code=500, detail=f"Internal server error: {str(e)}")

        return PumpControlResponse(
            status="success",
            message=f"Pump turned {'on' if actuator_state.status else 'off'}",
            data=actuator_state.to_payload(),
        )

    @app.get("/api/latest/{sensor_type}", response_model=LatestResponse)
    def get_latest(sensor_type: str):
        """Latest snapshot for a class plus device status."""
        return LatestResponse(**queries.latest_of(sensor_type))

    @app.get("/api/all/{sensor_type}", response_model=HistoryResponse)
    def get_history(sensor_type: str):
        """Bounded history for a class."""
        return HistoryResponse(**queries.all_of(sensor_type))

    @app.get("/api/health", response_model=HealthResponse)
    def health_check():
        """Basic health check endpoint."""
        return HealthResponse(**queries.health_summary())

    @app.get("/api/health/detailed", response_model=DetailedHealthResponse)
    def detailed_health_check():
        """Per-class health using the has-reported signal."""
        return DetailedHealthResponse(**queries.detailed_health())

    @app.get("/api/status/all", response_model=StatusAllResponse)
    def get_all_status():
        """Aggregate status for every sensor class."""
        return StatusAllResponse(**queries.all_status())

    @app.delete("/api/reset/{sensor_type}", response_model=ResetResponse)
    def reset_sensor(sensor_type: str):
        """Clear one class's snapshot and history."""
        state.store.reset(sensor_type)
        return ResetResponse(
            message=f"Data {sensor_type} reset successfully",
            server_ip=server_ip,
        )

    static_dir = config.server.static_dir
    if static_dir:
        if Path(static_dir).is_dir():
            # mounted last so the API routes take precedence
            app.mount("/", StaticFiles(directory=static_dir, html=True), name="dashboard")
        else:
            logger.warning("Static directory not found, dashboard disabled", static_dir=static_dir)

    return app


def log_startup_banner(config: MonitorConfiguration) -> None:
    """Log the server address and the dashboard pages."""
    base_url = f"http://{config.server.advertised_ip}:{config.server.port}"
    logger.info("Ruang Kebon Smart Farming Dashboard", server=base_url)
    if config.server.static_dir:
        logger.info("Dashboard page", page="dashboard", url=f"{base_url}/")
        for sensor_type in SensorClass.wire_names():
            logger.info("Dashboard page", page=sensor_type, url=f"{base_url}/{sensor_type}.html")


def run_server(config: Optional[MonitorConfiguration] = None,
               state: Optional[MonitorState] = None,
               debug: bool = False) -> None:
    """Run the FastAPI server under uvicorn."""
    import uvicorn

    config = config or MonitorConfiguration()
    log_level = "debug" if debug else config.logging.level.lower()

    logger.info("Starting API server",
                host=config.server.host,
                port=config.server.port,
                debug=debug)
    log_startup_banner(config)

    uvicorn.run(
        create_app(config, state),
        host=config.server.host,
        port=config.server.port,
        log_level=log_level,
    )


# Export the main components
__all__ = [
    "create_app",
    "run_server",
    "log_startup_banner",
    "PumpControlRequest",
    "SubmitResponse",
    "PumpControlResponse",
    "LatestResponse",
    "HistoryResponse",
    "HealthResponse",
    "DetailedHealthResponse",
    "StatusAllResponse",
    "ResetResponse",
]
