"""FastAPI main application."""

import time
from typing import Any, Dict, List, Optional

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .. import __version__
from ..config import settings
from ..config.presets import DEFAULT_PRESET, default_galaxy_config, list_presets
from ..core.galaxy_generator import generate_galaxy
from ..core.models import ConnectivityOptions, FixedSystemSpec, Galaxy
from ..utils.logging_setup import configure_logging

configure_logging(settings.log_level, settings.log_format)

logger = structlog.get_logger()

# Initialize FastAPI app
app = FastAPI(
    title="Galaxy Generator API",
    description="Deterministic procedural galaxy generation",
    version=__version__,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Last generated galaxy; not persisted
app.state.current_galaxy = None


# Request/Response models
class GalaxyGenerationRequest(BaseModel):
    """Request to generate a new galaxy."""

    seed: Optional[int] = Field(None, description="Random seed for reproducible generation")
    radius: Optional[float] = Field(None, gt=0, description="Galaxy radius in light years")
    systems: Optional[int] = Field(None, ge=1, description="Target number of star systems")
    anomalies: Optional[int] = Field(None, ge=0, description="Target number of anomalies")
    preset: str = Field(DEFAULT_PRESET, description="Fixed-system preset name")
    fixed_systems: Optional[List[FixedSystemSpec]] = Field(
        None, description="Explicit fixed systems; replaces the preset"
    )
    connectivity: Optional[ConnectivityOptions] = Field(None, description="Warp lane tuning")
    min_distance: Optional[float] = Field(None, ge=0, description="Minimum system separation")
    core_radius: Optional[float] = Field(None, ge=0, description="Radius of the core tier")


class SystemDetail(BaseModel):
    """A star system together with its warp lanes."""

    system: Dict[str, Any]
    lanes: List[Dict[str, Any]]


def _dump(model: BaseModel) -> Dict[str, Any]:
    return model.model_dump(mode="json", by_alias=True)


def _current_galaxy() -> Galaxy:
    galaxy = app.state.current_galaxy
    if galaxy is None:
        raise HTTPException(status_code=404, detail="No galaxy generated yet")
    return galaxy


# Event handlers
@app.on_event("startup")
async def startup_event():
    """Log startup."""
    logger.info("Starting Galaxy Generator API", presets=list_presets())


@app.on_event("shutdown")
async def shutdown_event():
    """Cleanup on shutdown."""
    logger.info("Shutting down Galaxy Generator API")


# API endpoints
@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "message": "Galaxy Generator API",
        "version": __version__,
        "status": "running"
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    return {"status": "healthy"}


@app.get("/presets")
async def get_presets():
    """List fixed-system presets."""
    return {"presets": list_presets(), "default": DEFAULT_PRESET}


@app.post("/galaxy/generate")
def generate(request: GalaxyGenerationRequest):
    """
    Generate a galaxy and keep it as the current one.

    Runs synchronously in the worker threadpool; each call owns its random
    engine.
    """
    logger.info("Galaxy generation requested", request=request.model_dump(exclude_none=True))

    if request.systems is not None and request.systems > settings.max_system_count:
        raise HTTPException(
            status_code=422,
            detail=f"systems must be at most {settings.max_system_count}",
        )
    if request.anomalies is not None and request.anomalies > settings.max_anomaly_count:
        raise HTTPException(
            status_code=422,
            detail=f"anomalies must be at most {settings.max_anomaly_count}",
        )

    overrides: Dict[str, Any] = {}
    if request.seed is not None:
        overrides["seed"] = request.seed
    if request.radius is not None:
        overrides["radius"] = request.radius
    if request.systems is not None:
        overrides["star_system_count"] = request.systems
    if request.anomalies is not None:
        overrides["anomaly_count"] = request.anomalies
    if request.fixed_systems is not None:
        overrides["fixed_systems"] = request.fixed_systems
    if request.connectivity is not None:
        overrides["connectivity"] = request.connectivity
    if request.min_distance is not None:
        overrides["min_distance"] = request.min_distance
    if request.core_radius is not None:
        overrides["core_radius"] = request.core_radius

    start_time = time.time()
    try:
        config = default_galaxy_config(request.preset, **overrides)
        galaxy = generate_galaxy(config)
    except ValueError as e:
        # Covers pydantic validation errors and GalaxyConfigError
        logger.warning("Galaxy configuration rejected", error=str(e))
        raise HTTPException(status_code=422, detail=str(e))

    app.state.current_galaxy = galaxy
    logger.info(
        "Galaxy generation completed",
        seed=config.seed,
        systems=len(galaxy.systems),
        lanes=len(galaxy.warp_lanes),
        generation_time_seconds=round(time.time() - start_time, 3),
    )
    return _dump(galaxy)


@app.get("/galaxy/current")
async def get_current_galaxy():
    """Return the last generated galaxy."""
    return _dump(_current_galaxy())


@app.get("/galaxy/systems/{system_id}", response_model=SystemDetail)
async def get_system(system_id: str):
    """Return one system of the current galaxy with its warp lanes."""
    galaxy = _current_galaxy()
    system = galaxy.get_system(system_id)
    if system is None:
        raise HTTPException(status_code=404, detail="System not found")

    return SystemDetail(
        system=_dump(system),
        lanes=[_dump(lane) for lane in galaxy.lanes_for(system_id)],
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.api_host, port=settings.api_port)
