"""
MindMatch Placement & Wellness Platform - Main Application

FastAPI backend with:
- Postgres (or the in-memory mock backend) for every record
- OpenAI-compatible chat completions for job matching and career help
- HuggingFace inference for mood-note sentiment
- JWT authentication

Run: uvicorn mindmatch.main:app --reload
"""

import logging

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from mindmatch.api.routes import api_router
from mindmatch.core.config import get_settings
from mindmatch.core.errors import MindMatchError
from mindmatch.core.log_config import configure_logging
from mindmatch.schemas.schemas import ErrorResponse
from mindmatch.services.ai_advisors import validate_api_keys
from mindmatch.services.container import ServiceContainer, get_container

settings = get_settings()
configure_logging(settings.log_level)
logger = logging.getLogger(__name__)

# Create FastAPI app
app = FastAPI(
    title="MindMatch Placement & Wellness Platform",
    description="""
    Campus placement backend with student wellness tracking.

    ## Features
    - **Authentication**: JWT-based auth for students, companies and admins
    - **Profiles**: Student and company profiles, admin verification
    - **Jobs**: Posting lifecycle, applications with AI match scores
    - **Wellness**: Mood logs, resilience score, recommendations, alerts
    - **AI Assistance**: Resume generation, career suggestions, summaries
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc"
)

# CORS middleware (allow all for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include API routes
app.include_router(api_router, prefix="/api")


@app.exception_handler(MindMatchError)
async def mindmatch_error_handler(request: Request, exc: MindMatchError):
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(detail=exc.message).model_dump(),
    )


# Startup event
@app.on_event("startup")
async def startup_event():
    """Create tables on startup (live mode only)."""
    if settings.use_mock_backend:
        logger.info("Running with the in-memory mock backend")
        return
    from mindmatch.db.postgres import get_engine
    from mindmatch.db.schema import create_schema
    try:
        create_schema(get_engine())
        logger.info("Database schema ready")
    except Exception as e:
        logger.error("Schema initialization failed: %s", e)


@app.get("/", tags=["Health"])
async def root():
    return {"status": "healthy", "app": "MindMatch Placement & Wellness Platform"}


@app.get("/health", tags=["Health"])
async def health_check(container: ServiceContainer = Depends(get_container)):
    """Detailed health check."""
    from mindmatch.db.postgres import test_postgres_connection

    database = "in-memory"
    if container.engine is not None:
        database = "connected" if test_postgres_connection(container.engine) else "disconnected"
    return {
        "status": "healthy",
        "mode": container.mode,
        "database": database,
        "api_keys": validate_api_keys(container.settings),
    }
