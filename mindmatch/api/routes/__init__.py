"""
API Routes - Combines all route modules into single router.
"""

from fastapi import APIRouter

from mindmatch.api.routes.auth_routes import router as auth_router
from mindmatch.api.routes.profile_routes import router as profile_router
from mindmatch.api.routes.job_routes import router as job_router
from mindmatch.api.routes.application_routes import router as application_router
from mindmatch.api.routes.wellness_routes import router as wellness_router
from mindmatch.api.routes.ai_routes import router as ai_router

# Main API router
api_router = APIRouter()

api_router.include_router(auth_router)
api_router.include_router(profile_router)
api_router.include_router(job_router)
api_router.include_router(application_router)
api_router.include_router(wellness_router)
api_router.include_router(ai_router)
