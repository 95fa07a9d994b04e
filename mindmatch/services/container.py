"""
Service Container - wires every service to one set of record stores.

The backend is chosen exactly once, here:
- settings.use_mock_backend -> in-memory stores
- otherwise                 -> SQL stores on the configured database

Usage:
    container = get_container()
    container.auth.sign_in(email, password)
"""

import logging
from dataclasses import dataclass
from functools import lru_cache
from typing import Dict, Optional

from sqlalchemy.engine import Engine

from mindmatch.core.config import Settings, get_settings
from mindmatch.db.schema import TABLES
from mindmatch.db.stores import RecordStore, build_record_stores
from mindmatch.services.ai_advisors import CareerAssistant, JobMatchAdvisor
from mindmatch.services.application_service import ApplicationService
from mindmatch.services.auth_gateway import AuthGateway
from mindmatch.services.identity import IdentityProvider
from mindmatch.services.job_service import JobService
from mindmatch.services.openai_client import TextGenerationClient
from mindmatch.services.profile_store import ProfileStore
from mindmatch.services.sentiment_client import MoodAnalysisService
from mindmatch.services.wellness_service import WellnessService

logger = logging.getLogger(__name__)


@dataclass
class ServiceContainer:
    settings: Settings
    stores: Dict[str, RecordStore]
    profiles: ProfileStore
    auth: AuthGateway
    jobs: JobService
    applications: ApplicationService
    wellness: WellnessService
    match_advisor: JobMatchAdvisor
    career: CareerAssistant
    mood_analysis: MoodAnalysisService
    engine: Optional[Engine] = None

    @property
    def mode(self) -> str:
        return "mock" if self.engine is None else "live"


def build_container(
    settings: Optional[Settings] = None,
    engine: Optional[Engine] = None,
    text_client: Optional[TextGenerationClient] = None,
    mood_analysis: Optional[MoodAnalysisService] = None,
) -> ServiceContainer:
    """
    Build all services. Pass `engine` to force SQL stores (tests use SQLite);
    otherwise the engine comes from settings unless mock mode is configured.
    """
    settings = settings or get_settings()
    if engine is None and not settings.use_mock_backend:
        from mindmatch.db.postgres import get_engine
        engine = get_engine()

    stores = build_record_stores(TABLES, engine)
    profiles = ProfileStore(
        stores["profiles"], stores["student_profiles"], stores["company_profiles"]
    )
    text_client = text_client or TextGenerationClient(settings)
    match_advisor = JobMatchAdvisor(text_client)
    jobs = JobService(stores["job_postings"])

    return ServiceContainer(
        settings=settings,
        stores=stores,
        profiles=profiles,
        auth=AuthGateway(IdentityProvider(stores["users"]), profiles),
        jobs=jobs,
        applications=ApplicationService(stores["applications"], jobs, match_advisor),
        wellness=WellnessService(stores["mood_logs"], stores["wellness_alerts"]),
        match_advisor=match_advisor,
        career=CareerAssistant(text_client),
        mood_analysis=mood_analysis or MoodAnalysisService(settings),
        engine=engine,
    )


@lru_cache()
def get_container() -> ServiceContainer:
    """Process-wide container (FastAPI dependency)."""
    container = build_container()
    logger.info("Service container ready (%s mode)", container.mode)
    return container
