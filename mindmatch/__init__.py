"""
MindMatch Placement & Wellness Platform
A placement backend that also looks after student wellbeing.

Architecture:
- Record stores: Postgres via SQLAlchemy, or in-memory in mock mode
- Services: profiles, auth, jobs/applications, wellness, AI advisors
- API: FastAPI routers under /api
"""

__version__ = "1.0.0"
