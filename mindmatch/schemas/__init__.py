"""
Schemas module - record models and API request/response schemas.

All schemas live in schemas.py:
- Records: what the stores hold (Profile, JobPosting, MoodLog, ...)
- Requests/responses: the API contract
"""
