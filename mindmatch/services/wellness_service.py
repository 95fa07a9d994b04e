"""
Wellness Service - mood logging, summaries and alert lifecycle.

Mood logs are append-only. Every new log triggers an alert scan; an alert
type is raised at most once while an unresolved alert of that type exists.
"""

import logging
from datetime import datetime, timezone
from typing import List, Optional

from mindmatch.core.errors import InvalidTransitionError
from mindmatch.db.stores import RecordStore
from mindmatch.schemas.schemas import (
    MoodLog,
    MoodLogCreate,
    WellnessAlert,
    WellnessSummary,
)
from mindmatch.services.wellness_alerts import detect_wellness_alerts
from mindmatch.services.wellness_scorer import (
    RESILIENCE_WINDOW,
    calculate_resilience_score,
    generate_wellness_recommendations,
)

logger = logging.getLogger(__name__)


class WellnessService:

    def __init__(self, mood_logs: RecordStore, alerts: RecordStore):
        self.mood_logs = mood_logs
        self.alerts = alerts

    # ---------------- mood logs ----------------

    def log_mood(self, student_id: str, data: MoodLogCreate) -> MoodLog:
        row = self.mood_logs.insert({"student_id": student_id, **data.model_dump()})
        log = MoodLog.model_validate(row)
        self.scan_alerts(student_id)
        return log

    def list_mood_logs(self, student_id: str, limit: Optional[int] = None) -> List[MoodLog]:
        """Mood logs oldest -> newest; with limit, the newest `limit` entries."""
        if limit is None:
            rows = self.mood_logs.find(student_id=student_id, order_by="logged_at")
        else:
            rows = self.mood_logs.find(
                student_id=student_id, order_by="logged_at", descending=True, limit=limit
            )[::-1]
        return [MoodLog.model_validate(row) for row in rows]

    def get_summary(self, student_id: str) -> WellnessSummary:
        logs = self.list_mood_logs(student_id)
        latest = logs[-1] if logs else None
        recommendations = []
        if latest is not None:
            recommendations = generate_wellness_recommendations(
                latest.mood_score, latest.stress_level, latest.energy_level
            )
        return WellnessSummary(
            student_id=student_id,
            resilience_score=calculate_resilience_score(logs),
            log_count=len(logs),
            latest=latest,
            recommendations=recommendations,
        )

    # ---------------- alerts ----------------

    def scan_alerts(self, student_id: str, now: Optional[datetime] = None) -> List[WellnessAlert]:
        """Raise alerts for newly detected patterns. Returns the alerts created."""
        logs = self.list_mood_logs(student_id, limit=RESILIENCE_WINDOW)
        open_types = {
            row["alert_type"]
            for row in self.alerts.find(student_id=student_id, is_resolved=False)
        }
        created = []
        for candidate in detect_wellness_alerts(logs, now):
            if candidate.alert_type.value in open_types:
                continue
            row = self.alerts.insert({
                "student_id": student_id,
                "alert_type": candidate.alert_type,
                "severity": candidate.severity,
                "message": candidate.message,
                "is_resolved": False,
            })
            logger.info(
                "Wellness alert %s (%s) raised for student %s",
                candidate.alert_type.value, candidate.severity.value, student_id,
            )
            created.append(WellnessAlert.model_validate(row))
        return created

    def list_alerts(self, student_id: Optional[str] = None, include_resolved: bool = False) -> List[WellnessAlert]:
        filters = {}
        if student_id is not None:
            filters["student_id"] = student_id
        if not include_resolved:
            filters["is_resolved"] = False
        rows = self.alerts.find(order_by="triggered_at", descending=True, **filters)
        return [WellnessAlert.model_validate(row) for row in rows]

    def resolve_alert(self, alert_id: str, resolver_id: str, notes: Optional[str] = None) -> WellnessAlert:
        alert = WellnessAlert.model_validate(self.alerts.get(alert_id))
        if alert.is_resolved:
            raise InvalidTransitionError("Alert is already resolved")
        row = self.alerts.update(alert_id, {
            "is_resolved": True,
            "resolved_at": datetime.now(timezone.utc),
            "resolved_by": resolver_id,
            "resolution_notes": notes,
        })
        return WellnessAlert.model_validate(row)
