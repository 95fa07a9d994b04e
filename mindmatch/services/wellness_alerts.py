"""
Wellness alert heuristics.

Given a student's mood logs (oldest -> newest) decide which concerning
patterns are present right now:

- low_mood:        latest mood <= 3        (high, critical at <= 2)
- high_stress:     latest stress >= 8      (medium, high at >= 9)
- declining_trend: least-squares slope of mood over the last 7 logs
                   <= -0.5 per entry, with at least 4 logs (medium)
- no_activity:     no logs at all, or the latest is older than 7 days (low)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import List, Optional, Sequence

import numpy as np

from mindmatch.schemas.schemas import AlertSeverity, AlertType, MoodLog

TREND_WINDOW = 7
TREND_MIN_LOGS = 4
TREND_SLOPE_THRESHOLD = -0.5
INACTIVITY_PERIOD = timedelta(days=7)


@dataclass(frozen=True)
class AlertCandidate:
    alert_type: AlertType
    severity: AlertSeverity
    message: str


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def mood_trend_slope(mood_logs: Sequence[MoodLog]) -> Optional[float]:
    """Slope of mood_score per entry over the trend window, None if too short."""
    window = list(mood_logs)[-TREND_WINDOW:]
    if len(window) < TREND_MIN_LOGS:
        return None
    x = np.arange(len(window), dtype=float)
    y = np.array([log.mood_score for log in window], dtype=float)
    slope, _intercept = np.polyfit(x, y, 1)
    return float(slope)


def detect_wellness_alerts(mood_logs: Sequence[MoodLog], now: Optional[datetime] = None) -> List[AlertCandidate]:
    now = _as_utc(now or datetime.now(timezone.utc))
    logs = list(mood_logs)

    if not logs:
        return [AlertCandidate(
            AlertType.no_activity, AlertSeverity.low,
            "No mood entries logged yet",
        )]

    alerts: List[AlertCandidate] = []
    latest = logs[-1]

    if latest.mood_score <= 3:
        severity = AlertSeverity.critical if latest.mood_score <= 2 else AlertSeverity.high
        alerts.append(AlertCandidate(
            AlertType.low_mood, severity,
            f"Latest mood score is {latest.mood_score}/10",
        ))

    if latest.stress_level >= 8:
        severity = AlertSeverity.high if latest.stress_level >= 9 else AlertSeverity.medium
        alerts.append(AlertCandidate(
            AlertType.high_stress, severity,
            f"Latest stress level is {latest.stress_level}/10",
        ))

    slope = mood_trend_slope(logs)
    if slope is not None and slope <= TREND_SLOPE_THRESHOLD:
        alerts.append(AlertCandidate(
            AlertType.declining_trend, AlertSeverity.medium,
            f"Mood has been declining ({slope:.2f} points per entry)",
        ))

    if now - _as_utc(latest.logged_at) > INACTIVITY_PERIOD:
        alerts.append(AlertCandidate(
            AlertType.no_activity, AlertSeverity.low,
            f"No mood entry in the last {INACTIVITY_PERIOD.days} days",
        ))

    return alerts
