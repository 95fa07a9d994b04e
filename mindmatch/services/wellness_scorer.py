"""
Wellness Scorer - resilience score and recommendation rules.

Pure functions, no I/O.

Resilience score (0-100) over the last 7 mood logs:
    round((avg_mood * 0.4 + (10 - avg_stress) * 0.3 + avg_energy * 0.3) * 10)
A neutral history (5, 5, 5) scores exactly 50; an empty one defaults to 50.
"""

import math
from dataclasses import dataclass
from typing import Any, Callable, List, Sequence, Tuple

RESILIENCE_WINDOW = 7
NEUTRAL_SCORE = 50
DEFAULT_SAMPLE = 5

MOOD_WEIGHT = 0.4
STRESS_WEIGHT = 0.3
ENERGY_WEIGHT = 0.3


def _sample(log: Any, field: str) -> float:
    if isinstance(log, dict):
        value = log.get(field)
    else:
        value = getattr(log, field, None)
    return DEFAULT_SAMPLE if value is None else value


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def calculate_resilience_score(mood_logs: Sequence[Any]) -> int:
    """
    Resilience score from mood logs ordered oldest -> newest.

    Accepts MoodLog models or plain dicts; a missing score counts as 5.
    """
    window = list(mood_logs)[-RESILIENCE_WINDOW:]
    if not window:
        return NEUTRAL_SCORE

    count = len(window)
    avg_mood = sum(_sample(log, "mood_score") for log in window) / count
    avg_stress = sum(_sample(log, "stress_level") for log in window) / count
    avg_energy = sum(_sample(log, "energy_level") for log in window) / count

    score = _round_half_up(
        (avg_mood * MOOD_WEIGHT + (10 - avg_stress) * STRESS_WEIGHT + avg_energy * ENERGY_WEIGHT) * 10
    )
    return max(0, min(100, score))


# ============================================================
# RECOMMENDATION RULES
# ============================================================

@dataclass(frozen=True)
class WellnessRule:
    name: str
    predicate: Callable[[int, int, int], bool]
    messages: Tuple[str, ...]

    def matches(self, mood: int, stress: int, energy: int) -> bool:
        return self.predicate(mood, stress, energy)


LOW_MOOD_RULE = WellnessRule(
    name="low_mood",
    predicate=lambda mood, stress, energy: mood < 4,
    messages=(
        "Consider talking to a counselor or trusted friend",
        "Try engaging in activities you enjoy",
    ),
)

HIGH_STRESS_RULE = WellnessRule(
    name="high_stress",
    predicate=lambda mood, stress, energy: stress > 7,
    messages=(
        "Practice deep breathing or meditation",
        "Take regular breaks from work/study",
        "Consider time management techniques",
    ),
)

LOW_ENERGY_RULE = WellnessRule(
    name="low_energy",
    predicate=lambda mood, stress, energy: energy < 4,
    messages=(
        "Ensure you're getting adequate sleep",
        "Try light exercise or a short walk",
        "Check your nutrition and hydration",
    ),
)

WELLNESS_RULES: Tuple[WellnessRule, ...] = (LOW_MOOD_RULE, HIGH_STRESS_RULE, LOW_ENERGY_RULE)

POSITIVE_MESSAGES: Tuple[str, ...] = (
    "Keep up the great work on your wellness!",
    "Continue your current healthy habits",
)


def generate_wellness_recommendations(
    mood: int,
    stress: int,
    energy: int,
    rules: Sequence[WellnessRule] = WELLNESS_RULES,
) -> List[str]:
    """Every matching rule contributes its messages; none matching -> positive set."""
    recommendations: List[str] = []
    for rule in rules:
        if rule.matches(mood, stress, energy):
            recommendations.extend(rule.messages)
    if not recommendations:
        recommendations.extend(POSITIVE_MESSAGES)
    return recommendations
