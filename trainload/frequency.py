"""
Training Load Analytics — Frequency Analyzer

Distinct training days per muscle per week. Only primary involvement
counts; secondary work is a volume concern, not a frequency one.
"""
import logging
from typing import Optional, Sequence

from trainload import history as hist
from trainload.config import DEFAULT_SETTINGS, EngineSettings
from trainload.models import MuscleFrequencyStatus, Role, as_window, resolve_muscles

logger = logging.getLogger(__name__)

STATUS_ORDER = {"undertrained": 0, "low": 1, "optimal": 2}


def classify_frequency(days: int, recommended: int) -> str:
    if days >= recommended:
        return "optimal"
    if days == recommended - 1:
        return "low"
    return "undertrained"


def _trend(this_week: int, last_week: int) -> str:
    if this_week > last_week:
        return "up"
    if this_week < last_week:
        return "down"
    return "same"


def compute_frequency(
    catalog,
    history: Sequence,
    this_week,
    last_week,
    enabled_muscles: Optional[Sequence] = None,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> list:
    this_week = as_window(this_week)
    last_week = as_window(last_week)
    targets = resolve_muscles(enabled_muscles)

    sets = hist.sets_frame(catalog, history)
    muscle_sets = hist.muscle_sets_frame(catalog, sets[sets["countable"]])
    primary = muscle_sets[muscle_sets["role"] == Role.PRIMARY.value]

    def days_per_muscle(window) -> dict:
        scoped = hist.in_window(primary, window)
        if scoped.empty:
            return {}
        return scoped.groupby("muscle")["day"].nunique().to_dict()

    current = days_per_muscle(this_week)
    previous = days_per_muscle(last_week)

    results = []
    for muscle in targets:
        recommended = settings.recommended_frequency(muscle)
        days = int(current.get(muscle.value, 0))
        prev_days = int(previous.get(muscle.value, 0))
        results.append(MuscleFrequencyStatus(
            muscle=muscle,
            this_week_days=days,
            last_week_days=prev_days,
            recommended=recommended,
            trend=_trend(days, prev_days),
            status=classify_frequency(days, recommended),
        ))

    results.sort(key=lambda r: (STATUS_ORDER[r.status], -r.this_week_days))
    logger.debug("Frequency computed for %d muscles", len(results))
    return results
