"""
Training Load Analytics — Progression Analyzer

Progressive-overload trend per exercise: compares the heaviest working
set of the last two weeks against the two weeks before (or the month
before that) and flags progressing / stagnant / regressing exercises.
"""
import logging
from datetime import datetime, timedelta
from typing import Optional, Sequence

import pandas as pd

from trainload import history as hist
from trainload.config import DEFAULT_SETTINGS, EngineSettings
from trainload.models import ExerciseProgressionStatus
from trainload.rounding import round_half_up

logger = logging.getLogger(__name__)

PROGRESSING, STAGNANT, REGRESSING, NEW = "progressing", "stagnant", "regressing", "new"
STATUS_ORDER = {REGRESSING: 0, STAGNANT: 1, NEW: 2, PROGRESSING: 3}

SUGGESTIONS = {
    NEW: "Not enough data for an analysis yet",
    PROGRESSING: "Keep going! Solid progression",
    REGRESSING: "Check sleep, nutrition and recovery. Consider planning a deload.",
    "more_volume": "Try increasing volume (more sets)",
    "more_weight": "Volume is high, try adding weight instead of sets",
    "variation": "Try an exercise variation or change the rep range",
}


def _percent_change(current: float, previous: float) -> int:
    if previous > 0:
        return round_half_up((current - previous) / previous * 100)
    return 0


def _mean_volume(sessions: pd.DataFrame) -> float:
    return sessions["total_volume"].sum() / max(len(sessions), 1)


def weeks_since_progress(max_weights: Sequence[float], current_max: float, cap: int = 12) -> int:
    """
    Approximate weeks without a new max.

    Walks back from the second-newest session while each session is at
    least as heavy as the running reference, counting sessions (capped),
    then halves the count assuming about two sessions per week.
    """
    count = 0
    reference = current_max
    for weight in max_weights[1:]:
        if count >= cap or weight < reference:
            break
        reference = weight
        count += 1
    return count // 2


def _stagnant_suggestion(volume_trend: int, settings: EngineSettings) -> str:
    if volume_trend < -settings.volume_trend_percent:
        return SUGGESTIONS["more_volume"]
    if volume_trend > settings.volume_trend_percent:
        return SUGGESTIONS["more_weight"]
    return SUGGESTIONS["variation"]


def analyze_exercise(sessions: pd.DataFrame, now: datetime, settings: EngineSettings = DEFAULT_SETTINGS) -> dict:
    """Progression verdict for one exercise's session summaries (any order)."""
    sessions = sessions.sort_values("start_time", ascending=False, kind="stable")
    dates = sessions["start_time"]
    two_weeks_ago = now - timedelta(weeks=settings.recent_weeks)
    four_weeks_ago = now - timedelta(weeks=settings.previous_weeks)
    eight_weeks_ago = now - timedelta(weeks=settings.older_weeks)

    recent = sessions[dates > two_weeks_ago]
    previous = sessions[(dates > four_weeks_ago) & (dates <= two_weeks_ago)]
    older = sessions[(dates > eight_weeks_ago) & (dates <= four_weeks_ago)]

    if not recent.empty:
        current_max = float(recent["max_weight"].max())
    else:
        current_max = float(sessions["max_weight"].iloc[0])

    if not previous.empty:
        previous_max = float(previous["max_weight"].max())
    elif not older.empty:
        previous_max = float(older["max_weight"].max())
    else:
        previous_max = current_max

    percent_change = _percent_change(current_max, previous_max)
    recent_volume = _mean_volume(recent)
    previous_volume = _mean_volume(previous)
    volume_trend = _percent_change(recent_volume, previous_volume)
    stale = weeks_since_progress(
        sessions["max_weight"].tolist(), current_max, settings.progress_lookback_sessions,
    )

    suggestion = None
    if len(sessions) < settings.min_progression_sessions:
        status = NEW
        suggestion = SUGGESTIONS[NEW]
    elif percent_change > settings.progressing_percent:
        status = PROGRESSING
        suggestion = SUGGESTIONS[PROGRESSING]
    elif percent_change < settings.regressing_percent:
        status = REGRESSING
        suggestion = SUGGESTIONS[REGRESSING]
    elif stale >= settings.stagnant_weeks:
        status = STAGNANT
        suggestion = _stagnant_suggestion(volume_trend, settings)
    else:
        status = PROGRESSING

    return {
        "status": status,
        "current_max": current_max,
        "previous_max": previous_max,
        "percent_change": percent_change,
        "volume_trend": volume_trend,
        "weeks_since_progress": stale,
        "last_trained": dates.iloc[0].to_pydatetime(),
        "session_count": len(sessions),
        "suggestion": suggestion,
    }


def compute_progression(
    catalog,
    history: Sequence,
    now: Optional[datetime] = None,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> list:
    """ExerciseProgressionStatus per logged exercise, problems first."""
    now = now or hist.default_now(history)
    sets = hist.sets_frame(catalog, history, upto=now)
    working = sets[sets["countable"] & ~sets["is_warmup"]]
    summary = hist.exercise_sessions_frame(working)
    if summary.empty:
        return []

    results = []
    for exercise_id, group in summary.groupby("exercise_id", sort=False):
        verdict = analyze_exercise(group, now, settings)
        results.append(ExerciseProgressionStatus(
            exercise_id=exercise_id,
            exercise_name=catalog.name(exercise_id),
            **verdict,
        ))

    results.sort(key=lambda r: r.last_trained, reverse=True)
    results.sort(key=lambda r: STATUS_ORDER[r.status])
    logger.debug("Progression computed for %d exercises", len(results))
    return results
