"""
Training Load Analytics — Auto-Regulation Engine

Next-session load per exercise from reported reps in reserve (RIR) over
the last four weeks.
"""
import logging
import math
from datetime import datetime, timedelta
from typing import Optional, Sequence

import pandas as pd

from trainload import history as hist
from trainload.config import DEFAULT_SETTINGS, EngineSettings
from trainload.models import AutoRegulationRecommendation
from trainload.rounding import round_half_up, round_to_increment

logger = logging.getLogger(__name__)

INCREASE, MAINTAIN, DECREASE, DELOAD = "increase", "maintain", "decrease", "deload"
RECOMMENDATION_ORDER = {DELOAD: 0, DECREASE: 1, INCREASE: 2, MAINTAIN: 3}


def _is_missing(value) -> bool:
    return value is None or (isinstance(value, float) and math.isnan(value))


def recommend(
    last_weight: float,
    session_rirs: Sequence,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> dict:
    """
    Recommendation from chronological per-session RIR (None when unreported).

    Returns last_rir, avg_rir, recommended_weight, recommendation, reason
    and confidence.
    """
    reported = [r for r in session_rirs if not _is_missing(r)]
    avg_rir = sum(reported) / len(reported) if reported else settings.default_rir
    latest = session_rirs[-1] if session_rirs else None
    last_rir = avg_rir if _is_missing(latest) else latest
    inc = settings.weight_increment

    if last_rir >= settings.increase_rir:
        recommendation = INCREASE
        weight = round_to_increment(last_weight * settings.increase_factor, inc)
        if weight == last_weight:
            weight = last_weight + inc
        reason = f"RIR {last_rir:.1f} - Reps left in the tank. Time to add weight."
        confidence = "high" if last_rir >= settings.easy_rir else "medium"
    elif last_rir >= settings.maintain_rir:
        if len(reported) >= settings.sustained_sessions and avg_rir >= settings.sustained_rir:
            recommendation = INCREASE
            weight = last_weight + inc
            reason = f"RIR {last_rir:.1f} - Consistent performance. Ready for the next step."
        else:
            recommendation = MAINTAIN
            weight = last_weight
            reason = f"RIR {last_rir:.1f} - Optimal intensity. Keep the weight."
        confidence = "high"
    elif last_rir >= settings.hard_rir:
        recommendation = MAINTAIN
        weight = last_weight
        reason = f"RIR {last_rir:.1f} - High intensity. Keep the weight to adapt."
        confidence = "high"
    else:
        recommendation = DECREASE
        weight = round_to_increment(last_weight * settings.decrease_factor, inc)
        reason = f"RIR {last_rir:.1f} - Too hard! Reduce the weight or take a deload."
        confidence = "high"

    window = list(session_rirs[-settings.deload_sessions:])
    low = [r for r in window if not _is_missing(r) and r < settings.deload_rir]
    if len(low) >= settings.deload_sessions:
        recommendation = DELOAD
        weight = round_to_increment(last_weight * settings.deload_factor, inc)
        cut = round_half_up((1 - settings.deload_factor) * 100)
        reason = (
            f"{settings.deload_sessions}+ sessions with RIR < {settings.deload_rir:g}. "
            f"Deload recommended: -{cut}% weight, -{cut}% volume."
        )
        confidence = "high"

    return {
        "last_rir": float(last_rir),
        "avg_rir": float(avg_rir),
        "recommended_weight": float(weight),
        "recommendation": recommendation,
        "reason": reason,
        "confidence": confidence,
    }


def compute_auto_regulation(
    catalog,
    history: Sequence,
    now: Optional[datetime] = None,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> list:
    """AutoRegulationRecommendation per exercise with enough recent sessions."""
    now = now or hist.default_now(history)
    cutoff = now - timedelta(days=settings.autoregulation_days)
    sets = hist.sets_frame(catalog, history, upto=now)
    recent = sets[sets["countable"]]
    if not recent.empty:
        recent = recent[recent["start_time"] >= cutoff]
    summary = hist.exercise_sessions_frame(recent)
    if summary.empty:
        return []

    results = []
    for exercise_id, group in summary.groupby("exercise_id", sort=False):
        group = group.sort_values("start_time", kind="stable")
        if len(group) < settings.min_autoregulation_sessions:
            continue
        latest = group.iloc[-1]
        rirs = [None if pd.isna(r) else float(r) for r in group["mean_rir"]]
        rec = recommend(float(latest["best_weight"]), rirs, settings)
        results.append(AutoRegulationRecommendation(
            exercise_id=exercise_id,
            exercise_name=catalog.name(exercise_id),
            last_weight=float(latest["best_weight"]),
            last_reps=int(latest["best_reps"]),
            **rec,
        ))

    results.sort(key=lambda r: (RECOMMENDATION_ORDER[r.recommendation], r.exercise_id))
    logger.debug("Auto-regulation computed for %d exercises", len(results))
    return results
