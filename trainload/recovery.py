"""
Training Load Analytics — Recovery Model

Linear recovery per muscle: 0 % right after training, 100 % once the
muscle's recovery time (shortened for secondary involvement) has elapsed.
"""
import logging
import math
from datetime import datetime
from typing import Mapping, Optional, Sequence

from trainload import history as hist
from trainload.config import DEFAULT_SETTINGS, EngineSettings
from trainload.models import (
    MuscleRecoveryStatus,
    Role,
    TrainingDayReadiness,
    resolve_muscles,
)
from trainload.rounding import round_half_up

logger = logging.getLogger(__name__)

READY, RECOVERING, FATIGUED = "ready", "recovering", "fatigued"


def recovery_status(percent: int, settings: EngineSettings = DEFAULT_SETTINGS) -> str:
    if percent >= settings.ready_threshold:
        return READY
    if percent >= settings.recovering_threshold:
        return RECOVERING
    return FATIGUED


def _last_trained(catalog, sessions, now: datetime) -> dict:
    """
    {muscle: (trained_at, role)} from each muscle's most recent session.

    Any completed loaded set is a training signal, warmups included.
    Primary wins when a muscle had both roles in that session.
    """
    sets = hist.sets_frame(catalog, sessions, upto=now)
    signal = hist.muscle_sets_frame(catalog, sets[sets["countable"]])
    if signal.empty:
        return {}

    last_start = signal.groupby("muscle")["start_time"].transform("max")
    latest = signal[signal["start_time"] == last_start]
    per_muscle = latest.groupby("muscle").agg(
        trained_at=("trained_at", "max"),
        primary=("role", lambda roles: (roles == Role.PRIMARY.value).any()),
    )
    return {
        muscle: (
            row.trained_at.to_pydatetime(),
            Role.PRIMARY if row.primary else Role.SECONDARY,
        )
        for muscle, row in per_muscle.iterrows()
    }


def compute_recovery(
    catalog,
    history: Sequence,
    now: Optional[datetime] = None,
    muscles: Optional[Sequence] = None,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> list:
    """One MuscleRecoveryStatus per muscle, in enumeration (or allow-list) order."""
    targets = resolve_muscles(muscles)
    now = now or hist.default_now(history)
    last = _last_trained(catalog, history, now)

    results = []
    for muscle in targets:
        if muscle.value not in last:
            # never trained: nothing to recover from
            results.append(MuscleRecoveryStatus(
                muscle=muscle,
                recovery_percent=100,
                hours_remaining=0,
                role=None,
                status=READY,
                last_trained=None,
                total_recovery_hours=settings.recovery_hours(muscle),
            ))
            continue

        trained_at, role = last[muscle.value]
        total = settings.total_recovery_hours(muscle, role)
        elapsed = (now - trained_at).total_seconds() / 3600
        if total > 0:
            pct = min(100, max(0, round_half_up(elapsed / total * 100)))
        else:
            pct = 100
        remaining = max(0, math.ceil((100 - pct) / 100 * total))

        results.append(MuscleRecoveryStatus(
            muscle=muscle,
            recovery_percent=pct,
            hours_remaining=remaining,
            role=role,
            status=recovery_status(pct, settings),
            last_trained=trained_at,
            total_recovery_hours=total,
        ))

    logger.debug("Recovery computed for %d muscles (%d trained)", len(results), len(last))
    return results


def summarize_recovery(statuses: Sequence[MuscleRecoveryStatus]) -> dict:
    """Overall readiness: average recovery plus per-status counts."""
    if not statuses:
        average = 100
    else:
        average = round_half_up(sum(s.recovery_percent for s in statuses) / len(statuses))
    return {
        "average_recovery": average,
        "ready": sum(1 for s in statuses if s.status == READY),
        "recovering": sum(1 for s in statuses if s.status == RECOVERING),
        "fatigued": sum(1 for s in statuses if s.status == FATIGUED),
        "muscles": len(statuses),
    }


def compute_training_day_readiness(
    catalog,
    statuses: Sequence[MuscleRecoveryStatus],
    training_days: Mapping,
    muscles: Optional[Sequence] = None,
) -> list:
    """
    Readiness of each planned training day ({name: [exercise ids]}).

    Averages recovery over the distinct muscles the day's exercises
    involve, in any role. A day that involves no tracked muscle is 100.
    """
    allowed = set(resolve_muscles(muscles))
    by_muscle = {s.muscle: s for s in statuses}

    results = []
    for name, exercise_ids in training_days.items():
        day_muscles = []
        for ex_id in exercise_ids:
            for inv in catalog.involvements(ex_id):
                if inv.muscle in allowed and inv.muscle in by_muscle and inv.muscle not in day_muscles:
                    day_muscles.append(inv.muscle)

        day_statuses = [by_muscle[m] for m in day_muscles]
        if day_statuses:
            average = round_half_up(sum(s.recovery_percent for s in day_statuses) / len(day_statuses))
        else:
            average = 100

        results.append(TrainingDayReadiness(
            name=name,
            average_recovery=average,
            muscles=tuple(day_muscles),
            ready=tuple(s.muscle for s in day_statuses if s.status == READY),
            recovering=tuple(s.muscle for s in day_statuses if s.status == RECOVERING),
            fatigued=tuple(s.muscle for s in day_statuses if s.status == FATIGUED),
        ))
    return results
