"""
Training Load Analytics — Volume Aggregator

Weekly effective sets per muscle: a working set counts 1 for each primary
muscle and 0.5 for each secondary muscle, classified against the muscle's
recommended {min, optimal, max} range.
"""
import logging
from typing import Optional, Sequence

import pandas as pd

from trainload import history as hist
from trainload.config import DEFAULT_SETTINGS, EngineSettings
from trainload.models import MuscleVolumeStatus, Role, TimeWindow, as_window, resolve_muscles
from trainload.rounding import round_half_up

logger = logging.getLogger(__name__)

UNDER, OPTIMAL, OVER = "under", "optimal", "over"
STATUS_ORDER = {UNDER: 0, OVER: 1, OPTIMAL: 2}


def classify_volume(effective_sets: float, volume_range: dict) -> str:
    if effective_sets < volume_range["min"]:
        return UNDER
    if effective_sets > volume_range["max"]:
        return OVER
    return OPTIMAL


def _set_counts(muscle_sets: pd.DataFrame, window: TimeWindow) -> pd.DataFrame:
    """Primary / secondary set counts per muscle inside the window."""
    scoped = hist.in_window(muscle_sets, window)
    if scoped.empty:
        return pd.DataFrame(columns=[Role.PRIMARY.value, Role.SECONDARY.value])
    counts = scoped.groupby(["muscle", "role"]).size().unstack(fill_value=0)
    return counts.reindex(columns=[Role.PRIMARY.value, Role.SECONDARY.value], fill_value=0)


def _effective(counts: pd.DataFrame, muscle: str, settings: EngineSettings):
    if muscle not in counts.index:
        return 0, 0, 0.0
    primary = int(counts.at[muscle, Role.PRIMARY.value])
    secondary = int(counts.at[muscle, Role.SECONDARY.value])
    return primary, secondary, primary + secondary * settings.secondary_set_weight


def compute_weekly_volume(
    catalog,
    history: Sequence,
    window,
    enabled_muscles: Optional[Sequence] = None,
    previous_window=None,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> list:
    """
    MuscleVolumeStatus for every allowed muscle, worst first.

    `window` is a TimeWindow or (start, end); the trend compares against
    `previous_window`, by default the window shifted back by its length.
    """
    window = as_window(window)
    prev = as_window(previous_window) if previous_window is not None else hist.previous_window(window)
    targets = resolve_muscles(enabled_muscles)

    sets = hist.sets_frame(catalog, history)
    working = sets[sets["countable"] & ~sets["is_warmup"]]
    muscle_sets = hist.muscle_sets_frame(catalog, working)

    current = _set_counts(muscle_sets, window)
    previous = _set_counts(muscle_sets, prev)

    results = []
    for muscle in targets:
        rng = settings.volume_range(muscle)
        primary, secondary, effective = _effective(current, muscle.value, settings)
        _, _, prev_effective = _effective(previous, muscle.value, settings)
        pct = round_half_up(effective / rng["optimal"] * 100) if rng["optimal"] > 0 else 0

        results.append(MuscleVolumeStatus(
            muscle=muscle,
            effective_sets=round_half_up(effective, 1),
            min=rng["min"],
            optimal=rng["optimal"],
            max=rng["max"],
            status=classify_volume(effective, rng),
            trend=round_half_up(effective - prev_effective, 1),
            primary_sets=primary,
            secondary_sets=secondary,
            percent_of_optimal=pct,
        ))

    # worst first: under, over, optimal; then furthest from optimal
    results.sort(key=lambda r: abs(r.effective_sets - r.optimal), reverse=True)
    results.sort(key=lambda r: STATUS_ORDER[r.status])
    logger.debug("Weekly volume computed for %d muscles in %s", len(results), window)
    return results
