"""
Training Load Analytics — Personal records & data quality
"""
import logging
from typing import Optional, Sequence

from trainload import history as hist
from trainload.models import PersonalRecord
from trainload.rounding import round_half_up

logger = logging.getLogger(__name__)


def epley_e1rm(weight: float, reps: int) -> float:
    """Epley estimated 1RM, one decimal. Applies to singles too (100x1 -> 103.3)."""
    if weight <= 0 or reps <= 0:
        return 0.0
    return round(weight * (1 + reps / 30), 1)


def compute_personal_records(catalog, history: Sequence, limit: Optional[int] = None) -> list:
    """Best e1RM set per exercise over working sets, strongest first."""
    sets = hist.sets_frame(catalog, history)
    working = sets[sets["countable"] & ~sets["is_warmup"]].copy()
    if working.empty:
        return []

    working["e1rm"] = [epley_e1rm(w, r) for w, r in zip(working["weight"], working["reps"])]
    working = working[working["e1rm"] > 0].sort_values("start_time", kind="stable")
    if working.empty:
        return []

    records = []
    for exercise_id, ex_df in working.groupby("exercise_id", sort=False):
        best = ex_df.loc[ex_df["e1rm"].idxmax()]
        # baseline: the first working set ever logged
        first = ex_df["e1rm"].iloc[0]
        improvement = round_half_up((best["e1rm"] - first) / first * 100) if first > 0 else 0
        records.append(PersonalRecord(
            exercise_id=exercise_id,
            exercise_name=catalog.name(exercise_id),
            weight=float(best["weight"]),
            reps=int(best["reps"]),
            e1rm=float(best["e1rm"]),
            date=best["start_time"].to_pydatetime(),
            improvement_percent=improvement,
        ))

    records.sort(key=lambda r: r.e1rm, reverse=True)
    if limit is not None:
        records = records[:limit]
    return records


def detect_unknown_exercises(catalog, history: Sequence) -> list:
    """Exercise ids referenced by logs but missing from the catalog."""
    unknown = hist.unknown_exercises(catalog, history)
    if unknown:
        logger.info("%d unknown exercise id(s) in history", len(unknown))
    return unknown
