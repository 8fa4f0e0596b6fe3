"""
Training Load Analytics — Muscle Balance

Pools countable sets into display categories (chest, back, legs, ...) by
each exercise's first primary muscle, scales every category against the
most trained one and scores how evenly the work is spread:

    score = max(0, 100 - std(category values))
"""
import logging
from typing import Optional, Sequence

import numpy as np
import pandas as pd

from trainload import history as hist
from trainload.config import BALANCE_CATEGORIES, DEFAULT_SETTINGS, EngineSettings
from trainload.models import MuscleBalance, MuscleBalanceStatus, Role, as_window, resolve_muscles
from trainload.rounding import round_half_up

logger = logging.getLogger(__name__)


def balance_label(score: int, settings: EngineSettings = DEFAULT_SETTINGS) -> str:
    if score >= settings.very_balanced_score:
        return "very_balanced"
    if score >= settings.balanced_score:
        return "balanced"
    if score >= settings.needs_work_score:
        return "needs_work"
    return "unbalanced"


def balance_score(values: Sequence[int]) -> int:
    """100 minus the population standard deviation of the 0-100 values."""
    if len(values) == 0:
        return 100
    spread = float(np.std(np.asarray(values, dtype=float)))
    return max(0, round_half_up(100 - spread))


def _primary_muscle_frame(catalog) -> pd.DataFrame:
    """exercise_id -> the exercise's first primary muscle (secondaries ignored)."""
    rows = []
    for definition in catalog:
        primary = catalog.muscles_for(definition.id, Role.PRIMARY)
        if primary:
            rows.append({"exercise_id": definition.id, "muscle": primary[0].value})
    return pd.DataFrame(rows, columns=["exercise_id", "muscle"])


def compute_muscle_balance(
    catalog,
    history: Sequence,
    window=None,
    muscles: Optional[Sequence] = None,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> MuscleBalance:
    """
    Set distribution across balance categories, most trained first.

    Counts completed, loaded sets (warmups included) over the whole
    history, or only inside `window` when given. `muscles` restricts
    which muscles count; categories without a tracked muscle are left out.
    """
    targets = resolve_muscles(muscles)
    category_of = {m.value: settings.balance_category(m) for m in targets}
    members = {}
    for m in targets:
        members.setdefault(category_of[m.value], []).append(m)
    categories = [c for c in BALANCE_CATEGORIES if c in members]

    sets = hist.sets_frame(catalog, history)
    counted = sets[sets["countable"]]
    if window is not None:
        counted = hist.in_window(counted, as_window(window))
    counted = counted.merge(_primary_muscle_frame(catalog), on="exercise_id", how="inner")
    counted = counted[counted["muscle"].isin(list(category_of))]

    if counted.empty:
        per_category = {}
    else:
        per_category = counted["muscle"].map(category_of).value_counts().to_dict()

    top = max([per_category.get(c, 0) for c in categories] + [1])
    statuses = []
    for category in categories:
        n = int(per_category.get(category, 0))
        statuses.append(MuscleBalanceStatus(
            category=category,
            label=BALANCE_CATEGORIES[category],
            sets=n,
            value=round_half_up(n / top * 100),
            muscles=tuple(members[category]),
        ))
    statuses.sort(key=lambda s: s.sets, reverse=True)

    score = balance_score([s.value for s in statuses])
    logger.debug("Muscle balance over %d categories: score %d", len(statuses), score)
    return MuscleBalance(
        score=score,
        label=balance_label(score, settings),
        categories=tuple(statuses),
        total_sets=sum(s.sets for s in statuses),
    )
