"""
Training Load Analytics — PR Forecaster

Projects when each exercise's next weight milestones will be reached,
from the running personal-record sequence of session top weights.
"""
import logging
import math
from dataclasses import replace
from datetime import datetime, timedelta
from typing import Mapping, Optional, Sequence

import numpy as np

from trainload import history as hist
from trainload.config import DEFAULT_SETTINGS, EngineSettings
from trainload.models import ExercisePRForecast, PRMilestone, PRPoint
from trainload.rounding import round_half_up

logger = logging.getLogger(__name__)


def running_prs(points: Sequence) -> list:
    """Keep each (date, weight) that beats every earlier weight. Input chronological."""
    prs = []
    best = 0.0
    for date, weight in points:
        if weight > best:
            best = weight
            prs.append(PRPoint(date=date, weight=float(weight)))
    return prs


def raw_weekly_rate(prs: Sequence[PRPoint]) -> float:
    """Gain per week between first and last PR (weeks floored at 1). 0 for < 2 PRs."""
    if len(prs) < 2:
        return 0.0
    first, last = prs[0], prs[-1]
    days = (last.date - first.date).days
    weeks = max(1, days / 7)
    return (last.weight - first.weight) / weeks


def fitted_weekly_rate(prs: Sequence[PRPoint]) -> Optional[float]:
    """Least-squares slope (per week) through the PR points."""
    if len(prs) < 2:
        return None
    origin = prs[0].date
    x = np.array([(p.date - origin).total_seconds() / 604800 for p in prs], dtype=float)
    y = np.array([p.weight for p in prs], dtype=float)
    if np.ptp(x) == 0:
        return None
    slope = np.polyfit(x, y, 1)[0]
    return round(float(slope), 2)


def damped_weekly_rate(prs: Sequence[PRPoint], settings: EngineSettings = DEFAULT_SETTINGS) -> float:
    """
    Raw rate scaled by a diminishing-returns factor (heavier = slower).

    Floored at min_weekly_rate whenever there was any gain; a flat history
    (a single PR) also uses the floor so milestones stay reachable.
    """
    current = prs[-1].weight
    gain = prs[-1].weight - prs[0].weight
    damping = max(settings.damping_floor, 1 - current / settings.damping_reference)
    rate = raw_weekly_rate(prs) * damping
    if (gain > 0 or len(prs) < 2) and rate < settings.min_weekly_rate:
        rate = settings.min_weekly_rate
    return rate


def milestone_targets(current_max: float, settings: EngineSettings = DEFAULT_SETTINGS) -> list:
    step = (
        settings.milestone_step_large
        if current_max >= settings.milestone_step_threshold
        else settings.milestone_step_small
    )
    base = math.ceil(current_max / settings.milestone_rounding) * settings.milestone_rounding
    targets = [base + step * i for i in range(1, settings.milestone_count + 1)]
    return [t for t in targets if t > current_max]


def _confidence(weeks: float, pr_count: int, settings: EngineSettings) -> str:
    if weeks <= settings.high_confidence_weeks and pr_count >= settings.high_confidence_points:
        return "high"
    if weeks <= settings.medium_confidence_weeks and pr_count >= settings.medium_confidence_points:
        return "medium"
    return "low"


def project_milestone(
    target: float,
    current_max: float,
    weekly_rate: float,
    pr_count: int,
    now: datetime,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> PRMilestone:
    weeks = (target - current_max) / weekly_rate
    return PRMilestone(
        target_weight=target,
        estimated_date=(now + timedelta(weeks=weeks)).date(),
        weeks_away=round_half_up(weeks),
        confidence=_confidence(weeks, pr_count, settings),
    )


def forecast_custom_target(
    forecast: ExercisePRForecast,
    target: float,
    now: Optional[datetime] = None,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> Optional[PRMilestone]:
    """Milestone for an ad-hoc target; None when the target is not above the current max."""
    if target is None or target <= forecast.current_max or forecast.weekly_rate <= 0:
        return None
    now = now or datetime.now(forecast.current_max_date.tzinfo if forecast.current_max_date else None)
    return project_milestone(
        target, forecast.current_max, forecast.weekly_rate, len(forecast.pr_points), now, settings,
    )


def forecast_exercise(
    exercise_id: str,
    points: Sequence,
    now: datetime,
    exercise_name: str = "",
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> Optional[ExercisePRForecast]:
    """Forecast from chronological (date, session max weight) points; None if too few."""
    if len(points) < settings.min_forecast_sessions:
        return None
    prs = running_prs(points)
    if not prs:
        return None

    current = prs[-1]
    rate = damped_weekly_rate(prs, settings)
    milestones = ()
    if rate > 0:
        milestones = tuple(
            project_milestone(t, current.weight, rate, len(prs), now, settings)
            for t in milestone_targets(current.weight, settings)
        )
    return ExercisePRForecast(
        exercise_id=exercise_id,
        exercise_name=exercise_name,
        current_max=current.weight,
        current_max_date=current.date,
        weekly_rate=round_half_up(rate, 2),
        raw_weekly_rate=round_half_up(raw_weekly_rate(prs), 2),
        fitted_weekly_rate=fitted_weekly_rate(prs),
        milestones=milestones,
        pr_points=tuple(prs),
    )


def compute_pr_forecast(
    catalog,
    history: Sequence,
    custom_targets: Optional[Mapping] = None,
    now: Optional[datetime] = None,
    settings: EngineSettings = DEFAULT_SETTINGS,
) -> list:
    """ExercisePRForecast per exercise with enough sessions, most recent PR first."""
    now = now or hist.default_now(history)
    custom_targets = custom_targets or {}
    sets = hist.sets_frame(catalog, history, upto=now)
    summary = hist.exercise_sessions_frame(sets[sets["countable"]])
    if summary.empty:
        return []

    results = []
    for exercise_id, group in summary.groupby("exercise_id", sort=False):
        group = group.sort_values("start_time", kind="stable")
        points = [
            (ts.to_pydatetime(), float(w))
            for ts, w in zip(group["start_time"], group["max_weight"])
        ]
        forecast = forecast_exercise(exercise_id, points, now, catalog.name(exercise_id), settings)
        if forecast is None:
            continue
        if exercise_id in custom_targets:
            custom = forecast_custom_target(forecast, custom_targets[exercise_id], now, settings)
            forecast = replace(forecast, custom_milestone=custom)
        results.append(forecast)

    results.sort(key=lambda f: f.current_max_date, reverse=True)
    logger.debug("PR forecasts computed for %d exercises", len(results))
    return results
