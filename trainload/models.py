"""
Training Load Analytics — Data model

Input records (sessions, exercise logs, sets), time windows and the derived
value objects every computation returns. Everything here is immutable:
the engine reads a history snapshot and hands back fresh records.
"""
from __future__ import annotations

from dataclasses import asdict, dataclass, fields, is_dataclass
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Optional, Sequence

import pandas as pd


class MuscleGroup(str, Enum):
    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    BICEPS = "biceps"
    TRICEPS = "triceps"
    FOREARMS = "forearms"
    ABS = "abs"
    QUADRICEPS = "quadriceps"
    HAMSTRINGS = "hamstrings"
    CALVES = "calves"
    GLUTES = "glutes"
    TRAPS = "traps"
    LATS = "lats"
    ADDUCTORS = "adductors"
    ABDUCTORS = "abductors"
    LOWER_BACK = "lower_back"
    NECK = "neck"


class Role(str, Enum):
    PRIMARY = "primary"
    SECONDARY = "secondary"


ALL_MUSCLES: tuple = tuple(MuscleGroup)


class InvalidWindowError(ValueError):
    """A time window whose end is not strictly after its start."""


def resolve_muscles(muscles: Optional[Sequence] = None) -> list:
    """Normalize an allow-list to MuscleGroup members (None = all muscles).

    Unknown names raise ValueError; duplicates keep their first position.
    """
    if muscles is None:
        return list(ALL_MUSCLES)
    resolved = []
    for m in muscles:
        member = MuscleGroup(m)
        if member not in resolved:
            resolved.append(member)
    return resolved


# ═════════════════════════════════════════════════════════════════════
# INPUT RECORDS
# ═════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class SetRecord:
    weight: float
    reps: int
    completed: bool = True
    rir: Optional[float] = None
    is_warmup: bool = False

    @property
    def countable(self) -> bool:
        """Completed and loaded. Bodyweight/empty sets never count."""
        return self.completed and self.weight > 0

    @property
    def volume(self) -> float:
        return self.weight * self.reps


@dataclass(frozen=True)
class ExerciseLog:
    exercise_id: str
    sets: tuple = ()


@dataclass(frozen=True)
class WorkoutSession:
    id: str
    start_time: datetime
    exercises: tuple = ()
    end_time: Optional[datetime] = None

    @property
    def trained_at(self) -> datetime:
        return self.end_time or self.start_time


@dataclass(frozen=True)
class TimeWindow:
    """Half-open interval [start, end)."""
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.end <= self.start:
            raise InvalidWindowError(
                f"Window end {self.end} must be after start {self.start}"
            )

    @property
    def length(self) -> timedelta:
        return self.end - self.start

    def shifted(self, delta: timedelta) -> "TimeWindow":
        return TimeWindow(self.start + delta, self.end + delta)

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end


def as_window(window) -> TimeWindow:
    """Accept a TimeWindow or a (start, end) pair; validates either way."""
    if isinstance(window, TimeWindow):
        return window
    start, end = window
    return TimeWindow(start, end)


# ═════════════════════════════════════════════════════════════════════
# DERIVED RECORDS
# ═════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class MuscleRecoveryStatus:
    muscle: MuscleGroup
    recovery_percent: int
    hours_remaining: int
    role: Optional[Role]
    status: str  # ready / recovering / fatigued
    last_trained: Optional[datetime] = None
    total_recovery_hours: float = 0.0


@dataclass(frozen=True)
class TrainingDayReadiness:
    name: str
    average_recovery: int
    muscles: tuple = ()
    ready: tuple = ()
    recovering: tuple = ()
    fatigued: tuple = ()


@dataclass(frozen=True)
class MuscleVolumeStatus:
    muscle: MuscleGroup
    effective_sets: float
    min: float
    optimal: float
    max: float
    status: str  # under / optimal / over
    trend: float
    primary_sets: int = 0
    secondary_sets: int = 0
    percent_of_optimal: int = 0


@dataclass(frozen=True)
class MuscleFrequencyStatus:
    muscle: MuscleGroup
    this_week_days: int
    last_week_days: int
    recommended: int
    trend: str  # up / down / same
    status: str  # optimal / low / undertrained


@dataclass(frozen=True)
class MuscleBalanceStatus:
    category: str
    label: str
    sets: int
    value: int  # 0-100, relative to the most trained category
    muscles: tuple = ()


@dataclass(frozen=True)
class MuscleBalance:
    score: int
    label: str  # very_balanced / balanced / needs_work / unbalanced
    categories: tuple = ()
    total_sets: int = 0


@dataclass(frozen=True)
class ExerciseProgressionStatus:
    exercise_id: str
    status: str  # progressing / stagnant / regressing / new
    current_max: float
    previous_max: float
    percent_change: int
    volume_trend: int
    suggestion: Optional[str] = None
    exercise_name: str = ""
    weeks_since_progress: int = 0
    last_trained: Optional[datetime] = None
    session_count: int = 0


@dataclass(frozen=True)
class AutoRegulationRecommendation:
    exercise_id: str
    last_weight: float
    last_reps: int
    last_rir: float
    avg_rir: float
    recommended_weight: float
    recommendation: str  # increase / maintain / decrease / deload
    reason: str
    confidence: str  # high / medium / low
    exercise_name: str = ""


@dataclass(frozen=True)
class PRPoint:
    date: datetime
    weight: float


@dataclass(frozen=True)
class PRMilestone:
    target_weight: float
    estimated_date: date
    weeks_away: int
    confidence: str


@dataclass(frozen=True)
class ExercisePRForecast:
    exercise_id: str
    current_max: float
    weekly_rate: float
    milestones: tuple = ()
    pr_points: tuple = ()
    exercise_name: str = ""
    current_max_date: Optional[datetime] = None
    raw_weekly_rate: float = 0.0
    fitted_weekly_rate: Optional[float] = None
    custom_milestone: Optional[PRMilestone] = None


@dataclass(frozen=True)
class PersonalRecord:
    exercise_id: str
    exercise_name: str
    weight: float
    reps: int
    e1rm: float
    date: datetime
    improvement_percent: int = 0


@dataclass(frozen=True)
class UnknownExercise:
    exercise_id: str
    session_count: int
    set_count: int
    first_seen: datetime
    last_seen: datetime


def records_to_frame(records: Sequence) -> pd.DataFrame:
    """Flatten result records into a DataFrame for display layers.

    Enum members are written as their plain string values; nested records
    (milestones, PR points) stay as tuples of dicts.
    """
    if not records:
        return pd.DataFrame()
    rows = []
    for rec in records:
        row = {}
        for f in fields(rec):
            value = getattr(rec, f.name)
            if isinstance(value, Enum):
                value = value.value
            elif isinstance(value, tuple):
                value = tuple(asdict(v) if is_dataclass(v) else v for v in value)
            elif is_dataclass(value):
                value = asdict(value)
            row[f.name] = value
        rows.append(row)
    return pd.DataFrame(rows)
