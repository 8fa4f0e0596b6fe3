"""
Training Load Analytics — History frames

Flattens a workout history snapshot into the DataFrames every component
aggregates over:

    sets_frame              one row per logged set (known exercises only)
    muscle_sets_frame       one row per set × involved muscle
    exercise_sessions_frame one row per exercise × session

plus Monday-start week window helpers.
"""
import logging
from datetime import datetime, timedelta
from typing import Sequence

import pandas as pd

from trainload.models import TimeWindow, UnknownExercise, WorkoutSession

logger = logging.getLogger(__name__)

SET_COLUMNS = [
    "session_id", "start_time", "trained_at", "exercise_id", "set_index",
    "weight", "reps", "rir", "completed", "is_warmup",
]

SUMMARY_COLUMNS = [
    "exercise_id", "session_id", "start_time", "trained_at", "max_weight",
    "total_volume", "n_sets", "mean_rir", "best_weight", "best_reps",
]


def default_now(sessions: Sequence[WorkoutSession]) -> datetime:
    """Current time, in the timezone of the history (naive if it is naive)."""
    tz = sessions[0].start_time.tzinfo if sessions else None
    return datetime.now(tz)


def flatten_sets(sessions: Sequence[WorkoutSession]) -> pd.DataFrame:
    """One row per set, catalog-agnostic. Always carries SET_COLUMNS + derived columns."""
    rows = []
    for session in sessions:
        for log in session.exercises:
            for i, s in enumerate(log.sets):
                rows.append({
                    "session_id": session.id,
                    "start_time": session.start_time,
                    "trained_at": session.trained_at,
                    "exercise_id": log.exercise_id,
                    "set_index": i,
                    "weight": s.weight,
                    "reps": s.reps,
                    "rir": s.rir,
                    "completed": s.completed,
                    "is_warmup": s.is_warmup,
                })

    df = pd.DataFrame(rows, columns=SET_COLUMNS)
    df["start_time"] = pd.to_datetime(df["start_time"])
    df["trained_at"] = pd.to_datetime(df["trained_at"])
    df["weight"] = df["weight"].astype("float64")
    df["reps"] = df["reps"].astype("int64")
    df["rir"] = df["rir"].astype("float64")
    df["completed"] = df["completed"].astype(bool)
    df["is_warmup"] = df["is_warmup"].astype(bool)
    df["countable"] = df["completed"] & (df["weight"] > 0)
    df["volume"] = df["weight"] * df["reps"]
    df["day"] = df["start_time"].dt.date
    return df


def sets_frame(catalog, sessions: Sequence[WorkoutSession], upto: datetime = None) -> pd.DataFrame:
    """
    Flattened sets restricted to exercises present in the catalog.

    Logs referencing unknown exercises are skipped with a single warning.
    With `upto`, sessions starting after that moment are dropped.
    """
    df = flatten_sets(sessions)
    if df.empty:
        return df

    known = df["exercise_id"].isin(catalog.ids)
    if not known.all():
        skipped = sorted(df.loc[~known, "exercise_id"].unique())
        logger.warning(
            "Skipping %d set(s) for %d exercise(s) not in catalog: %s",
            int((~known).sum()), len(skipped), ", ".join(skipped),
        )
        df = df[known]

    if upto is not None and not df.empty:
        df = df[df["start_time"] <= upto]
    return df.reset_index(drop=True)


def muscle_sets_frame(catalog, sets: pd.DataFrame) -> pd.DataFrame:
    """Join each set with its exercise's involvements (adds `muscle`, `role`)."""
    return sets.merge(catalog.involvement_frame(), on="exercise_id", how="inner")


def exercise_sessions_frame(sets: pd.DataFrame) -> pd.DataFrame:
    """
    Per exercise × session summary over the given sets.

    Several logs of the same exercise in one session are merged. The best
    set is the highest weight × reps; ties keep the earliest set.
    `mean_rir` is NaN when no set carries an RIR.
    """
    if sets.empty:
        return pd.DataFrame(columns=SUMMARY_COLUMNS)

    keys = ["exercise_id", "session_id"]
    summary = (
        sets.groupby(keys, sort=False)
        .agg(
            start_time=("start_time", "min"),
            trained_at=("trained_at", "max"),
            max_weight=("weight", "max"),
            total_volume=("volume", "sum"),
            n_sets=("weight", "size"),
            mean_rir=("rir", "mean"),
        )
        .reset_index()
    )
    # rows are in logged order, so idxmax keeps the earliest of equal sets
    best_idx = sets.groupby(keys, sort=False)["volume"].idxmax()
    best = (
        sets.loc[best_idx.values, keys + ["weight", "reps"]]
        .rename(columns={"weight": "best_weight", "reps": "best_reps"})
    )
    summary = summary.merge(best, on=keys, how="left")
    return summary.sort_values(["exercise_id", "start_time"], kind="stable").reset_index(drop=True)


def in_window(df: pd.DataFrame, window: TimeWindow, column: str = "start_time") -> pd.DataFrame:
    if df.empty:
        return df
    return df[(df[column] >= window.start) & (df[column] < window.end)]


def unknown_exercises(catalog, sessions: Sequence[WorkoutSession]) -> list:
    """Exercise ids logged but absent from the catalog, most recently seen first."""
    df = flatten_sets(sessions)
    if df.empty:
        return []
    unknown = df[~df["exercise_id"].isin(catalog.ids)]
    if unknown.empty:
        return []
    agg = (
        unknown.groupby("exercise_id")
        .agg(
            session_count=("session_id", "nunique"),
            set_count=("set_index", "size"),
            first_seen=("start_time", "min"),
            last_seen=("start_time", "max"),
        )
        .reset_index()
        .sort_values(["last_seen", "exercise_id"], ascending=[False, True])
    )
    return [
        UnknownExercise(
            exercise_id=r.exercise_id,
            session_count=int(r.session_count),
            set_count=int(r.set_count),
            first_seen=r.first_seen.to_pydatetime(),
            last_seen=r.last_seen.to_pydatetime(),
        )
        for r in agg.itertuples(index=False)
    ]


# ═════════════════════════════════════════════════════════════════════
# WEEK WINDOWS
# ═════════════════════════════════════════════════════════════════════

def week_window(moment: datetime) -> TimeWindow:
    """Calendar week containing `moment`: Monday 00:00 to next Monday 00:00."""
    start = moment.replace(hour=0, minute=0, second=0, microsecond=0)
    start -= timedelta(days=start.weekday())
    return TimeWindow(start, start + timedelta(days=7))


def previous_window(window: TimeWindow) -> TimeWindow:
    return window.shifted(-window.length)
