"""History builders shared by the test modules."""
from datetime import datetime, timedelta

from trainload.models import ExerciseLog, SetRecord, WorkoutSession

# Wednesday; its calendar week starts Monday 2026-03-02
NOW = datetime(2026, 3, 4, 18, 0)

BENCH = "ex1"          # chest P, triceps S, shoulders S
PULL_UP = "ex8"        # lats P, back P, biceps S
DEADLIFT = "ex14"      # back P, glutes P, hamstrings P, traps S
SQUAT = "ex33"         # quadriceps P, glutes P, hamstrings S
CURL = "ex23"          # biceps P
CRUNCH = "ex44"        # abs P


def sets(weight, reps=5, n=1, rir=None, completed=True, warmup=False):
    return tuple(
        SetRecord(weight=weight, reps=reps, completed=completed, rir=rir, is_warmup=warmup)
        for _ in range(n)
    )


def log(exercise_id, *set_groups):
    flat = tuple(s for group in set_groups for s in group)
    return ExerciseLog(exercise_id=exercise_id, sets=flat)


def session(sid, start, *logs, end=None):
    return WorkoutSession(id=sid, start_time=start, exercises=tuple(logs), end_time=end)


def series(exercise_id, weights, last, every=timedelta(weeks=1), reps=5, rirs=None):
    """One session per weight, evenly spaced, the last one at `last`."""
    out = []
    count = len(weights)
    for i, w in enumerate(weights):
        start = last - every * (count - 1 - i)
        rir = rirs[i] if rirs is not None else None
        out.append(session(f"{exercise_id}-{i}", start, log(exercise_id, sets(w, reps, rir=rir))))
    return out
