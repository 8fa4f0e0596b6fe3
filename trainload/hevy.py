"""
Training Load Analytics — Hevy payload adapter

Converts already-fetched Hevy API JSON (GET /v1/workouts pages,
GET /v1/exercise_templates pages) into engine inputs. No network here:
the caller owns fetching, paging and rate limiting.
"""
import logging
from datetime import datetime

from trainload.catalog import Catalog, ExerciseDefinition, MuscleInvolvement
from trainload.models import ExerciseLog, MuscleGroup, Role, SetRecord, WorkoutSession

logger = logging.getLogger(__name__)

# Hevy muscle names -> MuscleGroup. Unlisted Hevy groups (cardio,
# full_body, other) have no counterpart and are dropped.
HEVY_MUSCLE_MAP = {
    "abdominals": MuscleGroup.ABS,
    "upper_back": MuscleGroup.BACK,
    "chest": MuscleGroup.CHEST,
    "shoulders": MuscleGroup.SHOULDERS,
    "biceps": MuscleGroup.BICEPS,
    "triceps": MuscleGroup.TRICEPS,
    "forearms": MuscleGroup.FOREARMS,
    "quadriceps": MuscleGroup.QUADRICEPS,
    "hamstrings": MuscleGroup.HAMSTRINGS,
    "calves": MuscleGroup.CALVES,
    "glutes": MuscleGroup.GLUTES,
    "traps": MuscleGroup.TRAPS,
    "lats": MuscleGroup.LATS,
    "adductors": MuscleGroup.ADDUCTORS,
    "abductors": MuscleGroup.ABDUCTORS,
    "lower_back": MuscleGroup.LOWER_BACK,
    "neck": MuscleGroup.NECK,
}

# Hevy logs RPE; RIR is its complement on the 10-point scale
RPE_MAX = 10


def parse_timestamp(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _set_from_hevy(s: dict) -> SetRecord:
    rpe = s.get("rpe")
    return SetRecord(
        weight=float(s.get("weight_kg") or 0),
        reps=int(s.get("reps") or 0),
        completed=True,
        rir=max(0.0, RPE_MAX - float(rpe)) if rpe is not None else None,
        is_warmup=s.get("type") == "warmup",
    )


def sessions_from_hevy(workouts: list) -> list:
    """
    Hevy workouts -> WorkoutSession list, oldest first.

    Exercise ids are Hevy template ids. Hevy only stores finished sets,
    so every set is completed.
    """
    sessions = []
    for w in workouts:
        exercises = tuple(
            ExerciseLog(
                exercise_id=ex.get("exercise_template_id", ""),
                sets=tuple(_set_from_hevy(s) for s in ex.get("sets", [])),
            )
            for ex in w.get("exercises", [])
        )
        end = w.get("end_time")
        sessions.append(WorkoutSession(
            id=w["id"],
            start_time=parse_timestamp(w["start_time"]),
            end_time=parse_timestamp(end) if end else None,
            exercises=exercises,
        ))
    sessions.sort(key=lambda s: s.start_time)
    return sessions


def _muscle(name):
    return HEVY_MUSCLE_MAP.get((name or "").lower())


def catalog_from_hevy_templates(templates: list) -> Catalog:
    """Hevy exercise templates -> Catalog (primary group + secondary groups)."""
    definitions = []
    dropped = set()
    for t in templates:
        involvements = []
        primary = _muscle(t.get("primary_muscle_group"))
        if primary is None:
            dropped.add(t.get("primary_muscle_group"))
        else:
            involvements.append(MuscleInvolvement(primary, Role.PRIMARY))
        for name in t.get("secondary_muscle_groups", []) or []:
            m = _muscle(name)
            if m is None:
                dropped.add(name)
            else:
                involvements.append(MuscleInvolvement(m, Role.SECONDARY))
        definitions.append(ExerciseDefinition(
            id=t["id"],
            name=t.get("title", t["id"]),
            muscles=tuple(involvements),
        ))
    if dropped:
        logger.debug("Unmapped Hevy muscle groups: %s", sorted(str(d) for d in dropped))
    return Catalog(definitions)
