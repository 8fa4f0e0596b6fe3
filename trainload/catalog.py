"""
Training Load Analytics — Exercise-Muscle Catalog

Static lookup: exercise id -> ordered (muscle, role) involvements.
Names are only used for display, never for lookup.
"""
from dataclasses import dataclass
from typing import Iterable, Optional

import pandas as pd

from trainload.models import MuscleGroup, Role


@dataclass(frozen=True)
class MuscleInvolvement:
    muscle: MuscleGroup
    role: Role = Role.PRIMARY

    def __post_init__(self):
        object.__setattr__(self, "muscle", MuscleGroup(self.muscle))
        object.__setattr__(self, "role", Role(self.role))


@dataclass(frozen=True)
class ExerciseDefinition:
    id: str
    name: str
    muscles: tuple = ()
    muscle_groups: tuple = ()  # legacy flat list, used when `muscles` is empty

    def involvements(self) -> tuple:
        """
        Resolved involvement list, one entry per muscle.

        Exercises without an explicit list fall back to the legacy flat
        list: first muscle primary, the rest secondary. A muscle listed
        twice keeps its primary role.
        """
        if self.muscles:
            pairs = [(m.muscle, m.role) for m in self.muscles]
        else:
            pairs = [
                (MuscleGroup(m), Role.PRIMARY if i == 0 else Role.SECONDARY)
                for i, m in enumerate(self.muscle_groups)
            ]
        resolved = {}
        for muscle, role in pairs:
            if resolved.get(muscle) == Role.PRIMARY:
                continue
            resolved[muscle] = role
        return tuple(MuscleInvolvement(m, r) for m, r in resolved.items())


class Catalog:
    """Immutable exercise lookup keyed by exercise id."""

    def __init__(self, definitions: Iterable[ExerciseDefinition] = ()):
        self._definitions = {d.id: d for d in definitions}
        self._involvements = {
            ex_id: d.involvements() for ex_id, d in self._definitions.items()
        }

    @classmethod
    def from_dict(cls, db: dict) -> "Catalog":
        """Build from an EXERCISE_DB-style dict: {id: {name, muscles, ...}}."""
        definitions = []
        for ex_id, entry in db.items():
            definitions.append(ExerciseDefinition(
                id=ex_id,
                name=entry.get("name", ex_id),
                muscles=tuple(MuscleInvolvement(m, r) for m, r in entry.get("muscles", ())),
                muscle_groups=tuple(entry.get("muscle_groups", ())),
            ))
        return cls(definitions)

    def __contains__(self, exercise_id) -> bool:
        return exercise_id in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def __iter__(self):
        return iter(self._definitions.values())

    @property
    def ids(self) -> set:
        return set(self._definitions)

    def get(self, exercise_id: str) -> Optional[ExerciseDefinition]:
        return self._definitions.get(exercise_id)

    def name(self, exercise_id: str) -> str:
        d = self._definitions.get(exercise_id)
        return d.name if d else exercise_id

    def involvements(self, exercise_id: str) -> tuple:
        """Resolved involvements, () for unknown exercises."""
        return self._involvements.get(exercise_id, ())

    def muscles_for(self, exercise_id: str, role: Optional[Role] = None) -> list:
        return [
            inv.muscle for inv in self.involvements(exercise_id)
            if role is None or inv.role == role
        ]

    def involvement_frame(self) -> pd.DataFrame:
        """One row per (exercise_id, muscle, role), muscle/role as plain strings."""
        rows = [
            {"exercise_id": ex_id, "muscle": inv.muscle.value, "role": inv.role.value}
            for ex_id, invs in self._involvements.items()
            for inv in invs
        ]
        return pd.DataFrame(rows, columns=["exercise_id", "muscle", "role"])


# ═════════════════════════════════════════════════════════════════════
# DEFAULT EXERCISES — keyed by exercise id
#
# "muscles" is the ordered involvement list; custom exercises created
# before roles existed only carry "muscle_groups" (see ExerciseDefinition).
# ═════════════════════════════════════════════════════════════════════

P, S = "primary", "secondary"

DEFAULT_EXERCISES = {
    # ── Chest ───────────────────────────────────────────────────────
    "ex1": {"name": "Bench Press",
            "muscles": [("chest", P), ("triceps", S), ("shoulders", S)]},
    "ex2": {"name": "Incline Bench Press",
            "muscles": [("chest", P), ("shoulders", S), ("triceps", S)]},
    "ex3": {"name": "Dumbbell Flyes",
            "muscles": [("chest", P)]},
    "ex4": {"name": "Pec Deck",
            "muscles": [("chest", P)]},
    "ex5": {"name": "Cable Crossover",
            "muscles": [("chest", P)]},
    "ex6": {"name": "Dips",
            "muscles": [("chest", P), ("triceps", S), ("shoulders", S)]},
    "ex7": {"name": "Push-Ups",
            "muscles": [("chest", P), ("triceps", S), ("shoulders", S)]},
    # ── Back ────────────────────────────────────────────────────────
    "ex8": {"name": "Pull-Ups",
            "muscles": [("lats", P), ("back", P), ("biceps", S)]},
    "ex9": {"name": "Lat Pulldown",
            "muscles": [("lats", P), ("back", S), ("biceps", S)]},
    "ex10": {"name": "Barbell Row",
             "muscles": [("back", P), ("lats", P), ("biceps", S)]},
    "ex11": {"name": "Dumbbell Row",
             "muscles": [("back", P), ("lats", S), ("biceps", S)]},
    "ex12": {"name": "T-Bar Row",
             "muscles": [("back", P), ("lats", P)]},
    "ex13": {"name": "Seated Cable Row",
             "muscles": [("back", P), ("lats", S), ("biceps", S)]},
    "ex14": {"name": "Deadlift",
             "muscles": [("back", P), ("glutes", P), ("hamstrings", P), ("traps", S)]},
    "ex15": {"name": "Hyperextensions",
             "muscles": [("back", P), ("glutes", S), ("hamstrings", S)]},
    # ── Shoulders ───────────────────────────────────────────────────
    "ex16": {"name": "Shoulder Press",
             "muscles": [("shoulders", P), ("triceps", S)]},
    "ex17": {"name": "Lateral Raises",
             "muscles": [("shoulders", P)]},
    "ex18": {"name": "Front Raises",
             "muscles": [("shoulders", P)]},
    "ex19": {"name": "Reverse Flyes",
             "muscles": [("shoulders", P), ("back", S)]},
    "ex20": {"name": "Arnold Press",
             "muscles": [("shoulders", P), ("triceps", S)]},
    "ex21": {"name": "Face Pulls",
             "muscles": [("shoulders", P), ("traps", S)]},
    "ex22": {"name": "Shrugs",
             "muscles": [("traps", P)]},
    # ── Arms ────────────────────────────────────────────────────────
    "ex23": {"name": "Biceps Curls",
             "muscles": [("biceps", P)]},
    "ex24": {"name": "Hammer Curls",
             "muscles": [("biceps", P), ("forearms", S)]},
    "ex26": {"name": "Preacher Curls",
             "muscles": [("biceps", P)]},
    "ex28": {"name": "Triceps Press",
             "muscles": [("triceps", P)]},
    "ex29": {"name": "Triceps Pushdowns",
             "muscles": [("triceps", P)]},
    "ex30": {"name": "Overhead Triceps Extension",
             "muscles": [("triceps", P)]},
    "ex32": {"name": "Close Grip Bench Press",
             "muscles": [("triceps", P), ("chest", S)]},
    # ── Legs ────────────────────────────────────────────────────────
    "ex33": {"name": "Squat",
             "muscles": [("quadriceps", P), ("glutes", P), ("hamstrings", S)]},
    "ex34": {"name": "Leg Press",
             "muscles": [("quadriceps", P), ("glutes", S), ("hamstrings", S)]},
    "ex35": {"name": "Lunges",
             "muscles": [("quadriceps", P), ("glutes", P), ("hamstrings", S)]},
    "ex36": {"name": "Leg Extensions",
             "muscles": [("quadriceps", P)]},
    "ex37": {"name": "Bulgarian Split Squats",
             "muscles": [("quadriceps", P), ("glutes", P)]},
    "ex38": {"name": "Front Squats",
             "muscles": [("quadriceps", P), ("glutes", S)]},
    "ex39": {"name": "Leg Curls",
             "muscles": [("hamstrings", P)]},
    "ex40": {"name": "Romanian Deadlift",
             "muscles": [("hamstrings", P), ("glutes", P), ("back", S)]},
    "ex41": {"name": "Good Mornings",
             "muscles": [("hamstrings", P), ("glutes", S), ("back", S)]},
    "ex42": {"name": "Standing Calf Raises",
             "muscles": [("calves", P)]},
    "ex43": {"name": "Seated Calf Raises",
             "muscles": [("calves", P)]},
    # ── Core ────────────────────────────────────────────────────────
    "ex44": {"name": "Crunches",
             "muscles": [("abs", P)]},
    "ex45": {"name": "Plank",
             "muscles": [("abs", P)]},
    "ex50": {"name": "Hanging Leg Raises",
             "muscles": [("abs", P)]},
    "ex99": {"name": "Cable Crunches",
             "muscles": [("abs", P)]},
    # ── Hips ────────────────────────────────────────────────────────
    "ex51": {"name": "Adductor Machine",
             "muscles": [("adductors", P)]},
    "ex53": {"name": "Sumo Squats",
             "muscles": [("adductors", P), ("glutes", P), ("quadriceps", S)]},
    "ex55": {"name": "Abductor Machine",
             "muscles": [("abductors", P)]},
    "ex56": {"name": "Cable Abduction",
             "muscles": [("abductors", P), ("glutes", S)]},
    "ex60": {"name": "Back Extensions",
             "muscles": [("lower_back", P), ("glutes", S), ("hamstrings", S)]},
    "ex61": {"name": "Reverse Hypers",
             "muscles": [("lower_back", P), ("glutes", P), ("hamstrings", S)]},
    "ex66": {"name": "Hip Thrust",
             "muscles": [("glutes", P), ("hamstrings", S)]},
    "ex67": {"name": "Glute Bridge",
             "muscles": [("glutes", P), ("hamstrings", S)]},
    # ── Neck / Grip ─────────────────────────────────────────────────
    "ex63": {"name": "Neck Curls",
             "muscles": [("neck", P)]},
    "ex65": {"name": "Neck Harness",
             "muscles": [("neck", P), ("traps", S)]},
    "ex71": {"name": "Wrist Curls",
             "muscles": [("forearms", P)]},
    "ex73": {"name": "Farmers Walk",
             "muscles": [("forearms", P), ("traps", S), ("abs", S)]},
    "ex88": {"name": "Upright Row",
             "muscles": [("shoulders", P), ("traps", S)]},
}


def default_catalog() -> Catalog:
    return Catalog.from_dict(DEFAULT_EXERCISES)
