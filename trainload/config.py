"""
Training Load Analytics — Configuration

Single source of truth for every per-muscle constant (recovery time, weekly
set range, weekly frequency target) and for the tuning constants of the
progression, auto-regulation and forecasting rules.

Components never hard-code these numbers: they receive an EngineSettings
instance (DEFAULT_SETTINGS unless the caller injects another one).
"""
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Mapping

from trainload.models import MuscleGroup, Role

# ═════════════════════════════════════════════════════════════════════
# MUSCLE DATABASE — keyed by muscle group
#
# recovery_hours: base time for a full recovery after primary work.
#   Small muscles 24-48h, medium 48-72h, large 72-96h.
# volume: recommended weekly effective sets (research-based ranges).
# frequency: recommended distinct training days per week.
# balance: display category the muscle's sets are pooled into.
# ═════════════════════════════════════════════════════════════════════

MUSCLE_DB = {
    "chest": {
        "label": "Chest",
        "balance": "chest",
        "recovery_hours": 72,
        "volume": {"min": 10, "optimal": 16, "max": 22},
        "frequency": 2,
    },
    "back": {
        "label": "Back",
        "balance": "back",
        "recovery_hours": 72,
        "volume": {"min": 10, "optimal": 16, "max": 22},
        "frequency": 2,
    },
    "shoulders": {
        "label": "Shoulders",
        "balance": "shoulders",
        "recovery_hours": 48,
        "volume": {"min": 8, "optimal": 14, "max": 20},
        "frequency": 2,
    },
    "biceps": {
        "label": "Biceps",
        "balance": "biceps",
        "recovery_hours": 48,  # small, but often overtrained
        "volume": {"min": 8, "optimal": 12, "max": 18},
        "frequency": 2,
    },
    "triceps": {
        "label": "Triceps",
        "balance": "triceps",
        "recovery_hours": 48,
        "volume": {"min": 8, "optimal": 12, "max": 18},
        "frequency": 2,
    },
    "forearms": {
        "label": "Forearms",
        "balance": "forearms",
        "recovery_hours": 24,
        "volume": {"min": 4, "optimal": 8, "max": 12},
        "frequency": 2,
    },
    "abs": {
        "label": "Abs",
        "balance": "core",
        "recovery_hours": 24,
        "volume": {"min": 6, "optimal": 10, "max": 15},
        "frequency": 3,
    },
    "quadriceps": {
        "label": "Quadriceps",
        "balance": "legs",
        "recovery_hours": 96,  # largest muscle group
        "volume": {"min": 10, "optimal": 16, "max": 22},
        "frequency": 2,
    },
    "hamstrings": {
        "label": "Hamstrings",
        "balance": "legs",
        "recovery_hours": 72,
        "volume": {"min": 8, "optimal": 12, "max": 18},
        "frequency": 2,
    },
    "calves": {
        "label": "Calves",
        "balance": "legs",
        "recovery_hours": 48,
        "volume": {"min": 8, "optimal": 12, "max": 18},
        "frequency": 2,
    },
    "glutes": {
        "label": "Glutes",
        "balance": "legs",
        "recovery_hours": 72,
        "volume": {"min": 8, "optimal": 14, "max": 20},
        "frequency": 2,
    },
    "traps": {
        "label": "Traps",
        "balance": "back",
        "recovery_hours": 48,
        "volume": {"min": 6, "optimal": 10, "max": 14},
        "frequency": 2,
    },
    "lats": {
        "label": "Lats",
        "balance": "back",
        "recovery_hours": 72,
        "volume": {"min": 10, "optimal": 14, "max": 20},
        "frequency": 2,
    },
    "adductors": {
        "label": "Adductors",
        "balance": "legs",
        "recovery_hours": 48,
        "volume": {"min": 4, "optimal": 8, "max": 12},
        "frequency": 2,
    },
    "abductors": {
        "label": "Abductors",
        "balance": "legs",
        "recovery_hours": 48,
        "volume": {"min": 4, "optimal": 8, "max": 12},
        "frequency": 2,
    },
    "lower_back": {
        "label": "Lower Back",
        "balance": "back",
        "recovery_hours": 72,
        "volume": {"min": 4, "optimal": 8, "max": 12},
        "frequency": 2,
    },
    "neck": {
        "label": "Neck",
        "balance": "shoulders",
        "recovery_hours": 24,
        "volume": {"min": 2, "optimal": 4, "max": 8},
        "frequency": 2,
    },
}


# Balance categories in display order
BALANCE_CATEGORIES = {
    "chest": "Chest",
    "back": "Back",
    "shoulders": "Shoulders",
    "biceps": "Biceps",
    "triceps": "Triceps",
    "forearms": "Forearms",
    "legs": "Legs",
    "core": "Core",
}


# ═════════════════════════════════════════════════════════════════════
# HELPER FUNCTIONS — display lookups from MUSCLE_DB
# ═════════════════════════════════════════════════════════════════════

def get_muscle_label(muscle) -> str:
    return MUSCLE_DB[MuscleGroup(muscle).value]["label"]


# ═════════════════════════════════════════════════════════════════════
# ENGINE SETTINGS — injected into every computation
# ═════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class EngineSettings:
    # mappingproxy is unhashable: compared, not hashed
    muscle_table: Mapping = field(default_factory=lambda: MappingProxyType(MUSCLE_DB), hash=False)

    # Recovery
    secondary_recovery_multiplier: float = 0.4
    ready_threshold: int = 80
    recovering_threshold: int = 50

    # Volume
    secondary_set_weight: float = 0.5

    # Progression
    recent_weeks: int = 2
    previous_weeks: int = 4
    older_weeks: int = 8
    min_progression_sessions: int = 3
    progressing_percent: float = 2
    regressing_percent: float = -5
    stagnant_weeks: int = 3
    progress_lookback_sessions: int = 12
    volume_trend_percent: float = 10

    # Auto-regulation
    autoregulation_days: int = 28
    min_autoregulation_sessions: int = 2
    default_rir: float = 2.0
    increase_rir: float = 3.0
    easy_rir: float = 4.0
    maintain_rir: float = 1.5
    hard_rir: float = 0.5
    sustained_rir: float = 2.0
    sustained_sessions: int = 3
    deload_rir: float = 1.0
    deload_sessions: int = 3
    weight_increment: float = 2.5
    increase_factor: float = 1.025
    decrease_factor: float = 0.95
    deload_factor: float = 0.6

    # Muscle balance
    very_balanced_score: int = 80
    balanced_score: int = 60
    needs_work_score: int = 40

    # PR forecasting
    min_forecast_sessions: int = 3
    damping_reference: float = 300.0
    damping_floor: float = 0.3
    min_weekly_rate: float = 0.25
    milestone_count: int = 5
    milestone_rounding: float = 5
    milestone_step_small: float = 5
    milestone_step_large: float = 10
    milestone_step_threshold: float = 100
    high_confidence_weeks: float = 8
    high_confidence_points: int = 5
    medium_confidence_weeks: float = 16
    medium_confidence_points: int = 3

    @classmethod
    def from_mapping(cls, overrides: Mapping) -> "EngineSettings":
        """Build settings from a plain dict (e.g. stored user preferences).

        Keys must be EngineSettings field names; `muscle_table` entries are
        merged per muscle over MUSCLE_DB.
        """
        known = {f.name for f in fields(cls)}
        unknown = set(overrides) - known
        if unknown:
            raise ValueError(f"Unknown engine settings: {sorted(unknown)}")
        values = dict(overrides)
        if "muscle_table" in values:
            table = {k: dict(v) for k, v in MUSCLE_DB.items()}
            for muscle, entry in values["muscle_table"].items():
                table[MuscleGroup(muscle).value].update(entry)
            values["muscle_table"] = MappingProxyType(table)
        return replace(cls(), **values)

    def recovery_hours(self, muscle) -> float:
        return self.muscle_table[MuscleGroup(muscle).value]["recovery_hours"]

    def total_recovery_hours(self, muscle, role) -> float:
        base = self.recovery_hours(muscle)
        if role == Role.SECONDARY:
            return base * self.secondary_recovery_multiplier
        return base

    def volume_range(self, muscle) -> dict:
        return dict(self.muscle_table[MuscleGroup(muscle).value]["volume"])

    def recommended_frequency(self, muscle) -> int:
        return self.muscle_table[MuscleGroup(muscle).value]["frequency"]

    def balance_category(self, muscle) -> str:
        return self.muscle_table[MuscleGroup(muscle).value]["balance"]


DEFAULT_SETTINGS = EngineSettings()
