"""
Tests for the progression analyzer.
"""
from datetime import timedelta

from helpers import BENCH, CURL, NOW, SQUAT, log, series, session, sets


def _one(records, exercise_id):
    (rec,) = [r for r in records if r.exercise_id == exercise_id]
    return rec


class TestWeeksSinceProgress:
    """Session-count heuristic, halved into weeks."""

    def test_equal_sessions_counted(self):
        from trainload.progression import weeks_since_progress
        assert weeks_since_progress([100, 100, 100, 100, 100], 100) == 2

    def test_stops_at_lighter_session(self):
        from trainload.progression import weeks_since_progress
        assert weeks_since_progress([100, 100, 95, 100, 100], 100) == 0

    def test_heavier_older_session_raises_reference(self):
        from trainload.progression import weeks_since_progress
        # 100 -> 105 -> 102.5 stops: counted two sessions
        assert weeks_since_progress([100, 100, 105, 102.5], 100) == 1

    def test_capped(self):
        from trainload.progression import weeks_since_progress
        assert weeks_since_progress([100] * 30, 100) == 6

    def test_single_session(self):
        from trainload.progression import weeks_since_progress
        assert weeks_since_progress([100], 100) == 0


class TestProgressionVerdicts:
    def test_increasing_weights_progressing(self, catalog):
        from trainload.progression import compute_progression
        history = series(SQUAT, [100, 105, 110], last=NOW)
        rec = _one(compute_progression(catalog, history, NOW), SQUAT)
        assert rec.status == "progressing"
        assert rec.current_max == 110
        assert rec.previous_max == 100
        assert rec.percent_change == 10
        assert rec.session_count == 3
        assert rec.exercise_name == "Squat"

    def test_regressing(self, catalog):
        from trainload.progression import compute_progression
        history = series(SQUAT, [110, 110, 100, 100], last=NOW)
        rec = _one(compute_progression(catalog, history, NOW), SQUAT)
        assert rec.status == "regressing"
        assert rec.percent_change == -9
        assert "deload" in rec.suggestion

    def test_stagnant_vary_exercise(self, catalog):
        from trainload.progression import compute_progression
        history = series(BENCH, [100] * 8, last=NOW, every=timedelta(days=3, hours=12))
        rec = _one(compute_progression(catalog, history, NOW), BENCH)
        assert rec.weeks_since_progress == 3
        assert rec.status == "stagnant"
        assert rec.volume_trend == 0
        assert "variation" in rec.suggestion

    def test_stagnant_low_volume_suggests_more_sets(self, catalog):
        from trainload.progression import compute_progression
        every = timedelta(days=3, hours=12)
        history = []
        for i in range(8):
            start = NOW - every * i
            reps = 3 if i < 4 else 5
            history.append(session(f"s{i}", start, log(BENCH, sets(100, reps))))
        rec = _one(compute_progression(catalog, history, NOW), BENCH)
        assert rec.status == "stagnant"
        assert rec.volume_trend == -40
        assert "more sets" in rec.suggestion

    def test_stagnant_high_volume_suggests_weight(self, catalog):
        from trainload.progression import compute_progression
        every = timedelta(days=3, hours=12)
        history = [
            session(f"s{i}", NOW - every * i, log(BENCH, sets(100, 8 if i < 4 else 5)))
            for i in range(8)
        ]
        rec = _one(compute_progression(catalog, history, NOW), BENCH)
        assert rec.status == "stagnant"
        assert rec.volume_trend == 60
        assert "weight instead of sets" in rec.suggestion

    def test_flat_but_recent_defaults_to_progressing(self, catalog):
        from trainload.progression import compute_progression
        history = series(CURL, [20, 20, 20], last=NOW)
        rec = _one(compute_progression(catalog, history, NOW), CURL)
        assert rec.weeks_since_progress == 1
        assert rec.status == "progressing"
        assert rec.suggestion is None

    def test_new_with_two_sessions(self, catalog):
        from trainload.progression import compute_progression
        history = series(CURL, [20, 25], last=NOW)
        rec = _one(compute_progression(catalog, history, NOW), CURL)
        assert rec.status == "new"
        assert rec.suggestion

    def test_falls_back_to_older_window(self, catalog):
        from trainload.progression import compute_progression
        history = series(SQUAT, [120, 125, 130], last=NOW - timedelta(days=30))
        rec = _one(compute_progression(catalog, history, NOW), SQUAT)
        assert rec.current_max == 130  # most recent session
        assert rec.previous_max == 130  # older window max
        assert rec.percent_change == 0


class TestProgressionInputs:
    def test_warmups_and_failed_sets_ignored(self, catalog):
        from trainload.progression import compute_progression
        history = [
            session(f"s{i}", NOW - timedelta(weeks=2 - i), log(
                SQUAT, sets(200, 1, warmup=True), sets(300, 1, completed=False), sets(100 + 5 * i, 5),
            ))
            for i in range(3)
        ]
        rec = _one(compute_progression(catalog, history, NOW), SQUAT)
        assert rec.current_max == 110

    def test_sessions_after_now_ignored(self, catalog):
        from trainload.progression import compute_progression
        history = series(SQUAT, [100, 105, 110], last=NOW) + [
            session("future", NOW + timedelta(days=2), log(SQUAT, sets(50)))
        ]
        rec = _one(compute_progression(catalog, history, NOW), SQUAT)
        assert rec.session_count == 3
        assert rec.current_max == 110

    def test_sorted_problems_first(self, catalog):
        from trainload.progression import compute_progression
        history = (
            series(SQUAT, [100, 105, 110], last=NOW)
            + series(BENCH, [110, 110, 100, 100], last=NOW - timedelta(days=1))
            + series(CURL, [20, 25], last=NOW - timedelta(days=2))
        )
        records = compute_progression(catalog, history, NOW)
        assert [r.status for r in records] == ["regressing", "new", "progressing"]

    def test_unknown_exercise_skipped(self, catalog):
        from trainload.progression import compute_progression
        history = series("mystery", [100, 105, 110], last=NOW)
        assert compute_progression(catalog, history, NOW) == []

    def test_empty_history(self, catalog):
        from trainload.progression import compute_progression
        assert compute_progression(catalog, []) == []
