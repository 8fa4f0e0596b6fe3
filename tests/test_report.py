"""
Smoke tests for the report runner over a Hevy snapshot.
"""
from datetime import datetime, timedelta, timezone


def _workout(i, start, weight, rpe):
    return {
        "id": f"w-{i}",
        "start_time": start.isoformat(),
        "end_time": (start + timedelta(hours=1)).isoformat(),
        "exercises": [{
            "exercise_template_id": "79D0BB3A",
            "sets": [
                {"type": "warmup", "weight_kg": 60, "reps": 10, "rpe": None},
                {"type": "normal", "weight_kg": weight, "reps": 5, "rpe": rpe},
            ],
        }, {
            "exercise_template_id": "UNKNOWN1",
            "sets": [{"type": "normal", "weight_kg": 20, "reps": 10, "rpe": None}],
        }],
    }


TEMPLATES = [
    {"id": "79D0BB3A", "title": "Bench Press (Barbell)", "type": "weight_reps",
     "primary_muscle_group": "chest", "secondary_muscle_groups": ["triceps", "shoulders"]},
]

NOW = datetime(2026, 3, 4, 18, tzinfo=timezone.utc)


class TestRunReport:
    def test_sections_and_result(self, capsys):
        from trainload.report import run_report
        workouts = [
            _workout(i, NOW - timedelta(weeks=3 - i, hours=2), 100 + 2.5 * i, 8)
            for i in range(4)
        ]
        result = run_report(workouts, TEMPLATES, now=NOW)
        out = capsys.readouterr().out

        assert "Training Load Report" in out
        assert "Recovery" in out
        assert "PR forecast" in out
        assert "Muscle balance" in out
        assert "Chest:" in out
        assert "UNKNOWN1" in out
        assert result["sessions"] == 4
        assert result["unknown_exercises"] == 1
        assert [p.exercise_id for p in result["progression"]] == ["79D0BB3A"]
        assert result["forecasts"][0].current_max == 107.5
        assert result["personal_records"][0].exercise_name == "Bench Press (Barbell)"
        assert result["balance"].categories[0].category == "chest"

    def test_default_catalog_without_templates(self, capsys):
        from trainload.report import run_report
        result = run_report([], now=NOW)
        assert result["sessions"] == 0
        assert len(result["recovery"]) == 17
        assert result["forecasts"] == []
        assert "0 sessions" in capsys.readouterr().out
