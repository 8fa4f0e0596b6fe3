"""
Tests for the PR forecaster and the personal-record table.
"""
from datetime import timedelta

import pytest

from helpers import BENCH, CURL, NOW, SQUAT, log, series, session, sets


def _one(records, exercise_id):
    (rec,) = [r for r in records if r.exercise_id == exercise_id]
    return rec


class TestPrSequence:
    def test_running_prs_strictly_increasing(self):
        from trainload.forecast import running_prs
        points = [(NOW - timedelta(weeks=4 - i), w) for i, w in enumerate([100, 100, 105, 102.5, 110])]
        prs = running_prs(points)
        assert [p.weight for p in prs] == [100, 105, 110]

    def test_raw_rate_five_per_week(self):
        """PRs 100 -> 105 -> 110 spanning two weeks."""
        from trainload.forecast import raw_weekly_rate, running_prs
        points = [(NOW - timedelta(weeks=3 - i), w) for i, w in enumerate([100, 105, 110, 110])]
        assert raw_weekly_rate(running_prs(points)) == pytest.approx(5.0)

    def test_short_span_uses_one_week(self):
        from trainload.forecast import raw_weekly_rate, running_prs
        points = [(NOW - timedelta(days=2), 100), (NOW, 104)]
        assert raw_weekly_rate(running_prs(points)) == pytest.approx(4.0)

    def test_damping_floor(self):
        from trainload.forecast import damped_weekly_rate, running_prs
        prs = running_prs([(NOW - timedelta(weeks=1), 240), (NOW, 250)])
        # 10/wk × max(0.3, 1 - 250/300)
        assert damped_weekly_rate(prs) == pytest.approx(3.0)

    def test_minimum_rate_when_gaining(self):
        from trainload.forecast import damped_weekly_rate, running_prs
        prs = running_prs([(NOW - timedelta(weeks=20), 100), (NOW, 101)])
        assert damped_weekly_rate(prs) == pytest.approx(0.25)

    def test_milestones_small_steps(self):
        from trainload.forecast import milestone_targets
        assert milestone_targets(97.5) == [105, 110, 115, 120, 125]

    def test_milestones_large_steps(self):
        from trainload.forecast import milestone_targets
        assert milestone_targets(100) == [110, 120, 130, 140, 150]
        assert milestone_targets(112.5) == [125, 135, 145, 155, 165]


class TestPrForecast:
    def test_scenario_rates_and_milestones(self, catalog):
        from trainload.forecast import compute_pr_forecast
        history = series(SQUAT, [100, 105, 110, 110], last=NOW)
        fc = _one(compute_pr_forecast(catalog, history, now=NOW), SQUAT)
        assert fc.current_max == 110
        assert fc.current_max_date == NOW - timedelta(weeks=1)
        assert fc.raw_weekly_rate == 5.0
        assert fc.fitted_weekly_rate == 5.0
        assert fc.weekly_rate == pytest.approx(3.17)  # 5 × (1 - 110/300)
        assert [p.weight for p in fc.pr_points] == [100, 105, 110]

        first, *_, last = fc.milestones
        assert first.target_weight == 120
        assert first.weeks_away == 3
        assert first.confidence == "medium"
        assert first.estimated_date == (NOW + timedelta(weeks=10 / (5 * (1 - 110 / 300)))).date()
        assert last.target_weight == 160
        assert last.weeks_away == 16
        assert last.confidence == "medium"

    def test_high_confidence_needs_five_prs(self, catalog):
        from trainload.forecast import compute_pr_forecast
        history = series(CURL, [20, 22.5, 25, 27.5, 30], last=NOW)
        fc = _one(compute_pr_forecast(catalog, history, now=NOW), CURL)
        assert fc.milestones[0].target_weight == 35
        assert fc.milestones[0].confidence == "high"

    def test_flat_history_uses_floor_rate(self, catalog):
        from trainload.forecast import compute_pr_forecast
        history = series(BENCH, [100, 100, 100], last=NOW)
        fc = _one(compute_pr_forecast(catalog, history, now=NOW), BENCH)
        assert fc.weekly_rate == 0.25
        assert fc.raw_weekly_rate == 0
        assert fc.fitted_weekly_rate is None
        assert len(fc.milestones) == 5
        assert fc.milestones[0].weeks_away == 40
        assert fc.milestones[0].confidence == "low"

    def test_custom_target_rejected_at_or_below_max(self, catalog):
        from trainload.forecast import compute_pr_forecast, forecast_custom_target
        history = series(BENCH, [100, 100, 100], last=NOW)
        fc = _one(compute_pr_forecast(catalog, history, now=NOW), BENCH)
        assert forecast_custom_target(fc, 100, NOW) is None
        assert forecast_custom_target(fc, 90, NOW) is None
        custom = forecast_custom_target(fc, 102.5, NOW)
        assert custom.weeks_away == 10
        assert custom.target_weight == 102.5

    def test_custom_targets_attached(self, catalog):
        from trainload.forecast import compute_pr_forecast
        history = series(SQUAT, [100, 105, 110, 110], last=NOW) + series(BENCH, [80, 85, 90], last=NOW)
        forecasts = compute_pr_forecast(catalog, history, custom_targets={SQUAT: 115, BENCH: 70}, now=NOW)
        squat = _one(forecasts, SQUAT)
        assert squat.custom_milestone.target_weight == 115
        assert squat.custom_milestone.weeks_away == 2  # 5 / 3.17
        assert _one(forecasts, BENCH).custom_milestone is None

    def test_needs_three_sessions(self, catalog):
        from trainload.forecast import compute_pr_forecast
        history = series(SQUAT, [100, 110], last=NOW)
        assert compute_pr_forecast(catalog, history, now=NOW) == []

    def test_sorted_by_latest_pr(self, catalog):
        from trainload.forecast import compute_pr_forecast
        history = (
            series(SQUAT, [100, 105, 110], last=NOW - timedelta(days=10))
            + series(BENCH, [80, 85, 90], last=NOW)
        )
        forecasts = compute_pr_forecast(catalog, history, now=NOW)
        assert [f.exercise_id for f in forecasts] == [BENCH, SQUAT]

    def test_empty_history(self, catalog):
        from trainload.forecast import compute_pr_forecast
        assert compute_pr_forecast(catalog, []) == []


# ═══════════════════════════════════════════════════════════════════════
# PERSONAL RECORDS
# ═══════════════════════════════════════════════════════════════════════

class TestPersonalRecords:
    def test_epley(self):
        from trainload.records import epley_e1rm
        assert epley_e1rm(100, 5) == 116.7
        assert epley_e1rm(100, 1) == 103.3
        assert epley_e1rm(0, 10) == 0
        assert epley_e1rm(100, 0) == 0

    def test_best_e1rm_and_improvement(self, catalog):
        from trainload.records import compute_personal_records
        history = [
            session("a", NOW - timedelta(weeks=2), log(SQUAT, sets(100, 5))),
            session("b", NOW, log(SQUAT, sets(110, 5), sets(40, 12, warmup=True)), log(CURL, sets(20, 10))),
        ]
        records = compute_personal_records(catalog, history)
        assert [r.exercise_id for r in records] == [SQUAT, CURL]
        squat = records[0]
        assert (squat.weight, squat.reps, squat.e1rm) == (110, 5, 128.3)
        assert squat.improvement_percent == 10
        assert squat.date == NOW

    def test_improvement_from_first_set_logged(self, catalog):
        """60x5 opens the log: the baseline is 70.0, not the session best."""
        from trainload.records import compute_personal_records
        history = [
            session("a", NOW - timedelta(weeks=2), log(BENCH, sets(60, 5), sets(100, 5))),
            session("b", NOW, log(BENCH, sets(110, 5))),
        ]
        (bench,) = compute_personal_records(catalog, history)
        assert bench.e1rm == 128.3
        assert bench.improvement_percent == 83  # (128.3 - 70) / 70

    def test_limit(self, catalog):
        from trainload.records import compute_personal_records
        history = [session("a", NOW, log(SQUAT, sets(100)), log(CURL, sets(20)), log(BENCH, sets(80)))]
        assert len(compute_personal_records(catalog, history, limit=2)) == 2

    def test_empty(self, catalog):
        from trainload.records import compute_personal_records
        assert compute_personal_records(catalog, []) == []
