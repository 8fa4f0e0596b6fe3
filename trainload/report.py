"""
Training Load Analytics — Report runner

Runs every component over a Hevy JSON snapshot and prints a summary.

    python -m trainload.report workouts.json [templates.json] [--now 2026-03-01T18:00:00+00:00]

workouts.json is a GET /v1/workouts page (or a plain list of workouts);
templates.json a GET /v1/exercise_templates page. Without templates the
built-in catalog is used.
"""
import json
import logging
import sys
from datetime import datetime

from trainload.autoregulation import compute_auto_regulation
from trainload.balance import compute_muscle_balance
from trainload.catalog import default_catalog
from trainload.config import get_muscle_label
from trainload.forecast import compute_pr_forecast
from trainload.frequency import compute_frequency
from trainload.hevy import catalog_from_hevy_templates, parse_timestamp, sessions_from_hevy
from trainload.history import default_now, previous_window, week_window
from trainload.progression import compute_progression
from trainload.records import compute_personal_records, detect_unknown_exercises
from trainload.recovery import compute_recovery, summarize_recovery
from trainload.volume import compute_weekly_volume


def _load(path: str, key: str) -> list:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    return data.get(key, []) if isinstance(data, dict) else data


def run_report(workouts: list, templates: list = None, now: datetime = None) -> dict:
    print("🏋️ Training Load Report — Starting...")
    sessions = sessions_from_hevy(workouts)
    catalog = catalog_from_hevy_templates(templates) if templates else default_catalog()
    now = now or default_now(sessions)
    print(f"   {now.isoformat()}")
    print(f"   {len(sessions)} sessions, {len(catalog)} catalog exercises")

    unknown = detect_unknown_exercises(catalog, sessions)
    if unknown:
        print(f"\n⚠️  {len(unknown)} exercise(s) not in catalog (skipped):")
        for u in unknown:
            print(f"   {u.exercise_id}: {u.set_count} sets in {u.session_count} sessions")

    recovery = compute_recovery(catalog, sessions, now)
    overall = summarize_recovery(recovery)
    print(f"\n💤 Recovery: {overall['average_recovery']}% average "
          f"({overall['ready']} ready, {overall['recovering']} recovering, {overall['fatigued']} fatigued)")
    for r in recovery:
        if r.status != "ready":
            print(f"   {get_muscle_label(r.muscle)}: {r.recovery_percent}% ({r.hours_remaining}h left, {r.role.value})")

    this_week = week_window(now)
    last_week = previous_window(this_week)
    volume = compute_weekly_volume(catalog, sessions, this_week)
    print(f"\n📊 Weekly volume (from {this_week.start.date()}):")
    for v in volume:
        print(f"   {get_muscle_label(v.muscle)}: {v.effective_sets} sets [{v.min}-{v.max}] {v.status} ({v.trend:+})")

    frequency = compute_frequency(catalog, sessions, this_week, last_week)
    low = [f for f in frequency if f.status != "optimal"]
    print(f"\n📅 Frequency: {len(frequency) - len(low)}/{len(frequency)} muscles on target")

    balance = compute_muscle_balance(catalog, sessions)
    print(f"\n⚖️ Muscle balance: {balance.score}/100 ({balance.label.replace('_', ' ')})")
    for c in balance.categories:
        print(f"   {c.label}: {c.sets} sets ({c.value}%)")

    progression = compute_progression(catalog, sessions, now)
    print("\n📈 Progression:")
    for p in progression:
        line = f"   {p.exercise_name}: {p.status} ({p.percent_change:+}%)"
        if p.suggestion and p.status in ("stagnant", "regressing"):
            line += f" → {p.suggestion}"
        print(line)

    autoreg = compute_auto_regulation(catalog, sessions, now)
    print("\n🎚️ Next session:")
    for a in autoreg:
        print(f"   {a.exercise_name}: {a.recommendation} → {a.recommended_weight}kg ({a.reason})")

    forecasts = compute_pr_forecast(catalog, sessions, now=now)
    print("\n🔮 PR forecast:")
    for fc in forecasts:
        nxt = fc.milestones[0] if fc.milestones else None
        if nxt:
            print(f"   {fc.exercise_name}: {fc.current_max}kg → {nxt.target_weight}kg "
                  f"~{nxt.estimated_date} ({nxt.weeks_away} wk, {nxt.confidence})")

    prs = compute_personal_records(catalog, sessions, limit=5)
    if prs:
        print("\n🏆 Top PRs:")
        for pr in prs:
            print(f"   {pr.exercise_name}: {pr.weight}kg x{pr.reps} (e1RM {pr.e1rm})")

    return {
        "sessions": len(sessions),
        "unknown_exercises": len(unknown),
        "recovery": recovery,
        "volume": volume,
        "frequency": frequency,
        "balance": balance,
        "progression": progression,
        "auto_regulation": autoreg,
        "forecasts": forecasts,
        "personal_records": prs,
    }


if __name__ == "__main__":
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")
    args = [a for a in sys.argv[1:] if not a.startswith("--")]
    now_arg = None
    if "--now" in sys.argv:
        idx = sys.argv.index("--now")
        if idx + 1 < len(sys.argv):
            now_arg = sys.argv[idx + 1]
            args = [a for a in args if a != now_arg]

    if not args:
        print(__doc__)
        sys.exit(2)

    try:
        workouts = _load(args[0], "workouts")
        templates = _load(args[1], "exercise_templates") if len(args) > 1 else None
        run_report(workouts, templates, parse_timestamp(now_arg) if now_arg else None)
    except (OSError, ValueError, KeyError) as e:
        print(f"\n❌ Report FAILED: {e}")
        sys.exit(1)
    print("\nDone.")
