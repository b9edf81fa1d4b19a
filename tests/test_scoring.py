from datetime import timedelta

import pytest

from conftest import FrozenClock, make_activity, make_task
from shame_engine.models import ShameLevel, TaskPriority
from shame_engine.scoring import (
    SCORE_WEIGHTS,
    ScoreCalculator,
    context_switch_penalty,
    deadline_pressure,
    deadline_proximity,
    priority_severity_penalty,
    score_to_shame_level,
    task_completion_ratio,
    time_wasted_ratio,
)


def test_weights_sum_to_one():
    assert sum(SCORE_WEIGHTS.values()) == pytest.approx(1.0)


def test_blatant_only_day_scores_35(clock):
    calculator = ScoreCalculator(clock)
    snapshot = calculator.calculate([make_activity("youtube.com", 120)], [])

    assert snapshot.breakdown.time_wasted_ratio == 100
    assert snapshot.breakdown.deadline_proximity == 0
    assert snapshot.breakdown.task_completion_ratio == 0
    assert snapshot.breakdown.priority_severity_penalty == 0
    assert snapshot.score == 35
    assert snapshot.shame_level == ShameLevel.PASSIVE_AGGRESSIVE


def test_overdue_critical_task_without_activity_scores_58(clock):
    task = make_task(
        "ship release",
        priority=TaskPriority.P0_CRITICAL,
        due=clock.now() - timedelta(minutes=30),
    )
    snapshot = ScoreCalculator(clock).calculate([], [task])

    assert snapshot.breakdown.time_wasted_ratio == 50
    assert snapshot.breakdown.deadline_proximity == 100
    assert snapshot.breakdown.task_completion_ratio == 100
    # 17.5 + 25 + 15 = 57.5 rounds half up.
    assert snapshot.score == 58
    assert snapshot.shame_level == ShameLevel.DIRECT_CALLOUT


def test_reset_then_empty_inputs_gives_neutral_baseline(clock):
    calculator = ScoreCalculator(clock)
    calculator.calculate([make_activity("youtube.com", 120)], [])
    calculator.reset_score()

    assert calculator.history()[-1].score == 0
    assert calculator.streak_days == 0

    snapshot = calculator.calculate([], [])
    assert snapshot.score == 18
    assert snapshot.shame_level == ShameLevel.GENTLE_NUDGE
    assert [entry.score for entry in calculator.history()] == [35, 0, 18]


@pytest.mark.parametrize(
    "score, level",
    [
        (0, 1),
        (20, 1),
        (21, 2),
        (40, 2),
        (41, 3),
        (60, 3),
        (61, 4),
        (80, 4),
        (81, 5),
        (100, 5),
    ],
)
def test_shame_level_band_boundaries(score, level):
    assert score_to_shame_level(score) == level


def test_time_wasted_ratio_weights_categories():
    activities = [
        make_activity("github.com", 60, "productive"),
        make_activity("reddit.com", 30, "questionable"),
        make_activity("youtube.com", 10, "blatant_procrastination"),
    ]
    # (0 + 18 + 10) / 100
    assert time_wasted_ratio(activities) == pytest.approx(28.0)
    assert time_wasted_ratio([]) == 50
    assert time_wasted_ratio([make_activity("idle", 0, "productive")]) == 50


@pytest.mark.parametrize(
    "hours, pressure",
    [(-1, 100), (0.5, 95), (2, 80), (12, 60), (48, 40), (100, 20), (200, 5)],
)
def test_deadline_pressure_tiers(hours, pressure):
    assert deadline_pressure(hours) == pressure


def test_deadline_proximity_applies_priority_and_skips_done(clock):
    now = clock.now()
    tasks = [
        make_task("low", priority=TaskPriority.P3_LOW, due=now + timedelta(hours=2)),
        make_task("done", priority=TaskPriority.P0_CRITICAL, due=now, status="done"),
        make_task("undated", priority=TaskPriority.P0_CRITICAL),
    ]
    assert deadline_proximity(tasks, now) == pytest.approx(80 * 0.7)

    high = make_task("high", priority=TaskPriority.P1_HIGH, due=now + timedelta(hours=12))
    assert deadline_proximity([*tasks, high], now) == pytest.approx(60 * 1.3)


def test_task_completion_ratio_counts_overdue(clock):
    now = clock.now()
    tasks = [
        make_task("late", due=now - timedelta(hours=1)),
        make_task("flagged", status="overdue"),
        make_task("fine", due=now + timedelta(days=1)),
        make_task("late but done", due=now - timedelta(hours=1), status="done"),
    ]
    assert task_completion_ratio(tasks, now) == 50
    assert task_completion_ratio([], now) == 0


def test_priority_severity_penalty(clock):
    activities = [
        make_activity("youtube.com", 10),
        make_activity("github.com", 10, "productive"),
    ]
    p0 = make_task("p0", priority=TaskPriority.P0_CRITICAL)
    p1 = make_task("p1", priority=TaskPriority.P1_HIGH)
    low = make_task("low", priority=TaskPriority.P3_LOW)

    assert priority_severity_penalty([low], activities) == 0
    assert priority_severity_penalty([p1], activities) == pytest.approx(50)
    assert priority_severity_penalty([p0, p1], activities) == pytest.approx(65)
    assert priority_severity_penalty([p0], []) == 0


@pytest.mark.parametrize(
    "switches, penalty",
    [(0, 0), (5, 0), (6, 20), (10, 20), (11, 50), (20, 50), (21, 75), (30, 75), (31, 100)],
)
def test_context_switch_steps(switches, penalty):
    assert context_switch_penalty(switches) == penalty


def test_trend_needs_three_prior_scores(clock):
    calculator = ScoreCalculator(clock)
    blatant = [make_activity("youtube.com", 120)]
    for _ in range(2):
        assert calculator.calculate(blatant, []).trend == "stable"

    assert calculator.calculate(blatant, []).trend == "stable"
    productive = [make_activity("github.com", 120, "productive")]
    assert calculator.calculate(productive, []).trend == "improving"


def test_trend_worsening(clock):
    calculator = ScoreCalculator(clock)
    productive = [make_activity("github.com", 120, "productive")]
    for _ in range(3):
        calculator.calculate(productive, [])
    snapshot = calculator.calculate([make_activity("youtube.com", 120)], [])
    assert snapshot.trend == "worsening"


def test_streak_increments_once_per_bad_day():
    clock = FrozenClock()
    calculator = ScoreCalculator(clock)
    now = clock.now()
    bad_tasks = [make_task("late", priority=TaskPriority.P0_CRITICAL, due=now - timedelta(days=1))]
    bad_activities = [make_activity("youtube.com", 120, at=now)]

    first = calculator.calculate(bad_activities, bad_tasks)
    assert first.score >= 50
    calculator.calculate(bad_activities, bad_tasks)
    assert calculator.streak_days == 1

    clock.advance(days=1)
    snapshot = calculator.calculate(bad_activities, bad_tasks)
    assert calculator.streak_days == 2
    assert snapshot.breakdown.streak_penalty == 15

    clock.advance(days=1)
    calculator.calculate([], [])
    assert calculator.streak_days == 0


def test_history_is_bounded(clock):
    calculator = ScoreCalculator(clock, history_limit=3)
    for _ in range(5):
        calculator.calculate([], [])
    assert len(calculator.history()) == 3
    assert len(calculator.history(limit=2)) == 2
    assert calculator.history(limit=0) == []


def test_summary_mentions_distractions_and_overdue(clock):
    now = clock.now()
    snapshot = ScoreCalculator(clock).calculate(
        [make_activity("youtube.com", 90)],
        [make_task("late", due=now - timedelta(hours=2))],
    )
    assert "Procrastination Score" in snapshot.summary
    assert "Overdue tasks: 1" in snapshot.summary
    assert "youtube.com" in snapshot.summary
