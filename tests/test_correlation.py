import pytest
from datetime import date

from forge.analytics import correlation
from forge.analytics.correlation import CorrelationEngine, correlation_insights, pearson_correlation
from forge.schemas.analytics import CorrelationType, strength_bucket
from tests.fixtures import TODAY, done, done_on, make_habit

EVEN = range(0, 30, 2)
ODD = range(1, 30, 2)


def test_pearson_of_identical_vectors_is_one():
    xs = [1, 0, 1, 1, 0, 0, 1, 0, 1, 1]
    assert pearson_correlation(xs, xs) == pytest.approx(1.0)


def test_pearson_of_inverted_vectors_is_minus_one():
    xs = [1, 0, 1, 1, 0, 0, 1, 0, 1, 1]
    ys = [1 - x for x in xs]
    assert pearson_correlation(xs, ys) == pytest.approx(-1.0)


def test_pearson_of_constant_vectors_is_zero():
    assert pearson_correlation([0] * 30, [0] * 30) == 0.0
    assert pearson_correlation([1] * 30, [1, 0] * 15) == 0.0


def test_strength_buckets():
    assert strength_bucket(1.0) == "Very Strong"
    assert strength_bucket(0.8) == "Very Strong"
    assert strength_bucket(0.7) == "Strong"
    assert strength_bucket(0.5) == "Moderate"
    assert strength_bucket(0.35) == "Weak"
    assert strength_bucket(0.1) == "Very Weak"


def test_habits_done_together_give_synergy():
    run = make_habit(name="Run")
    stretch = make_habit(name="Stretch")
    logs = done_on(run, EVEN) + done_on(stretch, EVEN)

    insight = CorrelationEngine([run, stretch], logs, TODAY).pair_insight(run, stretch)

    assert insight is not None
    assert insight.type == CorrelationType.positive
    assert insight.title == "Synergy Detected"
    assert insight.strength == pytest.approx(1.0)
    assert insight.habit_ids == [run.id, stretch.id]
    assert "100% more likely to complete 'Stretch'" in insight.description


def test_habits_done_on_alternate_days_give_conflict():
    gym = make_habit(name="Gym")
    late = make_habit(name="Late Night")
    logs = done_on(gym, EVEN) + done_on(late, ODD)

    insight = CorrelationEngine([gym, late], logs, TODAY).pair_insight(gym, late)

    assert insight.type == CorrelationType.negative
    assert insight.title == "Conflict Pattern"
    assert insight.strength == pytest.approx(1.0)


def test_constant_habit_yields_no_pair_insight():
    always = make_habit(name="Always")
    sometimes = make_habit(name="Sometimes")
    logs = done_on(always, range(30)) + done_on(sometimes, EVEN)
    assert CorrelationEngine([always, sometimes], logs, TODAY).pair_insight(always, sometimes) is None


def test_weekday_pattern_is_detected():
    habit = make_habit(name="Yoga")
    mondays = [date(2026, 3, d) for d in (16, 9, 2)] + [date(2026, 2, 23)]
    logs = [done(habit, d) for d in mondays]

    insight = CorrelationEngine([habit], logs, TODAY).temporal_insight(habit)

    assert insight.type == CorrelationType.temporal
    assert insight.title == "Weekly Pattern"
    assert insight.strength == pytest.approx(1.0)
    assert "higher on Mondays than Sundays" in insight.description


def test_even_habit_has_no_weekday_pattern():
    habit = make_habit()
    logs = done_on(habit, range(30))
    assert CorrelationEngine([habit], logs, TODAY).temporal_insight(habit) is None


def test_insights_are_capped_and_sorted():
    habits = [make_habit(name=f"H{i}") for i in range(4)]
    logs = [log for h in habits for log in done_on(h, EVEN)]

    insights = correlation_insights(habits, logs, TODAY)

    assert len(insights) == 5
    strengths = [i.strength for i in insights]
    assert strengths == sorted(strengths, reverse=True)


def test_inactive_habits_are_not_correlated():
    a = make_habit(name="A")
    b = make_habit(name="B", is_active=False)
    logs = done_on(a, EVEN) + done_on(b, EVEN)
    insights = correlation_insights([a, b], logs, TODAY)
    assert all(b.id not in i.habit_ids for i in insights)


def test_no_data_means_no_insights():
    assert correlation_insights([], [], TODAY) == []
    assert correlation_insights([make_habit(), make_habit()], [], TODAY) == []


def test_correlation_of_exactly_point_three_is_ignored(monkeypatch):
    a = make_habit(name="A")
    b = make_habit(name="B")
    engine = CorrelationEngine([a, b], [], TODAY)

    monkeypatch.setattr(correlation, "pearson_correlation", lambda xs, ys: 0.3)
    assert engine.pair_insight(a, b) is None

    monkeypatch.setattr(correlation, "pearson_correlation", lambda xs, ys: -0.3)
    assert engine.pair_insight(a, b) is None

    monkeypatch.setattr(correlation, "pearson_correlation", lambda xs, ys: 0.31)
    assert engine.pair_insight(a, b).strength == pytest.approx(0.31)


def test_weekday_spread_of_exactly_point_three_is_ignored(monkeypatch):
    habit = make_habit()
    engine = CorrelationEngine([habit], [], TODAY)

    monkeypatch.setattr(engine, "weekday_rates", lambda h: [0.3, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0])
    assert engine.temporal_insight(habit) is None

    monkeypatch.setattr(engine, "weekday_rates", lambda h: [0.31, 0.0, 0.0, 0.0, 0.0, 0.0, 0.0])
    insight = engine.temporal_insight(habit)
    assert insight.strength == pytest.approx(0.31)
    assert "higher on Sundays than Mondays" in insight.description
