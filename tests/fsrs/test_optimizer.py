import logging
from datetime import timedelta

from studycore.fsrs.constants import (
    MIN_REVIEW_COUNT_FIRST,
    MIN_REVIEW_COUNT_SUBSEQUENT,
)
from studycore.fsrs.optimizer import (
    min_review_count,
    optimization_eligibility,
    parse_optimizer_output,
)


def test_parses_weights_from_stdout():
    weights = [round(i + 0.1, 2) for i in range(21)]
    stdout = f"Optimizer done. Weights={weights}"
    assert parse_optimizer_output(stdout, "") == tuple(weights)


def test_falls_back_to_stderr():
    weights = [0.5] * 21
    assert parse_optimizer_output("progress [1, 2]", f"result: {weights}") == tuple(weights)


def test_ignores_lists_of_wrong_length():
    weights = [0.5] * 21
    stdout = f"epochs [1, 2, 3] final {weights}"
    assert parse_optimizer_output(stdout) == tuple(weights)


def test_unparseable_output_returns_none_and_logs(caplog):
    with caplog.at_level(logging.ERROR):
        assert parse_optimizer_output("no weights here", "still no weights") is None
    assert "Could not parse" in caplog.text


def test_min_review_count():
    assert min_review_count(False) == MIN_REVIEW_COUNT_FIRST
    assert min_review_count(True) == MIN_REVIEW_COUNT_SUBSEQUENT


def test_not_ready_on_first_run(now):
    result = optimization_eligibility(MIN_REVIEW_COUNT_FIRST - 1, now=now)
    assert result.status == "NOT_READY"
    assert result.total_reviews == MIN_REVIEW_COUNT_FIRST - 1
    assert result.new_reviews_since_last == MIN_REVIEW_COUNT_FIRST - 1
    assert result.days_since_last is None


def test_ready_on_first_run(now):
    assert optimization_eligibility(MIN_REVIEW_COUNT_FIRST, now=now).status == "READY"


def test_recently_optimized(now):
    result = optimization_eligibility(
        MIN_REVIEW_COUNT_FIRST + 20,
        MIN_REVIEW_COUNT_SUBSEQUENT - 1,
        last_optimized_at=now - timedelta(days=2),
        now=now,
    )
    assert result.status == "OPTIMIZED"
    assert result.days_since_last < 7


def test_ready_after_enough_new_reviews(now):
    result = optimization_eligibility(
        500,
        MIN_REVIEW_COUNT_SUBSEQUENT,
        last_optimized_at=now - timedelta(days=2),
        now=now,
    )
    assert result.status == "READY"


def test_ready_after_enough_days(now):
    result = optimization_eligibility(500, 3, last_optimized_at=now - timedelta(days=8), now=now)
    assert result.status == "READY"
