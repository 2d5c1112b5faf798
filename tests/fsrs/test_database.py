from datetime import timedelta

import pytest

from studycore.fsrs import database
from studycore.fsrs.config import ExposurePolicy
from studycore.fsrs.constants import FSRS_V6_DEFAULT_WEIGHTS, MIN_REVIEW_COUNT_FIRST, Grade
from studycore.fsrs.errors import PersistenceError
from studycore.fsrs.models import UserSettings


def test_database_url_required(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)
    with pytest.raises(PersistenceError, match="DATABASE_URL"):
        database.get_database_url()


def test_test_mode_swaps_database_name(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@localhost:5432/learning_db")
    monkeypatch.setenv("TEST_MODE", "true")
    assert database.get_database_url().endswith("/test_learning_db")

    monkeypatch.setenv("TEST_MODE", "false")
    assert database.get_database_url().endswith("/learning_db")


def test_memory_state_round_trip(db_session, scheduler, now):
    outcome = scheduler.review_card(None, Grade.GOOD, now=now)
    database.save_memory_state("u1", "c1", outcome.state, session=db_session)

    loaded = database.load_memory_state("u1", "c1", session=db_session)
    assert loaded == outcome.state
    assert loaded.next_review.tzinfo is not None


def test_missing_state_is_none(db_session):
    assert database.load_memory_state("u1", "nope", session=db_session) is None


def test_save_updates_existing_state(db_session, scheduler, now):
    first = scheduler.review_card(None, Grade.GOOD, now=now)
    database.save_memory_state("u1", "c1", first.state, session=db_session)

    second = scheduler.review_card(first.state, Grade.EASY, now=now + timedelta(days=3))
    database.save_memory_state("u1", "c1", second.state, session=db_session)

    assert database.load_memory_state("u1", "c1", session=db_session) == second.state
    assert len(database.load_cards_with_state("u1", session=db_session)) == 1


def test_clear_memory_state(db_session, scheduler, now):
    outcome = scheduler.review_card(None, Grade.GOOD, now=now)
    database.save_memory_state("u1", "c1", outcome.state, session=db_session)

    assert database.clear_memory_state("u1", "c1", session=db_session)
    assert not database.clear_memory_state("u1", "c1", session=db_session)
    assert database.load_memory_state("u1", "c1", session=db_session) is None


def test_load_cards_scoped_by_user(db_session, scheduler, now):
    state = scheduler.review_card(None, Grade.GOOD, now=now).state
    database.save_memory_state("u1", "b", state, session=db_session)
    database.save_memory_state("u1", "a", state, session=db_session)
    database.save_memory_state("u2", "c", state, session=db_session)

    cards = database.load_cards_with_state("u1", session=db_session)
    assert [c.id for c in cards] == ["a", "b"]


def test_log_review_and_count(db_session, scheduler, now):
    first = scheduler.review_card(None, Grade.GOOD, now=now)
    database.log_review("u1", "c1", Grade.GOOD, first, session=db_session)

    later = now + timedelta(days=2)
    second = scheduler.review_card(first.state, Grade.AGAIN, now=later)
    database.log_review("u1", "c1", Grade.AGAIN, second, prior_state=first.state,
                        duration_ms=4200, session=db_session)

    logs = database.get_review_logs("u1", session=db_session)
    assert [row["grade"] for row in logs] == [3, 1]
    assert logs[0]["stability_before"] is None
    assert logs[1]["elapsed_days"] == pytest.approx(2.0)
    assert logs[1]["stability_before"] == pytest.approx(first.state.stability)
    assert logs[1]["duration_ms"] == 4200

    assert database.count_reviews("u1", session=db_session) == 2
    assert database.count_reviews("u1", since=now, session=db_session) == 1
    assert database.count_reviews("u2", session=db_session) == 0


def test_user_config_defaults(db_session):
    config = database.get_user_config("nobody", session=db_session)
    assert config.weights == FSRS_V6_DEFAULT_WEIGHTS
    assert config.target_retention == 0.9


def test_user_config_pads_stored_weights(db_session):
    db_session.add(UserSettings(user_id="u1", fsrs_weights=[1, 2, 3], target_retention=0.92))
    db_session.commit()

    config = database.get_user_config("u1", session=db_session)
    assert config.target_retention == 0.92
    assert len(config.weights) == 21
    assert config.weights[:3] == (1.0, 2.0, 3.0)
    assert config.weights[20] == 1.0


def test_save_user_weights(db_session, now):
    weights = [0.3] * 21
    database.save_user_weights("u1", weights, target_retention=0.85, optimized_at=now, session=db_session)

    config = database.get_user_config("u1", session=db_session)
    assert config.weights == tuple(weights)
    assert config.target_retention == 0.85


def test_exposure_policy_defaults_and_overrides(db_session):
    assert database.get_exposure_policy("u1", session=db_session) == ExposurePolicy()

    db_session.add(UserSettings(user_id="u1", min_reveal_seconds=10, adaptive_fuzzing=False))
    db_session.commit()

    policy = database.get_exposure_policy("u1", session=db_session)
    assert policy.min_reveal_seconds == 10
    assert policy.adaptive_fuzzing is False
    assert policy.fuzzing_hours_max == 8


def test_optimization_eligibility_from_history(db_session, scheduler, now):
    outcome = scheduler.review_card(None, Grade.GOOD, now=now)
    database.log_review("u1", "c1", Grade.GOOD, outcome, session=db_session)

    result = database.get_optimization_eligibility("u1", now=now, session=db_session)
    assert result.status == "NOT_READY"
    assert result.total_reviews == 1
    assert result.total_reviews < MIN_REVIEW_COUNT_FIRST


def test_init_db_is_idempotent():
    from sqlalchemy import create_engine, inspect

    engine = create_engine("sqlite://")
    database.init_db(engine)
    database.init_db(engine)
    assert {"card_state", "review_log", "user_settings"} <= set(inspect(engine).get_table_names())
    engine.dispose()


def test_reset_db_drops_data(scheduler, now):
    from sqlalchemy import create_engine
    from sqlalchemy.orm import Session
    from sqlalchemy.pool import StaticPool

    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    database.init_db(engine)
    with Session(engine) as session:
        state = scheduler.review_card(None, Grade.GOOD, now=now).state
        database.save_memory_state("u1", "c1", state, session=session)
        session.commit()
        assert len(database.load_cards_with_state("u1", session=session)) == 1

    database.reset_db(engine)
    with Session(engine) as session:
        assert database.load_cards_with_state("u1", session=session) == []
    engine.dispose()


def test_default_user_id(monkeypatch):
    monkeypatch.delenv("DEFAULT_USER_ID", raising=False)
    assert database.get_default_user_id() == "default"
    monkeypatch.setenv("DEFAULT_USER_ID", "alice")
    assert database.get_default_user_id() == "alice"


def test_caller_rollback_discards_write(db_session, scheduler, now):
    state = scheduler.review_card(None, Grade.GOOD, now=now).state
    database.save_memory_state("u1", "c1", state, session=db_session)
    assert database.load_memory_state("u1", "c1", session=db_session) == state

    db_session.rollback()
    assert database.load_memory_state("u1", "c1", session=db_session) is None


def test_state_and_log_share_one_transaction(db_session, scheduler, now):
    outcome = scheduler.review_card(None, Grade.GOOD, now=now)
    database.save_memory_state("u1", "c1", outcome.state, session=db_session)
    database.log_review("u1", "c1", Grade.GOOD, outcome, session=db_session)
    database.get_optimization_eligibility("u1", now=now, session=db_session)

    db_session.rollback()
    assert database.load_cards_with_state("u1", session=db_session) == []
    assert database.count_reviews("u1", session=db_session) == 0


def test_queries_fall_back_to_default_user(monkeypatch, db_session, scheduler, now):
    monkeypatch.setenv("DEFAULT_USER_ID", "alice")
    outcome = scheduler.review_card(None, Grade.GOOD, now=now)
    database.save_memory_state("alice", "c1", outcome.state, session=db_session)
    database.log_review("alice", "c1", Grade.GOOD, outcome, session=db_session)
    database.save_memory_state("bob", "c2", outcome.state, session=db_session)

    assert [c.id for c in database.load_cards_with_state(session=db_session)] == ["c1"]
    assert database.count_reviews(session=db_session) == 1
    assert len(database.get_review_logs(session=db_session)) == 1
    assert database.get_optimization_eligibility(now=now, session=db_session).total_reviews == 1
    assert database.get_user_config(session=db_session).weights == FSRS_V6_DEFAULT_WEIGHTS
    assert database.get_exposure_policy(session=db_session) == ExposurePolicy()
