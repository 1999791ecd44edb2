from sibyl.config.settings import ScoringConfig
from sibyl.scoring.policy import (
    LexiconScoringPolicy,
    mean_score,
    recency_weighted_score,
    score_messages,
)


def _policy() -> LexiconScoringPolicy:
    return LexiconScoringPolicy(
        ScoringConfig(
            rating_ceiling=300,
            base_rating=20,
            shout_weight=40,
            exclamation_weight=10,
            terms={"idiot": 60, "kill": 120, "thanks": -20},
        )
    )


def test_neutral_message_gets_base_rating() -> None:
    assert _policy().rate("see you at lunch") == 20


def test_terms_match_whole_words_case_insensitive() -> None:
    policy = _policy()
    assert policy.rate("you Idiot") == 80
    assert policy.rate("idiotic plan") == 20


def test_shouting_and_exclamations_add_up() -> None:
    assert _policy().rate("STOP THAT NOW!!") == 20 + 40 + 20


def test_rating_is_clamped() -> None:
    policy = _policy()
    assert policy.rate("kill kill kill") == 300
    assert policy.rate("thanks thanks") == 0


def test_rating_is_deterministic() -> None:
    policy = _policy()
    text = "you idiot!!"
    assert policy.rate(text) == policy.rate(text)


def test_aggregations() -> None:
    assert mean_score([]) == 0
    assert mean_score([10, 20, 40]) == 23
    assert recency_weighted_score([]) == 0
    # weights 3, 2, 1 for most recent first
    assert recency_weighted_score([90, 0, 0]) == 45
    assert recency_weighted_score([0, 0, 90]) == 15


def test_aggregation_is_idempotent() -> None:
    policy = _policy()
    ratings = [120, 20, 80]
    assert policy.aggregate_user(ratings) == policy.aggregate_user(ratings)
    assert policy.aggregate_channel(ratings) == policy.aggregate_channel(ratings)


def test_score_messages_returns_ratings_in_input_order() -> None:
    policy = _policy()
    score, ratings = score_messages(policy, ["kill", "hello"], policy.aggregate_user)
    assert ratings == [140, 20]
    assert score == 80
