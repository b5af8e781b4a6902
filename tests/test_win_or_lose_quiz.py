"""Rules of the win-or-lose quiz: bets, transitions, termination and statistics."""

import pytest

from minigames.domain import win_or_lose_quiz as quiz
from minigames.domain.errors import (
    AlreadyFinishedError,
    BadAnswerIndexError,
    BetTooHighError,
    BetTooLowError,
    EmptyQuestionsError,
    InsufficientPointsError,
    InvalidAnswerIndexError,
    NoMoreQuestionsError,
)
from minigames.domain.win_or_lose_quiz import Answer, GameConfig, Question, SessionState


def single_question_config() -> GameConfig:
    return GameConfig(
        questions=(Question("2+2?", ("3", "4", "5"), 1),),
        initial_points=100,
        min_bet_amount=1,
    )


def two_question_config(initial_points: int = 10, **kwargs) -> GameConfig:
    return GameConfig(
        questions=(
            Question("Capital of France?", ("Paris", "Rome"), 0),
            Question("Largest planet?", ("Mars", "Jupiter", "Venus"), 1),
        ),
        initial_points=initial_points,
        **kwargs,
    )


# ==== validate_config =========================================================


def test_validate_config_rejects_empty_questions():
    with pytest.raises(EmptyQuestionsError):
        quiz.validate_config(GameConfig(questions=()))


def test_validate_config_reports_bad_answer_index():
    config = GameConfig(questions=(Question("Q", ("a", "b"), 5),))

    with pytest.raises(BadAnswerIndexError) as excinfo:
        quiz.validate_config(config)

    assert excinfo.value.question_index == 0


def test_validate_config_reports_first_bad_question():
    config = GameConfig(
        questions=(
            Question("Q1", ("a", "b"), 1),
            Question("Q2", ("a", "b"), 2),
            Question("Q3", ("a", "b"), 3),
        )
    )

    with pytest.raises(BadAnswerIndexError) as excinfo:
        quiz.validate_config(config)

    assert excinfo.value.question_index == 1
    assert "Question 2" in excinfo.value.message


def test_validate_config_accepts_valid_config():
    quiz.validate_config(two_question_config())


# ==== initialize / current_question ===========================================


def test_initialize():
    state = quiz.initialize(single_question_config())

    assert state == SessionState(
        current_question_index=0,
        player_points=100,
        answer_history=(),
        is_finished=False,
        final_score=None,
    )


def test_initialize_defaults_to_100_points():
    state = quiz.initialize(GameConfig(questions=(Question("Q", ("a", "b"), 0),), initial_points=0))
    assert state.player_points == 100


def test_current_question_hides_correct_answer():
    config = single_question_config()
    view = quiz.current_question(config, quiz.initialize(config))

    assert view.question_index == 0
    assert view.question == "2+2?"
    assert view.options == ("3", "4", "5")
    assert not hasattr(view, "correct_answer_index")


def test_current_question_out_of_range():
    config = single_question_config()
    state = SessionState(current_question_index=1, player_points=100)
    assert quiz.current_question(config, state) is None


# ==== process_answer ==========================================================


def test_correct_answer_on_last_question_finishes_game():
    config = single_question_config()
    state = quiz.initialize(config)

    new_state, result = quiz.process_answer(config, state, Answer(selected_answer_index=1, bet_amount=20))

    assert result.is_correct is True
    assert result.points_change == 20
    assert result.new_points == 120
    assert result.correct_answer_index == 1
    assert result.is_game_finished is True
    assert new_state.is_finished is True
    assert new_state.final_score == 120
    assert new_state.current_question_index == 1


def test_bet_above_balance_is_rejected_and_state_unchanged():
    config = single_question_config()
    state = quiz.initialize(config)

    with pytest.raises(InsufficientPointsError) as excinfo:
        quiz.process_answer(config, state, Answer(selected_answer_index=1, bet_amount=150))

    assert "150" in excinfo.value.message
    assert state == quiz.initialize(config)


def test_bankruptcy_ends_game_before_last_question():
    config = two_question_config(initial_points=10)
    state = quiz.initialize(config)

    new_state, result = quiz.process_answer(config, state, Answer(selected_answer_index=1, bet_amount=10))

    assert result.is_correct is False
    assert result.points_change == -10
    assert result.new_points == 0
    assert result.is_game_finished is True
    assert new_state.is_finished is True
    assert new_state.final_score == 0
    assert new_state.current_question_index == 1


def test_finished_game_is_absorbing():
    config = single_question_config()
    finished, _ = quiz.process_answer(
        config, quiz.initialize(config), Answer(selected_answer_index=0, bet_amount=30)
    )

    assert quiz.current_question(config, finished) is None
    with pytest.raises(AlreadyFinishedError):
        quiz.process_answer(config, finished, Answer(selected_answer_index=1, bet_amount=1))
    assert finished.final_score == 70


def test_wrong_answer_mid_game_keeps_session_active():
    config = two_question_config(initial_points=50)
    state = quiz.initialize(config)

    new_state, result = quiz.process_answer(config, state, Answer(selected_answer_index=1, bet_amount=20))

    assert result.is_game_finished is False
    assert new_state.player_points == 30
    assert new_state.final_score is None
    assert quiz.current_question(config, new_state).question == "Largest planet?"


def test_no_more_questions():
    config = single_question_config()
    state = SessionState(current_question_index=1, player_points=100)

    with pytest.raises(NoMoreQuestionsError):
        quiz.process_answer(config, state, Answer(selected_answer_index=0, bet_amount=1))


def test_bet_below_minimum():
    config = two_question_config(initial_points=100, min_bet_amount=10)

    with pytest.raises(BetTooLowError) as excinfo:
        quiz.process_answer(config, quiz.initialize(config), Answer(selected_answer_index=0, bet_amount=5))

    assert "10" in excinfo.value.message


def test_bet_above_maximum():
    config = two_question_config(initial_points=100, max_bet_amount=25)

    with pytest.raises(BetTooHighError) as excinfo:
        quiz.process_answer(config, quiz.initialize(config), Answer(selected_answer_index=0, bet_amount=30))

    assert "25" in excinfo.value.message


def test_unbounded_maximum_allows_whole_balance():
    config = two_question_config(initial_points=100)
    new_state, _ = quiz.process_answer(
        config, quiz.initialize(config), Answer(selected_answer_index=0, bet_amount=100)
    )
    assert new_state.player_points == 200


def test_invalid_answer_index():
    config = two_question_config(initial_points=100)

    with pytest.raises(InvalidAnswerIndexError):
        quiz.process_answer(config, quiz.initialize(config), Answer(selected_answer_index=2, bet_amount=5))


def test_insufficient_points_is_checked_before_bet_limits():
    config = two_question_config(initial_points=10, max_bet_amount=5)

    with pytest.raises(InsufficientPointsError):
        quiz.process_answer(config, quiz.initialize(config), Answer(selected_answer_index=9, bet_amount=20))


def test_bet_limits_are_checked_before_answer_index():
    config = two_question_config(initial_points=100, min_bet_amount=10)

    with pytest.raises(BetTooLowError):
        quiz.process_answer(config, quiz.initialize(config), Answer(selected_answer_index=9, bet_amount=1))


def test_index_advances_by_one_and_history_is_appended():
    config = GameConfig(
        questions=tuple(Question(f"Q{i}", ("a", "b"), i % 2) for i in range(4)),
        initial_points=40,
    )
    state = quiz.initialize(config)
    answers = [Answer(0, 10), Answer(0, 10), Answer(0, 5), Answer(0, 5)]

    for expected_index, answer in enumerate(answers, start=1):
        previous_history = state.answer_history
        state, _ = quiz.process_answer(config, state, answer)
        assert state.current_question_index == expected_index
        assert state.answer_history[:-1] == previous_history

    assert [record.is_correct for record in state.answer_history] == [True, False, True, False]
    assert [record.points_change for record in state.answer_history] == [10, -10, 5, -5]
    assert state.player_points == 40
    assert state.is_finished is True


def test_loss_never_exceeds_balance():
    config = GameConfig(
        questions=tuple(Question(f"Q{i}", ("a", "b"), 0) for i in range(5)),
        initial_points=30,
    )
    state = quiz.initialize(config)
    while not state.is_finished:
        state, result = quiz.process_answer(
            config, state, Answer(selected_answer_index=1, bet_amount=min(20, state.player_points))
        )
        assert result.new_points >= 0
    assert state.final_score == 0


# ==== compute_statistics ======================================================


def test_statistics_after_finished_game():
    config = two_question_config(initial_points=100)
    state = quiz.initialize(config)
    state, _ = quiz.process_answer(config, state, Answer(selected_answer_index=0, bet_amount=30))
    state, _ = quiz.process_answer(config, state, Answer(selected_answer_index=0, bet_amount=50))

    statistics = quiz.compute_statistics(state)

    assert statistics.total_questions == 2
    assert statistics.correct_answers == 1
    assert statistics.wrong_answers == 1
    assert statistics.accuracy == 50
    assert statistics.final_score == 80
    assert statistics.total_bet == 80


def test_statistics_before_any_answer():
    statistics = quiz.compute_statistics(quiz.initialize(single_question_config()))

    assert statistics.total_questions == 0
    assert statistics.accuracy == 0
    assert statistics.final_score == 100
    assert statistics.total_bet == 0


def test_statistics_accuracy_rounds_half_up():
    config = GameConfig(
        questions=tuple(Question(f"Q{i}", ("a", "b"), 0) for i in range(8)),
        initial_points=100,
    )
    state = quiz.initialize(config)
    state, _ = quiz.process_answer(config, state, Answer(0, 1))
    for _ in range(7):
        state, _ = quiz.process_answer(config, state, Answer(1, 1))

    assert quiz.compute_statistics(state).accuracy == 13


def test_statistics_of_final_score_zero():
    config = two_question_config(initial_points=10)
    state, _ = quiz.process_answer(config, quiz.initialize(config), Answer(1, 10))

    assert quiz.compute_statistics(state).final_score == 0


def test_statistics_are_idempotent():
    config = two_question_config(initial_points=100)
    state, _ = quiz.process_answer(config, quiz.initialize(config), Answer(0, 10))

    assert quiz.compute_statistics(state) == quiz.compute_statistics(state)
