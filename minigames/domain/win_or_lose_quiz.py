"""Win-or-lose quiz rules.

A player starts with a point balance and bets part of it on every question.
A correct answer adds the bet, a wrong one subtracts it. The game ends when
all questions are answered or the balance drops to zero or below.

Every function here is pure: states are immutable values and a transition
returns a new state instead of mutating the one passed in.
"""

import math
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple

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

DEFAULT_INITIAL_POINTS = 100
DEFAULT_MIN_BET_AMOUNT = 1
MIN_OPTIONS = 2
MAX_OPTIONS = 6


@dataclass(frozen=True)
class Question:
    question: str
    options: Tuple[str, ...]
    correct_answer_index: int


@dataclass(frozen=True)
class GameConfig:
    questions: Tuple[Question, ...]
    initial_points: int = DEFAULT_INITIAL_POINTS
    min_bet_amount: int = DEFAULT_MIN_BET_AMOUNT
    max_bet_amount: Optional[int] = None


@dataclass(frozen=True)
class AnswerRecord:
    question_index: int
    bet_amount: int
    selected_answer_index: int
    is_correct: bool
    points_change: int


@dataclass(frozen=True)
class SessionState:
    current_question_index: int
    player_points: int
    answer_history: Tuple[AnswerRecord, ...] = field(default_factory=tuple)
    is_finished: bool = False
    final_score: Optional[int] = None


@dataclass(frozen=True)
class Answer:
    selected_answer_index: int
    bet_amount: int


@dataclass(frozen=True)
class AnswerResult:
    is_correct: bool
    correct_answer_index: int
    points_change: int
    new_points: int
    is_game_finished: bool


@dataclass(frozen=True)
class QuestionView:
    """A question as shown to the player. The correct answer is not part of it."""

    question_index: int
    question: str
    options: Tuple[str, ...]


@dataclass(frozen=True)
class Statistics:
    total_questions: int
    correct_answers: int
    wrong_answers: int
    accuracy: int
    final_score: int
    total_bet: int


def validate_config(config: GameConfig) -> None:
    """Reject configs that cannot be played.

    Raises:
        EmptyQuestionsError: The config has no questions.
        BadAnswerIndexError: A question's correct answer index is out of range.
    """
    if not config.questions:
        raise EmptyQuestionsError()

    for index, question in enumerate(config.questions):
        if question.correct_answer_index >= len(question.options):
            raise BadAnswerIndexError(index)


def initialize(config: GameConfig) -> SessionState:
    """Return the state of a freshly started session."""
    return SessionState(
        current_question_index=0,
        player_points=config.initial_points or DEFAULT_INITIAL_POINTS,
    )


def current_question(config: GameConfig, state: SessionState) -> Optional[QuestionView]:
    """Return the question the player has to answer next, or None when there is none."""
    if state.is_finished:
        return None
    if state.current_question_index >= len(config.questions):
        return None

    question = config.questions[state.current_question_index]
    return QuestionView(
        question_index=state.current_question_index,
        question=question.question,
        options=question.options,
    )


def process_answer(
    config: GameConfig, state: SessionState, answer: Answer
) -> Tuple[SessionState, AnswerResult]:
    """Apply one answer and bet to the session.

    Args:
        config (GameConfig): The quiz being played
        state (SessionState): State before the answer
        answer (Answer): Selected option and bet amount

    Raises:
        AlreadyFinishedError: The session already ended.
        NoMoreQuestionsError: Every question has been answered.
        InsufficientPointsError: The bet is larger than the balance.
        BetTooLowError: The bet is below the configured minimum.
        BetTooHighError: The bet is above the configured maximum.
        InvalidAnswerIndexError: The selected option does not exist.

    Returns:
        Tuple[SessionState, AnswerResult]: The new state and the outcome of the answer
    """
    if state.is_finished:
        raise AlreadyFinishedError()

    if state.current_question_index >= len(config.questions):
        raise NoMoreQuestionsError()

    question = config.questions[state.current_question_index]

    if answer.bet_amount > state.player_points:
        raise InsufficientPointsError(state.player_points, answer.bet_amount)

    if config.min_bet_amount and answer.bet_amount < config.min_bet_amount:
        raise BetTooLowError(config.min_bet_amount)

    if config.max_bet_amount and answer.bet_amount > config.max_bet_amount:
        raise BetTooHighError(config.max_bet_amount)

    if answer.selected_answer_index >= len(question.options):
        raise InvalidAnswerIndexError(answer.selected_answer_index, len(question.options))

    is_correct = answer.selected_answer_index == question.correct_answer_index
    points_change = answer.bet_amount if is_correct else -answer.bet_amount
    new_points = state.player_points + points_change
    next_index = state.current_question_index + 1

    record = AnswerRecord(
        question_index=state.current_question_index,
        bet_amount=answer.bet_amount,
        selected_answer_index=answer.selected_answer_index,
        is_correct=is_correct,
        points_change=points_change,
    )

    # Bankruptcy ends the game even when questions remain.
    is_finished = next_index >= len(config.questions) or new_points <= 0

    new_state = replace(
        state,
        current_question_index=next_index,
        player_points=new_points,
        answer_history=state.answer_history + (record,),
        is_finished=is_finished,
        final_score=new_points if is_finished else None,
    )
    result = AnswerResult(
        is_correct=is_correct,
        correct_answer_index=question.correct_answer_index,
        points_change=points_change,
        new_points=new_points,
        is_game_finished=is_finished,
    )
    return new_state, result


def compute_statistics(state: SessionState) -> Statistics:
    """Summarize the answers given so far. Safe to call mid-game."""
    total_questions = len(state.answer_history)
    correct_answers = sum(1 for record in state.answer_history if record.is_correct)
    total_bet = sum(record.bet_amount for record in state.answer_history)

    accuracy = 0
    if total_questions > 0:
        # Halves round up.
        accuracy = math.floor(correct_answers / total_questions * 100 + 0.5)

    final_score = state.final_score if state.final_score is not None else state.player_points

    return Statistics(
        total_questions=total_questions,
        correct_answers=correct_answers,
        wrong_answers=total_questions - correct_answers,
        accuracy=accuracy,
        final_score=final_score,
        total_bet=total_bet,
    )
