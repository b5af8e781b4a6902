"""Error taxonomy shared by the quiz engine, the session registry and the routers.

Every error carries the HTTP status the boundary answers with, so routers can
let them propagate and a single exception handler renders them.
"""

from http import HTTPStatus


class GameError(Exception):
    status_code: int = HTTPStatus.BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# ==== Config errors ===========================================================


class ConfigError(GameError):
    status_code = HTTPStatus.BAD_REQUEST


class EmptyQuestionsError(ConfigError):
    def __init__(self):
        super().__init__("Game must have at least one question")


class BadAnswerIndexError(ConfigError):
    def __init__(self, question_index: int):
        super().__init__(f"Question {question_index + 1}: Invalid correctAnswerIndex")
        self.question_index = question_index


# ==== Session errors ==========================================================


class SessionError(GameError):
    status_code = HTTPStatus.CONFLICT


class SessionNotFoundError(SessionError):
    status_code = HTTPStatus.NOT_FOUND

    def __init__(self, session_id: str):
        super().__init__("Gameplay session not found or expired")
        self.session_id = session_id


class AlreadyFinishedError(SessionError):
    def __init__(self):
        super().__init__("Game is already finished")


class NoMoreQuestionsError(SessionError):
    def __init__(self):
        super().__init__("No more questions available")


# ==== Bet errors ==============================================================


class BetError(GameError):
    status_code = HTTPStatus.BAD_REQUEST


class InsufficientPointsError(BetError):
    def __init__(self, player_points: int, bet_amount: int):
        super().__init__(
            f"Insufficient points. You have {player_points} points but trying to bet {bet_amount}"
        )
        self.player_points = player_points
        self.bet_amount = bet_amount


class BetTooLowError(BetError):
    def __init__(self, min_bet_amount: int):
        super().__init__(f"Bet amount must be at least {min_bet_amount}")
        self.min_bet_amount = min_bet_amount


class BetTooHighError(BetError):
    def __init__(self, max_bet_amount: int):
        super().__init__(f"Bet amount cannot exceed {max_bet_amount}")
        self.max_bet_amount = max_bet_amount


class InvalidAnswerIndexError(BetError):
    def __init__(self, selected_answer_index: int, option_count: int):
        super().__init__(
            f"Invalid answer index {selected_answer_index}: question has {option_count} options"
        )
        self.selected_answer_index = selected_answer_index


# ==== Infrastructure ==========================================================


class ContentStoreError(GameError):
    """Database or session backend failure. Not part of the game rules."""

    status_code = HTTPStatus.SERVICE_UNAVAILABLE

    def __init__(self, message: str = "Service temporarily unavailable"):
        super().__init__(message)
