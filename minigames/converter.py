from typing import Callable, Dict, List, Optional

from minigames.domain.win_or_lose_quiz import (
    DEFAULT_INITIAL_POINTS,
    DEFAULT_MIN_BET_AMOUNT,
    AnswerRecord,
    AnswerResult,
    GameConfig,
    Question,
    QuestionView,
    SessionState,
    Statistics,
)
from minigames.models.dc_models import (
    AnswerResponseModel,
    CreateWinOrLoseQuizModel,
    QuestionModel,
    QuestionViewModel,
    StatisticsModel,
    UpdateWinOrLoseQuizModel,
)
from minigames.models.schema_models import GameSchema

WIN_OR_LOSE_QUIZ_SLUG = "win-or-lose-quiz"


class UnsupportedTemplateError(ValueError):
    """The stored game belongs to a template this service cannot decode."""


def _decode_win_or_lose_quiz(game_json: dict) -> GameConfig:
    questions = tuple(
        Question(
            question=question["question"],
            options=tuple(question["options"]),
            correct_answer_index=int(question["correctAnswerIndex"]),
        )
        for question in game_json.get("questions", [])
    )
    return GameConfig(
        questions=questions,
        initial_points=game_json.get("initialPoints") or DEFAULT_INITIAL_POINTS,
        min_bet_amount=game_json.get("minBetAmount") or DEFAULT_MIN_BET_AMOUNT,
        max_bet_amount=game_json.get("maxBetAmount"),
    )


# One decoder per template slug. The quiz engine only ever sees its own GameConfig.
GAME_JSON_DECODERS: Dict[str, Callable[[dict], GameConfig]] = {
    WIN_OR_LOSE_QUIZ_SLUG: _decode_win_or_lose_quiz,
}


class DataConverter:
    """This class is used to convert data between storage, domain and client formats."""

    def convert_game_to_config(self, game: GameSchema) -> GameConfig:
        """Decode the game_json of a stored game according to its template slug

        Args:
            game (GameSchema): Stored game with its template loaded

        Raises:
            UnsupportedTemplateError: No decoder exists for the game's template

        Returns:
            GameConfig: Typed quiz configuration
        """
        slug = game.game_template.slug if game.game_template else None
        decoder = GAME_JSON_DECODERS.get(slug)
        if decoder is None:
            raise UnsupportedTemplateError(f"Unsupported game template: {slug}")
        return decoder(game.game_json)

    def convert_config_to_game_json(self, config: GameConfig) -> dict:
        game_json = {
            "questions": [
                {
                    "question": question.question,
                    "options": list(question.options),
                    "correctAnswerIndex": question.correct_answer_index,
                }
                for question in config.questions
            ],
            "initialPoints": config.initial_points,
            "minBetAmount": config.min_bet_amount,
        }
        if config.max_bet_amount is not None:
            game_json["maxBetAmount"] = config.max_bet_amount
        return game_json

    def convert_questions(self, questions: List[QuestionModel]) -> tuple:
        return tuple(
            Question(
                question=question.question,
                options=tuple(question.options),
                correct_answer_index=question.correct_answer_index,
            )
            for question in questions
        )

    def convert_create_model_to_config(self, data: CreateWinOrLoseQuizModel) -> GameConfig:
        return GameConfig(
            questions=self.convert_questions(data.questions),
            initial_points=data.initial_points or DEFAULT_INITIAL_POINTS,
            min_bet_amount=data.min_bet_amount or DEFAULT_MIN_BET_AMOUNT,
            max_bet_amount=data.max_bet_amount,
        )

    def merge_update_into_config(
        self, old_config: GameConfig, data: UpdateWinOrLoseQuizModel
    ) -> GameConfig:
        """Overlay the fields present in a partial update on the stored config

        Args:
            old_config (GameConfig): Config currently stored
            data (UpdateWinOrLoseQuizModel): Partial update, None means keep

        Returns:
            GameConfig: Merged config, not yet validated
        """
        questions = old_config.questions
        if data.questions is not None:
            questions = self.convert_questions(data.questions)

        return GameConfig(
            questions=questions,
            initial_points=(
                data.initial_points
                if data.initial_points is not None
                else old_config.initial_points
            ),
            min_bet_amount=(
                data.min_bet_amount
                if data.min_bet_amount is not None
                else old_config.min_bet_amount
            ),
            max_bet_amount=(
                data.max_bet_amount
                if data.max_bet_amount is not None
                else old_config.max_bet_amount
            ),
        )

    def convert_question_view(self, view: Optional[QuestionView]) -> Optional[QuestionViewModel]:
        if view is None:
            return None
        return QuestionViewModel(
            question_index=view.question_index,
            question=view.question,
            options=list(view.options),
        )

    def convert_statistics(self, statistics: Optional[Statistics]) -> Optional[StatisticsModel]:
        if statistics is None:
            return None
        return StatisticsModel(
            total_questions=statistics.total_questions,
            correct_answers=statistics.correct_answers,
            wrong_answers=statistics.wrong_answers,
            accuracy=statistics.accuracy,
            final_score=statistics.final_score,
            total_bet=statistics.total_bet,
        )

    def convert_answer_result(
        self,
        result: AnswerResult,
        next_question: Optional[QuestionView],
        statistics: Optional[Statistics],
    ) -> AnswerResponseModel:
        return AnswerResponseModel(
            is_correct=result.is_correct,
            correct_answer_index=result.correct_answer_index,
            points_change=result.points_change,
            new_points=result.new_points,
            is_game_finished=result.is_game_finished,
            next_question=self.convert_question_view(next_question),
            statistics=self.convert_statistics(statistics),
        )

    def convert_session_state_to_dict(self, state: SessionState) -> dict:
        return {
            "current_question_index": state.current_question_index,
            "player_points": state.player_points,
            "answer_history": [
                {
                    "question_index": record.question_index,
                    "bet_amount": record.bet_amount,
                    "selected_answer_index": record.selected_answer_index,
                    "is_correct": record.is_correct,
                    "points_change": record.points_change,
                }
                for record in state.answer_history
            ],
            "is_finished": state.is_finished,
            "final_score": state.final_score,
        }

    def convert_dict_to_session_state(self, data: dict) -> SessionState:
        return SessionState(
            current_question_index=data["current_question_index"],
            player_points=data["player_points"],
            answer_history=tuple(AnswerRecord(**record) for record in data["answer_history"]),
            is_finished=data["is_finished"],
            final_score=data.get("final_score"),
        )
