from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, model_validator
from pydantic.alias_generators import to_camel


class QuestionModel(BaseModel):
    question: str = Field(min_length=1)
    options: List[str] = Field(min_length=2, max_length=6)
    correct_answer_index: int = Field(ge=0)

    @model_validator(mode="after")
    def check_options_not_empty(self):
        if any(len(option) == 0 for option in self.options):
            raise ValueError("Option cannot be empty")
        return self

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class CreateWinOrLoseQuizModel(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    description: Optional[str] = Field(default=None, max_length=256)
    thumbnail_image: Optional[str] = None
    is_published: bool = False
    questions: List[QuestionModel]
    initial_points: int = Field(default=100, gt=0, alias="initialPoints")
    max_bet_amount: Optional[int] = Field(default=None, gt=0, alias="maxBetAmount")
    min_bet_amount: int = Field(default=1, gt=0, alias="minBetAmount")

    @model_validator(mode="after")
    def check_bet_limits(self):
        if self.max_bet_amount is not None and self.max_bet_amount < self.min_bet_amount:
            raise ValueError("maxBetAmount must be >= minBetAmount")
        return self

    class Config:
        populate_by_name = True
        str_strip_whitespace = True


class UpdateWinOrLoseQuizModel(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=128)
    description: Optional[str] = Field(default=None, max_length=256)
    thumbnail_image: Optional[str] = None
    is_published: Optional[bool] = None
    questions: Optional[List[QuestionModel]] = None
    initial_points: Optional[int] = Field(default=None, gt=0, alias="initialPoints")
    max_bet_amount: Optional[int] = Field(default=None, gt=0, alias="maxBetAmount")
    min_bet_amount: Optional[int] = Field(default=None, gt=0, alias="minBetAmount")

    class Config:
        populate_by_name = True
        str_strip_whitespace = True


class CheckAnswerModel(BaseModel):
    session_id: str = Field(min_length=1)
    selected_answer_index: int = Field(ge=0)
    bet_amount: int = Field(gt=0)

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class QuestionViewModel(BaseModel):
    question_index: int
    question: str
    options: List[str]

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class StatisticsModel(BaseModel):
    total_questions: int
    correct_answers: int
    wrong_answers: int
    accuracy: int
    final_score: int
    total_bet: int

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class PlayResponseModel(BaseModel):
    session_id: str
    game_id: UUID
    game_name: str
    player_points: int
    current_question: Optional[QuestionViewModel]
    total_questions: int
    min_bet_amount: int
    max_bet_amount: Optional[int]

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class AnswerResponseModel(BaseModel):
    is_correct: bool
    correct_answer_index: int
    points_change: int
    new_points: int
    is_game_finished: bool
    next_question: Optional[QuestionViewModel]
    statistics: Optional[StatisticsModel]

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class GameSummaryModel(BaseModel):
    id: UUID
    name: str
    description: Optional[str]
    is_published: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class GameDetailModel(BaseModel):
    id: UUID
    name: str
    description: Optional[str]
    thumbnail_image: Optional[str]
    is_published: bool
    game_json: dict
    total_played: int
    created_at: datetime


class DeletedGameModel(BaseModel):
    id: UUID


class LeaderboardEntryModel(BaseModel):
    user_id: UUID
    username: str
    highest_score: int
    total_plays: int


class ScoreEntryModel(BaseModel):
    game_id: UUID
    score: int
    time_taken: Optional[int]
    created_at: datetime
