import logging
from uuid import UUID, uuid4

from fastapi import APIRouter, Depends, HTTPException, Request, status

from minigames.authentication.basic_authentication import BasicAuthentication
from minigames.converter import WIN_OR_LOSE_QUIZ_SLUG, DataConverter
from minigames.domain import win_or_lose_quiz as quiz
from minigames.domain.errors import ContentStoreError
from minigames.domain.win_or_lose_quiz import GameConfig
from minigames.models.basic_authentication_models import RoleModel, UserModel
from minigames.models.dc_models import (
    AnswerResponseModel,
    CheckAnswerModel,
    CreateWinOrLoseQuizModel,
    DeletedGameModel,
    GameDetailModel,
    GameSummaryModel,
    PlayResponseModel,
    StatisticsModel,
    UpdateWinOrLoseQuizModel,
)
from minigames.models.schema_models import GameSchema
from minigames.services import game_db
from minigames.session_registry import SessionRegistry

logging.basicConfig(level=logging.INFO)

win_or_lose_quiz_router = APIRouter(prefix="/win-or-lose-quiz", tags=["win-or-lose-quiz"])
basic_auth = BasicAuthentication()
data_converter = DataConverter()


def get_session_registry(request: Request) -> SessionRegistry:
    return request.app.state.session_registry


async def read_quiz_game(game_id: UUID) -> GameSchema:
    """Read a game and make sure it is a win-or-lose quiz

    Raises:
        HTTPException: The game does not exist or belongs to another template
    """
    game = await game_db.read_game_data(game_id)
    if game is None or game.game_template is None or game.game_template.slug != WIN_OR_LOSE_QUIZ_SLUG:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Game not found")
    return game


def check_owner(game: GameSchema, user: UserModel, action: str) -> None:
    if user.role != RoleModel.super_admin and game.creator_id != user.user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail=f"User cannot {action} this game",
        )


async def check_unique_name(name: str, game_id: UUID | None = None) -> None:
    existing_game_id = await game_db.read_game_id_by_name(name)
    if existing_game_id is not None and existing_game_id != game_id:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Game name already exists")


class WinOrLoseQuizAPI:
    @staticmethod
    @win_or_lose_quiz_router.post(
        "", response_model=GameSummaryModel, status_code=status.HTTP_201_CREATED
    )
    async def create_game(
        data: CreateWinOrLoseQuizModel,
        user: UserModel = Depends(basic_auth.check_user_data),
    ):
        if data.name:
            await check_unique_name(data.name)

        template_id = await game_db.read_template_id(WIN_OR_LOSE_QUIZ_SLUG)
        if template_id is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Game template not found")

        game_config: GameConfig = data_converter.convert_create_model_to_config(data)
        quiz.validate_config(game_config)

        game_id = uuid4()
        game = await game_db.create_game_data(
            game_id=game_id,
            game_template_id=template_id,
            creator_id=user.user_id,
            name=data.name or f"Win or Lose Quiz {str(game_id)[:8]}",
            description=data.description or "A betting-based quiz game",
            thumbnail_image=data.thumbnail_image or "/default-thumbnail.png",
            is_published=data.is_published,
            game_json=data_converter.convert_config_to_game_json(game_config),
        )
        logging.info(f"Created win-or-lose quiz {game.game_id} by {user.username}")
        return GameSummaryModel(
            id=game.game_id,
            name=game.name,
            description=game.description,
            is_published=game.is_published,
            created_at=game.created_at,
        )

    @staticmethod
    @win_or_lose_quiz_router.get("/{game_id}", response_model=GameDetailModel)
    async def get_game(game_id: UUID, user: UserModel = Depends(basic_auth.check_user_data)):
        game = await read_quiz_game(game_id)
        check_owner(game, user, "access")
        return GameDetailModel(
            id=game.game_id,
            name=game.name,
            description=game.description,
            thumbnail_image=game.thumbnail_image,
            is_published=game.is_published,
            game_json=game.game_json,
            total_played=game.total_played,
            created_at=game.created_at,
        )

    @staticmethod
    @win_or_lose_quiz_router.patch("/{game_id}", response_model=GameSummaryModel)
    async def update_game(
        game_id: UUID,
        data: UpdateWinOrLoseQuizModel,
        user: UserModel = Depends(basic_auth.check_user_data),
    ):
        game = await read_quiz_game(game_id)
        check_owner(game, user, "update")

        if data.name:
            await check_unique_name(data.name, game_id)

        old_config = data_converter.convert_game_to_config(game)
        updated_config = data_converter.merge_update_into_config(old_config, data)
        if (
            updated_config.max_bet_amount is not None
            and updated_config.max_bet_amount < updated_config.min_bet_amount
        ):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="maxBetAmount must be >= minBetAmount",
            )
        # The merged config replaces the stored one, so it is validated as a whole.
        quiz.validate_config(updated_config)

        values = {
            column: value
            for column, value in (
                ("name", data.name),
                ("description", data.description),
                ("thumbnail_image", data.thumbnail_image),
                ("is_published", data.is_published),
            )
            if value is not None
        }
        values["game_json"] = data_converter.convert_config_to_game_json(updated_config)

        updated_game = await game_db.update_game_data(game_id, values)
        if updated_game is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Game not found")
        return GameSummaryModel(
            id=updated_game.game_id,
            name=updated_game.name,
            description=updated_game.description,
            is_published=updated_game.is_published,
            updated_at=updated_game.updated_at,
        )

    @staticmethod
    @win_or_lose_quiz_router.delete("/{game_id}", response_model=DeletedGameModel)
    async def delete_game(game_id: UUID, user: UserModel = Depends(basic_auth.check_user_data)):
        game = await read_quiz_game(game_id)
        check_owner(game, user, "delete")
        await game_db.delete_game_data(game_id)
        logging.info(f"Deleted win-or-lose quiz {game_id}")
        return DeletedGameModel(id=game_id)


class GameplayAPI:
    @staticmethod
    @win_or_lose_quiz_router.post(
        "/{game_id}/play", response_model=PlayResponseModel, response_model_by_alias=True
    )
    async def play(
        game_id: UUID,
        registry: SessionRegistry = Depends(get_session_registry),
        user: UserModel | None = Depends(basic_auth.check_optional_user_data),
    ):
        game = await read_quiz_game(game_id)
        if not game.is_published:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Game is not published")

        game_config = data_converter.convert_game_to_config(game)
        gameplay = quiz.initialize(game_config)

        current_question = quiz.current_question(game_config, gameplay)

        # No session is stored for a play that was not counted.
        await game_db.increment_total_played(game_id)

        session_id = str(uuid4())
        await registry.put(session_id, game_id, gameplay)
        logging.info(
            f"Started session {session_id} for game {game_id} "
            f"as {user.username if user else 'anonymous'}"
        )

        return PlayResponseModel(
            session_id=session_id,
            game_id=game_id,
            game_name=game.name,
            player_points=gameplay.player_points,
            current_question=data_converter.convert_question_view(current_question),
            total_questions=len(game_config.questions),
            min_bet_amount=game_config.min_bet_amount,
            max_bet_amount=game_config.max_bet_amount,
        )

    @staticmethod
    @win_or_lose_quiz_router.post(
        "/{game_id}/answer", response_model=AnswerResponseModel, response_model_by_alias=True
    )
    async def answer(
        game_id: UUID,
        data: CheckAnswerModel,
        registry: SessionRegistry = Depends(get_session_registry),
        user: UserModel | None = Depends(basic_auth.check_optional_user_data),
    ):
        # Answers to one session are applied one at a time; a late duplicate sees the new state.
        async with registry.locked(data.session_id):
            gameplay = await registry.get(data.session_id, game_id)

            game = await read_quiz_game(game_id)
            game_config = data_converter.convert_game_to_config(game)

            updated_gameplay, answer_result = quiz.process_answer(
                game_config,
                gameplay,
                quiz.Answer(
                    selected_answer_index=data.selected_answer_index,
                    bet_amount=data.bet_amount,
                ),
            )

            next_question = None
            statistics = None
            if answer_result.is_game_finished:
                statistics = quiz.compute_statistics(updated_gameplay)
                await registry.delete(data.session_id)
            else:
                next_question = quiz.current_question(game_config, updated_gameplay)
                await registry.put(data.session_id, game_id, updated_gameplay)

        if answer_result.is_game_finished:
            # The session is already settled; a failed leaderboard write must not undo it.
            try:
                await game_db.record_score(
                    game_id, user.user_id if user else None, statistics.final_score
                )
            except ContentStoreError as e:
                logging.error(f"Failed to record score for session {data.session_id}: {e}")

        return data_converter.convert_answer_result(answer_result, next_question, statistics)

    @staticmethod
    @win_or_lose_quiz_router.get(
        "/{game_id}/stats/{session_id}", response_model=StatisticsModel, response_model_by_alias=True
    )
    async def stats(
        game_id: UUID,
        session_id: str,
        registry: SessionRegistry = Depends(get_session_registry),
    ):
        # Sessions are keyed by their id alone; game_id is not cross-checked.
        gameplay = await registry.get(session_id)
        return data_converter.convert_statistics(quiz.compute_statistics(gameplay))
