from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from minigames.authentication.basic_authentication import BasicAuthentication
from minigames.models.basic_authentication_models import UserModel
from minigames.models.dc_models import LeaderboardEntryModel, ScoreEntryModel
from minigames.services import game_db

leaderboard_router = APIRouter(prefix="/leaderboard", tags=["leaderboard"])
basic_auth = BasicAuthentication()


async def check_game_exists(game_id: UUID) -> None:
    if await game_db.read_game_data(game_id) is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Game not found")


class LeaderboardAPI:
    @staticmethod
    @leaderboard_router.get("/{game_id}", response_model=List[LeaderboardEntryModel])
    async def get_game_leaderboard(game_id: UUID, limit: int = Query(default=10, ge=1, le=100)):
        await check_game_exists(game_id)
        return await game_db.read_game_leaderboard(game_id, limit)

    @staticmethod
    @leaderboard_router.get("/{game_id}/me", response_model=ScoreEntryModel)
    async def get_highest_score(game_id: UUID, user: UserModel = Depends(basic_auth.check_user_data)):
        highest_score = await game_db.read_highest_score(user.user_id, game_id)
        if highest_score is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No score found")
        return ScoreEntryModel(
            game_id=highest_score.game_id,
            score=highest_score.score,
            time_taken=highest_score.time_taken,
            created_at=highest_score.created_at,
        )

    @staticmethod
    @leaderboard_router.get("/{game_id}/history", response_model=List[ScoreEntryModel])
    async def get_game_history(
        game_id: UUID,
        limit: int = Query(default=10, ge=1, le=100),
        user: UserModel = Depends(basic_auth.check_user_data),
    ):
        history = await game_db.read_user_game_history(user.user_id, game_id, limit)
        return [
            ScoreEntryModel(
                game_id=entry.game_id,
                score=entry.score,
                time_taken=entry.time_taken,
                created_at=entry.created_at,
            )
            for entry in history
        ]
