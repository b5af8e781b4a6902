"""DB service layer for game related use cases.

- Routers should not touch DB sessions directly; they call this module.
- This layer owns session/transaction boundaries.
"""

from typing import List
from uuid import UUID

from minigames.crud import CreateData, DeleteData, ReadData, UpdateData
from minigames.db import Session
from minigames.models.dc_models import LeaderboardEntryModel
from minigames.models.schema_models import GameSchema, LeaderboardSchema, UserSchema


async def create_game_template(slug: str, name: str) -> UUID:
    async with Session() as session:
        return await CreateData.create_game_template(slug, name, session)


async def read_template_id(slug: str) -> UUID | None:
    async with Session() as session:
        return await ReadData.read_template_id(slug, session)


async def read_game_data(game_id: UUID) -> GameSchema | None:
    async with Session() as session:
        return await ReadData.read_game_data(game_id, session)


async def read_game_id_by_name(name: str) -> UUID | None:
    async with Session() as session:
        return await ReadData.read_game_id_by_name(name, session)


async def create_game_data(
    game_id: UUID,
    game_template_id: UUID,
    creator_id: UUID,
    name: str,
    description: str,
    thumbnail_image: str,
    is_published: bool,
    game_json: dict,
) -> GameSchema:
    async with Session() as session:
        return await CreateData.create_game(
            game_id,
            game_template_id,
            creator_id,
            name,
            description,
            thumbnail_image,
            is_published,
            game_json,
            session,
        )


async def update_game_data(game_id: UUID, values: dict) -> GameSchema | None:
    async with Session() as session:
        return await UpdateData.update_game(game_id, values, session)


async def delete_game_data(game_id: UUID) -> None:
    async with Session() as session:
        await DeleteData.delete_game(game_id, session)


async def increment_total_played(game_id: UUID) -> None:
    async with Session() as session:
        await UpdateData.increment_total_played(game_id, session)


async def record_score(game_id: UUID, user_id: UUID | None, score: int) -> None:
    async with Session() as session:
        await CreateData.create_leaderboard_data(game_id, user_id, score, session)


async def read_game_leaderboard(game_id: UUID, limit: int) -> List[LeaderboardEntryModel]:
    async with Session() as session:
        return await ReadData.read_game_leaderboard(game_id, limit, session)


async def read_highest_score(user_id: UUID, game_id: UUID) -> LeaderboardSchema | None:
    async with Session() as session:
        return await ReadData.read_highest_score(user_id, game_id, session)


async def read_user_game_history(user_id: UUID, game_id: UUID, limit: int) -> List[LeaderboardSchema]:
    async with Session() as session:
        return await ReadData.read_user_game_history(user_id, game_id, limit, session)


async def read_user_data(username: str) -> UserSchema | None:
    async with Session() as session:
        return await ReadData.read_user_data(username, session)


async def create_user_data(username: str, hash_password: str, salt: str, role: str) -> None:
    async with Session() as session:
        await CreateData.create_user_data(username, hash_password, salt, role, session)
