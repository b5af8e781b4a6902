from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession
from sqlalchemy import delete, desc, func, select, update
from sqlalchemy.exc import SQLAlchemyError
from typing import List
import logging

from minigames.domain.errors import ContentStoreError
from minigames.models.dc_models import LeaderboardEntryModel
from minigames.models.schema_models import (
    GameSchema,
    LeaderboardSchema,
    UserSchema,
)
from minigames.models.schemas import (
    Base,
    Game,
    GameTemplate,
    Leaderboard,
    User,
)
from uuid import UUID


class CreateData:
    @staticmethod
    async def create_table(engine: AsyncEngine) -> None:
        """Create tables if not exists"""
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logging.error(f"Failed to create tables: {e}")
            raise ContentStoreError() from e

    @staticmethod
    async def create_game_template(slug: str, name: str, session: AsyncSession) -> UUID:
        """Create a game template unless one with the same slug exists

        Args:
            slug (str): Template slug such as "win-or-lose-quiz"
            name (str): Human readable template name

        Returns:
            UUID: ID of the new or existing template
        """
        async with session:
            try:
                stmt = select(GameTemplate).where(GameTemplate.slug == slug)
                result = await session.execute(stmt)
                template = result.scalars().first()
                if template is not None:
                    return template.game_template_id

                template = GameTemplate(slug=slug, name=name)
                session.add(template)
                await session.commit()
                return template.game_template_id
            except SQLAlchemyError as e:
                logging.error(f"Failed to create game template: {e}")
                raise ContentStoreError() from e

    @staticmethod
    async def create_game(
        game_id: UUID,
        game_template_id: UUID,
        creator_id: UUID,
        name: str,
        description: str,
        thumbnail_image: str,
        is_published: bool,
        game_json: dict,
        session: AsyncSession,
    ) -> GameSchema:
        """Create game data with its type specific payload

        Args:
            game_json (dict): Payload interpreted according to the template slug
            session (AsyncSession): AsyncSession object to interact with database
        """
        async with session:
            try:
                new_game = Game(
                    game_id=game_id,
                    game_template_id=game_template_id,
                    creator_id=creator_id,
                    name=name,
                    description=description,
                    thumbnail_image=thumbnail_image,
                    is_published=is_published,
                    game_json=game_json,
                    total_played=0,
                )
                session.add(new_game)
                await session.commit()
            except SQLAlchemyError as e:
                logging.error(f"Failed to create game data: {e}")
                raise ContentStoreError() from e
        return await ReadData.read_game_data(game_id, session)

    @staticmethod
    async def create_leaderboard_data(
        game_id: UUID, user_id: UUID | None, score: int, session: AsyncSession, time_taken: int | None = None
    ) -> None:
        """Append one finished play to the leaderboard

        Args:
            user_id (UUID | None): Player, None for anonymous players
            score (int): Final score of the play
        """
        async with session:
            try:
                session.add(
                    Leaderboard(
                        game_id=game_id,
                        user_id=user_id,
                        score=score,
                        time_taken=time_taken,
                    )
                )
                await session.commit()
            except SQLAlchemyError as e:
                logging.error(f"Failed to create leaderboard data: {e}")
                raise ContentStoreError() from e

    @staticmethod
    async def create_user_data(
        username: str, hash_password: str, salt: str, role: str, session: AsyncSession
    ) -> None:
        async with session:
            try:
                session.add(
                    User(username=username, hash_password=hash_password, salt=salt, role=role)
                )
                await session.commit()
            except SQLAlchemyError as e:
                logging.error(f"Failed to create user data: {e}")
                raise ContentStoreError() from e


class ReadData:
    @staticmethod
    async def read_template_id(slug: str, session: AsyncSession) -> UUID | None:
        async with session:
            try:
                stmt = select(GameTemplate.game_template_id).where(GameTemplate.slug == slug)
                result = await session.execute(stmt)
                return result.scalars().first()
            except SQLAlchemyError as e:
                logging.error(f"Failed to read template id: {e}")
                raise ContentStoreError() from e

    @staticmethod
    async def read_game_data(game_id: UUID, session: AsyncSession) -> GameSchema | None:
        """Read game data and its template from database

        Args:
            game_id (UUID): To identify the game

        Returns:
            GameSchema: Game data with template, None if the game does not exist
        """
        async with session:
            try:
                stmt = select(Game).where(Game.game_id == game_id)
                result = await session.execute(stmt)
                result = result.scalars().first()

                if result is None:
                    return None

                return GameSchema.model_validate(result)
            except SQLAlchemyError as e:
                logging.error(f"Failed to read game data: {e}")
                raise ContentStoreError() from e

    @staticmethod
    async def read_game_id_by_name(name: str, session: AsyncSession) -> UUID | None:
        async with session:
            try:
                stmt = select(Game.game_id).where(Game.name == name)
                result = await session.execute(stmt)
                return result.scalars().first()
            except SQLAlchemyError as e:
                logging.error(f"Failed to read game id: {e}")
                raise ContentStoreError() from e

    @staticmethod
    async def read_user_data(username: str, session: AsyncSession) -> UserSchema | None:
        """Read user data to get salt and password hash

        Args:
            username (str): username of the user

        Returns:
            UserSchema: user id, password hash, salt and role
        """
        async with session:
            try:
                stmt = select(User).where(User.username == username)
                result = await session.execute(stmt)
                result = result.scalars().first()
                if result is None:
                    return None
                return UserSchema.model_validate(result)
            except SQLAlchemyError as e:
                logging.error(f"Error reading user data: {e}")
                raise ContentStoreError() from e

    @staticmethod
    async def read_game_leaderboard(
        game_id: UUID, limit: int, session: AsyncSession
    ) -> List[LeaderboardEntryModel]:
        """Read the best score of every registered player of a game

        Args:
            game_id (UUID): To identify the game
            limit (int): Maximum number of players

        Returns:
            List[LeaderboardEntryModel]: Players ordered by their highest score
        """
        async with session:
            try:
                highest_score = func.max(Leaderboard.score).label("highest_score")
                stmt = (
                    select(
                        Leaderboard.user_id,
                        User.username,
                        highest_score,
                        func.count(Leaderboard.leaderboard_id).label("total_plays"),
                    )
                    .join(User, User.user_id == Leaderboard.user_id)
                    .where(Leaderboard.game_id == game_id)
                    .group_by(Leaderboard.user_id, User.username)
                    .order_by(desc(highest_score))
                    .limit(limit)
                )
                result = await session.execute(stmt)
                return [
                    LeaderboardEntryModel(
                        user_id=row.user_id,
                        username=row.username,
                        highest_score=row.highest_score,
                        total_plays=row.total_plays,
                    )
                    for row in result.all()
                ]
            except SQLAlchemyError as e:
                logging.error(f"Failed to read leaderboard: {e}")
                raise ContentStoreError() from e

    @staticmethod
    async def read_highest_score(
        user_id: UUID, game_id: UUID, session: AsyncSession
    ) -> LeaderboardSchema | None:
        async with session:
            try:
                stmt = (
                    select(Leaderboard)
                    .where(Leaderboard.user_id == user_id, Leaderboard.game_id == game_id)
                    .order_by(desc(Leaderboard.score))
                    .limit(1)
                )
                result = await session.execute(stmt)
                result = result.scalars().first()
                if result is None:
                    return None
                return LeaderboardSchema.model_validate(result)
            except SQLAlchemyError as e:
                logging.error(f"Failed to read highest score: {e}")
                raise ContentStoreError() from e

    @staticmethod
    async def read_user_game_history(
        user_id: UUID, game_id: UUID, limit: int, session: AsyncSession
    ) -> List[LeaderboardSchema]:
        async with session:
            try:
                stmt = (
                    select(Leaderboard)
                    .where(Leaderboard.user_id == user_id, Leaderboard.game_id == game_id)
                    .order_by(desc(Leaderboard.created_at), desc(Leaderboard.leaderboard_id))
                    .limit(limit)
                )
                result = await session.execute(stmt)
                return [LeaderboardSchema.model_validate(row) for row in result.scalars().all()]
            except SQLAlchemyError as e:
                logging.error(f"Failed to read game history: {e}")
                raise ContentStoreError() from e


class UpdateData:
    @staticmethod
    async def update_game(game_id: UUID, values: dict, session: AsyncSession) -> GameSchema | None:
        """Update game columns

        Args:
            game_id (UUID): To identify the game
            values (dict): Column name to new value, only the changed columns
        """
        async with session:
            try:
                stmt = select(Game).where(Game.game_id == game_id)
                result = await session.execute(stmt)
                result = result.scalars().first()

                if result is None:
                    return None

                for column, value in values.items():
                    setattr(result, column, value)
                await session.commit()
            except SQLAlchemyError as e:
                logging.error(f"Failed to update game data: {e}")
                raise ContentStoreError() from e
        return await ReadData.read_game_data(game_id, session)

    @staticmethod
    async def increment_total_played(game_id: UUID, session: AsyncSession) -> None:
        async with session:
            try:
                stmt = (
                    update(Game)
                    .where(Game.game_id == game_id)
                    .values(total_played=Game.total_played + 1)
                )
                await session.execute(stmt)
                await session.commit()
            except SQLAlchemyError as e:
                logging.error(f"Failed to increment total played: {e}")
                raise ContentStoreError() from e


class DeleteData:
    @staticmethod
    async def delete_game(game_id: UUID, session: AsyncSession) -> None:
        """Delete a game and its leaderboard rows

        Args:
            game_id (UUID): To identify the game
        """
        async with session:
            try:
                await session.execute(delete(Leaderboard).where(Leaderboard.game_id == game_id))
                await session.execute(delete(Game).where(Game.game_id == game_id))
                await session.commit()
            except SQLAlchemyError as e:
                logging.error(f"Failed to delete game data: {e}")
                raise ContentStoreError() from e
