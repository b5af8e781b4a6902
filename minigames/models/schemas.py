from datetime import datetime
from uuid import uuid4

from sqlalchemy import ForeignKey
from sqlalchemy.orm import DeclarativeBase, relationship
from sqlalchemy.schema import Column
from sqlalchemy.types import JSON, Boolean, DateTime, Integer, String, Uuid
from uuid6 import uuid7


class Base(DeclarativeBase):
    pass


class GameTemplate(Base):
    __tablename__ = "game_templates"
    game_template_id = Column(Uuid, primary_key=True, default=uuid7)
    slug = Column(String, unique=True, index=True, nullable=False)
    name = Column(String, nullable=False)

    games = relationship("Game", back_populates="game_template")


class Game(Base):
    __tablename__ = "games"
    game_id = Column(Uuid, primary_key=True, default=uuid4)
    game_template_id = Column(
        Uuid, ForeignKey("game_templates.game_template_id"), nullable=False
    )
    creator_id = Column(Uuid, nullable=False)
    name = Column(String(128), unique=True, index=True, nullable=False)
    description = Column(String(256))
    thumbnail_image = Column(String)
    is_published = Column(Boolean, default=False)
    # Type specific payload, decoded according to game_template.slug
    game_json = Column(JSON, nullable=False)
    total_played = Column(Integer, default=0)
    created_at = Column(DateTime, default=datetime.now)
    updated_at = Column(DateTime, default=datetime.now, onupdate=datetime.now)

    game_template = relationship("GameTemplate", back_populates="games", lazy="joined")


class Leaderboard(Base):
    __tablename__ = "leaderboard"
    leaderboard_id = Column(Uuid, primary_key=True, default=uuid7)
    # None for anonymous players
    user_id = Column(Uuid, ForeignKey("users.user_id"), nullable=True, index=True)
    game_id = Column(Uuid, ForeignKey("games.game_id"), nullable=False, index=True)
    score = Column(Integer, nullable=False)
    time_taken = Column(Integer, nullable=True)
    created_at = Column(DateTime, default=datetime.now)


class User(Base):
    __tablename__ = "users"
    user_id = Column(Uuid, primary_key=True, default=uuid7)
    username = Column(String, unique=True, index=True, nullable=False)
    hash_password = Column(String, nullable=False)
    salt = Column(String, nullable=False)
    role = Column(String, default="USER")
