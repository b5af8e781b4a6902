from pydantic import BaseModel
from typing import Optional
from uuid import UUID
from datetime import datetime


class GameTemplateSchema(BaseModel):
    game_template_id: UUID
    slug: str
    name: str

    class Config:
        from_attributes = True


class GameSchema(BaseModel):
    game_id: UUID
    game_template_id: UUID
    creator_id: UUID
    name: str
    description: str | None
    thumbnail_image: str | None
    is_published: bool
    game_json: dict
    total_played: int
    created_at: datetime
    updated_at: datetime | None
    game_template: Optional[GameTemplateSchema] = None

    class Config:
        from_attributes = True


class LeaderboardSchema(BaseModel):
    leaderboard_id: UUID
    user_id: UUID | None
    game_id: UUID
    score: int
    time_taken: int | None
    created_at: datetime

    class Config:
        from_attributes = True


class UserSchema(BaseModel):
    user_id: UUID
    username: str
    hash_password: str
    salt: str
    role: str

    class Config:
        from_attributes = True
