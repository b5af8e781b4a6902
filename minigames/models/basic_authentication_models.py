from enum import Enum
from uuid import UUID

from pydantic import BaseModel


class RoleModel(str, Enum):
    user = "USER"
    super_admin = "SUPER_ADMIN"


class UserModel(BaseModel):
    """The authenticated caller. Anonymous players have no UserModel at all."""
    user_id: UUID
    username: str
    role: RoleModel
