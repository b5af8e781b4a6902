import argparse
import asyncio
import hashlib
import logging
import secrets

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBasic, HTTPBasicCredentials

from minigames.create_database_engine import engine
from minigames.crud import CreateData
from minigames.load_secrets import pepper_data
from minigames.models.basic_authentication_models import RoleModel, UserModel
from minigames.models.schema_models import UserSchema
from minigames.services import game_db

security = HTTPBasic()
optional_security = HTTPBasic(auto_error=False)


def hash_password(password: str, salt: str) -> str:
    return hashlib.sha256((password + salt + pepper_data).encode()).hexdigest()


class BasicAuthentication:
    def __init__(self):
        pass

    async def _verify(self, credentials: HTTPBasicCredentials) -> UserModel:
        user_data: UserSchema = await game_db.read_user_data(credentials.username)
        if user_data is None:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid username",
                headers={"WWW-Authenticate": "Basic"},
            )

        hashed_password = hash_password(credentials.password, user_data.salt)
        if not secrets.compare_digest(hashed_password, user_data.hash_password):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid password",
                headers={"WWW-Authenticate": "Basic"},
            )
        return UserModel(
            user_id=user_data.user_id,
            username=user_data.username,
            role=RoleModel(user_data.role),
        )

    async def check_user_data(
        self, credentials: HTTPBasicCredentials = Depends(security)
    ) -> UserModel:
        """Check the caller's credentials. Used by the creator endpoints.

        Args:
            credentials (HTTPBasicCredentials, optional): Defaults to Depends(security).

        Raises:
            HTTPException: The user is not found in the database
            HTTPException: The password is incorrect

        Returns:
            UserModel: The authenticated user
        """
        return await self._verify(credentials)

    async def check_optional_user_data(
        self, credentials: HTTPBasicCredentials | None = Depends(optional_security)
    ) -> UserModel | None:
        """Same as check_user_data, but a request without credentials plays anonymously."""
        if credentials is None:
            return None
        return await self._verify(credentials)

    async def store_user_data(self, user_name: str, password: str, role: RoleModel = RoleModel.user) -> None:
        salt = secrets.token_hex(8)
        await game_db.create_user_data(user_name, hash_password(password, salt), salt, role.value)
        logging.info(f"Created user {user_name} with role {role.value}")


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Create a user for Basic Authentication")
    parser.add_argument("--username", type=str, help="Username", required=True)
    parser.add_argument("--password", type=str, help="Password", required=True)
    parser.add_argument(
        "--role",
        type=str,
        choices=[role.value for role in RoleModel],
        default=RoleModel.user.value,
        help="Role of the user",
    )
    return parser


async def main(user_name: str, password: str, role: str):
    await CreateData.create_table(engine)
    basic_auth = BasicAuthentication()
    await basic_auth.store_user_data(user_name, password, RoleModel(role))
    user_data = await game_db.read_user_data(user_name)
    print(user_data.username, user_data.user_id, user_data.role)


if __name__ == "__main__":
    parser = get_parser()
    args = parser.parse_args()
    asyncio.run(main(args.username, args.password, args.role))
