import asyncio
import os
import tempfile

# Settings are read at import time, so they must be in place before minigames is imported.
_database_dir = tempfile.mkdtemp(prefix="minigames-test-")
os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{_database_dir}/test.sqlite3"
os.environ["SESSION_BACKEND"] = "memory"
os.environ["PEPPER_DATA"] = "test-pepper"

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from minigames.authentication.basic_authentication import BasicAuthentication  # noqa: E402
from minigames.create_database_engine import engine  # noqa: E402
from minigames.main import app  # noqa: E402
from minigames.models.basic_authentication_models import RoleModel  # noqa: E402
from minigames.models.schemas import Base  # noqa: E402

CREATOR = ("creator", "creator-password")
OTHER_USER = ("other", "other-password")
ADMIN = ("admin", "admin-password")
PLAYER = ("player", "player-password")


async def _drop_tables():
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def _create_users():
    basic_auth = BasicAuthentication()
    await basic_auth.store_user_data(*CREATOR)
    await basic_auth.store_user_data(*OTHER_USER)
    await basic_auth.store_user_data(*PLAYER)
    await basic_auth.store_user_data(*ADMIN, RoleModel.super_admin)


@pytest.fixture
def client():
    with TestClient(app) as test_client:
        asyncio.run(_create_users())
        yield test_client
    asyncio.run(_drop_tables())


@pytest.fixture
def quiz_payload():
    return {
        "name": "Arithmetic bets",
        "description": "Bet on sums",
        "is_published": True,
        "questions": [
            {"question": "2+2?", "options": ["3", "4", "5"], "correctAnswerIndex": 1},
            {"question": "3+3?", "options": ["6", "7"], "correctAnswerIndex": 0},
        ],
        "initialPoints": 100,
        "minBetAmount": 5,
        "maxBetAmount": 50,
    }


@pytest.fixture
def created_game(client, quiz_payload):
    response = client.post("/win-or-lose-quiz", json=quiz_payload, auth=CREATOR)
    assert response.status_code == 201
    return response.json()
