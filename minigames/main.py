from apscheduler.schedulers.asyncio import AsyncIOScheduler
import logging
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from contextlib import asynccontextmanager
from redis.asyncio import Redis
import uvicorn

from minigames.converter import WIN_OR_LOSE_QUIZ_SLUG
from minigames.create_database_engine import engine
from minigames.crud import CreateData
from minigames.domain.errors import GameError
from minigames.load_secrets import (
    redis_host,
    redis_port,
    session_backend,
    session_sweep_interval_seconds,
    session_ttl_seconds,
)
from minigames.routers import leaderboard, win_or_lose_quiz
from minigames.services import game_db
from minigames.session_registry import (
    InMemorySessionRegistry,
    RedisSessionRegistry,
    SessionRegistry,
)

logging.basicConfig(level=logging.INFO)
logging.getLogger("aiosqlite").setLevel(logging.WARNING)


def create_session_registry() -> SessionRegistry:
    if session_backend == "redis":
        redis = Redis(host=redis_host, port=redis_port, decode_responses=True, health_check_interval=30)
        return RedisSessionRegistry(redis, session_ttl_seconds)
    return InMemorySessionRegistry(session_ttl_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create tables and the win-or-lose-quiz template, then start the session sweeper.
    This function is called to start the server.
    """
    await CreateData.create_table(engine)
    await game_db.create_game_template(WIN_OR_LOSE_QUIZ_SLUG, "Win or Lose Quiz")

    app.state.session_registry = create_session_registry()

    # Abandoned sessions never finish, so idle ones are evicted periodically
    scheduler = AsyncIOScheduler()
    scheduler.add_job(
        app.state.session_registry.sweep_expired,
        "interval",
        seconds=session_sweep_interval_seconds,
    )
    scheduler.start()
    try:
        yield
    finally:
        scheduler.shutdown()
        if isinstance(app.state.session_registry, RedisSessionRegistry):
            await app.state.session_registry.redis.aclose()
        logging.info("Stop Server")


app = FastAPI(lifespan=lifespan)
app.include_router(win_or_lose_quiz.win_or_lose_quiz_router)
app.include_router(leaderboard.leaderboard_router)


@app.exception_handler(GameError)
async def game_error_handler(request: Request, exc: GameError):
    if exc.status_code >= 500:
        logging.error(f"{request.method} {request.url.path} failed: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


if __name__ == "__main__":
    uvicorn.run("minigames.main:app", host="0.0.0.0", port=8080)
