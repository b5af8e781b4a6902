import os
from dotenv import load_dotenv

load_dotenv()

user = os.getenv("DB_USER")
password = os.getenv("DB_PASSWORD")
host = os.getenv("DB_HOST")
port = os.getenv("DB_PORT")
db_name = os.getenv("DB_NAME")
pepper_data = os.getenv("PEPPER_DATA", "")

# A full URL (e.g. sqlite+aiosqlite:///./minigames.sqlite3) wins over the DB_* parts.
database_url = os.getenv(
    "DATABASE_URL",
    f"postgresql+asyncpg://{user}:{password}@{host}:{port}/{db_name}",
)

redis_host = os.getenv("REDIS_HOST", "redis")
redis_port = int(os.getenv("REDIS_PORT", "6379"))

# "memory" keeps sessions in this process, "redis" shares them between workers.
session_backend = os.getenv("SESSION_BACKEND", "memory")
session_ttl_seconds = int(os.getenv("SESSION_TTL_SECONDS", "3600"))
session_sweep_interval_seconds = int(os.getenv("SESSION_SWEEP_INTERVAL_SECONDS", "300"))

if __name__ == "__main__":
    print(database_url, redis_host, redis_port, session_backend, session_ttl_seconds)
