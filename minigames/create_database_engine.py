from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import NullPool

from minigames.load_secrets import database_url

if database_url.startswith("postgresql"):
    engine = create_async_engine(database_url, pool_size=20, max_overflow=20)
else:
    # sqlite connections must not outlive the event loop that opened them
    engine = create_async_engine(url=database_url, echo=False, poolclass=NullPool)
