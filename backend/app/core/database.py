from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from app.core.config import get_settings

settings = get_settings()


def build_engine(url: str, **kwargs):
    connect_args = {}
    if url.startswith("sqlite"):
        # Needed for SQLite; the timeout lets concurrent writers wait for the lock
        connect_args = {"check_same_thread": False, "timeout": 30}
    return create_async_engine(url, connect_args=connect_args, **kwargs)


engine = build_engine(
    settings.DATABASE_URL,
    echo=settings.LOG_LEVEL == "DEBUG",
)

SessionLocal = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False
)

class Base(DeclarativeBase):
    pass

async def get_db():
    async with SessionLocal() as session:
        yield session
