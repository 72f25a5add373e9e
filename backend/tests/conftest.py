import pytest
import pytest_asyncio
from datetime import timedelta

from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from app import models  # register tables
from app.core.database import Base, build_engine, get_db
from app.core.rate_limit import reset_invite_attempts
from app.core.security import create_access_token, get_password_hash
from app.main import app
from app.models.event import Event, EventStatus, EventType
from app.models.user import User
from app.utils.dates import utcnow


@pytest_asyncio.fixture
async def engine(tmp_path):
    # a real file so separate sessions/connections can race each other
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'lumina_test.db'}")
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(bind=engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    reset_invite_attempts()
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


async def make_event(db, **overrides) -> Event:
    values = {
        "title": "Lumina Piano Competition 2024",
        "type": EventType.COMPETITION,
        "description": {"en": "Annual piano competition", "id": "Kompetisi piano tahunan"},
        "start_date": utcnow() + timedelta(days=30),
        "location": "Jakarta",
        "status": EventStatus.UPCOMING,
    }
    values.update(overrides)
    event = Event(**values)
    db.add(event)
    await db.commit()
    await db.refresh(event)
    return event


@pytest_asyncio.fixture
async def event(db):
    return await make_event(db)


async def make_user(db, email: str, is_admin: bool) -> User:
    user = User(email=email, hashed_password=get_password_hash("secret-pass"), is_admin=is_admin)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@pytest_asyncio.fixture
async def admin_headers(db):
    user = await make_user(db, "admin@lumina.test", is_admin=True)
    token = create_access_token({"sub": user.email})
    return {"Authorization": f"Bearer {token}"}


def registration_form(**overrides) -> dict:
    form = {
        "registrant_status": "parents",
        "registrant_name": "Dewi Lestari",
        "registrant_whatsapp": "+6281234567890",
        "registrant_email": "dewi@example.com",
        "participant_name": "Ayu Lestari",
        "participant_age": 12,
        "song_title": "Clair de Lune",
        "song_duration": "5:00",
        "bank_name": "BCA",
        "bank_account_number": "1234567890",
        "bank_account_name": "Dewi Lestari",
        "payment_receipt_url": "https://storage.example.com/receipts/ayu.png",
    }
    form.update(overrides)
    return form
