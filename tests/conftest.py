import os

# Настройки окружения должны быть заданы до импорта приложения
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_FORMAT"] = "text"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["JWT_SECRET_KEY"] = "test-secret-key-with-enough-length-0123456789"
os.environ["ADMIN_USERNAME"] = "admin"
os.environ["ADMIN_PASSWORD"] = "correct-horse"
os.environ.pop("WEATHERAPI_KEY", None)

from datetime import date, timedelta
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from skirent.auth.core.jwt_auth import jwt_manager
from skirent.core.database import Base, get_session
from skirent.main import app
from skirent.rental.models import (
    Booking,
    Lesson,
    LessonLevel,
    LessonType,
    Product,
    ProductType,
    ReservationStatus,
    Teacher,
)


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest_asyncio.fixture
async def session_factory(engine):
    return sessionmaker(
        engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
    )


@pytest_asyncio.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(session_factory):
    async def override_get_session():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_session] = override_get_session
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def admin_headers():
    token = jwt_manager.create_access_token("admin")
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def today():
    return date.today()


@pytest.fixture
def tomorrow(today):
    return today + timedelta(days=1)


@pytest_asyncio.fixture
async def make_product(db):
    async def factory(**kwargs):
        data = {
            "type": ProductType.SKI,
            "title": "Rossignol Experience 78",
            "price": Decimal("40.00"),
            "size": None,
            "standard": True,
            "professional": False,
            "images": [],
        }
        data.update(kwargs)
        product = Product(**data)
        db.add(product)
        await db.commit()
        return product

    return factory


@pytest_asyncio.fixture
async def make_teacher(db):
    async def factory(firstname="Giorgi", lastname="Beridze"):
        teacher = Teacher(firstname=firstname, lastname=lastname)
        db.add(teacher)
        await db.commit()
        return teacher

    return factory


@pytest_asyncio.fixture
async def make_booking(db, tomorrow):
    async def factory(products=(), **kwargs):
        data = {
            "first_name": "Nino",
            "last_name": "Kapanadze",
            "phone_number": "995555123456",
            "email": "nino@example.com",
            "personal_id": "01001012345",
            "number_of_people": 1,
            "start_date": tomorrow,
            "end_date": tomorrow + timedelta(days=2),
            "status": ReservationStatus.PENDING,
            "total_price": Decimal("120.00"),
        }
        data.update(kwargs)
        booking = Booking(**data)
        booking.products = list(products)
        db.add(booking)
        await db.commit()
        return booking

    return factory


@pytest_asyncio.fixture
async def make_lesson(db, tomorrow):
    async def factory(**kwargs):
        data = {
            "number_of_people": 2,
            "duration": 2,
            "level": LessonLevel.BEGINNER,
            "lesson_type": LessonType.SKI,
            "language": "English",
            "date": tomorrow,
            "start_time": "11:00",
            "first_name": "John",
            "last_name": "Smith",
            "phone_number": "447700900123",
            "email": "john@example.com",
            "personal_id": "P1234567",
            "participants": ["John Smith", "Jane Smith"],
            "status": ReservationStatus.PENDING,
            "total_price": Decimal("360.00"),
        }
        data.update(kwargs)
        lesson = Lesson(**data)
        db.add(lesson)
        await db.commit()
        return lesson

    return factory
