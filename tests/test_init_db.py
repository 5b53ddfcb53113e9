import pytest
from sqlalchemy import func, select

from skirent.core import init_db
from skirent.core.exceptions import ConfigurationError
from skirent.rental.models import LessonPricing, PriceList, ProductType


@pytest.fixture
def seeded_session(monkeypatch, session_factory):
    monkeypatch.setattr(init_db, "async_session", session_factory)
    return session_factory


async def count(session_factory, column):
    async with session_factory() as session:
        return (await session.execute(select(func.count(column)))).scalar()


async def test_seeds_are_idempotent(seeded_session):
    await init_db.seed_lesson_pricing()
    await init_db.seed_price_list()
    await init_db.seed_lesson_pricing()
    await init_db.seed_price_list()

    assert await count(seeded_session, LessonPricing.id) == 12
    assert await count(seeded_session, PriceList.id) == len(init_db.DEFAULT_PRICE_LIST)


async def test_price_list_seed_keeps_admin_rows(seeded_session):
    async with seeded_session() as session:
        session.add(PriceList(item_key="custom", type="Custom", includes="", price="1 ₾"))
        await session.commit()

    await init_db.seed_price_list()

    assert await count(seeded_session, PriceList.id) == 1


async def test_legacy_product_types_migrated(seeded_session, make_product):
    legacy = await make_product(type=ProductType.OTHER, title="Old jacket", size="L")
    await make_product(type=ProductType.HELMET, title="Helmet", size="M")

    assert await init_db.migrate_legacy_product_types() == 1
    assert await init_db.migrate_legacy_product_types() == 0

    async with seeded_session() as session:
        product = await session.get(type(legacy), legacy.id)
        assert product.type == ProductType.ADULT_CLOTH


async def test_reset_refused_outside_dev(monkeypatch):
    monkeypatch.setattr(init_db, "ENVIRONMENT", "production")

    with pytest.raises(ConfigurationError):
        await init_db.reset_database()
