import asyncio
import logging

from sqlalchemy import select, func, update

from skirent.core.config import ENVIRONMENT
from skirent.core.database import async_session, db_manager, db_operation, engine, Base
from skirent.core.exceptions import DatabaseError, ConfigurationError
from skirent.rental.models import LessonPricing, PriceList, Product, ProductType
from skirent.rental.services.pricing import DEFAULT_LESSON_PRICING

logger = logging.getLogger(__name__)

# Rows of the public price table shown until an admin edits it
DEFAULT_PRICE_LIST = [
    {
        "item_key": "ski_set_standard",
        "type": "Ski set (standard)",
        "includes": "Skis, boots, poles",
        "price": "50 ₾",
    },
    {
        "item_key": "ski_set_professional",
        "type": "Ski set (professional)",
        "includes": "Skis, boots, poles",
        "price": "60-150 ₾",
    },
    {
        "item_key": "ski_set_kids",
        "type": "Kids ski set",
        "includes": "Skis, boots, poles",
        "price": "40 ₾",
    },
    {
        "item_key": "ski_only_standard",
        "type": "Skis only (standard)",
        "includes": "Skis, poles",
        "price": "40 ₾",
    },
    {
        "item_key": "ski_only_professional",
        "type": "Skis only (professional)",
        "includes": "Skis, poles",
        "price": "70 ₾",
    },
    {
        "item_key": "ski_boots",
        "type": "Ski boots",
        "includes": "Boots",
        "price": "30 ₾",
    },
    {
        "item_key": "snowboard_set_standard",
        "type": "Snowboard set (standard)",
        "includes": "Board, boots",
        "price": "70 ₾",
    },
    {
        "item_key": "snowboard_set_kids",
        "type": "Kids snowboard set",
        "includes": "Board, boots",
        "price": "60 ₾",
    },
    {
        "item_key": "snowboard_set_professional",
        "type": "Snowboard set (professional)",
        "includes": "Board, boots",
        "price": "80-150 ₾",
    },
    {
        "item_key": "snowboard_only_standard",
        "type": "Snowboard only (standard)",
        "includes": "Board",
        "price": "50 ₾",
    },
    {
        "item_key": "snowboard_boots",
        "type": "Snowboard boots",
        "includes": "Boots",
        "price": "30 ₾",
    },
]


async def migrate_legacy_product_types() -> int:
    """OTHER was split into ADULT_CLOTH / CHILD_CLOTH; old rows become ADULT_CLOTH"""
    async with async_session() as session:
        result = await session.execute(
            update(Product)
            .where(Product.type == ProductType.OTHER)
            .values(type=ProductType.ADULT_CLOTH)
        )
        await session.commit()

    migrated = result.rowcount or 0
    if migrated:
        logger.info(f"✅ Migrated {migrated} legacy OTHER products to ADULT_CLOTH")
    else:
        logger.debug("No legacy OTHER products to migrate")
    return migrated


async def run_migrations():
    """Run idempotent data migrations"""
    migrations = [
        ("migrate_legacy_product_types", migrate_legacy_product_types),
    ]

    for name, migration in migrations:
        try:
            await migration()
        except Exception as e:
            logger.warning(f"Migration {name} skipped: {e}")


@db_operation
async def seed_lesson_pricing():
    """Create the default lesson price matrix if the table is empty"""
    async with async_session() as session:
        try:
            count = (
                await session.execute(select(func.count(LessonPricing.id)))
            ).scalar() or 0

            if count:
                logger.info(f"Lesson pricing already exists ({count} rows), skipping seed")
                return

            for people, cells in DEFAULT_LESSON_PRICING.items():
                for duration, price in cells.items():
                    session.add(
                        LessonPricing(
                            number_of_people=people, duration=duration, price=price
                        )
                    )
            await session.commit()
            logger.info("Default lesson pricing created")

        except Exception as e:
            await session.rollback()
            logger.error(f"Failed to seed lesson pricing: {e}")
            raise DatabaseError(f"Failed to seed lesson pricing: {str(e)}")


@db_operation
async def seed_price_list():
    """Create the default price table if it is empty"""
    async with async_session() as session:
        try:
            count = (await session.execute(select(func.count(PriceList.id)))).scalar() or 0

            if count:
                logger.info(f"Price list already exists ({count} rows), skipping seed")
                return

            session.add_all(PriceList(**row) for row in DEFAULT_PRICE_LIST)
            await session.commit()
            logger.info("Default price list created")

        except Exception as e:
            await session.rollback()
            logger.error(f"Failed to seed price list: {e}")
            raise DatabaseError(f"Failed to seed price list: {str(e)}")


async def init_database():
    """Initialize database with tables and initial data"""
    try:
        logger.info("Starting database initialization...")

        await db_manager.check_connection()
        logger.info("✅ Database connection verified")

        await db_manager.create_tables()
        logger.info("✅ Database tables created/verified")

        await run_migrations()
        logger.info("✅ Database migrations checked/applied")

        await seed_lesson_pricing()
        await seed_price_list()
        logger.info("✅ Initial data created/verified")

        logger.info("🎉 Database initialization completed successfully")

    except DatabaseError:
        raise
    except Exception as e:
        logger.error(f"Unexpected error during database initialization: {e}")
        raise DatabaseError(f"Database initialization failed: {str(e)}")


async def verify_database_setup():
    """Verify that seed data is present"""
    try:
        logger.info("Verifying database setup...")

        async with async_session() as session:
            pricing_count = (
                await session.execute(select(func.count(LessonPricing.id)))
            ).scalar() or 0
            prices_count = (
                await session.execute(select(func.count(PriceList.id)))
            ).scalar() or 0

        if not pricing_count:
            raise DatabaseError("Lesson pricing table is empty")
        if not prices_count:
            raise DatabaseError("Price list table is empty")

        logger.info(
            f"✅ Database verification passed: {pricing_count} lesson prices, "
            f"{prices_count} price list rows"
        )
        return True

    except DatabaseError:
        raise
    except Exception as e:
        logger.error(f"Database verification failed: {e}")
        raise DatabaseError(f"Database verification failed: {str(e)}")


async def reset_database():
    """Reset database (for development/testing only)"""
    if ENVIRONMENT not in ["development", "dev", "test"]:
        raise ConfigurationError(
            "ENVIRONMENT",
            "Database reset is only allowed in development or test environments",
        )

    try:
        logger.warning("🚨 RESETTING DATABASE - ALL DATA WILL BE LOST!")

        async with engine.begin() as conn:
            await conn.run_sync(Base.metadata.drop_all)
        logger.info("✅ All tables dropped")

        await init_database()
        logger.info("✅ Database reset completed")

    except Exception as e:
        logger.error(f"Database reset failed: {e}")
        raise DatabaseError(f"Database reset failed: {str(e)}")


if __name__ == "__main__":
    import sys

    commands = {
        "init": init_database,
        "verify": verify_database_setup,
        "reset": reset_database,
        "migrate-product-types": migrate_legacy_product_types,
    }

    async def main():
        command = sys.argv[1] if len(sys.argv) > 1 else "init"
        if command not in commands:
            print(f"Unknown command: {command}")
            print(f"Available commands: {', '.join(commands)}")
            sys.exit(1)
        await commands[command]()

    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        logger.info("Database initialization cancelled by user")
    except Exception as e:
        logger.error(f"Database initialization failed: {e}")
        sys.exit(1)
