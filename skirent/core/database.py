import asyncio
import logging
from functools import wraps
from typing import Callable, TypeVar, Any, AsyncGenerator, Dict
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.sql import text
from sqlalchemy.exc import (
    SQLAlchemyError,
    OperationalError,
    DisconnectionError,
    TimeoutError,
)
from asyncpg.exceptions import (
    ConnectionFailureError,
    ConnectionDoesNotExistError,
)

from .config import DATABASE_URL, DB_RETRY_ATTEMPTS, DB_RETRY_DELAY, DB_RETRY_BACKOFF_FACTOR
from .exceptions import DatabaseConnectionError, DatabaseTimeoutError

logger = logging.getLogger(__name__)

RETRYABLE_ERRORS = (
    OperationalError,
    DisconnectionError,
    TimeoutError,
    ConnectionFailureError,
    ConnectionDoesNotExistError,
)


def engine_options(url: str) -> Dict[str, Any]:
    """Pool settings for the configured backend (SQLite has no sized pool)"""
    if url.startswith("sqlite"):
        return {"echo": False}
    return {
        "echo": False,
        "pool_size": 20,
        "max_overflow": 10,
        "pool_timeout": 30,
        "pool_recycle": 3600,  # Переподключение каждый час
        "pool_pre_ping": True,
    }


engine = create_async_engine(DATABASE_URL, **engine_options(DATABASE_URL))

async_session = sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
    autoflush=False,
)

Base = declarative_base()

F = TypeVar("F", bound=Callable[..., Any])


def db_retry(
    max_attempts: int = None,
    delay: float = None,
    backoff_factor: float = None,
    exceptions: tuple = None,
) -> Callable[[F], F]:
    """
    Retry an async database operation on transient connection errors.

    Args:
        max_attempts: Максимальное количество попыток (по умолчанию из config)
        delay: Начальная задержка между попытками (по умолчанию из config)
        backoff_factor: Множитель для увеличения задержки
        exceptions: Кортеж исключений для повтора
    """
    max_attempts = max_attempts or DB_RETRY_ATTEMPTS
    delay = DB_RETRY_DELAY if delay is None else delay
    backoff_factor = backoff_factor or DB_RETRY_BACKOFF_FACTOR
    exceptions = exceptions or RETRYABLE_ERRORS

    def decorator(func: F) -> F:
        if not asyncio.iscoroutinefunction(func):
            return func

        @wraps(func)
        async def wrapper(*args, **kwargs):
            current_delay = delay
            last_exception = None

            for attempt in range(max_attempts):
                try:
                    return await func(*args, **kwargs)
                except exceptions as e:
                    last_exception = e
                    if attempt == max_attempts - 1:
                        break

                    logger.warning(
                        f"Database operation failed (attempt {attempt + 1}/{max_attempts}): {str(e)}",
                        extra={
                            "function": func.__name__,
                            "attempt": attempt + 1,
                            "max_attempts": max_attempts,
                            "exception_type": type(e).__name__,
                        },
                    )
                    await asyncio.sleep(current_delay)
                    current_delay *= backoff_factor

            logger.error(
                f"Database operation failed after {max_attempts} attempts: {str(last_exception)}",
                extra={
                    "function": func.__name__,
                    "max_attempts": max_attempts,
                    "final_exception": str(last_exception),
                },
            )

            if isinstance(
                last_exception,
                (ConnectionFailureError, ConnectionDoesNotExistError, DisconnectionError),
            ):
                raise DatabaseConnectionError(
                    f"Database connection failed after {max_attempts} attempts"
                )
            if isinstance(last_exception, TimeoutError):
                raise DatabaseTimeoutError(func.__name__, 30)
            raise last_exception

        return wrapper

    return decorator


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a database session"""
    session = async_session()
    try:
        yield session
    except Exception as e:
        await session.rollback()
        logger.error(f"Session error: {str(e)}")
        raise
    finally:
        await session.close()


class DatabaseManager:
    """Менеджер для управления операциями с базой данных"""

    @staticmethod
    @db_retry()
    async def create_tables():
        """Создание всех таблиц в базе данных"""
        try:
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            logger.info("Database tables created successfully")
        except Exception as e:
            logger.error(f"Failed to create database tables: {str(e)}")
            raise

    @staticmethod
    @db_retry()
    async def check_connection():
        """Проверка соединения с базой данных"""
        try:
            async with engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
            logger.info("Database connection check successful")
            return True
        except RETRYABLE_ERRORS:
            raise
        except Exception as e:
            logger.error(f"Database connection check failed: {str(e)}")
            raise DatabaseConnectionError("Database connection check failed")

    @staticmethod
    async def close_connections():
        """Закрытие всех соединений с базой данных"""
        try:
            await engine.dispose()
            logger.info("Database connections closed successfully")
        except Exception as e:
            logger.error(f"Error closing database connections: {str(e)}")


db_manager = DatabaseManager()


def db_operation(func: F) -> F:
    """
    Декоратор для CRUD операций с логированием ошибок
    """

    @wraps(func)
    async def wrapper(*args, **kwargs):
        operation_name = func.__name__

        try:
            logger.debug(f"Starting database operation: {operation_name}")
            result = await func(*args, **kwargs)
            logger.debug(f"Database operation completed: {operation_name}")
            return result

        except SQLAlchemyError as e:
            logger.error(
                f"SQLAlchemy error in {operation_name}: {str(e)}",
                extra={"operation": operation_name, "exception_type": type(e).__name__},
            )
            raise

    return wrapper
