import os

# Настройки PostgreSQL
POSTGRES_USER = os.getenv("POSTGRES_USER", "postgres")
POSTGRES_PASSWORD = os.getenv("POSTGRES_PASSWORD", "postgres")
POSTGRES_DB = os.getenv("POSTGRES_DB", "skirent")
POSTGRES_HOST = os.getenv("POSTGRES_HOST", "db")
POSTGRES_PORT = os.getenv("POSTGRES_PORT", "5432")

DATABASE_URL = os.getenv(
    "DATABASE_URL",
    f"postgresql+asyncpg://{POSTGRES_USER}:{POSTGRES_PASSWORD}@{POSTGRES_HOST}:{POSTGRES_PORT}/{POSTGRES_DB}",
)

# Настройки среды
ENVIRONMENT = os.getenv("ENVIRONMENT", "production").lower()
DEBUG = ENVIRONMENT in ["development", "dev"]

# Настройки retry для базы данных
DB_RETRY_ATTEMPTS = int(os.getenv("DB_RETRY_ATTEMPTS", "3"))
DB_RETRY_DELAY = float(os.getenv("DB_RETRY_DELAY", "1.0"))
DB_RETRY_BACKOFF_FACTOR = float(os.getenv("DB_RETRY_BACKOFF_FACTOR", "2.0"))

# Настройки логирования
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO" if not DEBUG else "DEBUG")
LOG_FORMAT = os.getenv("LOG_FORMAT", "json" if not DEBUG else "text")

# Настройки приложения
APP_NAME = os.getenv("APP_NAME", "Ski Rent API")
APP_VERSION = os.getenv("APP_VERSION", "1.0.0")

# Admin auth
JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY")
JWT_ALGORITHM = "HS256"
JWT_ACCESS_TOKEN_EXPIRE_MINUTES = int(os.getenv("JWT_ACCESS_TOKEN_EXPIRE_MINUTES", "720"))
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD")

# Weather (Gudauri)
WEATHERAPI_KEY = os.getenv("WEATHERAPI_KEY")
WEATHERAPI_URL = os.getenv("WEATHERAPI_URL", "https://api.weatherapi.com/v1/current.json")
WEATHER_LAT = float(os.getenv("WEATHER_LAT", "42.4779"))
WEATHER_LON = float(os.getenv("WEATHER_LON", "44.4796"))

# HTTP
CORS_ORIGINS = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS",
        "https://skirentfanatic.ge,http://localhost:3000",
    ).split(",")
    if origin.strip()
]
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
SLOW_REQUEST_THRESHOLD = float(os.getenv("SLOW_REQUEST_THRESHOLD", "5.0"))

# Бизнес-настройки
CURRENCY = os.getenv("CURRENCY", "GEL")
SUPPORTED_LOCALES = ("geo", "en", "ru")
DEFAULT_LOCALE = "en"


def validate_config():
    """Валидация конфигурации при запуске"""
    errors = []

    if not DATABASE_URL:
        errors.append("DATABASE_URL is required")

    if not JWT_SECRET_KEY:
        errors.append("JWT_SECRET_KEY is required")

    if not ADMIN_USERNAME or not ADMIN_PASSWORD:
        errors.append("ADMIN_USERNAME and ADMIN_PASSWORD are required")

    if DB_RETRY_ATTEMPTS < 1:
        errors.append("DB_RETRY_ATTEMPTS must be >= 1")

    if DB_RETRY_DELAY < 0:
        errors.append("DB_RETRY_DELAY must be >= 0")

    if JWT_ACCESS_TOKEN_EXPIRE_MINUTES < 1:
        errors.append("JWT_ACCESS_TOKEN_EXPIRE_MINUTES must be >= 1")

    if errors:
        raise ValueError(f"Configuration errors: {'; '.join(errors)}")
