import os
from datetime import timedelta
from dotenv import load_dotenv

load_dotenv()


def _flag(name, default="False"):
    return os.getenv(name, default).lower() in ("true", "1", "yes")


def _database_url():
    url = os.getenv("DATABASE_URL")
    if url:
        return url

    user = os.getenv("DB_USER", "postgres")
    password = os.getenv("DB_PASSWORD", "postgres")
    host = os.getenv("DB_HOST", "localhost")
    port = os.getenv("DB_PORT", "5432")
    name = os.getenv("DB_NAME", "learnly")
    return f"postgresql+psycopg2://{user}:{password}@{host}:{port}/{name}"


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "default-secret")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

    # Database
    SQLALCHEMY_DATABASE_URI = _database_url()
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {}
    if SQLALCHEMY_DATABASE_URI.startswith("postgresql"):
        # Bounded pool; idle connections are recycled after DB_IDLE_TIMEOUT seconds
        SQLALCHEMY_ENGINE_OPTIONS = {
            "pool_size": int(os.getenv("DB_POOL_SIZE", 20)),
            "pool_recycle": int(os.getenv("DB_IDLE_TIMEOUT", 30)),
            "pool_pre_ping": True,
        }

    RUN_MIGRATIONS = _flag("RUN_MIGRATIONS", "True")
    SEED_DB = _flag("SEED_DB")

    # Auth
    JWT_SECRET_KEY = os.getenv("JWT_SECRET", "your-secret-key-change-in-production")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=7)
    JWT_TOKEN_LOCATION = ["headers"]

    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")


class TestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    RUN_MIGRATIONS = True
    SEED_DB = False
    JWT_SECRET_KEY = "test-secret-key-with-enough-length-for-hs256"
