# ABOUTME: Application configuration and the service context injected into the Flask app
# ABOUTME: Replaces module-level singletons so tests can hand in a different store

import os
from dataclasses import dataclass, field

from core.comment_service import CommentService
from core.post_service import PostService
from core.postgres_database import PostgresDatabase, get_postgres_connection_string
from core.sessions import SessionManager
from core.user_service import UserService

VALID_ENVIRONMENTS = {"development", "production", "testing"}

DEFAULT_DEV_ORIGINS = ["http://localhost:3000", "http://localhost:3001"]


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return default


@dataclass
class AppConfig:
    """Settings read from the environment once at startup."""

    database_url: str
    environment: str = "development"
    cors_origins: list[str] = field(default_factory=lambda: list(DEFAULT_DEV_ORIGINS))
    db_pool_min: int = 2
    db_pool_max: int = 10
    db_connect_timeout: int = 10
    db_idle_timeout: int = 20
    session_cookie_name: str = "auth_session"
    log_level: str = "INFO"
    host: str = "0.0.0.0"
    port: int = 3000

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @property
    def debug_errors(self) -> bool:
        """Expose exception messages in 500 responses (never in production)."""
        return not self.is_production

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build configuration from environment variables.

        Environment variables:
            DATABASE_URL / POSTGRES_*: Database connection
            FORUM_ENV: development | production | testing
            FORUM_CORS_ORIGINS: Comma-separated allowed origins
            FORUM_DB_POOL_MIN, FORUM_DB_POOL_MAX: Pool bounds
            FORUM_DB_CONNECT_TIMEOUT, FORUM_DB_IDLE_TIMEOUT: Seconds
            FORUM_SESSION_COOKIE: Session cookie name
            FORUM_LOG_LEVEL: Logging level
            HOST, PORT: Server bind address
        """
        environment = os.environ.get("FORUM_ENV", "development").strip().lower()
        if environment not in VALID_ENVIRONMENTS:
            environment = "development"

        raw_origins = os.environ.get("FORUM_CORS_ORIGINS", "")
        origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]
        if not origins and environment != "production":
            origins = list(DEFAULT_DEV_ORIGINS)

        return cls(
            database_url=get_postgres_connection_string(),
            environment=environment,
            cors_origins=origins,
            db_pool_min=_env_int("FORUM_DB_POOL_MIN", 2),
            db_pool_max=_env_int("FORUM_DB_POOL_MAX", 10),
            db_connect_timeout=_env_int("FORUM_DB_CONNECT_TIMEOUT", 10),
            db_idle_timeout=_env_int("FORUM_DB_IDLE_TIMEOUT", 20),
            session_cookie_name=os.environ.get("FORUM_SESSION_COOKIE", "auth_session"),
            log_level=os.environ.get("FORUM_LOG_LEVEL", "INFO").upper(),
            host=os.environ.get("HOST", "0.0.0.0"),
            port=_env_int("PORT", 3000),
        )


@dataclass
class ServiceContext:
    """Everything a request handler needs, built once per process."""

    config: AppConfig
    db: object
    sessions: SessionManager
    users: UserService
    posts: PostService
    comments: CommentService

    @classmethod
    def from_store(cls, config: AppConfig, db) -> "ServiceContext":
        """Wire services around any object implementing the store methods."""
        return cls(
            config=config,
            db=db,
            sessions=SessionManager(db, cookie_name=config.session_cookie_name, secure_cookies=config.is_production),
            users=UserService(db),
            posts=PostService(db),
            comments=CommentService(db),
        )

    @classmethod
    def from_config(cls, config: AppConfig, skip_schema_setup: bool = False) -> "ServiceContext":
        """Open the PostgreSQL pool and wire services around it."""
        db = PostgresDatabase(
            config.database_url,
            min_pool_size=config.db_pool_min,
            max_pool_size=config.db_pool_max,
            connection_timeout=config.db_connect_timeout,
            idle_timeout=config.db_idle_timeout,
            sslmode="require" if config.is_production else None,
            skip_schema_setup=skip_schema_setup,
        )
        return cls.from_store(config, db)

    def close(self) -> None:
        cleanup = getattr(self.db, "cleanup", None)
        if cleanup:
            cleanup()
