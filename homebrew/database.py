# homebrew/database.py

import logging
import os
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, URL
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import declarative_base

from homebrew.errors import StorageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DatabaseConfig:
    username: str
    password: str
    host: str
    port: int
    database: str
    driver: str = "mysql+mysqlconnector"

    @property
    def url(self) -> URL:
        return URL.create(
            drivername=self.driver,
            username=self.username,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )

    @classmethod
    def from_env(
        cls,
        prefix: str = "HOMEBREW_DB",
        defaults: Dict[str, str] | None = None,
    ) -> "DatabaseConfig":
        defaults = defaults or {}
        def _env(name: str, fallback: str) -> str:
            return os.getenv(f"{prefix}_{name}", defaults.get(name, fallback))

        return cls(
            username=_env("USER", "homebrew"),
            password=_env("PASSWORD", ""),
            host=_env("HOST", "localhost"),
            port=int(_env("PORT", "3306")),
            database=_env("NAME", "homebrew"),
            driver=_env("DRIVER", "mysql+mysqlconnector"),
        )


ENGINE_REGISTRY: Dict[str, Engine] = {}


def get_engine(
    config: DatabaseConfig,
    *,
    pool_pre_ping: bool = True,
    echo: bool = False,
) -> Engine:
    key = f"{config.driver}:{config.host}:{config.port}:{config.database}:{config.username}"
    if key not in ENGINE_REGISTRY:
        logger.info(
            "Creating engine driver=%s host=%s port=%s db=%s user=%s",
            config.driver,
            config.host,
            config.port,
            config.database,
            config.username,
        )
        ENGINE_REGISTRY[key] = create_engine(
            config.url,
            pool_pre_ping=pool_pre_ping,
            echo=echo,
        )
    return ENGINE_REGISTRY[key]


Base = declarative_base()


class SqlConnection:
    """Runs single statements against an engine.

    Every call checks a connection out of the engine pool and commits on its
    own; nothing spans two calls. Driver errors surface as ``StorageError``.
    """

    def __init__(self, engine: Engine):
        self.engine = engine

    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> int:
        try:
            with self.engine.begin() as conn:
                result = conn.execute(text(sql), dict(params or {}))
                return result.rowcount
        except SQLAlchemyError as exc:
            logger.warning("Statement failed: %s | err=%s", sql, exc)
            raise StorageError(str(exc)) from exc

    def query(self, sql: str, params: Mapping[str, Any] | None = None) -> List[Dict[str, Any]]:
        try:
            with self.engine.begin() as conn:
                rows = conn.execute(text(sql), dict(params or {})).mappings().all()
        except SQLAlchemyError as exc:
            logger.warning("Query failed: %s | err=%s", sql, exc)
            raise StorageError(str(exc)) from exc
        return [dict(row) for row in rows]
