import logging
from typing import Tuple

from sqlalchemy import text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError

from homebrew.database import Base
from homebrew import models  # noqa: F401  # registers WeatherReportRow on Base

logger = logging.getLogger(__name__)

# statements appended here run in order on every start; each must tolerate having run before
MIGRATIONS: Tuple[str, ...] = ()


def bootstrap_schema(engine: Engine) -> bool:
    """Create the weather_reports table and apply MIGRATIONS.

    Failures are logged and skipped so the service can still start against a
    database whose schema is managed elsewhere. Returns True when every step
    succeeded.
    """
    ok = True
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("[schema] %s table ready", models.TABLE_NAME)
    except SQLAlchemyError as exc:
        ok = False
        logger.error("[schema] create table failed: %s", exc)

    for statement in MIGRATIONS:
        if not statement.strip():
            continue
        try:
            with engine.begin() as conn:
                conn.execute(text(statement))
            logger.info("[schema] migration applied: %s", statement)
        except SQLAlchemyError as exc:
            ok = False
            logger.error("[schema] migration failed: %s | err=%s", statement, exc)
    return ok
