import logging
from typing import Any, Dict, List, Mapping, Protocol

from homebrew.models import TABLE_NAME, Reading
from homebrew.query import build_select

logger = logging.getLogger(__name__)


class Connection(Protocol):
    def execute(self, sql: str, params: Mapping[str, Any] | None = None) -> int: ...

    def query(self, sql: str, params: Mapping[str, Any] | None = None) -> List[Dict[str, Any]]: ...


class RecordStore:
    """Persists readings keyed by ``oid``.

    Writes are not transactional: ``upsert`` issues an insert-or-skip followed
    by one UPDATE per reported metric, each committed separately. If a later
    UPDATE fails the earlier ones stay applied and ``StorageError`` is raised.
    Two concurrent upserts on the same oid can interleave column by column.
    """

    def __init__(self, connection: Connection, table: str = TABLE_NAME):
        self.connection = connection
        self.table = table

    def upsert(self, reading: Reading) -> Reading:
        existing = self.query(predicate="oid = :oid", params={"oid": reading.oid})
        if not existing:
            self.connection.execute(
                f"INSERT INTO {self.table} (oid, device_type, timestamp) "
                "VALUES (:oid, :device_type, :timestamp)",
                {
                    "oid": reading.oid,
                    "device_type": reading.device_type,
                    "timestamp": reading.timestamp,
                },
            )
            logger.info("[store] created reading oid=%s device_type=%s", reading.oid, reading.device_type)

        updated = []
        for column, value in reading.metrics().items():
            if value is None:
                continue
            self.connection.execute(
                f"UPDATE {self.table} SET {column} = :value WHERE oid = :oid",
                {"value": value, "oid": reading.oid},
            )
            updated.append(column)
        logger.debug("[store] oid=%s updated columns=%s", reading.oid, updated)
        return reading

    def query(
        self,
        predicate: str | None = None,
        order: str | None = None,
        limit: int | None = None,
        offset: int | None = None,
        params: Mapping[str, Any] | None = None,
    ) -> List[Reading]:
        stmt = build_select(self.table, predicate=predicate, order=order, limit=limit, offset=offset)
        rows = self.connection.query(stmt, params or {})
        return [Reading.from_row(row) for row in rows]

    def latest(self, device_type: str | None = None) -> Reading | None:
        if device_type:
            rows = self.query(
                predicate="device_type = :device_type",
                limit=1,
                params={"device_type": device_type},
            )
        else:
            rows = self.query(limit=1)
        if not rows:
            return None
        return rows[0]
