DEFAULT_ORDER = "id DESC"


def _non_negative(name: str, value: int) -> int:
    value = int(value)
    if value < 0:
        raise ValueError(f"{name} must be >= 0, got {value}")
    return value


def build_select(
    table: str,
    predicate: str | None = None,
    order: str | None = None,
    limit: int | None = None,
    offset: int | None = None,
) -> str:
    """Assemble ``SELECT * FROM table [WHERE] ORDER BY [LIMIT] [OFFSET]``.

    ``predicate`` and ``order`` are inserted verbatim, so they must come from
    code, never from a request. Values belong in ``:name`` bind markers passed
    to the connection alongside the statement.
    """
    stmt = f"SELECT * FROM {table}"
    if predicate is not None:
        stmt += f" WHERE {predicate}"
    stmt += f" ORDER BY {order if order is not None else DEFAULT_ORDER}"
    if limit is not None:
        stmt += f" LIMIT {_non_negative('limit', limit)}"
    if offset is not None:
        stmt += f" OFFSET {_non_negative('offset', offset)}"
    return stmt
