import logging
from typing import Any, Callable, Mapping

from pydantic import ValidationError as PayloadValidationError

from homebrew.config import ServiceConfig
from homebrew.errors import ValidationError
from homebrew.models import METRIC_FIELDS, Reading
from homebrew.schemas import ReadingPayload
from homebrew.store import RecordStore
from homebrew.utils.auth_guard import require_api_key
from homebrew.utils.identifiers import epoch_seconds, generate_oid

logger = logging.getLogger(__name__)


def parse_payload(raw: Any) -> ReadingPayload:
    """Validate a decoded JSON object or form body; blank values count as absent."""
    if not isinstance(raw, Mapping):
        raise ValidationError("body", "expected a JSON object or form fields")
    normalized = {
        key: value
        for key, value in raw.items()
        if not (isinstance(value, str) and not value.strip())
    }
    try:
        return ReadingPayload.model_validate(normalized)
    except PayloadValidationError as exc:
        first = exc.errors()[0]
        loc = first.get("loc") or ("body",)
        raise ValidationError(str(loc[0]), first.get("msg", "invalid value")) from exc


def ingest_reading(
    config: ServiceConfig,
    store: RecordStore,
    authorization: str | None,
    raw: Any,
    *,
    new_oid: Callable[[], str] = generate_oid,
    clock: Callable[[], int] = epoch_seconds,
) -> Reading:
    """Authenticate, validate and store one device reading.

    Returns the reading as built here (``id`` stays 0), not a fresh copy from
    the database. When the payload names an existing ``oid`` only the metrics
    it carries are written; device_type and timestamp of that row are kept.
    """
    require_api_key(authorization, config.api_key)
    payload = parse_payload(raw)

    reading = Reading(
        oid=payload.oid or new_oid(),
        device_type=payload.device_type,
        timestamp=int(clock()),
        **{name: getattr(payload, name) for name in METRIC_FIELDS},
    )
    store.upsert(reading)
    logger.info(
        "Accepted reading oid=%s device_type=%s metrics=%s",
        reading.oid,
        reading.device_type,
        [name for name, value in reading.metrics().items() if value is not None],
    )
    return reading


def latest_reading(
    config: ServiceConfig,
    store: RecordStore,
    authorization: str | None,
    device_type: str | None = None,
) -> Reading | None:
    require_api_key(authorization, config.api_key)
    return store.latest(device_type=device_type)
