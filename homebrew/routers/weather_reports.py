import json
import logging
from typing import Any, Callable, Dict

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Request
from fastapi.responses import JSONResponse, Response
from starlette.exceptions import HTTPException as StarletteHTTPException

from homebrew.config import ServiceConfig, get_settings
from homebrew.database import SqlConnection, get_engine
from homebrew.errors import AuthError, StorageError, ValidationError
from homebrew.handlers import ingest_reading, latest_reading
from homebrew.schemas import ReadingOut
from homebrew.store import RecordStore
from homebrew.utils.auth_guard import SECRET_HEADER
from homebrew.utils.identifiers import epoch_seconds, generate_oid

logger = logging.getLogger(__name__)
router = APIRouter(tags=["weather_reports"])

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_store(settings: ServiceConfig = Depends(get_settings)) -> RecordStore:
    return RecordStore(SqlConnection(get_engine(settings.database)))


def get_oid_factory() -> Callable[[], str]:
    return generate_oid


def get_clock() -> Callable[[], int]:
    return epoch_seconds


async def read_body(request: Request) -> Any:
    # undecodable bodies become None so authentication still runs first
    content_type = request.headers.get("content-type", "").lower()
    try:
        if content_type.startswith(FORM_CONTENT_TYPES):
            form = await request.form()
            return {key: value for key, value in form.items()}
        body = await request.body()
        if not body.strip():
            return None
        return json.loads(body)
    except (ValueError, RecursionError, StarletteHTTPException):
        return None


def _not_found() -> HTTPException:
    # same outcome as an unknown route so the endpoint is not revealed
    return HTTPException(status_code=404)


def _validation_response(exc: ValidationError) -> JSONResponse:
    return JSONResponse(status_code=400, content={"detail": exc.message, "field": exc.field})


def _storage_response() -> JSONResponse:
    return JSONResponse(status_code=500, content={"detail": "Storage unavailable"})


@router.post("/api/weather_reports", response_model=ReadingOut)
def create_weather_report(
    raw: Any = Depends(read_body),
    authorization: str | None = Header(None, alias=SECRET_HEADER),
    settings: ServiceConfig = Depends(get_settings),
    store: RecordStore = Depends(get_store),
    new_oid: Callable[[], str] = Depends(get_oid_factory),
    clock: Callable[[], int] = Depends(get_clock),
) -> Dict[str, Any]:
    try:
        reading = ingest_reading(settings, store, authorization, raw, new_oid=new_oid, clock=clock)
    except AuthError:
        raise _not_found() from None
    except ValidationError as exc:
        logger.info("Rejected weather report: %s", exc)
        return _validation_response(exc)
    except StorageError:
        logger.exception("Failed to store weather report")
        return _storage_response()
    return reading.to_dict()


@router.get(
    "/api/weather_reports",
    response_model=ReadingOut,
    responses={204: {"description": "No reading stored yet"}},
)
def get_latest_weather_report(
    device_type: str | None = Query(None, description="indoor, outdoor or other"),
    authorization: str | None = Header(None, alias=SECRET_HEADER),
    settings: ServiceConfig = Depends(get_settings),
    store: RecordStore = Depends(get_store),
) -> Dict[str, Any]:
    try:
        reading = latest_reading(settings, store, authorization, device_type=device_type)
    except AuthError:
        raise _not_found() from None
    except StorageError:
        logger.exception("Failed to load latest weather report")
        return _storage_response()
    if reading is None:
        return Response(status_code=204)
    return reading.to_dict()


@router.api_route(
    "/api/weather_reports",
    methods=["PUT", "PATCH", "DELETE", "OPTIONS", "HEAD"],
    include_in_schema=False,
)
def unsupported_weather_report_method() -> None:
    # a 405 would confirm the route exists
    raise _not_found()
