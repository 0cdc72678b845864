import logging
import uuid
from datetime import date, datetime, timezone

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession

from punchclock.core.config import Settings, get_settings
from punchclock.core.middleware import require_device_key
from punchclock.db.session import get_db
from punchclock.schemas.punch import (
    DailyAttendanceResponse,
    PunchBatchResponse,
    PunchEntry,
    split_punch_batch,
)
from punchclock.services.attendance import get_daily_attendance
from punchclock.services.batch import process_batch

logger = logging.getLogger(__name__)

router = APIRouter()

HTTP_207_MULTI_STATUS = 207


def _cors_headers(request: Request, settings: Settings) -> dict[str, str]:
    origins = settings.CORS_ALLOW_ORIGINS
    origin = request.headers.get("origin")
    if "*" in origins:
        allow_origin = "*"
    elif origin in origins:
        allow_origin = origin
    else:
        allow_origin = origins[0] if origins else ""
    return {
        "Access-Control-Allow-Origin": allow_origin,
        "Access-Control-Allow-Headers": ", ".join(settings.CORS_ALLOW_HEADERS),
    }


def _bad_request(message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"success": False, "error": message},
    )


@router.options("/punch", include_in_schema=False)
async def punch_preflight(
    request: Request,
    settings: Settings = Depends(get_settings),
) -> Response:
    return Response(headers=_cors_headers(request, settings))


@router.post(
    "/punch",
    response_model=PunchBatchResponse,
    summary="Submit one punch or a batch of punches from a badge reader",
    responses={HTTP_207_MULTI_STATUS: {"model": PunchBatchResponse, "description": "Some punches failed"}},
)
async def submit_punches(
    request: Request,
    _device: None = Depends(require_device_key),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> JSONResponse:
    received_at = datetime.now(timezone.utc)

    try:
        body = await request.json()
    except ValueError:
        logger.warning("Rejected punch request: body is not valid JSON")
        return _bad_request("Request body must be valid JSON")

    try:
        raw_punches = split_punch_batch(body)
    except ValueError as exc:
        logger.warning("Rejected punch request: %s", exc)
        return _bad_request(str(exc))

    logger.info("Received punch request with %d punch(es)", len(raw_punches))

    result = await process_batch(raw_punches, received_at, db, settings)

    return JSONResponse(
        status_code=status.HTTP_200_OK if result.success else HTTP_207_MULTI_STATUS,
        content=result.model_dump(mode="json", exclude_none=True),
        headers=_cors_headers(request, settings),
    )


@router.get(
    "/daily/{employee_id}",
    response_model=DailyAttendanceResponse,
    summary="Daily attendance summary with the day's punches",
)
async def read_daily_attendance(
    employee_id: uuid.UUID,
    day: date = Query(..., description="ISO date YYYY-MM-DD"),
    _device: None = Depends(require_device_key),
    db: AsyncSession = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> DailyAttendanceResponse:
    found = await get_daily_attendance(employee_id, day, db, settings.ATTENDANCE_TIMEZONE)
    if found is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No attendance recorded for this employee on this day",
        )

    summary, punches = found
    return DailyAttendanceResponse(
        employee_id=summary.employee_id,
        work_date=summary.work_date,
        check_in=summary.check_in,
        check_out=summary.check_out,
        status=summary.status,
        work_hours=summary.work_hours,
        punches=[PunchEntry.model_validate(p) for p in punches],
    )
