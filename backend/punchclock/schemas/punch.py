import uuid
from datetime import date, datetime
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, field_validator

from punchclock.workday import ensure_utc

PunchType = Literal["in", "out"]


class PunchRequest(BaseModel):
    """One punch as sent by a badge reader.

    card_id is optional at this level so that a missing id is reported as an
    item error of the batch instead of rejecting the whole request.
    """

    model_config = ConfigDict(extra="ignore")

    card_id: str | None = None
    punch_time: datetime | None = None
    device_id: str | None = None
    device_location: str | None = None
    punch_type: PunchType | None = None


class PunchResult(BaseModel):
    card_id: str | None = None
    success: bool
    punch_id: int | None = None
    punch_type: PunchType | None = None
    punch_time: datetime | None = None
    error: str | None = None


class PunchBatchResponse(BaseModel):
    success: bool
    results: list[PunchResult]
    processed: int
    successful: int
    failed: int

    @classmethod
    def from_results(cls, results: list[PunchResult]) -> "PunchBatchResponse":
        successful = sum(1 for r in results if r.success)
        return cls(
            success=all(r.success for r in results),
            results=results,
            processed=len(results),
            successful=successful,
            failed=len(results) - successful,
        )


def split_punch_batch(body: Any) -> list[Any]:
    """Return the raw punch items of a request body.

    Accepts either a single punch object or {"punches": [...]}. Items are
    validated one by one later so that a bad item fails alone.
    """
    if not isinstance(body, dict):
        raise ValueError("Request body must be a JSON object")
    if "punches" in body:
        punches = body["punches"]
        if not isinstance(punches, list):
            raise ValueError("'punches' must be a list")
        return punches
    return [body]


class PunchEntry(BaseModel):
    id: int
    punch_time: datetime
    punch_type: PunchType
    card_id: str
    device_id: str | None
    device_location: str | None
    source: str

    model_config = ConfigDict(from_attributes=True)

    @field_validator("punch_time")
    @classmethod
    def stored_in_utc(cls, v: datetime) -> datetime:
        return ensure_utc(v)


class DailyAttendanceResponse(BaseModel):
    employee_id: uuid.UUID
    work_date: date
    check_in: datetime | None
    check_out: datetime | None
    status: str
    work_hours: float | None
    punches: list[PunchEntry]

    # Some backends hand timestamps back without tzinfo; they are stored in UTC.
    @field_validator("check_in", "check_out")
    @classmethod
    def stored_in_utc(cls, v: datetime | None) -> datetime | None:
        return ensure_utc(v) if v is not None else None
