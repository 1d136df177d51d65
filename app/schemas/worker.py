"""Worker API schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from app.application.dtos.worker import WorkerCommand
from app.domain.enums import ExitReason, WorkerGender, WorkerStatus


class WorkerWriteRequest(BaseModel):
    """Request body for creating or replacing a worker.

    age is accepted for compatibility and ignored: it is always derived
    from birth_year.
    """

    full_name: str = Field(..., min_length=1, max_length=255)
    national_id: str = Field(..., min_length=1, max_length=64)
    phone: str = Field(default="", max_length=32)
    gender: WorkerGender
    birth_year: int = Field(..., ge=1900)
    age: int | None = Field(default=None, description="Ignored; derived from birth_year")
    site_id: str = Field(..., min_length=1)
    room_number: str = Field(default="", max_length=20)
    status: WorkerStatus = WorkerStatus.ACTIVE
    entry_date: date
    exit_date: date | None = None
    exit_reason: ExitReason | None = None

    def to_command(self) -> WorkerCommand:
        return WorkerCommand(
            full_name=self.full_name,
            national_id=self.national_id,
            gender=self.gender,
            birth_year=self.birth_year,
            site_id=self.site_id,
            entry_date=self.entry_date,
            phone=self.phone,
            room_number=self.room_number,
            status=self.status,
            exit_date=self.exit_date,
            exit_reason=self.exit_reason,
        )


class WorkerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    full_name: str
    national_id: str
    phone: str
    gender: WorkerGender
    age: int
    birth_year: int
    site_id: str
    room_number: str
    dormitory_label: str
    status: WorkerStatus
    entry_date: date
    exit_date: date | None = None
    exit_reason: ExitReason | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class WorkerListResponse(BaseModel):
    """Filtered workers with the average ages of the active ones."""

    items: list[WorkerResponse]
    total: int
    average_age_men: int
    average_age_women: int
