"""DTOs for worker use cases."""

from dataclasses import dataclass
from datetime import date

from app.domain.enums import ExitReason, WorkerGender, WorkerStatus


@dataclass(frozen=True)
class WorkerCommand:
    """Worker attributes accepted on create/update.

    There is no age: it is always derived from birth_year. exit_date and
    exit_reason left as None keep whatever the worker already has.
    """

    full_name: str
    national_id: str
    gender: WorkerGender
    birth_year: int
    site_id: str
    entry_date: date
    phone: str = ""
    room_number: str = ""
    status: WorkerStatus = WorkerStatus.ACTIVE
    exit_date: date | None = None
    exit_reason: ExitReason | None = None
