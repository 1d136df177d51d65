"""Worker domain entity."""

from dataclasses import dataclass, field
from datetime import date, datetime

from app.domain.enums import ExitReason, RoomGender, WorkerGender, WorkerStatus
from app.domain.exceptions import ValidationException
from app.shared.utils.datetime import current_year

MIN_BIRTH_YEAR = 1900

_DORMITORY_LABELS = {
    RoomGender.MEN: "Men's dormitory",
    RoomGender.WOMEN: "Women's dormitory",
}


def dormitory_label(gender: RoomGender) -> str:
    """Display label of the dormitory a room of this gender belongs to."""
    return _DORMITORY_LABELS[gender]


def age_from_birth_year(birth_year: int) -> int:
    """Age in whole years for the current calendar year."""
    return current_year() - birth_year


@dataclass
class WorkerEntity:
    """Domain entity for a housed worker.

    ``age`` is not an input: it is derived from ``birth_year`` every time an
    entity is built, so any age stored in a document or sent by a client is
    ignored.
    """

    id: str
    full_name: str
    national_id: str
    gender: WorkerGender
    birth_year: int
    site_id: str
    entry_date: date
    phone: str = ""
    room_number: str = ""
    dormitory_label: str = ""
    status: WorkerStatus = WorkerStatus.ACTIVE
    exit_date: date | None = None
    exit_reason: ExitReason | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    age: int = field(init=False)

    def __post_init__(self) -> None:
        self.validate()
        self.age = age_from_birth_year(self.birth_year)

    def validate(self) -> None:
        """Validate worker business rules. Raises ValidationException if invalid."""
        if not self.id:
            raise ValidationException("Worker ID is required", field="id")
        if not self.full_name or not self.full_name.strip():
            raise ValidationException("Worker name is required", field="fullName")
        if not self.national_id or not self.national_id.strip():
            raise ValidationException("National ID is required", field="nationalId")
        if not self.site_id:
            raise ValidationException("Worker site is required", field="siteId")
        if not MIN_BIRTH_YEAR <= self.birth_year <= current_year():
            raise ValidationException(
                f"Birth year must be between {MIN_BIRTH_YEAR} and {current_year()}",
                field="birthYear",
            )
        if self.exit_date is not None and self.exit_date < self.entry_date:
            raise ValidationException(
                "Exit date cannot be before entry date", field="exitDate"
            )

    @property
    def is_active(self) -> bool:
        return self.status == WorkerStatus.ACTIVE

    def matches_search(self, term: str) -> bool:
        """Case-insensitive match of term against name or national id."""
        needle = term.strip().lower()
        if not needle:
            return True
        return needle in self.full_name.lower() or needle in self.national_id.lower()
