"""Spreadsheet export of a (filtered) worker list, using openpyxl."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import date
from io import BytesIO

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from app.domain.entities import WorkerEntity
from app.domain.enums import WorkerGender, WorkerStatus
from app.shared.utils.datetime import utc_today

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

# (header, column width in characters)
COLUMNS: tuple[tuple[str, int], ...] = (
    ("Name", 20),
    ("National ID", 12),
    ("Phone", 15),
    ("Gender", 8),
    ("Age", 6),
    ("Birth year", 12),
    ("Site", 20),
    ("Room", 10),
    ("Dormitory", 15),
    ("Entry date", 12),
    ("Exit date", 12),
    ("Exit reason", 20),
    ("Status", 8),
)

_DATE_FORMAT = "%d/%m/%Y"


def _format_date(value: date | None) -> str:
    return value.strftime(_DATE_FORMAT) if value else ""


def export_filename(today: date | None = None) -> str:
    """workers_<YYYY-MM-DD>.xlsx for the given (default: current UTC) day."""
    return f"workers_{(today or utc_today()).isoformat()}.xlsx"


def worker_row(worker: WorkerEntity, site_names: Mapping[str, str]) -> list:
    """One spreadsheet row, in COLUMNS order. Unknown sites show their id."""
    return [
        worker.full_name,
        worker.national_id,
        worker.phone,
        "Man" if worker.gender == WorkerGender.MAN else "Woman",
        worker.age,
        worker.birth_year,
        site_names.get(worker.site_id, worker.site_id),
        worker.room_number,
        worker.dormitory_label,
        _format_date(worker.entry_date),
        _format_date(worker.exit_date),
        worker.exit_reason.value if worker.exit_reason else "",
        "Active" if worker.status == WorkerStatus.ACTIVE else "Inactive",
    ]


class ExportService:
    def __init__(self, sheet_name: str = "Workers") -> None:
        self.sheet_name = sheet_name

    def build_workbook(
        self,
        workers: Iterable[WorkerEntity],
        site_names: Mapping[str, str],
    ) -> Workbook:
        wb = Workbook()
        ws = wb.active
        ws.title = self.sheet_name
        ws.append([header for header, _ in COLUMNS])
        for cell in ws[1]:
            cell.font = Font(bold=True)
        for worker in workers:
            ws.append(worker_row(worker, site_names))
        for index, (_, width) in enumerate(COLUMNS, start=1):
            ws.column_dimensions[get_column_letter(index)].width = width
        ws.freeze_panes = "A2"
        return wb

    def export_workers(
        self,
        workers: Iterable[WorkerEntity],
        site_names: Mapping[str, str],
    ) -> bytes:
        """Serialized .xlsx content for the given workers."""
        buffer = BytesIO()
        self.build_workbook(workers, site_names).save(buffer)
        return buffer.getvalue()
