"""Spreadsheet export with openpyxl."""

from datetime import date
from io import BytesIO

from openpyxl import load_workbook

from app.application.services import ExportService
from app.application.services.export_service import COLUMNS, export_filename, worker_row
from app.domain.entities import WorkerEntity
from app.domain.enums import ExitReason, WorkerGender, WorkerStatus


def _worker(**overrides) -> WorkerEntity:
    fields = {
        "id": "w1",
        "full_name": "Amina Haddad",
        "national_id": "AB123",
        "gender": WorkerGender.WOMAN,
        "birth_year": 1990,
        "site_id": "s1",
        "entry_date": date(2024, 3, 1),
        "room_number": "201",
        "dormitory_label": "Women's dormitory",
    }
    fields.update(overrides)
    return WorkerEntity(**fields)


def test_export_filename() -> None:
    assert export_filename(date(2024, 7, 4)) == "workers_2024-07-04.xlsx"


def test_worker_row_formats_values() -> None:
    row = worker_row(
        _worker(
            status=WorkerStatus.INACTIVE,
            exit_date=date(2024, 5, 2),
            exit_reason=ExitReason.TRANSFER,
        ),
        {"s1": "North farm"},
    )
    assert len(row) == len(COLUMNS)
    assert row[3] == "Woman"
    assert row[6] == "North farm"
    assert row[9] == "01/03/2024"
    assert row[10] == "02/05/2024"
    assert row[11] == "transfer"
    assert row[12] == "Inactive"


def test_worker_row_unknown_site_shows_id() -> None:
    assert worker_row(_worker(site_id="s9"), {})[6] == "s9"


def test_export_workbook_layout() -> None:
    content = ExportService(sheet_name="Workers").export_workers(
        [_worker(), _worker(id="w2", full_name="Omar", gender=WorkerGender.MAN)],
        {"s1": "North farm"},
    )

    sheet = load_workbook(BytesIO(content))["Workers"]
    assert [cell.value for cell in sheet[1]] == [header for header, _ in COLUMNS]
    assert sheet["A1"].font.bold
    assert sheet.freeze_panes == "A2"
    assert sheet.max_row == 3
    assert sheet["A3"].value == "Omar"
    assert sheet.column_dimensions["A"].width == 20
    assert sheet.column_dimensions["M"].width == 8
