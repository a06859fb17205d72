import io
from datetime import datetime, time

import pytest
from openpyxl import Workbook

from itinerary.errors import ProcessingError, UnsupportedFileError
from itinerary.loaders import load_csv_grid, load_grid, load_xlsx_grid
from itinerary.processor import process_itinerary


def xlsx_bytes(rows):
    wb = Workbook()
    ws = wb.active
    ws.title = "Itinerary"
    for row in rows:
        ws.append(row)
    buf = io.BytesIO()
    wb.save(buf)
    return buf.getvalue()


def test_csv_grid_is_padded_to_widest_row():
    raw = (
        "Title,Weekend in Paris\n"
        "Day,City,Date,Time,Category,Description\n"
        "1,Paris,2025-05-01,09:00,Food,Breakfast at the hotel\n"
    ).encode("utf-8")

    grid, report = load_csv_grid(raw)

    assert grid[0] == ["Title", "Weekend in Paris", None, None, None, None]
    assert grid[2][5] == "Breakfast at the hotel"
    assert report["row_width"]["columns"] == 6
    assert report["row_width"]["short_rows_padded"] == 1


def test_csv_bom_and_crlf():
    raw = b"\xef\xbb\xbfTitle,Trip\r\nDay,City,Date,Time,Category,Description\r\n"

    grid, report = load_csv_grid(raw)

    assert grid[0][0] == "Title"
    assert report["newlines"]["changed"] is True


def test_csv_quoted_commas():
    raw = (
        "Title,Trip\n"
        "Day,City,Date,Time,Category,Description\n"
        '1,Paris,2025-05-01,19:00,Food,"Dinner, then a walk"\n'
        '1,Paris,2025-05-01,21:00,Activity,"Seine cruise, night"\n'
    ).encode("utf-8")

    grid, _ = load_csv_grid(raw)

    assert grid[2][5] == "Dinner, then a walk"


def test_csv_semicolon_delimiter():
    raw = (
        "Title;Alps\n"
        "Day;City;Date;Time;Category;Description\n"
        "1;Vienna;2025-06-01;08:00;Food;Breakfast\n"
        "2;Prague;2025-06-02;10:00;Sightseeing;Old Town\n"
    ).encode("utf-8")

    grid, report = load_csv_grid(raw)

    assert report["delimiter"]["detected"] == ";"
    itinerary = process_itinerary(grid)
    assert itinerary.title == "Alps"
    assert itinerary.days["2"].city == "Prague"


def test_xlsx_grid_keeps_native_values():
    raw = xlsx_bytes([
        ["Title", "Rome in spring"],
        ["Day", "City", "Date", "Time", "Category", "Description"],
        [1, "Rome", datetime(2025, 5, 3), time(9, 30), "Sightseeing", "Colosseum"],
        [1, "Rome", datetime(2025, 5, 3), time(13, 0), "Food", "Lunch in Trastevere"],
    ])

    grid, report = load_xlsx_grid(raw)

    assert report["worksheet"] == "Itinerary"
    assert len(grid) == 4
    assert all(len(row) == 6 for row in grid)

    day = process_itinerary(grid).days["1"]
    assert day.date == "2025-05-03"
    assert [i.timing for i in day.items] == ["09:30", "13:00"]
    assert day.all_meals == ["lunch"]


def test_broken_workbook_raises_processing_error():
    with pytest.raises(ProcessingError):
        load_xlsx_grid(b"definitely not a zip archive")


def test_load_grid_dispatch():
    grid, _ = load_grid("TRIP.CSV", b"Title,Trip\n")
    assert grid[0] == ["Title", "Trip"]

    with pytest.raises(UnsupportedFileError) as exc:
        load_grid("trip.numbers", b"")
    assert exc.value.message == "Only CSV or XLSX files are supported"
    assert exc.value.filename == "trip.numbers"
