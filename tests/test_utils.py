from datetime import datetime, timedelta, timezone

import pytest

from utils import Icon, get_svg_name, list_svg_files, to_camel_case, to_identifier, to_iso, to_pascal_case


@pytest.mark.parametrize(
    "name,expected",
    [
        ("book-service", "BookService"),
        ("arrow_left", "ArrowLeft"),
        ("tick", "Tick"),
        ("ev charging", "EvCharging"),
    ],
)
def test_to_pascal_case(name, expected):
    assert to_pascal_case(name) == expected


def test_to_camel_case():
    assert to_camel_case("book-service") == "bookService"
    assert to_camel_case("arrow_left-2") == "arrowLeft2"
    assert to_camel_case("---") == ""


@pytest.mark.parametrize(
    "name,expected",
    [
        ("book-service", "BookService"),
        ("1st-place", "Icon1stPlace"),
        ("date", "DateIcon"),
        ("symbol", "SymbolIcon"),
        ("car.v2", "Carv2"),
    ],
)
def test_to_identifier(name, expected):
    assert to_identifier(name) == expected


def test_to_identifier_rejects_empty():
    with pytest.raises(ValueError):
        to_identifier("---")


def test_to_iso():
    dt = datetime(2024, 3, 1, 14, 30, 5, 123456, tzinfo=timezone(timedelta(hours=2)))
    assert to_iso(dt) == "2024-03-01T12:30:05.123Z"


def test_get_svg_name():
    assert get_svg_name("tick") == "tick.svg"


def test_list_svg_files(tmp_path):
    (tmp_path / "b.svg").write_text("<svg/>")
    (tmp_path / "a.svg").write_text("<svg/>")
    (tmp_path / "notes.txt").write_text("")
    (tmp_path / "nested").mkdir()
    (tmp_path / "nested" / "c.svg").write_text("<svg/>")

    assert [p.name for p in list_svg_files(tmp_path)] == ["a.svg", "b.svg"]
    assert [p.name for p in list_svg_files(tmp_path, recursive=True)] == ["a.svg", "b.svg", "c.svg"]


def test_list_svg_files_missing_dir(tmp_path):
    with pytest.raises(FileNotFoundError):
        list_svg_files(tmp_path / "nope")


def test_icon_to_json():
    icon = Icon("tick", "tick.svg", "status", ["tick", "status"], 120, "2024-01-01T00:00:00.000Z")
    assert icon.to_json() == {
        "name": "tick",
        "filename": "tick.svg",
        "category": "status",
        "tags": ["tick", "status"],
        "size": 120,
        "lastModified": "2024-01-01T00:00:00.000Z",
    }


def test_icon_requires_name():
    with pytest.raises(ValueError):
        Icon("", ".svg", "general")
