import pytest
from csvchat.services.security import build_preview, sanitize_cell, sanitize_table

SAMPLES = [
    "", "   ", "plain", "O'Brien", "<b>bold</b>", ' "quoted" ', "a;b;c",
    "`tick`", " < > ", "  spaced  ", "'; DROP TABLE users;--", "tab\tinside",
]


@pytest.mark.parametrize("val,expected", [
    ("O'Brien", "OBrien"),
    ("<b>bold</b>", "bbold/b"),
    ('  "quoted"  ', "quoted"),
    ("a;b", "ab"),
    ("`x`", "x"),
    (" < > ", ""),
    ("no change", "no change"),
])
def test_sanitize_cell(val, expected):
    assert sanitize_cell(val) == expected


@pytest.mark.parametrize("val", SAMPLES)
def test_sanitize_is_idempotent(val):
    once = sanitize_cell(val)
    assert sanitize_cell(once) == once


def test_sanitize_table_covers_header_row():
    assert sanitize_table([["<id>", "name"], ["1", "O'Brien"]]) == [["id", "name"], ["1", "OBrien"]]


def test_preview_caps_at_five_rows():
    table = [[str(i), "x"] for i in range(200)]
    preview = build_preview(table)
    assert len(preview) == 5
    assert preview[0] == ["0", "x"]
    assert preview[-1] == ["4", "x"]


def test_preview_short_table_kept_whole():
    table = [["id"], ["1"], ["2"]]
    assert build_preview(table) == table


def test_preview_respects_configured_length():
    assert len(build_preview([["a"]] * 10, preview_rows=2)) == 2
