from __future__ import annotations

import gzip

from dashboard.data.loader import (
    find_header_line,
    load_csv_files,
    parse_csv_text,
    read_upload_bytes,
)


def test_skips_comment_lines_and_trailing_blank(acquisition_csv):
    parsed = parse_csv_text(acquisition_csv)

    assert parsed.header == ["Source", "Sessions", "Users", "Average Session Duration"]
    assert len(parsed.records) == 3
    assert parsed.records[0] == {
        "Source": "google",
        "Sessions": "100",
        "Users": "80",
        "Average Session Duration": "30",
    }


def test_two_comment_lines_header_three_rows_blank_tail():
    text = "# Report\n# Range: Jan\nPage,Views\n/home,10\n/about,5\n/blog,7\n\n"
    parsed = parse_csv_text(text)

    assert parsed.header == ["Page", "Views"]
    assert [r["Page"] for r in parsed.records] == ["/home", "/about", "/blog"]


def test_quoted_fields_keep_embedded_commas_and_quotes():
    text = 'Name,Note\n"Smith, J","said ""hi"""\n'
    parsed = parse_csv_text(text)

    assert parsed.records == [{"Name": "Smith, J", "Note": 'said "hi"'}]


def test_quoted_field_with_newline():
    text = 'Name,Note\nA,"line one\nline two"\nB,plain\n'
    parsed = parse_csv_text(text)

    assert len(parsed.records) == 2
    assert parsed.records[0]["Note"] == "line one\nline two"


def test_header_cells_are_trimmed_and_unquoted():
    parsed = parse_csv_text('"Page" , "Views"\n/x,1\n')

    assert parsed.header == ["Page", "Views"]


def test_cells_are_trimmed():
    parsed = parse_csv_text("A,B\n  x  , 2 \n")

    assert parsed.records == [{"A": "x", "B": "2"}]


def test_drops_ragged_blank_and_comment_rows():
    text = (
        "Source,Sessions,Users\n"
        "google,100,80\n"
        "short,1\n"           # too few fields
        "long,1,2,3\n"        # too many fields
        ",,\n"                # all blank
        "# Totals,150,120\n"  # comment in data block
        "direct,50,40\n"
    )
    parsed = parse_csv_text(text)

    assert [r["Source"] for r in parsed.records] == ["google", "direct"]
    assert parsed.dropped_lines == 4


def test_no_header_returns_empty_result():
    parsed = parse_csv_text("# only comments\n\nno delimiter here\n")

    assert parsed.header == []
    assert parsed.records == []
    assert not parsed.ok


def test_empty_text():
    assert parse_csv_text("").header == []


def test_byte_order_mark_is_ignored():
    parsed = parse_csv_text("\ufeffPage,Views\n/x,1\n")

    assert parsed.header == ["Page", "Views"]


def test_find_header_line_skips_commentless_lines():
    lines = ["# meta, with comma", "", "title only", "A,B", "1,2"]
    assert find_header_line(lines) == 3


def test_batch_rejects_file_with_different_header():
    batch = load_csv_files([
        ("jan.csv", "A,B\n1,2\n"),
        ("feb.csv", "A,C\n3,4\n"),
        ("mar.csv", "A,B\n5,6\n"),
    ])

    assert batch.header == ["A", "B"]
    assert [r["A"] for r in batch.records] == ["1", "5"]
    assert batch.accepted_files == ["jan.csv", "mar.csv"]
    assert batch.rejected_files == ["feb.csv"]
    assert any("feb.csv" in w for w in batch.warnings)


def test_batch_skips_unreadable_and_non_csv_files():
    batch = load_csv_files([
        ("notes.txt", "A,B\n1,2\n"),
        ("empty.csv", "# nothing\n"),
        ("real.csv", "A,B\n1,2\n"),
    ])

    assert batch.skipped_files == ["notes.txt", "empty.csv"]
    assert batch.accepted_files == ["real.csv"]
    assert batch.first_file == "real.csv"
    assert len(batch.records) == 1


def test_read_upload_bytes_gunzips_and_strips_bom():
    raw = "\ufeffA,B\n1,2\n".encode("utf-8")
    name, text = read_upload_bytes("export.csv.gz", gzip.compress(raw))

    assert name == "export.csv"
    assert text == "A,B\n1,2\n"


def test_read_upload_bytes_falls_back_to_latin1():
    name, text = read_upload_bytes("x.csv", "Café,B\n".encode("latin-1"))

    assert text.startswith("Café")
