from __future__ import annotations

from dashboard.analytics.sorting import next_sort_state, sort_rows, text_sort_key
from dashboard.data.schemas import Row, SortDirection


def _rows(values):
    return [Row(record={"Name": f"r{i}", "Value": v}, id=f"id{i}") for i, v in enumerate(values)]


def _ids(rows):
    return [r.id for r in rows]


def test_numeric_ascending_is_stable():
    rows = _rows(["3", "1", "2", "1"])
    ordered = sort_rows(rows, "Value", {"Value"})

    assert _ids(ordered) == ["id1", "id3", "id2", "id0"]


def test_descending_is_exact_reverse_of_ascending():
    rows = _rows(["3", "1", "2", "1", "2"])
    asc = sort_rows(rows, "Value", {"Value"}, SortDirection.ASC)
    desc = sort_rows(rows, "Value", {"Value"}, SortDirection.DESC)

    assert _ids(desc) == list(reversed(_ids(asc)))


def test_numeric_sort_uses_parsed_values():
    rows = _rows(["10", "9", "1,5", "100%"])
    ordered = sort_rows(rows, "Value", {"Value"})

    assert [r.get("Value") for r in ordered] == ["1,5", "9", "10", "100%"]


def test_invalid_numbers_trail_in_both_directions():
    rows = _rows(["2", "n/a", "1", ""])
    asc = sort_rows(rows, "Value", {"Value"}, SortDirection.ASC)
    desc = sort_rows(rows, "Value", {"Value"}, SortDirection.DESC)

    assert _ids(asc) == ["id2", "id0", "id1", "id3"]
    assert _ids(desc) == ["id0", "id2", "id1", "id3"]


def test_text_sort_ignores_case_and_accents():
    rows = [Row(record={"Name": n}) for n in ["banana", "Éclair", "apple", "Cherry"]]
    ordered = sort_rows(rows, "Name", set())

    assert [r.get("Name") for r in ordered] == ["apple", "banana", "Cherry", "Éclair"]


def test_text_sort_key_folds():
    assert text_sort_key("Éa")[0] == text_sort_key("ea")[0]


def test_sort_does_not_mutate_input():
    rows = _rows(["2", "1"])
    sort_rows(rows, "Value", {"Value"})
    assert _ids(rows) == ["id0", "id1"]


def test_next_sort_state():
    assert next_sort_state(None, SortDirection.ASC, "A") == ("A", SortDirection.ASC)
    assert next_sort_state("A", SortDirection.ASC, "A") == ("A", SortDirection.DESC)
    assert next_sort_state("A", SortDirection.DESC, "A") == ("A", SortDirection.ASC)
    assert next_sort_state("A", SortDirection.DESC, "B") == ("B", SortDirection.ASC)
