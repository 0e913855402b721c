"""Tests for the CSV parser."""

import pytest

from school_admin.services.importer import CSVParseError, CSVParser


def test_parses_header_and_rows_in_order():
    table = CSVParser().parse(b"name,section\nJSS 1,A\nJSS 2,B\n")

    assert table.headers == ["name", "section"]
    assert table.rows == [{"name": "JSS 1", "section": "A"}, {"name": "JSS 2", "section": "B"}]


def test_tolerates_utf8_bom():
    table = CSVParser().parse("﻿name\nJSS 1\n".encode("utf-8"))

    assert table.headers == ["name"]


def test_skips_empty_lines():
    table = CSVParser().parse("name,section\n\nJSS 1,A\n\n\nJSS 2,B\n")

    assert [row["name"] for row in table.rows] == ["JSS 1", "JSS 2"]


def test_delimiter_only_line_is_a_blank_row():
    table = CSVParser().parse("name,section\nJSS 1,A\n,\n   \n")

    assert table.rows == [
        {"name": "JSS 1", "section": "A"},
        {"name": "", "section": ""},
        {"name": "   ", "section": ""},
    ]


def test_short_rows_padded_and_extra_cells_dropped():
    table = CSVParser().parse("a,b,c\n1\n1,2,3,4\n")

    assert table.rows == [{"a": "1", "b": "", "c": ""}, {"a": "1", "b": "2", "c": "3"}]


def test_quoted_fields_keep_commas_quotes_and_newlines():
    table = CSVParser().parse('name,note\n"Doe, Jane","said ""hi""\nthen left"\n')

    assert table.rows == [{"name": "Doe, Jane", "note": 'said "hi"\nthen left'}]


def test_headers_are_kept_verbatim():
    table = CSVParser().parse("FirstName, lastName\nJohn,Doe\n")

    assert table.headers == ["FirstName", " lastName"]


def test_empty_input_has_no_headers():
    table = CSVParser().parse(b"")

    assert table.headers == []
    assert table.rows == []


def test_undecodable_bytes_raise_parse_error():
    with pytest.raises(CSVParseError, match="decoded"):
        CSVParser().parse(b"name\n\xff\xfe\xfa\n")


def test_malformed_quoting_raises_parse_error():
    with pytest.raises(CSVParseError):
        CSVParser().parse('name,note\n"unterminated,x\n')
