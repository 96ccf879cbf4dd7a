"""
Unit tests for the CSV extractor
"""

import pytest
from core.exceptions import EmptyInputError, ParseError
from ingestion.extractors.csv_extractor import (
    decode_text,
    detect_delimiter,
    parse_table,
    split_line,
)


class TestDetectDelimiter:
    """Test delimiter detection on the header line"""

    def test_highest_count_wins(self):
        assert detect_delimiter("a,b;c;d") == ";"
        assert detect_delimiter("a,b,c;d") == ","
        assert detect_delimiter("a\tb\tc") == "\t"

    def test_tie_defaults_to_semicolon(self):
        assert detect_delimiter("a,b;c") == ";"
        assert detect_delimiter("a,b\tc") == ";"

    def test_no_delimiter_defaults_to_semicolon(self):
        assert detect_delimiter("model") == ";"
        assert detect_delimiter("") == ";"


class TestSplitLine:
    """Test quote-aware line splitting"""

    def test_plain_cells_are_trimmed(self):
        assert split_line(" Apple ; iPhone 13 ;128 ", ";") == ["Apple", "iPhone 13", "128"]

    def test_quoted_cell_keeps_delimiter(self):
        assert split_line('Apple,"iPhone 13, Pro",128', ",") == ["Apple", "iPhone 13, Pro", "128"]

    def test_doubled_quotes_are_unescaped(self):
        assert split_line('"6.1"" screen";x', ";") == ['6.1" screen', "x"]

    def test_quote_inside_unquoted_cell_is_literal(self):
        assert split_line('Macbook 13" 2020;x', ";") == ['Macbook 13" 2020', "x"]

    def test_empty_cells_are_preserved(self):
        assert split_line("a;;c;", ";") == ["a", "", "c", ""]

    def test_whitespace_before_opening_quote(self):
        assert split_line('a;  "b;c"', ";") == ["a", "b;c"]

    def test_unbalanced_quotes_raise(self):
        with pytest.raises(ParseError) as exc_info:
            split_line('Apple;"iPhone 13;128', ";", line_number=4)

        assert exc_info.value.line_number == 4
        assert exc_info.value.details["line_number"] == 4

    def test_rejoin_and_resplit_is_stable(self):
        cells = ["Apple", "iPhone 13, Pro", 'say "hi"', ""]
        quoted = [
            '"' + cell.replace('"', '""') + '"' if ("," in cell or '"' in cell) else cell
            for cell in cells
        ]

        assert split_line(",".join(quoted), ",") == cells


class TestParseTable:
    """Test whole-file parsing"""

    def test_parse_semicolon_file(self, price_csv):
        table = parse_table(price_csv)

        assert table.delimiter == ";"
        assert table.header == ["brand", "model", "storage_gb", "base_price"]
        assert len(table.rows) == 3
        assert table.rows[0] == ["Apple", "iPhone 13", "128GB", "420"]

    def test_crlf_and_blank_lines(self):
        table = parse_table("a,b\r\n\r\n1,2\r\n   \r\n3,4\r\n")

        assert table.delimiter == ","
        assert table.rows == [["1", "2"], ["3", "4"]]

    def test_bom_is_stripped(self):
        table = parse_table("\ufeffbrand;model\nApple;iPhone\n")

        assert table.header == ["brand", "model"]

    def test_bytes_are_decoded(self):
        table = parse_table("\ufeffmerk;model\nApple;iPhone\n".encode("utf-8"))

        assert table.header == ["merk", "model"]

    def test_header_only_is_empty_input(self):
        with pytest.raises(EmptyInputError):
            parse_table("brand;model;storage_gb;base_price\n\n")

    def test_blank_text_is_empty_input(self):
        with pytest.raises(EmptyInputError):
            parse_table("  \n \r\n")

    def test_short_row_is_rejected(self):
        with pytest.raises(ParseError) as exc_info:
            parse_table("a;b;c\n1;2;3\n4;5\n")

        assert exc_info.value.line_number == 3
        assert exc_info.value.details["expected"] == 3
        assert exc_info.value.details["actual"] == 2

    def test_long_row_is_rejected(self):
        with pytest.raises(ParseError):
            parse_table("a;b\n1;2;3\n")


def test_decode_text_passthrough():
    assert decode_text("plain") == "plain"


def test_invalid_utf8_bytes_are_rejected():
    raw = b"brand;model;storage_gb;base_price\nApple;iPh\xffone;128;420\n"

    with pytest.raises(ParseError) as exc_info:
        parse_table(raw)

    assert exc_info.value.details["byte_offset"] == raw.index(b"\xff")


def test_invalid_utf8_offset_counts_the_bom():
    raw = b"\xef\xbb\xbfmodel\n\xff\n"

    with pytest.raises(ParseError) as exc_info:
        decode_text(raw)

    assert exc_info.value.details["byte_offset"] == 9
