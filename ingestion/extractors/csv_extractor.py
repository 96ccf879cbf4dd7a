"""
CSV text extractor: delimiter detection, quote-aware splitting and table parsing
"""

from dataclasses import dataclass, field
from typing import List, Optional, Union
from core.exceptions import EmptyInputError, ParseError
import logging

logger = logging.getLogger(__name__)

COMMA = ","
SEMICOLON = ";"
TAB = "\t"

# Files for this pipeline are usually exported with ';'
DEFAULT_DELIMITER = SEMICOLON
CANDIDATE_DELIMITERS = (COMMA, SEMICOLON, TAB)

QUOTE = '"'


@dataclass
class ParsedTable:
    """Header and data rows of an uploaded file"""
    header: List[str]
    rows: List[List[str]] = field(default_factory=list)
    delimiter: str = DEFAULT_DELIMITER


def detect_delimiter(header_line: str) -> str:
    """
    Pick the delimiter used in a header line.

    The candidate with the strictly highest count wins; a tie or no match
    at all falls back to the semicolon.
    """
    counts = {candidate: header_line.count(candidate) for candidate in CANDIDATE_DELIMITERS}
    best = max(counts.values())
    if best == 0:
        return DEFAULT_DELIMITER

    winners = [candidate for candidate, count in counts.items() if count == best]
    if len(winners) > 1:
        return DEFAULT_DELIMITER
    return winners[0]


def split_line(line: str, delimiter: str, line_number: Optional[int] = None) -> List[str]:
    """
    Split one line into trimmed cells.

    A double quote at the start of a cell opens a quoted section in which the
    delimiter is literal and ``""`` stands for one quote character. A quote
    anywhere else is kept as text.

    Raises:
        ParseError: the line ends inside a quoted section
    """
    cells: List[str] = []
    buffer: List[str] = []
    in_quotes = False
    i = 0
    length = len(line)

    while i < length:
        char = line[i]

        if in_quotes:
            if char == QUOTE:
                if i + 1 < length and line[i + 1] == QUOTE:
                    buffer.append(QUOTE)
                    i += 2
                    continue
                in_quotes = False
            else:
                buffer.append(char)
        elif char == delimiter:
            cells.append("".join(buffer).strip())
            buffer = []
        elif char == QUOTE and not "".join(buffer).strip():
            # Opening quote; whitespace before it is not part of the value
            buffer = []
            in_quotes = True
        else:
            buffer.append(char)

        i += 1

    if in_quotes:
        raise ParseError(
            "Unbalanced quotes: a quoted cell is never closed",
            line_number=line_number,
            details={"line": line}
        )

    cells.append("".join(buffer).strip())
    return cells


def decode_text(raw: Union[str, bytes]) -> str:
    """
    Decode upload content and drop a leading byte-order mark.

    Raises:
        ParseError: bytes that are not valid UTF-8
    """
    if isinstance(raw, bytes):
        bom_length = 3 if raw.startswith(b"\xef\xbb\xbf") else 0
        try:
            return raw[bom_length:].decode("utf-8")
        except UnicodeDecodeError as e:
            offset = bom_length + e.start
            raise ParseError(
                f"File is not valid UTF-8 (byte offset {offset})",
                details={"byte_offset": offset, "reason": e.reason},
                original_exception=e
            )
    if raw.startswith("\ufeff"):
        return raw[1:]
    return raw


def split_lines(text: str) -> List[str]:
    """Normalize line endings, trim, and keep only non-blank lines"""
    normalized = text.replace("\r\n", "\n").replace("\r", "\n").strip()
    return [line for line in normalized.split("\n") if line.strip()]


def parse_table(raw: Union[str, bytes]) -> ParsedTable:
    """
    Parse full file content into a header and data rows.

    Rows must have exactly as many cells as the header; a row that does not
    is rejected rather than padded or truncated.

    Raises:
        EmptyInputError: fewer than two non-blank lines
        ParseError: unbalanced quotes or a row with the wrong cell count
    """
    lines = split_lines(decode_text(raw))
    if len(lines) < 2:
        raise EmptyInputError(
            "CSV must contain a header line and at least one data line",
            details={"lines": len(lines)}
        )

    delimiter = detect_delimiter(lines[0])
    header = split_line(lines[0], delimiter, line_number=1)

    rows: List[List[str]] = []
    for line_number, line in enumerate(lines[1:], start=2):
        cells = split_line(line, delimiter, line_number=line_number)
        if len(cells) != len(header):
            raise ParseError(
                f"Line {line_number} has {len(cells)} cells, header has {len(header)}",
                line_number=line_number,
                details={"expected": len(header), "actual": len(cells)}
            )
        rows.append(cells)

    logger.info(
        f"Parsed CSV: {len(header)} columns, {len(rows)} rows, delimiter={delimiter!r}"
    )
    return ParsedTable(header=header, rows=rows, delimiter=delimiter)
