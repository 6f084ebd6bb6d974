"""
Tabular parsing of an uploaded catalog file.

Responsibilities:
- decode upload bytes to text
- newline normalization + blank line removal
- delimiter detection (from the header line only)
- header normalization + required header reporting
- row tokenization
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from charset_normalizer import from_bytes

from .models import ParseError
from .rules import COMMA, REQUIRED_HEADERS, SEMICOLON

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DataLine:
    line_number: int
    raw_fields: List[str]


@dataclass(frozen=True)
class ParsedTable:
    header_fields: List[str] = field(default_factory=list)
    data_lines: List[DataLine] = field(default_factory=list)
    errors: List[ParseError] = field(default_factory=list)


def decode_upload(raw: bytes) -> str:
    """
    Decode uploaded bytes to text.

    Rules:
    - UTF-8 (with or without BOM) is the expected format and is tried first.
    - Otherwise use charset-normalizer's best guess.
    - If that fails too, decode as UTF-8 with replacement characters.
    """
    try:
        return raw.decode("utf-8-sig")
    except UnicodeDecodeError:
        pass

    match = from_bytes(raw).best()
    if match is not None:
        logger.info("upload is not UTF-8, decoding as %s", match.encoding)
        return str(match)

    logger.warning("could not detect upload encoding, decoding with replacement")
    return raw.decode("utf-8", errors="replace")


def detect_delimiter(header_line: str) -> str:
    return SEMICOLON if SEMICOLON in header_line else COMMA


def split_lines(text: str) -> List[str]:
    # CRLF/CR -> LF, then drop lines with nothing but whitespace
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    return [line for line in text.split("\n") if line.strip()]


def tokenize(line: str, delimiter: str) -> List[str]:
    # positional split; quotes are ordinary characters
    return line.split(delimiter)


def parse_table(text: str) -> ParsedTable:
    lines = split_lines(text)
    if not lines:
        return ParsedTable(errors=[ParseError(line=1, message="empty file")])

    errors: List[ParseError] = []
    delimiter = detect_delimiter(lines[0])

    headers = [h.strip().lower() for h in tokenize(lines[0], delimiter)]

    for name in REQUIRED_HEADERS:
        if name not in headers:
            errors.append(ParseError(line=1, message=f'missing column in header: "{name}"'))

    data_lines: List[DataLine] = []
    for index, line in enumerate(lines[1:], start=2):
        fields = tokenize(line, delimiter)
        if all(not f.strip() for f in fields):
            continue

        data_lines.append(DataLine(line_number=index, raw_fields=fields))

    return ParsedTable(header_fields=headers, data_lines=data_lines, errors=errors)
