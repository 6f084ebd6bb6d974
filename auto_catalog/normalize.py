"""
Row validation + normalization into the canonical car shape.

A row is never dropped here: missing brand/model and unreadable years are
reported as line errors while the row itself is still returned.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence

from .models import Car, ParseError, Year
from .parser import parse_table
from .rules import FIELD_ALIASES

# hex, binary and octal literals count as numbers, unsigned only
NUMBER_PREFIXES = ("0x", "0b", "0o")

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RowResult:
    car: Optional[Car]
    errors: List[ParseError] = field(default_factory=list)


@dataclass(frozen=True)
class ImportResult:
    cars: List[Car] = field(default_factory=list)
    errors: List[ParseError] = field(default_factory=list)


def parse_year(value: str) -> Optional[Year]:
    """Return the numeric value of ``value``, or None when it is not a finite number."""
    if "_" in value:
        return None
    try:
        number = float(value)
    except ValueError:
        if value[:2].lower() in NUMBER_PREFIXES:
            try:
                return int(value, 0)
            except ValueError:
                return None
        return None
    if not math.isfinite(number):
        return None
    return int(number) if number.is_integer() else number


def resolve(values: Dict[str, str], canonical: str) -> str:
    for name in FIELD_ALIASES[canonical]:
        if values.get(name):
            return values[name]
    return ""


def validate_row(headers: Sequence[str], raw_fields: Sequence[str], line_number: int) -> RowResult:
    fields = [f.strip() for f in raw_fields]
    values = {h: (fields[i] if i < len(fields) else "") for i, h in enumerate(headers)}

    errors: List[ParseError] = []

    year: Optional[Year] = None
    raw_year = values.get("year", "")
    if raw_year:
        year = parse_year(raw_year)
        if year is None:
            errors.append(ParseError(line=line_number, message=f'year is not a number: "{raw_year}"'))

    brand = resolve(values, "brand")
    model = resolve(values, "model")
    if not brand:
        errors.append(ParseError(line=line_number, message="missing brand"))
    if not model:
        errors.append(ParseError(line=line_number, message="missing model"))

    car = Car(
        brand=brand,
        model=model,
        year=year,
        body=resolve(values, "body"),
        image_url=resolve(values, "image_url"),
    )
    return RowResult(car=car, errors=errors)


def parse_catalog(text: str) -> ImportResult:
    """Parse + validate a whole file. Errors come back in line order."""
    table = parse_table(text)

    cars: List[Car] = []
    errors: List[ParseError] = list(table.errors)

    for line in table.data_lines:
        result = validate_row(table.header_fields, line.raw_fields, line.line_number)
        errors.extend(result.errors)
        if result.car is not None:
            cars.append(result.car)

    logger.info("parsed %d rows with %d errors", len(cars), len(errors))
    return ImportResult(cars=cars, errors=errors)
