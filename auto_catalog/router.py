"""
Addresses for detail pages.

    ""                         -> home
    car/<brand>/<model>        -> detail page, any year
    car/<brand>/<model>/<year> -> detail page for that year

Segments are percent-encoded the way browsers' encodeURIComponent does it.
Decoding never fails; anything unrecognised is the home route.
"""

from __future__ import annotations

from typing import Optional, Sequence, Union
from urllib.parse import quote

from .models import Car, CarRoute, HomeRoute, format_year

CAR = "car"

# characters encodeURIComponent leaves alone on top of quote()'s own set
_SAFE = "!*'()"


def encode_segment(value: str) -> str:
    return quote(value, safe=_SAFE)


def encode(car: Car) -> str:
    address = f"{CAR}/{encode_segment(car.brand.lower())}/{encode_segment(car.model.lower())}"
    if car.year is not None:
        address += f"/{encode_segment(format_year(car.year))}"
    return address


def link(car: Car) -> str:
    return f"#/{encode(car)}"


def decode(address: str) -> Union[HomeRoute, CarRoute]:
    parts = [p for p in (address or "").lstrip("#").split("/") if p]
    if len(parts) >= 2 and parts[0] == CAR:
        return CarRoute(
            brand=parts[1],
            model=parts[2] if len(parts) > 2 else "",
            year=parts[3] if len(parts) > 3 else None,
        )
    return HomeRoute()


def find_car(cars: Sequence[Car], route: Union[HomeRoute, CarRoute]) -> Optional[Car]:
    if not isinstance(route, CarRoute):
        return None

    for car in cars:
        if encode_segment(car.brand.lower()) != route.brand:
            continue
        if encode_segment(car.model.lower()) != route.model:
            continue
        if route.year is not None and format_year(car.year) != route.year:
            continue
        return car
    return None
