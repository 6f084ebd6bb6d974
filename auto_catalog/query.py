"""
Derived views over the current catalog.

All functions are pure: they read the car collection, the filter state and
the favorite keys and never modify any of them.
"""

from __future__ import annotations

import unicodedata
from typing import AbstractSet, Iterable, List, Sequence

from .models import Car, FilterState, Stats, favorite_key, format_year
from .rules import ALL, IMAGE_URL_MIN_LENGTH, SIMILAR_LIMIT


def _collation_key(value: str):
    # accent/case-insensitive first, then lowercase before uppercase
    decomposed = unicodedata.normalize("NFKD", value)
    base = "".join(c for c in decomposed if not unicodedata.combining(c))
    return (base.casefold(), value.swapcase())


def _distinct(values: Iterable[str]) -> List[str]:
    unique = {v.strip() for v in values if v.strip()}
    return [ALL] + sorted(unique, key=_collation_key)


def distinct_brands(cars: Sequence[Car]) -> List[str]:
    return _distinct(c.brand for c in cars)


def distinct_bodies(cars: Sequence[Car]) -> List[str]:
    return _distinct(c.body for c in cars)


def search_text(car: Car) -> str:
    return f"{car.brand} {car.model} {car.body} {format_year(car.year)}".lower()


def matches(car: Car, filters: FilterState, favorite_keys: AbstractSet[str]) -> bool:
    if filters.brand != ALL and car.brand.lower() != filters.brand.lower():
        return False
    if filters.body != ALL and car.body.lower() != filters.body.lower():
        return False

    q = filters.query.strip().lower()
    if q and q not in search_text(car):
        return False

    if filters.only_favorites and favorite_key(car) not in favorite_keys:
        return False
    return True


def filter_cars(cars: Sequence[Car], filters: FilterState, favorite_keys: AbstractSet[str]) -> List[Car]:
    return [c for c in cars if matches(c, filters, favorite_keys)]


def similar_to(cars: Sequence[Car], car: Car, limit: int = SIMILAR_LIMIT) -> List[Car]:
    """
    Cars sharing the brand or the body of ``car``, in collection order.

    Anything with the same favorite key (the car itself, its duplicates) is
    left out.
    """
    target = favorite_key(car)
    brand = car.brand.lower()
    body = car.body.lower()

    out: List[Car] = []
    for other in cars:
        if len(out) >= limit:
            break
        if favorite_key(other) == target:
            continue
        if other.brand.lower() == brand or other.body.lower() == body:
            out.append(other)
    return out


def compute_stats(cars: Sequence[Car], filters: FilterState, favorite_keys: AbstractSet[str]) -> Stats:
    return Stats(
        brands=len({c.brand.strip() for c in cars if c.brand.strip()}),
        models=len({f"{c.brand.strip()}|{c.model.strip()}" for c in cars}),
        images=sum(1 for c in cars if len(c.image_url) > IMAGE_URL_MIN_LENGTH),
        favorites=sum(1 for c in cars if favorite_key(c) in favorite_keys),
        matches=len(filter_cars(cars, filters, favorite_keys)),
    )
