from __future__ import annotations

import math
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .rules import ALL

Year = Union[int, float]


def format_year(year: Optional[Year]) -> str:
    """Text form of a year: integral values without a decimal part, absent as ""."""
    if year is None:
        return ""
    if isinstance(year, float) and year.is_integer():
        return str(int(year))
    return str(year)


class Car(BaseModel):
    model_config = ConfigDict(frozen=True)

    brand: str = ""
    model: str = ""
    year: Optional[Year] = None
    body: str = ""
    image_url: str = ""

    @field_validator("year")
    @classmethod
    def year_is_finite(cls, value):
        if value is not None and not math.isfinite(value):
            raise ValueError("year must be a finite number")
        return value

    @property
    def title(self) -> str:
        return f"{self.brand} {self.model}"

    @property
    def key(self) -> str:
        return favorite_key(self)


def favorite_key(car: Car) -> str:
    # body and image are deliberately not part of the identity
    return f"{car.brand.lower()}|{car.model.lower()}|{format_year(car.year)}"


class ParseError(BaseModel):
    model_config = ConfigDict(frozen=True)

    line: int
    message: str


class FilterState(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: str = ""
    brand: str = ALL
    body: str = ALL
    only_favorites: bool = False


class HomeRoute(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["home"] = "home"


class CarRoute(BaseModel):
    """Address segments of a detail page, still percent-encoded."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["car"] = "car"
    brand: str = ""
    model: str = ""
    year: Optional[str] = None


Route = Annotated[Union[HomeRoute, CarRoute], Field(discriminator="kind")]


# --- API envelopes ---

class Stats(BaseModel):
    brands: int = 0
    models: int = 0
    images: int = 0
    favorites: int = 0
    matches: int = 0


class Facets(BaseModel):
    brands: List[str] = Field(default_factory=lambda: [ALL])
    bodies: List[str] = Field(default_factory=lambda: [ALL])


class CarCard(BaseModel):
    car: Car
    title: str
    address: str
    link: str
    is_favorite: bool = False


class ErrorReport(BaseModel):
    total: int = 0
    shown: List[ParseError] = Field(default_factory=list)
    hidden: int = 0
    errors: List[ParseError] = Field(default_factory=list)


class ImportResponse(BaseModel):
    accepted: bool
    rows: int = 0
    report: ErrorReport


class CatalogResponse(BaseModel):
    filters: FilterState
    facets: Facets
    stats: Stats
    cars: List[CarCard] = Field(default_factory=list)
    report: ErrorReport


class RoutePage(BaseModel):
    route: Route
    car: Optional[CarCard] = None
    similar: List[CarCard] = Field(default_factory=list)


class NavigateRequest(BaseModel):
    address: str = ""


class FavoritesResponse(BaseModel):
    keys: List[str] = Field(default_factory=list)


class ToggleResponse(BaseModel):
    key: str
    is_favorite: bool


class HealthResponse(BaseModel):
    ok: bool = True
