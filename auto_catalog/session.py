"""
Process-wide catalog session.

Holds the loaded cars, the filter state, the last import's errors and the
active route as one immutable ``CatalogState``. Every change builds a new
state and swaps it in; nothing is updated in place.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple, Union

from . import query, router
from .favorites import Favorites
from .models import (
    Car,
    CarCard,
    CarRoute,
    CatalogResponse,
    ErrorReport,
    Facets,
    FilterState,
    HomeRoute,
    ImportResponse,
    ParseError,
    RoutePage,
)
from .normalize import parse_catalog
from .parser import decode_upload
from .rules import ALL, ERROR_DISPLAY_LIMIT, SAMPLE_CARS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CatalogState:
    cars: Tuple[Car, ...] = ()
    filters: FilterState = field(default_factory=FilterState)
    errors: Tuple[ParseError, ...] = ()
    route: Union[HomeRoute, CarRoute] = field(default_factory=HomeRoute)


@dataclass(frozen=True)
class ImportOutcome:
    accepted: bool
    rows: int
    errors: Tuple[ParseError, ...]


def sample_cars() -> List[Car]:
    return [Car(**row) for row in SAMPLE_CARS]


def error_report(errors: Iterable[ParseError], limit: int = ERROR_DISPLAY_LIMIT) -> ErrorReport:
    errors = list(errors)
    return ErrorReport(
        total=len(errors),
        shown=errors[:limit],
        hidden=max(len(errors) - limit, 0),
        errors=errors,
    )


class CatalogSession:
    def __init__(self, favorites: Favorites, cars: Optional[Iterable[Car]] = None) -> None:
        self.favorites = favorites
        initial = sample_cars() if cars is None else cars
        self.state = CatalogState(cars=tuple(initial))

    def _replace(self, **changes) -> CatalogState:
        self.state = dataclasses.replace(self.state, **changes)
        return self.state

    # --- mutations ---

    def import_text(self, text: str) -> ImportOutcome:
        result = parse_catalog(text)
        errors = tuple(result.errors)

        if result.cars:
            self._replace(
                cars=tuple(result.cars),
                errors=errors,
                filters=self.state.filters.model_copy(
                    update={"query": "", "brand": ALL, "body": ALL}
                ),
            )
            logger.info("import accepted: %d cars, %d errors", len(result.cars), len(errors))
            return ImportOutcome(accepted=True, rows=len(result.cars), errors=errors)

        self._replace(errors=errors)
        logger.info("import rejected: no usable rows, %d errors", len(errors))
        return ImportOutcome(accepted=False, rows=0, errors=errors)

    def import_bytes(self, raw: bytes) -> ImportOutcome:
        return self.import_text(decode_upload(raw))

    def set_filters(self, filters: FilterState) -> FilterState:
        return self._replace(filters=filters).filters

    def navigate(self, address: str) -> Union[HomeRoute, CarRoute]:
        return self._replace(route=router.decode(address)).route

    def toggle_favorite(self, car: Car) -> bool:
        return self.favorites.toggle(car)

    # --- derived views ---

    @property
    def cars(self) -> Tuple[Car, ...]:
        return self.state.cars

    def filtered(self) -> List[Car]:
        return query.filter_cars(self.state.cars, self.state.filters, self.favorites.keys)

    def current_car(self) -> Optional[Car]:
        return router.find_car(self.state.cars, self.state.route)

    def card(self, car: Car) -> CarCard:
        return CarCard(
            car=car,
            title=car.title,
            address=router.encode(car),
            link=router.link(car),
            is_favorite=self.favorites.is_favorite(car),
        )

    def import_response(self, outcome: ImportOutcome) -> ImportResponse:
        return ImportResponse(
            accepted=outcome.accepted,
            rows=outcome.rows,
            report=error_report(outcome.errors),
        )

    def catalog_page(self) -> CatalogResponse:
        state = self.state
        keys = self.favorites.keys
        return CatalogResponse(
            filters=state.filters,
            facets=Facets(
                brands=query.distinct_brands(state.cars),
                bodies=query.distinct_bodies(state.cars),
            ),
            stats=query.compute_stats(state.cars, state.filters, keys),
            cars=[self.card(c) for c in self.filtered()],
            report=error_report(state.errors),
        )

    def route_page(self) -> RoutePage:
        car = self.current_car()
        if car is None:
            return RoutePage(route=self.state.route)
        return RoutePage(
            route=self.state.route,
            car=self.card(car),
            similar=[self.card(c) for c in query.similar_to(self.state.cars, car)],
        )
