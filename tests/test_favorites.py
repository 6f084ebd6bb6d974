import json

import pytest
from pydantic import ValidationError

from auto_catalog.favorites import Favorites, JsonFileStore, MemoryStore
from auto_catalog.models import Car
from auto_catalog.rules import FAVORITES_SLOT

M3 = Car(brand="BMW", model="M3", year=2016, body="sedan")


def test_toggle_twice_restores_state():
    favorites = Favorites(MemoryStore())
    assert favorites.toggle(M3) is True
    assert favorites.is_favorite(M3)
    assert favorites.toggle(M3) is False
    assert not favorites.is_favorite(M3)
    assert favorites.keys == frozenset()


def test_key_ignores_body_and_image():
    favorites = Favorites(MemoryStore())
    favorites.toggle(M3)
    assert favorites.is_favorite(Car(brand="bmw", model="m3", year=2016, body="coupe", image_url="x"))
    assert not favorites.is_favorite(Car(brand="bmw", model="m3"))


def test_every_toggle_persists_full_set():
    store = MemoryStore()
    favorites = Favorites(store)
    favorites.toggle(M3)
    favorites.toggle(Car(brand="Audi", model="RS6"))
    assert json.loads(store.data[FAVORITES_SLOT]) == ["audi|rs6|", "bmw|m3|2016"]


def test_load_seeds_keys():
    store = MemoryStore({FAVORITES_SLOT: json.dumps(["bmw|m3|2016", "gone|car|"])})
    favorites = Favorites(store)
    assert favorites.is_favorite(M3)
    assert "gone|car|" in favorites.keys


def test_corrupt_data_loads_as_empty():
    for raw in ["{not json", '{"a": 1}', "42", ""]:
        favorites = Favorites(MemoryStore({FAVORITES_SLOT: raw}))
        assert favorites.keys == frozenset()


def test_json_file_store(tmp_path):
    favorites = Favorites(JsonFileStore(tmp_path / "data"))
    assert favorites.keys == frozenset()
    favorites.toggle(M3)

    reloaded = Favorites(JsonFileStore(tmp_path / "data"))
    assert reloaded.is_favorite(M3)
    assert (tmp_path / "data" / f"{FAVORITES_SLOT}.json").exists()


def test_non_finite_year_is_rejected():
    with pytest.raises(ValidationError):
        Car(brand="a", model="b", year=float("inf"))
    with pytest.raises(ValidationError):
        Car(brand="a", model="b", year=float("nan"))
