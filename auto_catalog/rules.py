"""
Deterministic import and browsing rules.

Everything the pipeline decides by table lives here so the behaviour can be
read in one place.
"""

import os

REQUIRED_HEADERS = ("brand", "model", "year", "body", "image_url")

# canonical field -> candidate headers, first non-empty value wins
FIELD_ALIASES = {
    "brand": ("brand", "marka", "make"),
    "model": ("model", "type"),
    "body": ("body", "category"),
    "image_url": ("image_url", "image", "url"),
}

SEMICOLON = ";"
COMMA = ","

ALL = "all"
SIMILAR_LIMIT = 8
IMAGE_URL_MIN_LENGTH = 5
ERROR_DISPLAY_LIMIT = 10

FAVORITES_SLOT = "auto_catalog_favs"
UPLOAD_EXTENSIONS = (".csv", ".txt")

DATA_DIR = os.getenv("AUTO_CATALOG_DATA_DIR", ".auto_catalog")
LOG_LEVEL = os.getenv("AUTO_CATALOG_LOG_LEVEL", "INFO").upper()

SAMPLE_CARS = [
    {
        "brand": "BMW",
        "model": "M3",
        "year": 2016,
        "body": "sedan",
        "image_url": "https://images.unsplash.com/photo-1549921296-3a6b3f19f5b9?q=80&w=1600&auto=format&fit=crop",
    },
    {
        "brand": "Audi",
        "model": "RS6",
        "year": 2020,
        "body": "wagon",
        "image_url": "https://images.unsplash.com/photo-1549921298-c0a0b1b84a6a?q=80&w=1600&auto=format&fit=crop",
    },
    {
        "brand": "Toyota",
        "model": "Supra",
        "year": 1998,
        "body": "coupe",
        "image_url": "https://images.unsplash.com/photo-1622737133809-d95047b9e673?q=80&w=1600&auto=format&fit=crop",
    },
]
