import logging
from functools import lru_cache

from fastapi import Depends, FastAPI, File, HTTPException, UploadFile

from .favorites import Favorites, JsonFileStore
from .models import (
    Car,
    CatalogResponse,
    FavoritesResponse,
    FilterState,
    HealthResponse,
    ImportResponse,
    NavigateRequest,
    RoutePage,
    ToggleResponse,
)
from .rules import DATA_DIR, LOG_LEVEL, UPLOAD_EXTENSIONS
from .session import CatalogSession

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(
    title="auto-catalog",
    description="Import, browse and bookmark a vehicle catalog from a CSV file",
    version="0.1.0",
)


@lru_cache
def get_session() -> CatalogSession:
    logger.info("starting catalog session, favorites in %s", DATA_DIR)
    return CatalogSession(Favorites(JsonFileStore(DATA_DIR)))


@app.get("/health", response_model=HealthResponse)
def health():
    return {"ok": True}


@app.post("/import", response_model=ImportResponse)
async def import_catalog(file: UploadFile = File(...), session: CatalogSession = Depends(get_session)):
    if not (file.filename or "").lower().endswith(UPLOAD_EXTENSIONS):
        raise HTTPException(status_code=422, detail="Only CSV files are supported")

    raw = await file.read()
    outcome = session.import_bytes(raw)
    return session.import_response(outcome)


@app.get("/catalog", response_model=CatalogResponse)
def catalog(session: CatalogSession = Depends(get_session)):
    return session.catalog_page()


@app.put("/filters", response_model=CatalogResponse)
def update_filters(filters: FilterState, session: CatalogSession = Depends(get_session)):
    session.set_filters(filters)
    return session.catalog_page()


@app.get("/favorites", response_model=FavoritesResponse)
def favorites(session: CatalogSession = Depends(get_session)):
    return {"keys": sorted(session.favorites.keys)}


@app.post("/favorites/toggle", response_model=ToggleResponse)
def toggle_favorite(car: Car, session: CatalogSession = Depends(get_session)):
    active = session.toggle_favorite(car)
    return {"key": car.key, "is_favorite": active}


@app.get("/route", response_model=RoutePage)
def current_route(session: CatalogSession = Depends(get_session)):
    return session.route_page()


@app.put("/route", response_model=RoutePage)
def navigate(request: NavigateRequest, session: CatalogSession = Depends(get_session)):
    session.navigate(request.address)
    return session.route_page()
