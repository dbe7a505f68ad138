from __future__ import annotations

import logging
import os
import time
from datetime import datetime, timezone
from typing import Any

from fastapi import Body, Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware

from .analytics.aggregator import compute_analytics
from .analytics.store import get_events, record_event
from .errors import DuplicateUserError, InvalidInputError
from .matching.models import ScoredShop, Shop
from .matching.query import GeoFilter, QueryCriteria, query_shops
from .store.json_store import JsonDataStore, get_store
from .users.models import PublicUser, SimilarUser
from .users.registration import register_user, validate_registration
from .users.similarity import rank_similar_users

logger = logging.getLogger(__name__)

RECOMMENDATION_LIMIT = 10

app = FastAPI(title="Spice Road Nara API", version="1.0.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        o.strip() for o in os.environ.get("SPICE_ROAD_CORS_ORIGINS", "*").split(",") if o.strip()
    ],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 1)


def _geo_filter(lat: float | None, lng: float | None, radius_km: float | None) -> GeoFilter | None:
    given = [v is not None for v in (lat, lng, radius_km)]
    if not any(given):
        return None
    if not all(given):
        raise InvalidInputError("lat, lng and radiusKm must be given together")
    return GeoFilter(latitude=lat, longitude=lng, radius_km=radius_km)


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "OK", "timestamp": datetime.now(timezone.utc).isoformat()}


# ── Shop endpoints ───────────────────────────────────────────────────────


@app.get(
    "/api/shops",
    response_model=list[ScoredShop | Shop],
    response_model_exclude_none=True,
)
def list_shops(
    search: str | None = Query(default=None, max_length=200),
    user_id: str | None = Query(default=None, alias="userId"),
    region: list[str] | None = Query(default=None),
    min_rating: float | None = Query(default=None, alias="minRating", ge=0.0, le=5.0),
    lat: float | None = Query(default=None),
    lng: float | None = Query(default=None),
    radius_km: float | None = Query(default=None, alias="radiusKm", ge=0.0),
    limit: int | None = Query(default=None, ge=1, le=500),
    store: JsonDataStore = Depends(get_store),
) -> list[Shop]:
    start = time.perf_counter()
    try:
        near = _geo_filter(lat, lng, radius_km)
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    # An unknown userId falls back to unranked results
    user = store.find_user(user_id) if user_id else None
    if user_id and user is None:
        logger.info("Unknown userId %r, returning unranked shops", user_id)

    criteria = QueryCriteria(
        search_term=search,
        regions=frozenset(region) if region else None,
        min_rating=min_rating,
        near=near,
        requesting_user=user,
        limit=limit,
    )
    results = query_shops(store.list_shops(), criteria)

    record_event("shop_search", {
        "search": search,
        "regions": region or [],
        "ranked": user is not None,
        "results_returned": len(results),
        "response_time_ms": _elapsed_ms(start),
    })
    return results


@app.get("/api/shops/regions")
def list_regions(store: JsonDataStore = Depends(get_store)) -> list[str]:
    return sorted({s.region for s in store.list_shops() if s.region})


@app.get("/api/shops/{shop_id}", response_model=Shop, response_model_exclude_none=True)
def get_shop(shop_id: str, store: JsonDataStore = Depends(get_store)) -> Shop:
    shop = store.find_shop(shop_id)
    if shop is None:
        raise HTTPException(status_code=404, detail="Shop not found")
    return shop


@app.get(
    "/api/recommendations/{user_id}",
    response_model=list[ScoredShop],
    response_model_exclude_none=True,
)
def recommendations(user_id: str, store: JsonDataStore = Depends(get_store)) -> list[Shop]:
    start = time.perf_counter()
    user = store.find_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")

    criteria = QueryCriteria(
        requesting_user=user,
        exclude_disliked=True,
        limit=RECOMMENDATION_LIMIT,
    )
    results = query_shops(store.list_shops(), criteria)

    record_event("recommendations", {
        "results_returned": len(results),
        "response_time_ms": _elapsed_ms(start),
    })
    return results


# ── User endpoints ───────────────────────────────────────────────────────


@app.get("/api/users", response_model=list[PublicUser])
def list_users(store: JsonDataStore = Depends(get_store)) -> list[PublicUser]:
    return [PublicUser.from_user(u) for u in store.list_users() if u.is_public]


@app.get("/api/users/{user_id}", response_model=PublicUser)
def get_user(user_id: str, store: JsonDataStore = Depends(get_store)) -> PublicUser:
    user = store.find_user(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    if not user.is_public:
        raise HTTPException(status_code=403, detail="User profile is private")
    return PublicUser.from_user(user)


@app.get("/api/users/{user_id}/similar", response_model=list[SimilarUser])
def similar_users(
    user_id: str,
    limit: int = Query(default=5, ge=1, le=50),
    store: JsonDataStore = Depends(get_store),
) -> list[SimilarUser]:
    users = store.list_users()
    user = next((u for u in users if u.id == user_id), None)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    if not user.is_public:
        raise HTTPException(status_code=403, detail="User profile is private")
    return rank_similar_users(user, users, limit=limit)


@app.post("/api/users/register", response_model=PublicUser, status_code=201)
def register(
    payload: Any = Body(...),
    store: JsonDataStore = Depends(get_store),
) -> PublicUser:
    try:
        request = validate_registration(payload)
    except InvalidInputError as exc:
        record_event("registration", {"success": False, "reason": "invalid"})
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    users = store.list_users()
    try:
        user = register_user(request, users)
    except DuplicateUserError as exc:
        record_event("registration", {"success": False, "reason": "duplicate"})
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    if not store.add_user(user):
        record_event("registration", {"success": False, "reason": "save_failed"})
        raise HTTPException(status_code=500, detail="Failed to save user data")

    record_event("registration", {"success": True})
    logger.info("Registered user %s", user.id)
    return PublicUser.from_user(user)


# ── Monitoring ───────────────────────────────────────────────────────────


@app.get("/api/metrics")
def metrics() -> dict:
    return compute_analytics(get_events())
