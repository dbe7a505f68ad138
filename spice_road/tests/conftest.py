from __future__ import annotations

import json
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from spice_road.analytics.store import clear_events
from spice_road.app import app
from spice_road.matching.models import Shop
from spice_road.store.config import StoreConfig
from spice_road.store.json_store import JsonDataStore, get_store
from spice_road.users.models import User

SHOP_RECORDS = [
    {
        "id": "1", "name": "菩薩咖喱", "address": "奈良県奈良市薬師堂町21",
        "latitude": 34.676154, "longitude": 135.831229,
        "spiceParameters": {"spiciness": 60, "stimulation": 45, "aroma": 85},
        "rating": 4.6, "description": "古民家で野菜たっぷりのスパイスカレーを提供", "region": "奈良市",
    },
    {
        "id": "2", "name": "ハチノス", "address": "奈良県奈良市南市町8-1",
        "latitude": 34.679894, "longitude": 135.830062,
        "spiceParameters": {"spiciness": 70, "stimulation": 75, "aroma": 80},
        "rating": 4.4, "description": "薬膳スパイススープカレーと蜂蜜の店", "region": "奈良市",
    },
    {
        "id": "3", "name": "若草カレー本舗", "address": "奈良県奈良市餅飯殿町38-1",
        "latitude": 34.680776, "longitude": 135.828896,
        "spiceParameters": {"spiciness": 55, "stimulation": 50, "aroma": 75},
        "rating": 4.2, "region": "奈良市",
    },
    {
        "id": "4", "name": "Spice Garden Ikoma", "address": "奈良県生駒市谷田町1600",
        "latitude": 34.692, "longitude": 135.7006,
        "spiceParameters": {"spiciness": 85, "stimulation": 80, "aroma": 60},
        "rating": 4.1, "description": "Hot South Indian meals", "region": "生駒市",
    },
    {
        "id": "5", "name": "橿原スパイス食堂", "address": "奈良県橿原市内膳町1-1",
        "latitude": 34.5095, "longitude": 135.7925,
        "spiceParameters": {"spiciness": 30, "stimulation": 25, "aroma": 70},
        "rating": 3.9, "description": "まろやかな欧風カレー", "region": "橿原市",
    },
    {
        "id": "6", "name": "天理カリー工房", "address": "奈良県天理市川原城町650",
        "latitude": 34.5966, "longitude": 135.8337,
        "spiceParameters": {"spiciness": 45, "stimulation": 40, "aroma": 55},
        "rating": 4.0, "region": "天理市",
    },
]

USER_RECORDS = [
    {
        "id": "u-nara", "username": "nara_fan", "email": "nara@example.com",
        "displayName": "Nara Fan",
        "preferences": {
            "spiceParameters": {"spiciness": 60, "stimulation": 45, "aroma": 85},
            "favoriteShops": ["1"], "dislikes": ["2"],
        },
        "bio": "ならまち派", "createdAt": "2024-01-01T00:00:00Z", "isPublic": True,
    },
    {
        "id": "u-mild", "username": "mild_lover", "email": "mild@example.com",
        "displayName": "Mild Lover",
        "preferences": {
            "spiceParameters": {"spiciness": 20, "stimulation": 20, "aroma": 60},
            "favoriteShops": [], "dislikes": [],
        },
        "bio": "", "createdAt": "2024-02-10T09:30:00Z", "isPublic": False,
    },
    {
        "id": "u-hot", "username": "hot_head", "email": "hot@example.com",
        "displayName": "Hot Head",
        "preferences": {
            "spiceParameters": {"spiciness": 85, "stimulation": 80, "aroma": 60},
            "favoriteShops": ["4"], "dislikes": [],
        },
        "createdAt": "2024-03-05T12:00:00Z", "isPublic": True,
    },
]


def _make_shop(shop_id: str, spiciness: int = 50, stimulation: int = 50, aroma: int = 50, **overrides) -> Shop:
    record = {
        "id": shop_id,
        "name": f"Shop {shop_id}",
        "address": "奈良県奈良市",
        "latitude": 34.68,
        "longitude": 135.83,
        "spiceParameters": {"spiciness": spiciness, "stimulation": stimulation, "aroma": aroma},
        "rating": 4.0,
    }
    record.update(overrides)
    return Shop.model_validate(record)


def _make_user(
    user_id: str = "u1",
    spice: tuple[int, int, int] = (50, 50, 50),
    dislikes: tuple[str, ...] = (),
    **overrides,
) -> User:
    record = {
        "id": user_id,
        "username": f"user_{user_id}",
        "email": f"{user_id}@example.com",
        "displayName": f"User {user_id}",
        "preferences": {
            "spiceParameters": dict(zip(("spiciness", "stimulation", "aroma"), spice)),
            "favoriteShops": [],
            "dislikes": list(dislikes),
        },
        "createdAt": "2024-01-01T00:00:00Z",
        "isPublic": True,
    }
    record.update(overrides)
    return User.model_validate(record)


@pytest.fixture
def make_shop():
    return _make_shop


@pytest.fixture
def make_user():
    return _make_user


@pytest.fixture
def sample_shops() -> list[Shop]:
    return [Shop.model_validate(r) for r in SHOP_RECORDS]


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    (tmp_path / "shops.json").write_text(json.dumps(SHOP_RECORDS, ensure_ascii=False), encoding="utf-8")
    (tmp_path / "users.json").write_text(json.dumps(USER_RECORDS, ensure_ascii=False), encoding="utf-8")
    return tmp_path


@pytest.fixture
def store(data_dir: Path) -> JsonDataStore:
    return JsonDataStore(StoreConfig(data_dir=data_dir))


@pytest.fixture
def client(store: JsonDataStore):
    clear_events()
    app.dependency_overrides[get_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.pop(get_store, None)
        clear_events()
