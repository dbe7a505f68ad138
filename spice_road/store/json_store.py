from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from ..matching.models import Shop
from ..users.models import User
from .config import DEFAULT_STORE_CONFIG, StoreConfig

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


def _load_array(path: Path) -> list[Any]:
    """Load a JSON array from *path*. Raises ``OSError`` or ``ValueError``."""
    with path.open(encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, list):
        raise ValueError(f"Expected a JSON array in {path}, got {type(data).__name__}")
    return data


def _read_records(path: Path) -> list[dict[str, Any]]:
    try:
        return _load_array(path)
    except FileNotFoundError:
        logger.error("Data file not found: %s", path)
        return []
    except (OSError, ValueError):
        logger.error("Could not read %s", path, exc_info=True)
        return []


def _parse(records: list[dict[str, Any]], model: type[M], path: Path) -> list[M]:
    parsed: list[M] = []
    for i, record in enumerate(records):
        try:
            parsed.append(model.model_validate(record))
        except ValidationError as exc:
            logger.error(
                "Skipping malformed %s record #%d in %s: %s",
                model.__name__, i, path, exc.errors()[0].get("msg"),
            )
    return parsed


def write_records(path: Path, payload: list[Any]) -> bool:
    """Atomically replace *path* with *payload* as a JSON array.

    Writes to a temp file in the same directory and swaps it in with
    ``os.replace``. Returns ``False`` (and logs) on failure.
    """
    tmp_name = None
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.stem}-", suffix=".json", dir=path.parent)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(payload, fh, ensure_ascii=False, indent=2)
        os.replace(tmp_name, path)
        return True
    except OSError:
        logger.error("Error saving data to %s", path, exc_info=True)
        if tmp_name and os.path.exists(tmp_name):
            os.unlink(tmp_name)
        return False


class JsonDataStore:
    """Shops and users kept as whole JSON arrays on disk.

    Every read goes back to the file, so edits made out-of-band show up on
    the next request.
    """

    def __init__(self, config: StoreConfig = DEFAULT_STORE_CONFIG) -> None:
        self.config = config

    def list_shops(self) -> list[Shop]:
        path = self.config.shops_path
        return _parse(_read_records(path), Shop, path)

    def list_users(self) -> list[User]:
        path = self.config.users_path
        return _parse(_read_records(path), User, path)

    def find_shop(self, shop_id: str) -> Shop | None:
        return next((s for s in self.list_shops() if s.id == shop_id), None)

    def find_user(self, user_id: str) -> User | None:
        return next((u for u in self.list_users() if u.id == user_id), None)

    def save_users(self, users: list[User]) -> bool:
        """Rewrite the users file. Returns ``False`` (and logs) on failure."""
        return write_records(
            self.config.users_path,
            [u.model_dump(mode="json", by_alias=True) for u in users],
        )

    def add_user(self, user: User) -> bool:
        """Append *user* to the users file, keeping every existing record as-is."""
        path = self.config.users_path
        records: list[Any] = []
        if path.exists():
            try:
                records = _load_array(path)
            except (OSError, ValueError):
                logger.error("Not adding user %s: %s is unreadable", user.id, path, exc_info=True)
                return False
        records.append(user.model_dump(mode="json", by_alias=True))
        return write_records(path, records)


_store: JsonDataStore | None = None


def get_store() -> JsonDataStore:
    """Return the process-wide store, creating it on first call."""
    global _store
    if _store is None:
        _store = JsonDataStore()
    return _store
