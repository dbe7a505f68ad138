from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

_BUNDLED_DATA_DIR = Path(__file__).resolve().parent.parent / "data"


@dataclass(frozen=True)
class StoreConfig:
    data_dir: Path = Path(os.getenv("SPICE_ROAD_DATA_DIR", str(_BUNDLED_DATA_DIR)))
    shops_filename: str = "shops.json"
    users_filename: str = "users.json"

    @property
    def shops_path(self) -> Path:
        return self.data_dir / self.shops_filename

    @property
    def users_path(self) -> Path:
        return self.data_dir / self.users_filename


DEFAULT_STORE_CONFIG = StoreConfig()
