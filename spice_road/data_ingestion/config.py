from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..store.config import DEFAULT_STORE_CONFIG


@dataclass(frozen=True)
class IngestionConfig:
    """
    Configuration for the region backfill.
    """

    shops_path: Path = DEFAULT_STORE_CONFIG.shops_path
    fallback_region: str = "その他"


DEFAULT_INGESTION_CONFIG = IngestionConfig()
