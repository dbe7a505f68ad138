"""
Fill in missing shop regions from their addresses.

Usage:
    python -m spice_road.data_ingestion.regions
"""
from __future__ import annotations

import json
import logging
from pathlib import Path

from ..store.json_store import write_records
from .config import DEFAULT_INGESTION_CONFIG, IngestionConfig

logger = logging.getLogger(__name__)

# First match wins
KNOWN_REGIONS: list[str] = [
    "奈良市",
    "生駒市",
    "橿原市",
    "大和郡山市",
    "天理市",
    "桜井市",
    "大和高田市",
    "五條市",
    "生駒郡",
    "北葛城郡",
    "磯城郡",
]


def extract_region(address: str | None, fallback: str = DEFAULT_INGESTION_CONFIG.fallback_region) -> str:
    if not address:
        return fallback
    for region in KNOWN_REGIONS:
        if region in address:
            return region
    return fallback


def backfill_regions(config: IngestionConfig = DEFAULT_INGESTION_CONFIG) -> tuple[Path, int]:
    """
    Add a region to every shop that lacks one.

    Existing regions are left untouched. Returns the path written and the
    number of shops updated.
    """
    path = config.shops_path
    with path.open(encoding="utf-8") as fh:
        shops = json.load(fh)

    updated = 0
    for shop in shops:
        if not shop.get("region"):
            shop["region"] = extract_region(shop.get("address"), config.fallback_region)
            updated += 1

    if not write_records(path, shops):
        raise OSError(f"Could not write {path}")

    logger.info("Backfilled %d region(s) in %s", updated, path)
    return path, updated


if __name__ == "__main__":
    out, count = backfill_regions()
    print(f"Region data added to {count} shop(s): {out}")
