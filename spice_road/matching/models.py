from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SPICE_MIN = 0
SPICE_MAX = 100
NEUTRAL_SPICE_VALUE = 50


class CamelModel(BaseModel):
    """Base model that reads and writes camelCase JSON keys."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SpiceParameters(CamelModel):
    # Axes missing from stored records fall back to the neutral midpoint.
    spiciness: int = NEUTRAL_SPICE_VALUE
    stimulation: int = NEUTRAL_SPICE_VALUE
    aroma: int = NEUTRAL_SPICE_VALUE


class Shop(CamelModel):
    id: str = Field(..., min_length=1)
    name: str
    address: str
    latitude: float = Field(..., ge=-90.0, le=90.0)
    longitude: float = Field(..., ge=-180.0, le=180.0)
    spice_parameters: SpiceParameters = Field(default_factory=SpiceParameters)
    rating: float = 0.0
    description: str | None = None
    region: str | None = Field(default=None, description="Municipality, e.g. 奈良市")


class ScoredShop(Shop):
    match_score: int = Field(..., ge=SPICE_MIN, le=SPICE_MAX)
