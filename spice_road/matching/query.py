"""
Shop query pipeline.

Stages run in a fixed order, each narrowing or annotating the output of the
previous one:

1. free-text search over name, address and description
2. region membership
3. minimum rating, then distance from a point
4. ranking by match score for a requesting user (dislikes dropped)
5. limit

Without a requesting user the shops keep their input order and carry no
match score. Ties in match score keep their input order as well.
"""
from __future__ import annotations

from dataclasses import dataclass

import pandas as pd

from ..errors import InvalidInputError
from ..users.models import User
from .geo import haversine_km, is_valid_coordinate
from .models import ScoredShop, Shop
from .scoring import compute_match_score

_SEARCH_COLUMNS = ("name_lower", "address_lower", "description_lower")


@dataclass(frozen=True)
class GeoFilter:
    latitude: float
    longitude: float
    radius_km: float

    def __post_init__(self) -> None:
        if not is_valid_coordinate(self.latitude, self.longitude):
            raise InvalidInputError(
                f"Invalid coordinates: lat={self.latitude}, lng={self.longitude}"
            )
        if not self.radius_km >= 0:
            raise InvalidInputError("radius_km must be non-negative")


@dataclass(frozen=True)
class QueryCriteria:
    search_term: str | None = None
    regions: frozenset[str] | None = None
    min_rating: float | None = None
    near: GeoFilter | None = None
    requesting_user: User | None = None
    # Only consulted in ranking mode
    exclude_disliked: bool = True
    limit: int | None = None


def _shops_frame(shops: list[Shop]) -> pd.DataFrame:
    """Build a frame indexed by each shop's position in the input list."""
    return pd.DataFrame(
        {
            "id": [s.id for s in shops],
            "name_lower": [s.name.lower() for s in shops],
            "address_lower": [s.address.lower() for s in shops],
            "description_lower": [(s.description or "").lower() for s in shops],
            "region": [s.region for s in shops],
            "rating": [float(s.rating) for s in shops],
            "latitude": [float(s.latitude) for s in shops],
            "longitude": [float(s.longitude) for s in shops],
        },
        index=pd.RangeIndex(len(shops)),
    )


def _filter(frame: pd.DataFrame, criteria: QueryCriteria) -> pd.DataFrame:
    mask = pd.Series(True, index=frame.index)

    term = (criteria.search_term or "").lower()
    if term.strip():
        term_mask = pd.Series(False, index=frame.index)
        for column in _SEARCH_COLUMNS:
            term_mask |= frame[column].str.contains(term, regex=False, na=False)
        mask &= term_mask

    if criteria.regions:
        mask &= frame["region"].isin(list(criteria.regions))

    if criteria.min_rating is not None:
        mask &= frame["rating"] >= criteria.min_rating

    if criteria.near is not None:
        distances = haversine_km(
            criteria.near.latitude,
            criteria.near.longitude,
            frame["latitude"].to_numpy(),
            frame["longitude"].to_numpy(),
        )
        mask &= pd.Series(distances <= criteria.near.radius_km, index=frame.index)

    return frame.loc[mask]


def _rank(frame: pd.DataFrame, shops: list[Shop], user: User, exclude_disliked: bool) -> pd.DataFrame:
    user_vector = user.preferences.spice_parameters
    frame = frame.copy()
    frame["match_score"] = [
        compute_match_score(user_vector, shops[pos].spice_parameters) for pos in frame.index
    ]

    if exclude_disliked and user.preferences.dislikes:
        frame = frame.loc[~frame["id"].isin(list(user.preferences.dislikes))]

    # stable sort keeps input order among equal scores
    return frame.sort_values("match_score", ascending=False, kind="stable")


def query_shops(all_shops: list[Shop], criteria: QueryCriteria) -> list[Shop]:
    """Filter, optionally rank, and truncate *all_shops* according to *criteria*.

    Returns ``ScoredShop`` instances when ``criteria.requesting_user`` is set,
    plain ``Shop`` instances otherwise. The input list is never modified.
    """
    if not all_shops:
        return []

    frame = _filter(_shops_frame(all_shops), criteria)

    user = criteria.requesting_user
    if user is not None:
        frame = _rank(frame, all_shops, user, criteria.exclude_disliked)

    if criteria.limit is not None:
        frame = frame.head(max(criteria.limit, 0))

    if user is None:
        return [all_shops[pos] for pos in frame.index]

    return [
        ScoredShop(**all_shops[pos].model_dump(), match_score=int(score))
        for pos, score in zip(frame.index, frame["match_score"])
    ]
