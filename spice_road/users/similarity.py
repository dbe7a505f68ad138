from __future__ import annotations

from ..matching.scoring import compute_match_score
from .models import PublicUser, SimilarUser, User


def rank_similar_users(user: User, candidates: list[User], limit: int | None = None) -> list[SimilarUser]:
    """Rank other public users by how closely their spice preferences match *user*'s.

    The user themself and private profiles are left out. Equal similarities
    keep the order of *candidates*.
    """
    vector = user.preferences.spice_parameters
    scored = [
        SimilarUser(
            **PublicUser.from_user(other).model_dump(),
            similarity=compute_match_score(vector, other.preferences.spice_parameters),
        )
        for other in candidates
        if other.id != user.id and other.is_public
    ]
    scored.sort(key=lambda s: s.similarity, reverse=True)
    if limit is not None:
        scored = scored[: max(limit, 0)]
    return scored
