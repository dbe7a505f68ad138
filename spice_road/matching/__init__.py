"""
Shop matching core.

Responsibilities:
- Score a user's spice preferences against a shop's spice profile.
- Filter the shop list by search term, region, rating and distance.
- Rank shops by match score for a requesting user.
"""
