"""
Shop data maintenance.

Responsibilities:
- Derive each shop's region from its address.
- Rewrite shops.json with the missing regions filled in.
"""
