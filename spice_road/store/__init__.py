"""
Flat-file data store.

Responsibilities:
- Locate ``shops.json`` and ``users.json`` from configuration.
- Load and validate shop and user records, skipping malformed ones.
- Rewrite the users file atomically on registration.
"""
