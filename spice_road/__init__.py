"""Spice Road Nara: curry shop discovery API."""
