"""Spot domain entities served by the cache."""
