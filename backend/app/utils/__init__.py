"""Shared helpers: spherical geometry and locale strings."""
