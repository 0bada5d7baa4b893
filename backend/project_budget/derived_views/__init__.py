"""Derived views: read-only views for UI consumption.

UI must ONLY read from these views, never from ORM rows directly.
Monetary values are strings; dates are ISO 8601.
"""
