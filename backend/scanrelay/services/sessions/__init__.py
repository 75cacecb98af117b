"""Scan session domain services: scoring, storage, aggregation and lifecycle.

Socket handlers and HTTP routes import from here, keeping transport concerns
separated from the session rules themselves.
"""
