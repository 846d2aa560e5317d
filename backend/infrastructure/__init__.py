"""
Infrastructure layer (adapters behind the application ports).

Concrete building blocks: the HTTP watchlist client, local durable stores,
the auth context, Postgres persistence and configuration.
"""

__all__ = [
    "config",
    "persistence",
    "watchlist",
]
