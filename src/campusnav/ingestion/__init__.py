"""Ingestion layer.

Defensive parsing helpers shared by the entity and routing adapters and
by search input handling.
"""

__all__: list[str] = []
