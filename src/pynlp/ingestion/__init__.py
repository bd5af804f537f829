"""Ingestion layer.

Adapters that turn raw scan payloads handed over by the platform shell into
sets of typed observations.
"""

__all__: list[str] = []
