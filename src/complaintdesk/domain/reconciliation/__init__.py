"""Reconciliation of complaint records from the store and the ingestion snapshot.

Flow for read access:
1) each source yields raw records tagged with where they came from
2) ``normalize`` maps every raw record onto ``CanonicalComplaint``
3) ``merge`` keeps one entry per id, store entries winning over snapshot ones
"""

from __future__ import annotations

from .merge import merge
from .normalize import normalize, slugify
from .views import build_merged_view, build_store_report

__all__ = [
    "build_merged_view",
    "build_store_report",
    "merge",
    "normalize",
    "slugify",
]
