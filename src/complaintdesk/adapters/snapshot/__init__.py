"""Public interface for the snapshot file adapter."""

from __future__ import annotations

from .reader import JsonSnapshotSource
from .schema import SnapshotComplaint

__all__ = ["JsonSnapshotSource", "SnapshotComplaint"]
