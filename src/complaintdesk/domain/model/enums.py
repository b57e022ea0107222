"""Domain enums (pure, dependency-light)."""

from __future__ import annotations

from enum import StrEnum


class SourceTag(StrEnum):
    """Where a complaint record was read from."""

    STORE = "store"
    SNAPSHOT = "snapshot"


class ItemStatus(StrEnum):
    SUCCESS = "success"
    FAILED = "failed"


class FailureReason(StrEnum):
    """Business-rule failures reported per batch item (never raised)."""

    DEPARTMENT_NOT_FOUND = "department not found"
    MISSING_DEPARTMENT = "missing department"
    MISSING_DESCRIPTION = "missing description"
