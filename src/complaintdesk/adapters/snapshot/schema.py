"""Pydantic models describing entries of the ingestion snapshot file."""

from __future__ import annotations

import math
from collections.abc import Mapping
from typing import cast

from pydantic import BaseModel, ConfigDict, Field, field_validator


def _object_or_empty(value: object) -> object:
    if isinstance(value, Mapping):
        return dict(cast(Mapping[str, object], value))
    return {}


class SnapshotComplaint(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str | None = None
    category: str | None = None
    student_view: dict[str, object] = Field(default_factory=dict, alias="studentView")
    admin_view: dict[str, object] = Field(default_factory=dict, alias="adminView")

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> str | None:
        # Unusable ids count as absent so the entry still gets a content-derived id.
        if isinstance(value, str):
            return value
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return str(value)
        if isinstance(value, float) and math.isfinite(value):
            return str(int(value)) if value.is_integer() else str(value)
        return None

    @field_validator("category", mode="before")
    @classmethod
    def _coerce_category(cls, value: object) -> object:
        return value if isinstance(value, str) else None

    _coerce_student_view = field_validator("student_view", mode="before")(_object_or_empty)
    _coerce_admin_view = field_validator("admin_view", mode="before")(_object_or_empty)
