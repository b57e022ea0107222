"""Map source-native complaint records onto the canonical representation.

Every field of a view is resolved in a fixed order:

1) the value present in the view being populated
2) the mirrored value from the other view
3) a hard-coded default

Nothing in this module raises on malformed input; unusable values count as
absent and fall through to the next step.
"""

from __future__ import annotations

import hashlib
import json
import math
import re
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Final

from complaintdesk.domain.model.complaint import (
    DEFAULT_CATEGORY,
    DEFAULT_INSTITUTE,
    DEFAULT_SEVERITY,
    DEFAULT_STATUS,
    MAX_SEVERITY,
    MIN_SEVERITY,
    CanonicalComplaint,
    ComplaintView,
    RawSnapshotRecord,
    RawStoreRecord,
)

if TYPE_CHECKING:
    from complaintdesk.domain.model.complaint import RawComplaintRecord

_SLUG_SEPARATORS: Final = re.compile(r"[\s&]+")
SNAPSHOT_ID_PREFIX: Final[str] = "snap-"


@dataclass(frozen=True, slots=True, kw_only=True)
class PartialView:
    """View fields as found in a source; ``None`` marks an absent value."""

    complaint: str | None = None
    departments: tuple[str, ...] | None = None
    contacts: tuple[object, ...] | None = None
    suggestions: tuple[object, ...] | None = None
    severity: int | None = None
    institute: str | None = None
    timestamp: str | None = None
    status: str | None = None


EMPTY_VIEW: Final = PartialView()


def normalize(
    raw: RawComplaintRecord,
    *,
    default_institute: str = DEFAULT_INSTITUTE,
    now: datetime | None = None,
) -> CanonicalComplaint:
    """Return the canonical form of a store row or snapshot object."""

    if isinstance(raw, RawStoreRecord):
        return _normalize_store_record(raw, default_institute=default_institute, now=now)
    return _normalize_snapshot_record(raw, default_institute=default_institute, now=now)


def _normalize_store_record(
    raw: RawStoreRecord, *, default_institute: str, now: datetime | None
) -> CanonicalComplaint:
    own = PartialView(
        complaint=clean_text(raw.description),
        departments=_names(raw.department_name),
        contacts=_items(raw.contacts),
        suggestions=_items(raw.suggestions),
        severity=_severity(raw.severity),
        institute=clean_text(raw.institute),
        timestamp=_timestamp(raw.created_at),
        status=clean_text(raw.status),
    )
    student_view, admin_view = resolve_views(
        own, EMPTY_VIEW, default_institute=default_institute, now=now
    )
    return CanonicalComplaint(
        id=raw.complaint_id,
        category=derive_category(None, student_view, admin_view),
        student_view=student_view,
        admin_view=admin_view,
        source=raw.source,
    )


def _normalize_snapshot_record(
    raw: RawSnapshotRecord, *, default_institute: str, now: datetime | None
) -> CanonicalComplaint:
    student_view, admin_view = resolve_views(
        partial_view(raw.student_view),
        partial_view(raw.admin_view),
        default_institute=default_institute,
        now=now,
    )
    return CanonicalComplaint(
        id=clean_text(raw.id) or snapshot_fallback_id(raw),
        category=derive_category(raw.category, student_view, admin_view),
        student_view=student_view,
        admin_view=admin_view,
        source=raw.source,
    )


def partial_view(payload: Mapping[str, object] | None) -> PartialView:
    """Extract usable view fields from a loosely typed mapping."""

    if not payload:
        return EMPTY_VIEW
    complaint = payload.get("complaint")
    if complaint is None:
        complaint = payload.get("description")
    return PartialView(
        complaint=clean_text(complaint),
        departments=_names(payload.get("departments")),
        contacts=_items(payload.get("contacts")),
        suggestions=_items(payload.get("suggestions")),
        severity=_severity(payload.get("severity")),
        institute=clean_text(payload.get("institute")),
        timestamp=_timestamp(payload.get("timestamp")),
        status=clean_text(payload.get("status")),
    )


def resolve_views(
    student: PartialView,
    admin: PartialView,
    *,
    default_institute: str = DEFAULT_INSTITUTE,
    now: datetime | None = None,
) -> tuple[ComplaintView, ComplaintView]:
    """Resolve both views, each mirroring the other before falling back to defaults."""

    # One timestamp per record so both views agree when neither source has one.
    fallback_timestamp = (now or datetime.now(UTC)).isoformat()
    return (
        _resolve_view(student, admin, default_institute, fallback_timestamp),
        _resolve_view(admin, student, default_institute, fallback_timestamp),
    )


def _resolve_view(
    own: PartialView, mirror: PartialView, default_institute: str, fallback_timestamp: str
) -> ComplaintView:
    return ComplaintView(
        complaint=_first(own.complaint, mirror.complaint, ""),
        departments=_first(own.departments, mirror.departments, ()),
        contacts=_first(own.contacts, mirror.contacts, ()),
        suggestions=_first(own.suggestions, mirror.suggestions, ()),
        severity=_first(own.severity, mirror.severity, DEFAULT_SEVERITY),
        institute=_first(own.institute, mirror.institute, default_institute),
        timestamp=_first(own.timestamp, mirror.timestamp, fallback_timestamp),
        status=_first(own.status, mirror.status, DEFAULT_STATUS),
    )


def _first[T](own: T | None, mirrored: T | None, default: T) -> T:
    if own is not None:
        return own
    if mirrored is not None:
        return mirrored
    return default


def derive_category(
    explicit: object, student_view: ComplaintView, admin_view: ComplaintView
) -> str:
    """Explicit category, else the slug of the first department name, else ``"other"``."""

    explicit_slug = slugify(explicit) if isinstance(explicit, str) else ""
    if explicit_slug:
        return explicit_slug
    departments = admin_view.departments or student_view.departments
    for name in departments:
        slug = slugify(name)
        if slug:
            return slug
    return DEFAULT_CATEGORY


def slugify(name: str) -> str:
    """Lower-case ``name`` and collapse runs of whitespace and ``&`` into ``_``."""

    return _SLUG_SEPARATORS.sub("_", name.strip().lower()).strip("_")


def snapshot_fallback_id(raw: RawSnapshotRecord) -> str:
    """Deterministic id for snapshot objects that arrive without one."""

    document = {
        "category": raw.category,
        "student_view": dict(raw.student_view),
        "admin_view": dict(raw.admin_view),
    }
    encoded = json.dumps(document, sort_keys=True, default=str, separators=(",", ":"))
    digest = hashlib.sha256(encoded.encode("utf-8")).hexdigest()
    return f"{SNAPSHOT_ID_PREFIX}{digest[:16]}"


# Field coercion ---------------------------------------------------------------


def clean_text(value: object) -> str | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | float):
        return str(value)
    if isinstance(value, str):
        stripped = value.strip()
        return stripped or None
    return None


def _names(value: object) -> tuple[str, ...] | None:
    if isinstance(value, str):
        name = value.strip()
        return (name,) if name else None
    if isinstance(value, Sequence) and not isinstance(value, bytes | bytearray):
        names = tuple(text for item in value if (text := clean_text(item)) is not None)
        return names or None
    return None


def _items(value: object) -> tuple[object, ...] | None:
    if value is None:
        return None
    if isinstance(value, str):
        stripped = value.strip()
        return (stripped,) if stripped else None
    if isinstance(value, Sequence) and not isinstance(value, bytes | bytearray):
        items = tuple(item for item in value if item is not None and item != "")
        return items or None
    if isinstance(value, Mapping):
        return (dict(value),) if value else None
    return (value,)


def _severity(value: object) -> int | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int):
        parsed = value
    else:
        number = _finite_float(value)
        if number is None:
            return None
        parsed = round(number)
    return max(MIN_SEVERITY, min(MAX_SEVERITY, parsed))


def _finite_float(value: object) -> float | None:
    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


def _timestamp(value: object) -> str | None:
    if isinstance(value, datetime):
        moment = value if value.tzinfo else value.replace(tzinfo=UTC)
        return moment.astimezone(UTC).isoformat()
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, int | float):
        seconds = value / 1000 if value > 1e11 else value
        try:
            return datetime.fromtimestamp(seconds, tz=UTC).isoformat()
        except (OverflowError, OSError, ValueError):
            return None
    if isinstance(value, str):
        stripped = value.strip()
        if not stripped:
            return None
        parsed = parse_timestamp(stripped)
        return parsed.isoformat() if parsed is not None else stripped
    return None


def parse_timestamp(value: str) -> datetime | None:
    """Parse an ISO-8601 string (``Z`` suffix allowed) into an aware UTC datetime."""

    normalized = value.strip()
    if normalized.endswith(("Z", "z")):
        normalized = normalized[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(normalized)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)
