"""Ports for reading complaint records from their backing stores."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterator

    from complaintdesk.domain.model import RawComplaintRecord


class ComplaintSource(Protocol):
    """Produce raw complaint records tagged with their source.

    Each call returns a fresh, lazy, finite iterator. Implementations never
    raise when their backing store is unavailable: they log the failure and
    yield nothing.
    """

    @property
    def name(self) -> str: ...

    def __call__(self) -> Iterator[RawComplaintRecord]: ...
