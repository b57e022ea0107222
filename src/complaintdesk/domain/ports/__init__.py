"""Domain ports (interfaces implemented by adapters)."""

from __future__ import annotations

from .persistence import ComplaintRepository, DepartmentRepository, Repository, StudentRepository
from .sources import ComplaintSource
from .unit_of_work import ComplaintRepositories, ComplaintUnitOfWork

__all__ = [
    "ComplaintRepositories",
    "ComplaintRepository",
    "ComplaintSource",
    "ComplaintUnitOfWork",
    "DepartmentRepository",
    "Repository",
    "StudentRepository",
]
