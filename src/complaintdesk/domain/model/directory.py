"""Reference entities complaints point at: departments and submitting students."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(eq=False, kw_only=True)
class Department:
    name: str
    dept_id: int | None = None


@dataclass(eq=False, kw_only=True)
class Student:
    roll_number: str
    name: str | None = None
    email: str | None = None
    student_id: int | None = None
