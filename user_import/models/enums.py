from __future__ import annotations

from enum import Enum

"""Closed enumerations used by the user import pipeline.

Role and JobGrade mirror the values accepted by the users table. JobGrade
carries an explicit UNGRADED variant for a blank cell so that the commit
payload never has to fall back to a free-form string.
"""

__all__ = [
    "Role",
    "JobGrade",
    "ErrorKind",
]


class Role(Enum):
    """Application role assigned to an imported user."""
    ADMIN = "admin"
    MANAGER = "manager"
    VIEWER = "viewer"

    @classmethod
    def from_label(cls, label: str) -> Role | None:
        """Return the role for an already lower-cased label, or None."""
        for member in cls:
            if member.value == label:
                return member
        return None

    @classmethod
    def labels(cls) -> list[str]:
        return [m.value for m in cls]


class JobGrade(Enum):
    """Job grade labels. UNGRADED stands for an empty job_grade cell."""
    JG_1_1 = "1.1"
    JG_1_2 = "1.2"
    JG_2_1 = "2.1"
    JG_2_2 = "2.2"
    JG_3_1 = "3.1"
    JG_3_2 = "3.2"
    JG_5 = "5"
    UNGRADED = ""

    @classmethod
    def from_label(cls, label: str) -> JobGrade | None:
        """Resolve a trimmed label. Blank resolves to UNGRADED, unknown to None."""
        for member in cls:
            if member.value == label:
                return member
        return None

    @classmethod
    def labels(cls) -> list[str]:
        """Selectable grade labels (UNGRADED excluded)."""
        return [m.value for m in cls if m is not cls.UNGRADED]

    @property
    def payload_value(self) -> str | None:
        # UNGRADED is stored as NULL
        return None if self is JobGrade.UNGRADED else self.value


class ErrorKind(Enum):
    """Row-level error classification (UPPER_SNAKE for the error log)."""
    FIELD_REQUIRED = "FIELD_REQUIRED"
    FIELD_MALFORMED = "FIELD_MALFORMED"
    FIELD_NOT_FOUND = "FIELD_NOT_FOUND"
    FIELD_DUPLICATE = "FIELD_DUPLICATE"
