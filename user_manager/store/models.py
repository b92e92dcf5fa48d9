"""Data models for the store module."""

from dataclasses import dataclass
from typing import Any, Mapping, Optional

__all__ = ["UserRecord", "USER_FIELDS", "as_text", "sample_users"]

# Editable text fields, in display order
USER_FIELDS = ("name", "email", "phone", "city")


@dataclass
class UserRecord:
    """
    One managed user entry.

    Fields
    ──────
    id     — store-assigned integer, unique within the store
             (None only for hand-edited imports that omit it)
    name   — free text
    email  — free text; no format validation in the core
    phone  — free text; searched verbatim, not case-folded
    city   — free text
    """
    id:    Optional[int]
    name:  str = ""
    email: str = ""
    phone: str = ""
    city:  str = ""

    def to_dict(self) -> dict:
        return {
            "id":    self.id,
            "name":  self.name,
            "email": self.email,
            "phone": self.phone,
            "city":  self.city,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "UserRecord":
        """Build a record from a JSON object; missing text fields become ''."""
        return cls(
            id=data.get("id"),
            name=as_text(data.get("name")),
            email=as_text(data.get("email")),
            phone=as_text(data.get("phone")),
            city=as_text(data.get("city")),
        )

    def __str__(self) -> str:
        return f"UserRecord(id={self.id}, name={self.name!r}, email={self.email!r})"


def as_text(value: Any) -> str:
    """Coerce a JSON value to field text; only None becomes ''."""
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def sample_users() -> list[UserRecord]:
    """Demonstration data used when storage has never been written."""
    return [
        UserRecord(
            id=1,
            name="John Doe",
            email="john.doe@example.com",
            phone="+1 (555) 123-4567",
            city="New York",
        ),
        UserRecord(
            id=2,
            name="Jane Smith",
            email="jane.smith@example.com",
            phone="+1 (555) 987-6543",
            city="Los Angeles",
        ),
        UserRecord(
            id=3,
            name="Mike Johnson",
            email="mike.johnson@example.com",
            phone="+1 (555) 456-7890",
            city="Chicago",
        ),
    ]
