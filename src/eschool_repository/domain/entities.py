"""
Domain entities handled by the persistence layer.

These are plain, immutable value objects. They carry business fields only and
know nothing about tables, columns or sessions; the mapping to storage lives in
`eschool_repository.models`.
"""

import uuid
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

# Opaque identifier. Callers must not assume any particular encoding.
ID = str


def new_id() -> ID:
    """Return a fresh, globally unique identifier."""
    return str(uuid.uuid4())


class CourseStatus(str, Enum):
    DRAFT = "draft"
    READY = "ready"
    PUBLISHED = "published"


class CertificateGrade(str, Enum):
    BRONZE = "bronze"
    SILVER = "silver"
    GOLD = "gold"


@dataclass(frozen=True)
class User:
    name: str
    surname: str
    email: str
    password: str
    phone: str | None = None
    city: str | None = None
    avatar_url: str | None = None
    id: ID = ""


@dataclass(frozen=True)
class UserInfo:
    """Public projection of a user (what other users may see)."""
    name: str
    surname: str


@dataclass(frozen=True)
class School:
    owner_id: ID
    name: str
    description: str
    id: ID = ""


@dataclass(frozen=True)
class Course:
    school_id: ID
    name: str
    level: int
    price: int
    language: str
    status: CourseStatus = CourseStatus.DRAFT
    id: ID = ""


@dataclass(frozen=True)
class Review:
    user_id: ID
    course_id: ID
    text: str
    id: ID = ""


@dataclass(frozen=True)
class Certificate:
    user_id: ID
    course_id: ID
    name: str
    score: int
    grade: CertificateGrade
    # Assigned by the store when left empty on create.
    created_at: datetime | None = None
    id: ID = ""
