"""
Repository layer initialization module.

This module exports all repository classes for easy importing throughout the application.
Each repository is built over an async_sessionmaker (a session per statement) or a
caller-owned AsyncSession (its unit of work), and returns domain entities.

Usage:
    from eschool_repository.repositories import UserRepository, SchoolRepository
"""

from .base_repository import BaseRepository, SessionSource
from .user_repository import UserRepository
from .school_repository import SchoolRepository
from .course_repository import CourseRepository
from .review_repository import ReviewRepository
from .certificate_repository import CertificateRepository

__all__ = [
    "BaseRepository",
    "SessionSource",
    "UserRepository",
    "SchoolRepository",
    "CourseRepository",
    "ReviewRepository",
    "CertificateRepository",
]
