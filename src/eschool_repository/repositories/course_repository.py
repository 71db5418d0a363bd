"""
Course repository.

Courses only need the uniform CRUD contract; the courses of a school are listed
through `SchoolRepository.find_school_courses`.
"""

from eschool_repository.domain.entities import Course
from eschool_repository.models.course import CourseRecord
from .base_repository import BaseRepository, SessionSource


class CourseRepository(BaseRepository[CourseRecord, Course]):
    """Repository for Course entity operations."""

    def __init__(self, db: SessionSource):
        super().__init__(CourseRecord, db)
