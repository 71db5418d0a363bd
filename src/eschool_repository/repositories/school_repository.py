"""
School repository.

Besides the uniform CRUD contract, covers a school's courses and the
school <-> teacher membership relation (`school_teacher`).
"""

import logging

from sqlalchemy import text

from eschool_repository.domain.entities import ID, Course, School, User
from eschool_repository.exceptions.base import Operation
from eschool_repository.models.course import CourseRecord
from eschool_repository.models.school import SchoolRecord, school_teacher_table
from eschool_repository.models.user import UserRecord
from .base_repository import BaseRepository, SessionSource
from .statements import build_select, column_list, quote

logger = logging.getLogger(__name__)

_school_table = SchoolRecord.__table__
_user_table = UserRecord.__table__
_membership = quote(school_teacher_table.name)

SELECT_SCHOOLS_BY_OWNER = build_select(_school_table, "owner_id")
SELECT_COURSES_BY_SCHOOL = build_select(CourseRecord.__table__, "school_id")

SELECT_SCHOOL_TEACHERS = text(
    f"SELECT {column_list(_user_table, 'u')} "
    f"FROM {quote(_user_table.name)} AS \"u\" "
    f"JOIN {_membership} AS \"st\" ON \"st\".\"teacher_id\" = \"u\".\"id\" "
    f"WHERE \"st\".\"school_id\" = :school_id"
).columns(*_user_table.columns)

SELECT_SCHOOL_TEACHER = text(
    f"SELECT 1 FROM {_membership} "
    f"WHERE \"school_id\" = :school_id AND \"teacher_id\" = :teacher_id"
)

INSERT_SCHOOL_TEACHER = text(
    f"INSERT INTO {_membership} (\"school_id\", \"teacher_id\") VALUES (:school_id, :teacher_id)"
)


class SchoolRepository(BaseRepository[SchoolRecord, School]):
    """Repository for School entity operations."""

    def __init__(self, db: SessionSource):
        super().__init__(SchoolRecord, db)

    # =================================================================================================================
    # Read Operations (Multiple Entities)
    # =================================================================================================================

    async def find_user_schools(self, owner_id: ID) -> list[School]:
        """Schools owned by `owner_id`; empty list when there are none."""
        records = await self._fetch_all(SELECT_SCHOOLS_BY_OWNER, {"owner_id": owner_id})
        return self._to_entities(records)

    async def find_school_courses(self, school_id: ID) -> list[Course]:
        """Courses offered by `school_id`; empty list when there are none."""
        records = await self._fetch_all(SELECT_COURSES_BY_SCHOOL, {"school_id": school_id}, record=CourseRecord)
        return self._to_entities(records)

    async def find_school_teachers(self, school_id: ID) -> list[User]:
        """Users registered as teachers of `school_id`; empty list when there are none."""
        records = await self._fetch_all(SELECT_SCHOOL_TEACHERS, {"school_id": school_id}, record=UserRecord)
        return self._to_entities(records)

    # =================================================================================================================
    # Teacher membership
    # =================================================================================================================

    async def is_school_teacher(self, school_id: ID, teacher_id: ID) -> bool:
        """True when `teacher_id` is registered as a teacher of `school_id`."""
        return await self._exists(SELECT_SCHOOL_TEACHER, {"school_id": school_id, "teacher_id": teacher_id})

    async def add_school_teacher(self, school_id: ID, teacher_id: ID) -> None:
        """
        Register `teacher_id` as a teacher of `school_id`.

        Raises:
            DuplicateError: If the teacher is already registered for this school.
            PersistenceFailedError: If the school or the user does not exist, or the write failed.
        """
        await self._execute(
            Operation.INSERT,
            INSERT_SCHOOL_TEACHER,
            {"school_id": school_id, "teacher_id": teacher_id},
            entity="SchoolTeacher",
        )
        logger.info(
            "repo.school.teacher_added",
            extra={"entity": self.entity_name, "id": school_id, "teacher_id": teacher_id},
        )
