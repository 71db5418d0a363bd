"""
Review repository: reviews written by a user and reviews of a course.
"""

from eschool_repository.domain.entities import ID, Review
from eschool_repository.models.review import ReviewRecord
from .base_repository import BaseRepository, SessionSource
from .statements import build_select

_review_table = ReviewRecord.__table__

SELECT_REVIEWS_BY_USER = build_select(_review_table, "user_id")
SELECT_REVIEWS_BY_COURSE = build_select(_review_table, "course_id")


class ReviewRepository(BaseRepository[ReviewRecord, Review]):
    """Repository for Review entity operations."""

    def __init__(self, db: SessionSource):
        super().__init__(ReviewRecord, db)

    async def find_user_reviews(self, user_id: ID) -> list[Review]:
        """Reviews written by `user_id`; empty list when there are none."""
        records = await self._fetch_all(SELECT_REVIEWS_BY_USER, {"user_id": user_id})
        return self._to_entities(records)

    async def find_course_reviews(self, course_id: ID) -> list[Review]:
        """Reviews of `course_id`; empty list when there are none."""
        records = await self._fetch_all(SELECT_REVIEWS_BY_COURSE, {"course_id": course_id})
        return self._to_entities(records)
