"""
Certificate repository.

A user holds at most one certificate per course; a second one for the same
(course, user) pair is rejected with DuplicateError. `created_at` is assigned by
the store when the certificate is created without one.
"""

from eschool_repository.domain.entities import ID, Certificate
from eschool_repository.models.certificate import CertificateRecord
from .base_repository import BaseRepository, SessionSource
from .statements import build_select

_certificate_table = CertificateRecord.__table__

SELECT_CERTIFICATES_BY_USER = build_select(_certificate_table, "user_id")
SELECT_CERTIFICATE_BY_COURSE_AND_USER = build_select(_certificate_table, "course_id", "user_id")


class CertificateRepository(BaseRepository[CertificateRecord, Certificate]):
    """Repository for Certificate entity operations."""

    def __init__(self, db: SessionSource):
        super().__init__(CertificateRecord, db)

    async def find_user_certificates(self, user_id: ID) -> list[Certificate]:
        """Certificates earned by `user_id`; empty list when there are none."""
        records = await self._fetch_all(SELECT_CERTIFICATES_BY_USER, {"user_id": user_id})
        return self._to_entities(records)

    async def find_user_course_certificate(self, course_id: ID, user_id: ID) -> Certificate:
        """
        The certificate `user_id` earned for `course_id`.

        Raises:
            NotFoundError: If the user has no certificate for this course.
        """
        record = await self._fetch_one(
            SELECT_CERTIFICATE_BY_COURSE_AND_USER, {"course_id": course_id, "user_id": user_id}
        )
        return record.to_domain()
