from datetime import datetime, timezone

from sqlalchemy import DateTime, Enum, ForeignKey, Integer, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.sql import func

from eschool_repository.database.base import Base
from eschool_repository.domain.entities import Certificate, CertificateGrade, new_id


def _as_utc(value: datetime | None) -> datetime | None:
    """
    Normalize a timestamp to an aware UTC datetime.

    Backends without time zone support (SQLite) hand back naive values; those are
    stored in UTC, so they are tagged rather than shifted.
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class CertificateRecord(Base):
    """
    Row schema for the `certificate` relation.

    A user holds at most one certificate per course, enforced by a unique
    constraint on (course_id, user_id). `created_at` is filled in by the store
    when the entity does not carry one.
    """
    __tablename__ = "certificate"
    __table_args__ = (UniqueConstraint("course_id", "user_id"),)

    id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("user.id"), nullable=False, index=True)
    course_id: Mapped[str] = mapped_column(ForeignKey("course.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    score: Mapped[int] = mapped_column(Integer, nullable=False)
    grade: Mapped[CertificateGrade] = mapped_column(
        Enum(
            CertificateGrade,
            name="certificate_grade_enum",
            values_callable=lambda enum: [member.value for member in enum],
            create_constraint=True,
            validate_strings=False,
        ),
        nullable=False,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )

    @classmethod
    def from_domain(cls, certificate: Certificate) -> "CertificateRecord":
        return cls(
            id=certificate.id or new_id(),
            user_id=certificate.user_id,
            course_id=certificate.course_id,
            name=certificate.name,
            score=certificate.score,
            grade=certificate.grade,
            created_at=_as_utc(certificate.created_at),
        )

    def to_domain(self) -> Certificate:
        return Certificate(
            id=self.id,
            user_id=self.user_id,
            course_id=self.course_id,
            name=self.name,
            score=self.score,
            grade=CertificateGrade(self.grade),
            created_at=_as_utc(self.created_at),
        )
