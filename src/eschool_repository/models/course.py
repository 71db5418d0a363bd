from sqlalchemy import Enum, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from eschool_repository.database.base import Base
from eschool_repository.domain.entities import Course, CourseStatus, new_id


class CourseRecord(Base):
    """Row schema for the `course` relation."""
    __tablename__ = "course"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    school_id: Mapped[str] = mapped_column(ForeignKey("school.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    level: Mapped[int] = mapped_column(Integer, nullable=False)
    price: Mapped[int] = mapped_column(Integer, nullable=False)
    language: Mapped[str] = mapped_column(String(64), nullable=False)
    # Native ENUM on PostgreSQL, CHECK constraint elsewhere. Unknown strings are passed
    # through to the store so that the violation is reported by the database itself.
    status: Mapped[CourseStatus] = mapped_column(
        Enum(
            CourseStatus,
            name="course_status_enum",
            values_callable=lambda enum: [member.value for member in enum],
            create_constraint=True,
            validate_strings=False,
        ),
        nullable=False,
    )

    @classmethod
    def from_domain(cls, course: Course) -> "CourseRecord":
        return cls(
            id=course.id or new_id(),
            school_id=course.school_id,
            name=course.name,
            level=course.level,
            price=course.price,
            language=course.language,
            status=course.status,
        )

    def to_domain(self) -> Course:
        return Course(
            id=self.id,
            school_id=self.school_id,
            name=self.name,
            level=self.level,
            price=self.price,
            language=self.language,
            status=CourseStatus(self.status),
        )
