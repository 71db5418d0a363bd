from sqlalchemy import Column, ForeignKey, String, Table, Text
from sqlalchemy.orm import Mapped, mapped_column

from eschool_repository.database.base import Base
from eschool_repository.domain.entities import School, new_id


class SchoolRecord(Base):
    """Row schema for the `school` relation."""
    __tablename__ = "school"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    owner_id: Mapped[str] = mapped_column(ForeignKey("user.id"), nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)

    @classmethod
    def from_domain(cls, school: School) -> "SchoolRecord":
        return cls(
            id=school.id or new_id(),
            owner_id=school.owner_id,
            name=school.name,
            description=school.description,
        )

    def to_domain(self) -> School:
        return School(
            id=self.id,
            owner_id=self.owner_id,
            name=self.name,
            description=self.description,
        )


# Join relation: school <-> teacher membership. Existence-only, no identity of its own,
# so it has no record class and is written through a dedicated statement.
school_teacher_table = Table(
    "school_teacher",
    Base.metadata,
    Column("school_id", ForeignKey("school.id", ondelete="CASCADE"), primary_key=True),
    Column("teacher_id", ForeignKey("user.id", ondelete="CASCADE"), primary_key=True),
)
