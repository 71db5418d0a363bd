from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from eschool_repository.database.base import Base
from eschool_repository.domain.entities import Review, new_id


class ReviewRecord(Base):
    """Row schema for the `review` relation."""
    __tablename__ = "review"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    user_id: Mapped[str] = mapped_column(ForeignKey("user.id"), nullable=False, index=True)
    course_id: Mapped[str] = mapped_column(ForeignKey("course.id"), nullable=False, index=True)
    text: Mapped[str] = mapped_column(Text, nullable=False)

    @classmethod
    def from_domain(cls, review: Review) -> "ReviewRecord":
        return cls(
            id=review.id or new_id(),
            user_id=review.user_id,
            course_id=review.course_id,
            text=review.text,
        )

    def to_domain(self) -> Review:
        return Review(
            id=self.id,
            user_id=self.user_id,
            course_id=self.course_id,
            text=self.text,
        )
