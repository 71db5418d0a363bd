from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from eschool_repository.database.base import Base
from eschool_repository.domain.entities import User, new_id


class UserRecord(Base):
    """
    Row schema for the `user` relation.

    Holds the same information as the `User` entity flattened to columns.
    `email` is unique, so creating two users with the same address is a duplicate.
    """
    __tablename__ = "user"

    id: Mapped[str] = mapped_column(String, primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    surname: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    # Stored as supplied; hashing is the caller's concern.
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    avatar_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)

    @classmethod
    def from_domain(cls, user: User) -> "UserRecord":
        return cls(
            id=user.id or new_id(),
            name=user.name,
            surname=user.surname,
            email=user.email,
            password=user.password,
            phone=user.phone,
            city=user.city,
            avatar_url=user.avatar_url,
        )

    def to_domain(self) -> User:
        return User(
            id=self.id,
            name=self.name,
            surname=self.surname,
            email=self.email,
            password=self.password,
            phone=self.phone,
            city=self.city,
            avatar_url=self.avatar_url,
        )
