"""
Customer model - registered API users and their profile.
"""
import enum
from typing import Optional

from sqlalchemy import Integer, String, JSON, Enum as SQLEnum, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column

from customer_api.lib.db import Base


DEFAULT_ROLES = ["ROLE_USER"]


class Gender(str, enum.Enum):
    """Gender enumeration."""
    MALE = "MALE"
    FEMALE = "FEMALE"


class Customer(Base):
    """
    Customer entity.

    ``id`` is assigned by the store on first persistence and never changes.
    ``password`` always holds a hash, never the raw password.
    """
    __tablename__ = "customers"

    id: Mapped[int] = mapped_column(
        Integer,
        primary_key=True,
        autoincrement=True,
    )

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True,
    )
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    age: Mapped[int] = mapped_column(Integer, nullable=False)
    gender: Mapped[Gender] = mapped_column(
        SQLEnum(Gender, name="gender"),
        nullable=False,
    )

    # Role names used for token issuance only
    roles: Mapped[list[str]] = mapped_column(
        JSON,
        nullable=False,
        default=lambda: list(DEFAULT_ROLES),
    )

    profile_image_id: Mapped[Optional[str]] = mapped_column(
        String(36),
        unique=True,
        nullable=True,
    )

    __table_args__ = (
        CheckConstraint("age >= 0", name="customer_age_non_negative"),
    )

    @property
    def username(self) -> str:
        """Login identifier; customers sign in with their email."""
        return self.email

    def copy(self) -> "Customer":
        """Detached copy carrying the same column values."""
        return Customer(
            id=self.id,
            name=self.name,
            email=self.email,
            password=self.password,
            age=self.age,
            gender=self.gender,
            roles=list(self.roles or DEFAULT_ROLES),
            profile_image_id=self.profile_image_id,
        )

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, email={self.email})>"
