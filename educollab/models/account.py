"""Account model definitions."""

from enum import Enum

from sqlalchemy import Column, DateTime, Integer, String, func

from educollab.database import Base


class Role(str, Enum):
    """Closed set of account roles."""
    UNASSIGNED = "unassigned"
    STUDENT = "student"
    TUTOR = "tutor"
    ADMIN = "admin"

    def __str__(self):
        return self.value


class Account(Base):
    """A registered user of the marketplace."""
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    name = Column(String)
    photo_url = Column(String)
    role = Column(String, nullable=False, default=Role.UNASSIGNED.value)
    created_at = Column(DateTime, server_default=func.now())

    @property
    def role_value(self) -> Role:
        return Role(self.role) if self.role else Role.UNASSIGNED
