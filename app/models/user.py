"""User model: identity and role. Credentials live in Security."""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.db.session import Base

ROLE_MANAGER = "manager"
ROLE_MEMBER = "member"
ROLES = (ROLE_MANAGER, ROLE_MEMBER)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(80), unique=True, nullable=False, index=True)
    email = Column(String(255), nullable=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    role = Column(String(16), nullable=False, default=ROLE_MEMBER)  # manager | member
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)

    security = relationship("Security", back_populates="user", uselist=False)
    projects = relationship("Project", back_populates="owner")

    @property
    def display_name(self) -> str:
        full = " ".join(part for part in (self.first_name, self.last_name) if part)
        return full or self.username
