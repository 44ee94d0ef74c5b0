"""Security model: credential material and login metadata, 1:1 with User."""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from app.db.session import Base


class Security(Base):
    __tablename__ = "security"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    hashed_password = Column(String(255), nullable=False)
    last_login = Column(DateTime(timezone=True), nullable=True)

    user = relationship("User", back_populates="security")
