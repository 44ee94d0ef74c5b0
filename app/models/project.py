"""Project model: one book/document owned by a single user."""
from sqlalchemy import Column, Integer, String, Text, Date, DateTime, ForeignKey
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.db.session import Base


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(255), nullable=False)
    genre = Column(String(100), nullable=False, default="")
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=True)

    owner = relationship("User", back_populates="projects")
    goals = relationship("Goal", back_populates="project", passive_deletes=True)
    progress_logs = relationship(
        "ProgressLog",
        back_populates="project",
        order_by="ProgressLog.id",
        passive_deletes=True,
    )
