"""Goal model: word-count target for a project. One active 'total_words' goal per project."""
from sqlalchemy import Column, Integer, String, Boolean, Date, ForeignKey, Index, text
from sqlalchemy.orm import relationship

from app.db.session import Base

GOAL_TOTAL_WORDS = "total_words"


class Goal(Base):
    __tablename__ = "goals"
    __table_args__ = (
        # Partial unique index: at most one active total_words goal per project
        Index(
            "uq_goals_active_total_words",
            "project_id",
            unique=True,
            sqlite_where=text("is_active = 1 AND goal_type = 'total_words'"),
            postgresql_where=text("is_active AND goal_type = 'total_words'"),
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    goal_type = Column(String(32), nullable=False, default=GOAL_TOTAL_WORDS)
    target_words = Column(Integer, nullable=False)
    daily_target = Column(Integer, nullable=False)
    start_date = Column(Date, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    project = relationship("Project", back_populates="goals")
