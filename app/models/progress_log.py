"""ProgressLog model: append-only ledger of word-count deltas and running totals."""
from sqlalchemy import Column, Integer, DateTime, ForeignKey, Index
from sqlalchemy.orm import relationship

from app.db.session import Base


class ProgressLog(Base):
    __tablename__ = "progress_log"
    __table_args__ = (
        Index("ix_progress_log_project_logged_at", "project_id", "logged_at", "id"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    project_id = Column(Integer, ForeignKey("projects.id", ondelete="CASCADE"), nullable=False)
    word_count = Column(Integer, nullable=False)  # signed delta for this entry
    total_words = Column(Integer, nullable=False)  # running total after this entry
    logged_at = Column(DateTime(timezone=True), nullable=False)

    project = relationship("Project", back_populates="progress_logs")
