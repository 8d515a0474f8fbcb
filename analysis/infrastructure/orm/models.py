import uuid
from datetime import datetime, timezone

from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from config.database.session import Base


def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AnalysisORM(Base):
    __tablename__ = "analysis"

    id = Column(String(32), primary_key=True, default=_new_id)
    video_id = Column(String(100), nullable=False, index=True)
    keywords = Column(JSON, nullable=False, default=list)
    created_at = Column(DateTime(timezone=True), default=_utcnow)

    comments = relationship(
        "AnalysisCommentORM",
        back_populates="analysis",
        cascade="all, delete-orphan",
        order_by="AnalysisCommentORM.position",
    )


class AnalysisCommentORM(Base):
    __tablename__ = "analysis_comment"

    id = Column(Integer, primary_key=True, autoincrement=True)
    analysis_id = Column(String(32), ForeignKey("analysis.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    text = Column(Text)
    sentiment = Column(String(20), nullable=False)
    date = Column(DateTime(timezone=True))

    analysis = relationship("AnalysisORM", back_populates="comments")
