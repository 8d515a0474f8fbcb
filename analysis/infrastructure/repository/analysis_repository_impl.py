import logging

from sqlalchemy.exc import SQLAlchemyError

from analysis.application.port.analysis_repository_port import AnalysisRepositoryPort
from analysis.domain.analysis_record import AnalysisRecord
from analysis.domain.comment import Comment
from analysis.domain.exceptions import PersistenceError
from analysis.domain.sentiment_label import SentimentLabel
from analysis.infrastructure.orm.models import AnalysisCommentORM, AnalysisORM
from config.database.session import get_db_session

logger = logging.getLogger(__name__)


class AnalysisRepositoryImpl(AnalysisRepositoryPort):
    def __init__(self, session_factory=get_db_session):
        # 요청마다 별도 세션을 열어 스레드 간에 세션을 공유하지 않는다.
        self.session_factory = session_factory

    def save(self, record: AnalysisRecord) -> AnalysisRecord:
        """분석 레코드와 댓글을 하나의 트랜잭션으로 저장한다. 실패하면 아무것도 남지 않는다."""
        with self.session_factory() as db:
            try:
                orm = AnalysisORM(video_id=record.video_id, keywords=list(record.keywords))
                if record.created_at is not None:
                    orm.created_at = record.created_at
                orm.comments = [
                    AnalysisCommentORM(
                        position=position,
                        text=comment.text,
                        sentiment=comment.sentiment.value,
                        date=comment.date,
                    )
                    for position, comment in enumerate(record.comments)
                ]
                db.add(orm)
                db.commit()
                return self._to_domain(orm)
            except SQLAlchemyError as exc:
                db.rollback()
                logger.error("[STORE] analysis save failed | video_id=%s: %s", record.video_id, exc)
                raise PersistenceError(f"Analysis save failed: {exc}") from exc

    def find_by_id(self, analysis_id: str) -> AnalysisRecord | None:
        with self.session_factory() as db:
            try:
                orm = db.get(AnalysisORM, analysis_id)
                return self._to_domain(orm) if orm is not None else None
            except SQLAlchemyError as exc:
                raise PersistenceError(f"Analysis lookup failed: {exc}") from exc

    def list_recent(self, video_id: str | None = None, limit: int = 20) -> list[AnalysisRecord]:
        with self.session_factory() as db:
            try:
                query = db.query(AnalysisORM)
                if video_id:
                    query = query.filter(AnalysisORM.video_id == video_id)
                rows = query.order_by(AnalysisORM.created_at.desc()).limit(limit).all()
                return [self._to_domain(row) for row in rows]
            except SQLAlchemyError as exc:
                raise PersistenceError(f"Analysis listing failed: {exc}") from exc

    @staticmethod
    def _to_domain(orm: AnalysisORM) -> AnalysisRecord:
        return AnalysisRecord(
            id=orm.id,
            video_id=orm.video_id,
            comments=[
                Comment(
                    text=row.text or "",
                    date=row.date,
                    sentiment=SentimentLabel(row.sentiment),
                )
                for row in orm.comments
            ],
            keywords=list(orm.keywords or []),
            created_at=orm.created_at,
        )
