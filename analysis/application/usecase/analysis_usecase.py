import asyncio
import logging
from urllib.parse import parse_qs, urlparse

from analysis.application.port.analysis_repository_port import AnalysisRepositoryPort
from analysis.application.port.comment_source_port import CommentSourcePort
from analysis.application.usecase.keyword_usecase import extract_keywords
from analysis.application.usecase.sentiment_usecase import SentimentClassifier
from analysis.domain.analysis_record import AnalysisRecord
from analysis.domain.comment import Comment
from analysis.domain.exceptions import (
    AnalysisError,
    AnalysisNotFoundError,
    ClassificationError,
    InvalidInputError,
    PersistenceError,
    UpstreamRetrievalError,
)
from config.settings import AnalysisSettings

logger = logging.getLogger(__name__)


def resolve_video_id(url: str) -> str:
    """YouTube 시청 URL에서 v 파라미터를 꺼낸다. 없으면 네트워크 호출 전에 InvalidInputError."""
    if not isinstance(url, str) or not url.strip():
        raise InvalidInputError("Invalid YouTube URL")
    try:
        parsed = urlparse(url.strip())
    except ValueError as exc:
        raise InvalidInputError("Invalid YouTube URL") from exc
    if not parsed.scheme or not parsed.netloc:
        raise InvalidInputError("Invalid YouTube URL")

    values = parse_qs(parsed.query).get("v") or []
    video_id = values[0].strip() if values else ""
    if not video_id:
        raise InvalidInputError("Invalid YouTube URL")
    return video_id


class AnalysisUseCase:
    def __init__(
        self,
        comment_source: CommentSourcePort,
        classifier: SentimentClassifier,
        repository: AnalysisRepositoryPort,
        settings: AnalysisSettings | None = None,
    ):
        # 한국어 주석: 댓글 수집, 감정 분류, 저장소를 모두 주입받아 테스트에서 가짜 구현으로 바꿀 수 있게 합니다.
        self.comment_source = comment_source
        self.classifier = classifier
        self.repository = repository
        self.settings = settings or AnalysisSettings()

    async def analyze(self, url: str) -> AnalysisRecord:
        video_id = resolve_video_id(url)
        logger.info("[ANALYZE] started | video_id=%s", video_id)

        stage = {"name": "retrieval"}
        try:
            comments = await asyncio.wait_for(
                self._collect(video_id, stage), timeout=self.settings.request_timeout
            )
        except asyncio.TimeoutError as exc:
            message = f"Analysis timed out during {stage['name']}"
            if stage["name"] == "classification":
                raise ClassificationError(message) from exc
            raise UpstreamRetrievalError(message) from exc

        keywords = extract_keywords([comment.text for comment in comments])
        record = AnalysisRecord(video_id=video_id, comments=comments, keywords=keywords)

        # 저장 단계는 트랜잭션이 끝까지 완료되도록 전체 deadline 밖에서 실행한다.
        saved = await self._persist(record)
        logger.info(
            "[ANALYZE] success | video_id=%s, id=%s, comments=%d, keywords=%d",
            video_id,
            saved.id,
            len(saved.comments),
            len(saved.keywords),
        )
        return saved

    async def get_analysis(self, analysis_id: str) -> AnalysisRecord:
        try:
            record = await asyncio.to_thread(self.repository.find_by_id, analysis_id)
        except AnalysisError:
            raise
        except Exception as exc:
            raise PersistenceError(f"Analysis lookup failed: {exc}") from exc
        if record is None:
            raise AnalysisNotFoundError(f"Analysis not found: {analysis_id}")
        return record

    async def list_analyses(self, video_id: str | None = None, limit: int = 20) -> list[AnalysisRecord]:
        try:
            return await asyncio.to_thread(self.repository.list_recent, video_id, limit)
        except AnalysisError:
            raise
        except Exception as exc:
            raise PersistenceError(f"Analysis listing failed: {exc}") from exc

    async def _collect(self, video_id: str, stage: dict) -> list[Comment]:
        comments = await self._retrieve(video_id)
        logger.info("[ANALYZE] retrieved %d comments | video_id=%s", len(comments), video_id)
        stage["name"] = "classification"
        await self._classify_all(comments)
        return comments

    async def _retrieve(self, video_id: str) -> list[Comment]:
        try:
            return list(
                await asyncio.to_thread(
                    self.comment_source.fetch_comments, video_id, self.settings.max_comments
                )
            )
        except UpstreamRetrievalError:
            raise
        except Exception as exc:
            raise UpstreamRetrievalError(f"Comment retrieval failed: {exc}") from exc

    async def _classify_all(self, comments: list[Comment]) -> None:
        """
        모든 댓글을 동시에 분류하고 전부 끝날 때까지 기다린다(fan-out/fan-in).
        하나라도 실패하면 나머지 요청을 취소하고 ClassificationError를 올린다.
        """
        tasks = [asyncio.create_task(self._classify_one(comment.text)) for comment in comments]
        try:
            labels = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        for comment, label in zip(comments, labels):
            comment.sentiment = label

    async def _classify_one(self, text: str):
        try:
            return await asyncio.wait_for(
                self.classifier.classify(text), timeout=self.settings.classify_timeout
            )
        except asyncio.TimeoutError as exc:
            raise ClassificationError("Sentiment classification timed out") from exc
        except ClassificationError:
            raise
        except Exception as exc:
            raise ClassificationError(f"Sentiment classification failed: {exc}") from exc

    async def _persist(self, record: AnalysisRecord) -> AnalysisRecord:
        if not record.is_fully_classified():
            raise PersistenceError("Refusing to persist an analysis with unclassified comments")
        try:
            return await asyncio.to_thread(self.repository.save, record)
        except PersistenceError:
            raise
        except Exception as exc:
            raise PersistenceError(f"Analysis save failed: {exc}") from exc
