"""
Shared fixtures: in-memory fakes for the comment source, the language model
and the analysis store, plus an SQLite-backed database for repository tests.
"""

import asyncio
import uuid
from datetime import datetime, timezone

import pytest
from sqlalchemy.pool import StaticPool

from analysis.application.port.analysis_repository_port import AnalysisRepositoryPort
from analysis.application.port.comment_source_port import CommentSourcePort
from analysis.application.port.sentiment_model_port import SentimentModelPort
from analysis.application.usecase.analysis_usecase import AnalysisUseCase
from analysis.application.usecase.sentiment_usecase import SentimentClassifier
from analysis.domain.analysis_record import AnalysisRecord
from analysis.domain.comment import Comment
from analysis.domain.exceptions import PersistenceError
from config.database.session import Database
from config.settings import AnalysisSettings


class FakeCommentSource(CommentSourcePort):
    platform = "fake"

    def __init__(self, comments=None, error: Exception | None = None):
        self.comments = comments or []
        self.error = error
        self.calls: list[tuple[str, int]] = []

    def fetch_comments(self, video_id: str, max_results: int = 10):
        self.calls.append((video_id, max_results))
        if self.error:
            raise self.error
        return [Comment(text=c.text, date=c.date) for c in self.comments]


class FakeSentimentModel(SentimentModelPort):
    """Replies by looking up the comment text in a mapping; defaults to "neutral"."""

    def __init__(self, replies: dict[str, str] | None = None, fail_on: str | None = None, delay: float = 0.0):
        self.replies = replies or {}
        self.fail_on = fail_on
        self.delay = delay
        self.prompts: list[str] = []
        self.cancelled = 0

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        text = prompt.split("Comment: ", 1)[1]
        if self.fail_on is not None and text == self.fail_on:
            raise RuntimeError("model unavailable")
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
        except asyncio.CancelledError:
            self.cancelled += 1
            raise
        return self.replies.get(text, "neutral")


class InMemoryAnalysisRepository(AnalysisRepositoryPort):
    def __init__(self, fail: bool = False):
        self.fail = fail
        self.records: dict[str, AnalysisRecord] = {}

    def save(self, record: AnalysisRecord) -> AnalysisRecord:
        if self.fail:
            raise PersistenceError("store unavailable")
        record.id = uuid.uuid4().hex
        record.created_at = datetime.now(timezone.utc)
        self.records[record.id] = record
        return record

    def find_by_id(self, analysis_id: str):
        return self.records.get(analysis_id)

    def list_recent(self, video_id: str | None = None, limit: int = 20):
        records = [r for r in self.records.values() if video_id is None or r.video_id == video_id]
        return sorted(records, key=lambda r: r.created_at, reverse=True)[:limit]


@pytest.fixture
def sample_comments() -> list[Comment]:
    return [
        Comment(text="Great camera and amazing battery life", date=datetime(2026, 1, 5, tzinfo=timezone.utc)),
        Comment(text="The battery died after two hours", date=datetime(2026, 2, 3, tzinfo=timezone.utc)),
        Comment(text="It is a phone", date=datetime(2026, 1, 20, tzinfo=timezone.utc)),
    ]


@pytest.fixture
def model_replies() -> dict[str, str]:
    return {
        "Great camera and amazing battery life": "Agree",
        "The battery died after two hours": "Disagree.",
        "It is a phone": "Neutral",
    }


@pytest.fixture
def analysis_settings() -> AnalysisSettings:
    return AnalysisSettings(max_comments=10, classify_timeout=5.0, request_timeout=10.0)


@pytest.fixture
def make_usecase(analysis_settings):
    def _make(source=None, model=None, repository=None, settings=None):
        return AnalysisUseCase(
            comment_source=source or FakeCommentSource(),
            classifier=SentimentClassifier(model or FakeSentimentModel()),
            repository=repository or InMemoryAnalysisRepository(),
            settings=settings or analysis_settings,
        )

    return _make


@pytest.fixture
def sqlite_database():
    database = Database(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    database.init_schema()
    yield database
    database.close()
