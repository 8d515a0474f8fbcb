"""
Repository tests against an in-memory SQLite database.
"""

from datetime import datetime

import pytest
from sqlalchemy.exc import OperationalError

from analysis.domain.analysis_record import AnalysisRecord
from analysis.domain.comment import Comment
from analysis.domain.exceptions import PersistenceError
from analysis.domain.sentiment_label import SentimentLabel
from analysis.infrastructure.repository.analysis_repository_impl import AnalysisRepositoryImpl


def _record(video_id="abc123") -> AnalysisRecord:
    return AnalysisRecord(
        video_id=video_id,
        comments=[
            Comment(text="love it", date=datetime(2026, 1, 5, 10, 0), sentiment=SentimentLabel.AGREE),
            Comment(text="meh", date=datetime(2026, 2, 1, 8, 30), sentiment=SentimentLabel.NEUTRAL),
            Comment(text="awful", date=datetime(2026, 1, 9, 12, 0), sentiment=SentimentLabel.DISAGREE),
        ],
        keywords=["love"],
    )


@pytest.fixture
def repository(sqlite_database):
    return AnalysisRepositoryImpl(session_factory=sqlite_database.session)


def test_save_assigns_id_and_created_at(repository):
    saved = repository.save(_record())

    assert saved.id
    assert saved.created_at is not None
    assert saved.keywords == ["love"]


def test_round_trip_preserves_comment_order(repository):
    saved = repository.save(_record())

    loaded = repository.find_by_id(saved.id)

    assert [c.text for c in loaded.comments] == ["love it", "meh", "awful"]
    assert [c.sentiment for c in loaded.comments] == [
        SentimentLabel.AGREE,
        SentimentLabel.NEUTRAL,
        SentimentLabel.DISAGREE,
    ]
    assert loaded.comments[0].date.replace(tzinfo=None) == datetime(2026, 1, 5, 10, 0)


def test_empty_record(repository):
    saved = repository.save(AnalysisRecord(video_id="empty"))
    loaded = repository.find_by_id(saved.id)

    assert loaded.comments == []
    assert loaded.keywords == []


def test_find_unknown_returns_none(repository):
    assert repository.find_by_id("missing") is None


def test_list_recent_filters_by_video(repository):
    first = repository.save(_record("one"))
    repository.save(_record("two"))

    assert [r.id for r in repository.list_recent(video_id="one")] == [first.id]
    assert len(repository.list_recent()) == 2
    assert len(repository.list_recent(limit=1)) == 1


def test_failed_commit_leaves_nothing_behind(sqlite_database, repository):
    def failing_session():
        session = sqlite_database.session()

        def boom():
            raise OperationalError("INSERT INTO analysis", {}, Exception("disk I/O error"))

        session.commit = boom
        return session

    failing = AnalysisRepositoryImpl(session_factory=failing_session)

    with pytest.raises(PersistenceError):
        failing.save(_record())

    assert repository.list_recent() == []
