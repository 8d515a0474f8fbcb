import csv
import io
from datetime import datetime, timezone, tzinfo
from typing import Iterable

from analysis.domain.analysis_record import AnalysisRecord
from analysis.domain.comment import Comment
from analysis.domain.sentiment_label import SentimentLabel

MONTH_FORMAT = "%b %Y"

DISTRIBUTION_ORDER = (
    (SentimentLabel.AGREE, "Agree"),
    (SentimentLabel.DISAGREE, "Disagree"),
    (SentimentLabel.NEUTRAL, "Neutral"),
)


def _to_local(value: datetime, tz: tzinfo | None = None) -> datetime:
    """저장소에서 읽은 naive 값은 UTC로 보고, 표시용 시간대(기본: 서버 로컬)로 바꾼다."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.astimezone(tz)


def group_by_month(comments: Iterable[Comment], tz: tzinfo | None = None) -> list[dict]:
    """
    댓글을 월 단위("Oct 2026")로 묶는다. 버킷 순서는 시간순이 아니라 입력에서 처음 등장한 순서를 따른다.
    """
    months: dict[str, int] = {}
    for comment in comments:
        if comment.date is None:
            continue
        month = _to_local(comment.date, tz).strftime(MONTH_FORMAT)
        months[month] = months.get(month, 0) + 1
    return [{"month": month, "count": count} for month, count in months.items()]


def sentiment_counts(comments: Iterable[Comment]) -> dict:
    counts = {label.value: 0 for label, _ in DISTRIBUTION_ORDER}
    total = 0
    for comment in comments:
        total += 1
        if comment.sentiment is not None:
            counts[comment.sentiment.value] += 1
    return {"total": total, **counts}


def sentiment_distribution(comments: Iterable[Comment]) -> list[dict]:
    counts = sentiment_counts(comments)
    total = counts["total"]
    distribution = []
    for label, name in DISTRIBUTION_ORDER:
        value = counts[label.value]
        distribution.append(
            {
                "name": name,
                "value": value,
                "percentage": (value / total * 100) if total > 0 else 0,
            }
        )
    return distribution


def comments_to_csv(comments: Iterable[Comment]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(["text", "sentiment", "date"])
    for comment in comments:
        row = comment.to_dict()
        writer.writerow([row["text"], row["sentiment"] or "", row["date"] or ""])
    return buffer.getvalue()


def summarize(record: AnalysisRecord) -> dict:
    """차트 화면에 필요한 집계값을 한 번에 만든다."""
    return {
        "_id": record.id,
        "videoId": record.video_id,
        "counts": sentiment_counts(record.comments),
        "sentimentDistribution": sentiment_distribution(record.comments),
        "monthlyComments": group_by_month(record.comments),
        "keywords": list(record.keywords),
    }
