from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from analysis.domain.comment import Comment

MAX_KEYWORDS = 10


@dataclass
class AnalysisRecord:
    video_id: str
    comments: list[Comment] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)
    id: Optional[str] = None
    created_at: Optional[datetime] = None

    def is_fully_classified(self) -> bool:
        return all(comment.sentiment is not None for comment in self.comments)

    def to_dict(self) -> dict:
        """API 응답용 직렬화. 원본 문서 구조(_id, videoId, createdAt)를 그대로 따른다."""
        return {
            "_id": self.id,
            "videoId": self.video_id,
            "comments": [comment.to_dict() for comment in self.comments],
            "keywords": list(self.keywords),
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
