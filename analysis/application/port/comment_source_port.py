from abc import ABC, abstractmethod
from typing import Iterable

from analysis.domain.comment import Comment


class CommentSourcePort(ABC):
    platform: str

    @abstractmethod
    def fetch_comments(self, video_id: str, max_results: int = 10) -> Iterable[Comment]:
        raise NotImplementedError
