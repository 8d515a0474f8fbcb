import logging
from datetime import datetime
from typing import List

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from analysis.application.port.comment_source_port import CommentSourcePort
from analysis.domain.comment import Comment
from analysis.domain.exceptions import UpstreamRetrievalError
from config.settings import YouTubeSettings

logger = logging.getLogger(__name__)


class YouTubeClient(CommentSourcePort):
    platform = "youtube"

    def __init__(self, settings: YouTubeSettings, service=None):
        # YouTube Data API v3 클라이언트. 키가 없어도 생성은 되고, 첫 호출 시점에 서비스를 만든다.
        self.settings = settings
        self._service = service

    @property
    def service(self):
        if self._service is not None:
            return self._service
        if not self.settings.api_key:
            raise UpstreamRetrievalError("YOUTUBE_API_KEY is not configured")
        try:
            self._service = build(
                "youtube",
                "v3",
                developerKey=self.settings.api_key,
                cache_discovery=False,
            )
        except Exception as exc:
            raise UpstreamRetrievalError(f"YouTube client setup failed: {exc}") from exc
        return self._service

    def fetch_comments(self, video_id: str, max_results: int = 10) -> List[Comment]:
        params = {
            "part": "snippet",
            "videoId": video_id,
            "maxResults": min(max_results, 100),
        }
        if self.settings.quota_user:
            params["quotaUser"] = self.settings.quota_user
        try:
            response = self.service.commentThreads().list(**params).execute()
        except HttpError as exc:
            logger.error("[YOUTUBE] comments fetch failed | video_id=%s: %s", video_id, exc)
            raise UpstreamRetrievalError(f"YouTube comments fetch failed: {exc}") from exc

        comments: List[Comment] = []
        for item in response.get("items", []):
            snippet = item["snippet"]["topLevelComment"]["snippet"]
            comments.append(
                Comment(
                    text=snippet.get("textDisplay", ""),
                    date=self._parse_datetime(snippet.get("publishedAt")),
                )
            )
        return comments

    @staticmethod
    def _parse_datetime(value: str | None):
        if not value:
            return None
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return None
