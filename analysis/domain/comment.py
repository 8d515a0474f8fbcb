from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from analysis.domain.sentiment_label import SentimentLabel


@dataclass
class Comment:
    text: str
    date: Optional[datetime]
    sentiment: Optional[SentimentLabel] = None

    def to_dict(self) -> dict:
        return {
            "text": self.text,
            "sentiment": self.sentiment.value if self.sentiment else None,
            "date": self.date.isoformat() if self.date else None,
        }
