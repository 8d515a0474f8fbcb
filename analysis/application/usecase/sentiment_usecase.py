import logging

from analysis.application.port.sentiment_model_port import SentimentModelPort
from analysis.domain.exceptions import ClassificationError
from analysis.domain.sentiment_label import SentimentLabel

logger = logging.getLogger(__name__)

PROMPT_TEMPLATE = (
    "Analyze this YouTube comment and classify its sentiment ONLY as one of these exact words: "
    "agree(if the comment is good), disagree(if the comment is bad), or neutral.\n"
    "Comment: {text}"
)


def normalize_sentiment(reply: str) -> SentimentLabel:
    """
    모델 응답을 세 가지 라벨 중 하나로 정규화한다.
    "agree"는 "disagree"의 부분 문자열이므로 disagree를 먼저 검사한다.
    """
    normalized = reply.lower().strip()
    if "disagree" in normalized:
        return SentimentLabel.DISAGREE
    if "agree" in normalized:
        return SentimentLabel.AGREE
    return SentimentLabel.NEUTRAL


class SentimentClassifier:
    def __init__(self, model: SentimentModelPort):
        self.model = model

    async def classify(self, text: str) -> SentimentLabel:
        prompt = PROMPT_TEMPLATE.format(text=text)
        try:
            reply = await self.model.generate(prompt)
        except ClassificationError:
            raise
        except Exception as exc:
            raise ClassificationError(f"Sentiment classification failed: {exc}") from exc

        if not reply or not reply.strip():
            raise ClassificationError("Sentiment classification returned an empty response")
        label = normalize_sentiment(reply)
        logger.debug("[CLASSIFY] reply=%r -> %s", reply, label.value)
        return label
