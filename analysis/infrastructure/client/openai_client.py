from openai import AsyncOpenAI

from analysis.application.port.sentiment_model_port import SentimentModelPort
from analysis.domain.exceptions import ClassificationError
from config.settings import OpenAISettings


class OpenAISentimentModel(SentimentModelPort):
    def __init__(self, settings: OpenAISettings, client: AsyncOpenAI | None = None):
        self.settings = settings
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        # OPENAI_API_KEY가 비어 있으면 요청 시점에 분류 실패로 보고한다.
        if self._client is None:
            if not self.settings.api_key:
                raise ClassificationError("OPENAI_API_KEY is not configured")
            self._client = AsyncOpenAI(api_key=self.settings.api_key)
        return self._client

    async def generate(self, prompt: str) -> str:
        response = await self.client.chat.completions.create(
            model=self.settings.model,
            messages=[
                {"role": "system", "content": "Reply with a single word."},
                {"role": "user", "content": prompt},
            ],
            temperature=0,
        )
        return response.choices[0].message.content or ""
