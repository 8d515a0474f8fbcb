"""
Unit tests for the OpenAI-backed sentiment model.
"""

import pytest
from unittest.mock import AsyncMock, MagicMock

from analysis.domain.exceptions import ClassificationError
from analysis.infrastructure.client.openai_client import OpenAISentimentModel
from config.settings import OpenAISettings


@pytest.fixture
def mock_openai_client():
    client = MagicMock()
    response = MagicMock()
    response.choices = [MagicMock()]
    response.choices[0].message.content = "Agree"
    client.chat.completions.create = AsyncMock(return_value=response)
    return client


@pytest.mark.asyncio
async def test_generate_returns_reply_text(mock_openai_client):
    model = OpenAISentimentModel(OpenAISettings(api_key="test_key", model="gpt-4o-mini"), client=mock_openai_client)

    reply = await model.generate("Comment: nice")

    assert reply == "Agree"
    kwargs = mock_openai_client.chat.completions.create.call_args.kwargs
    assert kwargs["model"] == "gpt-4o-mini"
    assert kwargs["temperature"] == 0
    assert kwargs["messages"][-1] == {"role": "user", "content": "Comment: nice"}


@pytest.mark.asyncio
async def test_missing_content_becomes_empty_string(mock_openai_client):
    mock_openai_client.chat.completions.create.return_value.choices[0].message.content = None
    model = OpenAISentimentModel(OpenAISettings(api_key="test_key"), client=mock_openai_client)

    assert await model.generate("Comment: nice") == ""


@pytest.mark.asyncio
async def test_missing_api_key_raises_classification_error():
    model = OpenAISentimentModel(OpenAISettings(api_key=""))

    with pytest.raises(ClassificationError, match="OPENAI_API_KEY is not configured"):
        await model.generate("Comment: nice")
