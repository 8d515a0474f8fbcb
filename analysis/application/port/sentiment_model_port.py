from abc import ABC, abstractmethod


class SentimentModelPort(ABC):
    @abstractmethod
    async def generate(self, prompt: str) -> str:
        """Send a prompt to the language model and return its raw text reply."""
        raise NotImplementedError
