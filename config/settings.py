import os
from dataclasses import dataclass, field
from dotenv import load_dotenv

load_dotenv()


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.getenv(name, str(default)))
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.getenv(name, str(default)))
    except ValueError:
        return default


@dataclass
class OpenAISettings:
    api_key: str = field(default_factory=lambda: os.getenv("OPENAI_API_KEY", ""))
    model: str = field(default_factory=lambda: os.getenv("OPENAI_MODEL", "gpt-4o-mini"))


@dataclass
class YouTubeSettings:
    api_key: str = field(default_factory=lambda: os.getenv("YOUTUBE_API_KEY", ""))
    quota_user: str | None = field(default_factory=lambda: os.getenv("YOUTUBE_QUOTA_USER"))


@dataclass
class AnalysisSettings:
    max_comments: int = field(default_factory=lambda: _env_int("ANALYSIS_MAX_COMMENTS", 10))
    classify_timeout: float = field(
        default_factory=lambda: _env_float("ANALYSIS_CLASSIFY_TIMEOUT_SECONDS", 30.0)
    )
    request_timeout: float = field(
        default_factory=lambda: _env_float("ANALYSIS_REQUEST_TIMEOUT_SECONDS", 120.0)
    )
