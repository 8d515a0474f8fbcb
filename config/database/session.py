import os
import urllib.parse

from dotenv import load_dotenv
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base, sessionmaker

load_dotenv()

Base = declarative_base()


def build_database_url() -> str:
    """
    DATABASE_URL이 있으면 그대로 쓰고, 없으면 SQL_* 환경 변수로 PostgreSQL 접속 문자열을 만듭니다.
    """
    url = os.getenv("DATABASE_URL")
    if url:
        return url
    password = urllib.parse.quote_plus(os.getenv("SQL_PASSWORD", ""))
    return (
        f"postgresql+psycopg2://{os.getenv('SQL_USER','postgres')}:{password}"
        f"@{os.getenv('SQL_HOST','localhost')}:{os.getenv('SQL_PORT','5432')}/{os.getenv('SQL_DATABASE','comment_analyzer')}"
    )


class Database:
    """Process-wide engine and session factory, created on first use and disposed on shutdown."""

    def __init__(self, url: str | None = None, **engine_kwargs):
        self.url = url
        self.engine_kwargs = engine_kwargs
        self._engine: Engine | None = None
        self._session_factory: sessionmaker | None = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self.open()
        return self._engine

    def open(self) -> Engine:
        if self._engine is not None:
            return self._engine
        url = self.url or build_database_url()
        kwargs = {
            "echo": os.getenv("SQL_ECHO", "false").lower() == "true",
            "pool_pre_ping": True,
        }
        kwargs.update(self.engine_kwargs)
        self._engine = create_engine(url, **kwargs)
        self._session_factory = sessionmaker(autocommit=False, autoflush=False, bind=self._engine)
        return self._engine

    def session(self):
        if self._session_factory is None:
            self.open()
        return self._session_factory()

    def init_schema(self) -> None:
        """
        애플리케이션 기동 시 테이블이 없을 경우를 대비해 스키마를 생성합니다.
        """
        # 모델 모듈을 import해야 Base.metadata에 테이블이 등록됩니다.
        import analysis.infrastructure.orm.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_factory = None


database = Database()


def get_db_session():
    return database.session()
