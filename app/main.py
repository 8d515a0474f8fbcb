import logging
import os
from contextlib import asynccontextmanager
from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from analysis.adapter.input.web.analysis_router import analysis_router
from config.database.session import database

load_dotenv()

logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan 훅으로 DB 엔진을 기동 시 열고 종료 시 정리합니다.
    """
    # DB 스키마 미존재 시 자동 생성하여 UndefinedTable 오류를 예방합니다.
    database.open()
    database.init_schema()
    try:
        yield
    finally:
        database.close()


app = FastAPI(title="Comment Sentiment Analyzer", version="0.1.0", lifespan=lifespan)

origins_env = os.getenv("CORS_ORIGINS")
origins = [origin for origin in origins_env.split(",") if origin] if origins_env else ["http://localhost:3000"]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(analysis_router, prefix="/api")


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    """
    본문/쿼리 검증 실패도 {"error": ...} 형태의 400으로 돌려준다.
    """
    message = "Invalid YouTube URL" if request.url.path == "/api/analyze" else "Invalid request"
    return JSONResponse({"error": message}, status_code=400)


@app.get("/health")
def health_check() -> dict[str, str]:
    """
    헬스체크 엔드포인트입니다.
    """
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    host = os.getenv("APP_HOST", "0.0.0.0")
    port = int(os.getenv("APP_PORT", "8000"))
    uvicorn.run(app, host=host, port=port)
